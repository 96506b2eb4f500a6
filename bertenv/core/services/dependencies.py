"""
Dependency installer — everything else, from the requirements manifest.
"""

from __future__ import annotations

from bertenv.core.engine.executor import Phase, PlanStep
from bertenv.core.models.action import Action
from bertenv.core.models.settings import InstallerSettings
from bertenv.core.services.environment import EnvironmentHandle


def build_dependency_phase(
    settings: InstallerSettings,
    handle: EnvironmentHandle,
    requirements: str | None = None,
    number: int = 3,
) -> Phase:
    """``pip install -r <manifest>``; the manifest must exist before pip runs."""
    manifest = requirements or settings.requirements
    phase = Phase(number=number, title="Installing other dependencies...")
    phase.steps.append(
        PlanStep(
            action=Action(
                id="deps.install",
                name="Install requirements",
                adapter="shell",
                params={
                    "argv": handle.pip("install", "-r", manifest),
                    "stream": True,
                    "requires_files": [manifest],
                },
            ),
            success="✅ All dependencies installed",
            failure="Dependency installation failed!",
        )
    )
    return phase
