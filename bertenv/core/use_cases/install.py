"""
Install use case — options in, provisioned environment out.

The full vertical slice: plan the four phases for the resolved options,
execute them in order through the adapter registry, and attach the
next-step guidance when everything succeeded.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from bertenv.adapters.registry import AdapterRegistry, build_default_registry
from bertenv.core.engine.executor import InstallPlan, InstallReport, Observer, execute_plan
from bertenv.core.models.options import InstallOptions
from bertenv.core.models.settings import InstallerSettings
from bertenv.core.services.dependencies import build_dependency_phase
from bertenv.core.services.environment import (
    EnvironmentHandle,
    build_environment_phase,
    environment_handle,
)
from bertenv.core.services.framework import build_framework_phase
from bertenv.core.services.verification import (
    Guidance,
    build_verification_phase,
    next_steps,
)

logger = logging.getLogger(__name__)


@dataclass
class InstallResult:
    """Result of an install (or verify) run."""

    options: InstallOptions
    handle: EnvironmentHandle
    plan: InstallPlan
    report: InstallReport
    guidance: Guidance | None = None

    @property
    def ok(self) -> bool:
        return self.report.ok

    @property
    def exit_code(self) -> int:
        return 0 if self.report.ok else 1

    def to_dict(self) -> dict:
        return {
            "options": self.options.to_dict(),
            "environment": {
                "kind": self.handle.kind,
                "location": self.handle.location,
                "python": list(self.handle.python),
                "activate": self.handle.activate_hint,
            },
            "plan": [
                {"phase": p.number, "title": p.title, "steps": [s.action.display for s in p.steps]}
                for p in self.plan.phases
            ],
            "report": self.report.to_dict(),
            "guidance": self.guidance.to_dict() if self.guidance else None,
        }


def build_install_plan(
    options: InstallOptions,
    settings: InstallerSettings,
    handle: EnvironmentHandle,
    requirements: str | None = None,
    windows: bool | None = None,
) -> InstallPlan:
    """Environment → framework → dependencies → verification."""
    return InstallPlan(phases=[
        build_environment_phase(options, settings, handle, number=1, windows=windows),
        build_framework_phase(options, settings, handle, number=2),
        build_dependency_phase(settings, handle, requirements, number=3),
        build_verification_phase(handle, number=4),
    ])


def run_install(
    options: InstallOptions,
    settings: InstallerSettings | None = None,
    working_dir: Path | None = None,
    requirements: str | None = None,
    dry_run: bool = False,
    mock_mode: bool = False,
    registry: AdapterRegistry | None = None,
    observer: Observer | None = None,
    windows: bool | None = None,
) -> InstallResult:
    """Provision the environment described by ``options``.

    Args:
        options: Resolved install options.
        settings: Installer settings (default: built-in defaults).
        working_dir: Invocation directory (default: cwd).
        requirements: Manifest path overriding ``settings.requirements``.
        dry_run: List the commands without running them.
        mock_mode: Route every step to a succeeding mock.
        registry: Optional pre-configured adapter registry.
        observer: Progress callback handed to the executor.
        windows: Force Windows/POSIX paths (default: detect).

    Returns:
        InstallResult. Never raises for external failures; those are
        in ``result.report``.
    """
    settings = settings or InstallerSettings()
    working_dir = (working_dir or Path.cwd()).resolve()
    handle = environment_handle(options, settings, windows=windows)
    plan = build_install_plan(options, settings, handle, requirements, windows=windows)

    if registry is None:
        registry = build_default_registry(mock_mode=mock_mode)

    logger.info(
        "Installing: env=%s device=%s cuda=%s in %s (%d steps)",
        options.env_type, options.device, options.cuda, working_dir, plan.total_steps,
    )

    report = execute_plan(
        plan,
        registry,
        working_dir=str(working_dir),
        dry_run=dry_run,
        observer=observer,
    )

    result = InstallResult(options=options, handle=handle, plan=plan, report=report)
    if report.status == "ok":
        result.guidance = next_steps(options, settings, handle)
    return result


def run_verify(
    options: InstallOptions,
    settings: InstallerSettings | None = None,
    working_dir: Path | None = None,
    registry: AdapterRegistry | None = None,
    observer: Observer | None = None,
    windows: bool | None = None,
) -> InstallResult:
    """Re-run only the final import check against an existing environment."""
    settings = settings or InstallerSettings()
    working_dir = (working_dir or Path.cwd()).resolve()
    handle = environment_handle(options, settings, windows=windows)
    plan = InstallPlan(phases=[build_verification_phase(handle, number=1)])

    if registry is None:
        registry = build_default_registry()

    report = execute_plan(plan, registry, working_dir=str(working_dir), observer=observer)
    return InstallResult(options=options, handle=handle, plan=plan, report=report)
