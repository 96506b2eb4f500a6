"""
Verification & guidance — final import check and next-step instructions.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from bertenv.core.engine.executor import Phase, PlanStep
from bertenv.core.models.action import Action
from bertenv.core.models.options import InstallOptions
from bertenv.core.models.settings import InstallerSettings
from bertenv.core.services.environment import EnvironmentHandle

# Packages the training entry point cannot run without.
CRITICAL_PACKAGES: tuple[str, ...] = ("torch", "transformers", "numpy", "sklearn")

# Single ``-c`` line, for the same reason as FRAMEWORK_CHECK.
FINAL_CHECK = "; ".join([
    *(f"import {name}" for name in CRITICAL_PACKAGES),
    "print('All packages imported successfully')",
    "print(f'   - PyTorch: {torch.__version__}')",
    "print(f'   - Transformers: {transformers.__version__}')",
    "print(f'   - NumPy: {numpy.__version__}')",
    "print(f'   - scikit-learn: {sklearn.__version__}')",
])


def build_verification_phase(handle: EnvironmentHandle, number: int = 4) -> Phase:
    phase = Phase(number=number, title="Verifying installation...")
    phase.steps.append(
        PlanStep(
            action=Action(
                id="deps.verify",
                name="Check critical imports",
                adapter="shell",
                params={"argv": handle.run("-c", FINAL_CHECK)},
            ),
            failure="Verification failed!",
            error_kind="verification-failed",
            echo_output=True,
        )
    )
    return phase


@dataclass
class Guidance:
    """What the user does after a successful install."""

    steps: list[str] = field(default_factory=list)
    gpu_hint: str | None = None

    def to_dict(self) -> dict:
        return {"steps": self.steps, "gpu_hint": self.gpu_hint}


def next_steps(
    options: InstallOptions,
    settings: InstallerSettings,
    handle: EnvironmentHandle,
) -> Guidance:
    lines = [
        f"Download BERT model from:\n      {settings.model_url}",
        f"Place model files in {settings.pretrained_dir} folder",
        f"Prepare your data in {settings.data_dir} folder",
        f"Activate environment: {handle.activate_hint}",
        f"Run: {settings.train_command}",
    ]
    guidance = Guidance(steps=lines)
    if options.is_gpu:
        guidance.gpu_hint = "💡 GPU Mode: Training will be significantly faster!"
    return guidance
