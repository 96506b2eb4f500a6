"""
Framework installer — pinned torch + torchvision for CPU or one CUDA channel.
"""

from __future__ import annotations

from bertenv.core.engine.executor import Phase, PlanStep
from bertenv.core.models.action import Action
from bertenv.core.models.options import InstallOptions
from bertenv.core.models.settings import InstallerSettings
from bertenv.core.services.environment import EnvironmentHandle

# Run inside the new environment as a single ``-c`` line: ``conda run`` on
# Windows goes through a .bat wrapper that ends the command at a newline.
# Output stays ASCII so it survives legacy Windows console encodings.
FRAMEWORK_CHECK = "; ".join([
    "import torch",
    "cuda = torch.cuda.is_available()",
    "print(f'PyTorch {torch.__version__}')",
    "print(f'CUDA available: {cuda}')",
    "print(f'CUDA version: {torch.version.cuda}') if cuda else None",
    "print(f'GPU device: {torch.cuda.get_device_name(0)}') if cuda else None",
])


def framework_requirements(options: InstallOptions, settings: InstallerSettings) -> list[str]:
    """Pinned requirement strings, e.g. ``torch==1.9.0+cu111``."""
    channel = options.channel
    suffix = channel.channel if channel else "cpu"
    return [
        f"torch=={settings.torch_version}+{suffix}",
        f"torchvision=={settings.torchvision_version}+{suffix}",
    ]


def framework_install_argv(
    options: InstallOptions,
    settings: InstallerSettings,
    handle: EnvironmentHandle,
) -> list[str]:
    """pip command installing the framework build for the chosen device."""
    args: list[str] = ["install"]
    channel = options.channel
    if channel is not None:
        args += ["--index-url", f"{settings.index_base.rstrip('/')}/{channel.channel}"]
    args += framework_requirements(options, settings)
    args += ["-f", settings.find_links]
    return handle.pip(*args)


def build_framework_phase(
    options: InstallOptions,
    settings: InstallerSettings,
    handle: EnvironmentHandle,
    number: int = 2,
) -> Phase:
    """Driver advisory (gpu only) → install → framework check."""
    phase = Phase(number=number, title="Installing PyTorch...")
    channel = options.channel

    if channel is not None:
        phase.steps.append(
            PlanStep(
                action=Action(
                    id="gpu.driver",
                    name="Check NVIDIA driver",
                    adapter="gpu-driver",
                    params={"toolkit": channel.toolkit},
                ),
                success="✅ {output}",
                failure=f"Could not confirm an NVIDIA driver for {channel.label}",
                fatal=False,
            )
        )
        title = f"Installing PyTorch with {channel.label}..."
        failure = "PyTorch GPU installation failed!"
    else:
        title = "Installing PyTorch (CPU version)..."
        failure = "PyTorch CPU installation failed!"

    phase.steps.append(
        PlanStep(
            action=Action(
                id="torch.install",
                name="Install PyTorch",
                adapter="shell",
                params={"argv": framework_install_argv(options, settings, handle), "stream": True},
            ),
            title=title,
            title_style="warning",
            failure=failure,
        )
    )
    phase.steps.append(
        PlanStep(
            action=Action(
                id="torch.verify",
                name="Check PyTorch import",
                adapter="shell",
                params={"argv": handle.run("-c", FRAMEWORK_CHECK)},
            ),
            title="Verifying PyTorch installation...",
            success="✅ PyTorch installed successfully",
            failure="PyTorch verification failed!",
            error_kind="verification-failed",
            echo_output=True,
        )
    )
    return phase
