"""
Environment provisioner — venv or conda, created then "activated".

A child process cannot activate an environment for its parent, so
activation here means: every later command runs through the new
environment's interpreter (``venv/bin/python -m pip ...`` or
``conda run -n NAME python -m pip ...``). The activation step checks
that interpreter actually starts.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from bertenv.core.engine.executor import Phase, PlanStep
from bertenv.core.models.action import Action
from bertenv.core.models.options import InstallOptions
from bertenv.core.models.settings import InstallerSettings


@dataclass(frozen=True)
class EnvironmentHandle:
    """How to run Python inside the provisioned environment."""

    kind: str                 # "venv" | "conda"
    python: tuple[str, ...]   # argv prefix that starts the env interpreter
    location: str             # venv directory or conda env name
    activate_hint: str        # what the user types later to activate it

    def run(self, *args: str) -> list[str]:
        """argv running the env interpreter with extra arguments."""
        return [*self.python, *args]

    def pip(self, *args: str) -> list[str]:
        """argv running pip inside the environment."""
        return self.run("-m", "pip", *args)


def _is_windows() -> bool:
    return os.name == "nt"


def base_python(settings: InstallerSettings, windows: bool | None = None) -> str:
    """Interpreter used to create a venv."""
    if settings.base_python:
        return settings.base_python
    if windows is None:
        windows = _is_windows()
    return "python" if windows else "python3"


def environment_handle(
    options: InstallOptions,
    settings: InstallerSettings,
    windows: bool | None = None,
) -> EnvironmentHandle:
    """Resolve the interpreter and activation command for the chosen env kind."""
    if windows is None:
        windows = _is_windows()

    if options.env_type == "conda":
        return EnvironmentHandle(
            kind="conda",
            python=("conda", "run", "--no-capture-output", "-n", options.env_name, "python"),
            location=options.env_name,
            activate_hint=f"conda activate {options.env_name}",
        )

    venv_dir = settings.venv_dir.rstrip("/\\")
    if windows:
        return EnvironmentHandle(
            kind="venv",
            python=(f"{venv_dir}\\Scripts\\python.exe",),
            location=venv_dir,
            activate_hint=f"{venv_dir}\\Scripts\\activate",
        )
    return EnvironmentHandle(
        kind="venv",
        python=(f"{venv_dir}/bin/python",),
        location=venv_dir,
        activate_hint=f"source {venv_dir}/bin/activate",
    )


def build_environment_phase(
    options: InstallOptions,
    settings: InstallerSettings,
    handle: EnvironmentHandle,
    number: int = 1,
    windows: bool | None = None,
) -> Phase:
    """Probe → create → activate for the chosen environment kind."""
    if options.env_type == "conda":
        return _conda_phase(options, settings, handle, number)
    return _venv_phase(settings, handle, number, base_python(settings, windows))


def _venv_phase(
    settings: InstallerSettings,
    handle: EnvironmentHandle,
    number: int,
    python: str,
) -> Phase:
    phase = Phase(number=number, title="Setting up Python virtual environment (venv)...")
    phase.steps = [
        PlanStep(
            action=Action(
                id="env.probe",
                name="Check base interpreter",
                adapter="probe",
                params={"tool": python},
            ),
            success="✅ {output}",
            failure=f"{python} not found! Please install Python 3.7+ first.",
            error_kind="missing-tool",
        ),
        PlanStep(
            action=Action(
                id="env.create",
                name="Create virtual environment",
                adapter="shell",
                params={"argv": [python, "-m", "venv", settings.venv_dir]},
            ),
            title=f"Creating virtual environment '{settings.venv_dir}'...",
            success="✅ Virtual environment created",
            failure="Virtual environment creation failed!",
        ),
        PlanStep(
            action=Action(
                id="env.activate",
                name="Activate virtual environment",
                adapter="shell",
                params={"argv": handle.run("--version")},
            ),
            title="Activating virtual environment...",
            success="✅ Virtual environment activated",
            failure="Virtual environment activation failed!",
            hint=[f"Expected interpreter at {handle.python[0]}"],
        ),
    ]
    return phase


def _conda_phase(
    options: InstallOptions,
    settings: InstallerSettings,
    handle: EnvironmentHandle,
    number: int,
) -> Phase:
    name = options.env_name
    phase = Phase(number=number, title="Setting up Conda environment...")
    phase.steps = [
        PlanStep(
            action=Action(
                id="env.probe",
                name="Check conda",
                adapter="probe",
                params={"tool": "conda"},
            ),
            success="✅ {output}",
            failure="Conda not found! Please install Anaconda or Miniconda first.",
            hint=[f"Download: {settings.conda_download_url}"],
            error_kind="missing-tool",
        ),
        PlanStep(
            action=Action(
                id="env.create",
                name="Create conda environment",
                adapter="shell",
                params={
                    "argv": ["conda", "create", "-n", name, f"python={settings.python_version}", "-y"],
                    "stream": True,
                },
            ),
            title=f"Creating Conda environment '{name}' with Python {settings.python_version}...",
            success="✅ Conda environment created",
            failure="Conda environment creation failed!",
        ),
        PlanStep(
            action=Action(
                id="env.activate",
                name="Activate conda environment",
                adapter="shell",
                params={"argv": handle.run("--version")},
            ),
            title="Activating Conda environment...",
            success=f"✅ Conda environment activated: {name}",
            failure="Conda environment activation failed!",
        ),
    ]
    return phase
