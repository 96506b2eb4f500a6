"""
Config check use case — validate installer.yml and report issues.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from bertenv.core.config.loader import ConfigError, find_config_file, load_settings
from bertenv.core.models.settings import InstallerSettings


@dataclass
class ConfigCheckResult:
    """Result of configuration validation."""

    valid: bool = False
    settings: InstallerSettings | None = None
    config_path: Path | None = None
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "valid": self.valid,
            "config_path": str(self.config_path) if self.config_path else None,
            "errors": self.errors,
            "warnings": self.warnings,
            "settings": self.settings.model_dump() if self.settings else None,
        }


def check_config(config_path: Path | None = None, working_dir: Path | None = None) -> ConfigCheckResult:
    """Validate installer settings and look for problems an install would hit.

    A missing installer.yml is valid: the defaults apply.
    """
    result = ConfigCheckResult()
    working_dir = working_dir or Path.cwd()

    if config_path is None:
        config_path = find_config_file(working_dir)
    result.config_path = config_path

    try:
        settings = load_settings(config_path, search=False)
    except ConfigError as e:
        result.errors.append(str(e))
        return result

    result.settings = settings
    result.valid = True

    if config_path is None:
        result.warnings.append("No installer.yml found; using built-in defaults.")

    if not (working_dir / settings.requirements).is_file():
        result.warnings.append(
            f"Requirements file '{settings.requirements}' not found in {working_dir}."
        )

    if (working_dir / settings.venv_dir).exists():
        result.warnings.append(
            f"'{settings.venv_dir}' already exists; venv installs will reuse it."
        )

    return result
