"""
Domain models — Pydantic types for the installer.

    from bertenv.core.models import Action, Receipt, InstallOptions, InstallerSettings
"""

from bertenv.core.models.action import Action, Receipt
from bertenv.core.models.options import (
    Device,
    EnvType,
    ErrorKind,
    InstallOptions,
    InvalidArgumentError,
)
from bertenv.core.models.settings import InstallerSettings

__all__ = [
    "Action",
    "Device",
    "EnvType",
    "ErrorKind",
    "InstallOptions",
    "InstallerSettings",
    "InvalidArgumentError",
    "Receipt",
]
