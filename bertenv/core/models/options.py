"""
Install options — the four values that select an install path.

Resolved once at start (see ``bertenv.core.services.arguments``) and
never mutated afterwards.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict

from bertenv.core.data.cuda_channels import CUDA_CHANNELS, DEFAULT_CUDA_CODE, CudaChannel

EnvType = Literal["venv", "conda"]
Device = Literal["cpu", "gpu"]

ErrorKind = Literal[
    "invalid-argument",
    "missing-tool",
    "command-failed",
    "verification-failed",
    "config-error",
]

ENV_TYPES: tuple[str, ...] = ("venv", "conda")
DEVICES: tuple[str, ...] = ("cpu", "gpu")

DEFAULT_ENV_TYPE = "venv"
DEFAULT_DEVICE = "cpu"
DEFAULT_ENV_NAME = "bert_env"


class InvalidArgumentError(ValueError):
    """Raised when an option is outside its legal set."""

    kind: ErrorKind = "invalid-argument"

    def __init__(self, message: str, details: list[str] | None = None):
        super().__init__(message)
        self.details = details or []


class InstallOptions(BaseModel):
    """Resolved install options."""

    model_config = ConfigDict(frozen=True)

    env_type: EnvType = DEFAULT_ENV_TYPE
    device: Device = DEFAULT_DEVICE
    cuda: str = DEFAULT_CUDA_CODE
    env_name: str = DEFAULT_ENV_NAME

    @property
    def is_gpu(self) -> bool:
        return self.device == "gpu"

    @property
    def channel(self) -> CudaChannel | None:
        """The CUDA channel for GPU installs, None for CPU installs."""
        if not self.is_gpu:
            return None
        return CUDA_CHANNELS[self.cuda]

    def to_dict(self) -> dict:
        channel = self.channel
        return {
            "env_type": self.env_type,
            "device": self.device,
            "cuda": self.cuda,
            "env_name": self.env_name,
            "channel": channel.channel if channel else None,
            "channel_label": channel.label if channel else None,
        }
