"""
Argument resolver — defaults and membership checks for install options.

No side effects: an invalid value is rejected here, before any
external command is planned.
"""

from __future__ import annotations

import logging

from bertenv.core.data.cuda_channels import CUDA_CHANNELS, DEFAULT_CUDA_CODE, supported_codes_text
from bertenv.core.models.options import (
    DEFAULT_DEVICE,
    DEFAULT_ENV_NAME,
    DEFAULT_ENV_TYPE,
    DEVICES,
    ENV_TYPES,
    InstallOptions,
    InvalidArgumentError,
)

logger = logging.getLogger(__name__)

_FIELDS = ("env_type", "device", "cuda", "env_name")


def merge_positional(
    positional: tuple[str, ...] | list[str],
    named: dict[str, str | None],
) -> dict[str, str | None]:
    """Combine positional values (``venv gpu 111 myenv``) with named options.

    Positional values fill the fields in order. A field given both ways
    must agree.

    Raises:
        InvalidArgumentError: Too many positional values, or a conflict.
    """
    if len(positional) > len(_FIELDS):
        raise InvalidArgumentError(
            f"Too many arguments: expected at most {len(_FIELDS)}, got {len(positional)}"
        )

    merged = {key: named.get(key) for key in _FIELDS}
    for key, value in zip(_FIELDS, positional):
        existing = merged[key]
        if existing is not None and existing != value:
            raise InvalidArgumentError(
                f"Conflicting values for {key.replace('_', '-')}: '{value}' and '{existing}'"
            )
        merged[key] = value
    return merged


def resolve_options(
    env_type: str | None = None,
    device: str | None = None,
    cuda: str | None = None,
    env_name: str | None = None,
) -> InstallOptions:
    """Apply defaults and validate.

    Raises:
        InvalidArgumentError: env type, device, or (for gpu) CUDA code
            outside its legal set.
    """
    env_type = (env_type or DEFAULT_ENV_TYPE).strip().lower()
    device = (device or DEFAULT_DEVICE).strip().lower()
    cuda = (cuda or DEFAULT_CUDA_CODE).strip()
    env_name = (env_name or DEFAULT_ENV_NAME).strip() or DEFAULT_ENV_NAME

    if env_type not in ENV_TYPES:
        raise InvalidArgumentError(
            f"Invalid environment type: {env_type} (must be 'venv' or 'conda')"
        )

    if device not in DEVICES:
        raise InvalidArgumentError(f"Invalid device: {device} (must be 'cpu' or 'gpu')")

    # The CUDA code only matters, and is only checked, for gpu installs.
    if device == "gpu" and cuda not in CUDA_CHANNELS:
        raise InvalidArgumentError(
            f"Invalid CUDA version: {cuda}",
            details=[f"Supported: {supported_codes_text()}"],
        )

    options = InstallOptions(env_type=env_type, device=device, cuda=cuda, env_name=env_name)
    logger.debug("Resolved options: %s", options.to_dict())
    return options
