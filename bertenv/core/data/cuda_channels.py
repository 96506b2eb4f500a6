"""
L0 Data — CUDA version codes, PyTorch wheel channels, driver minimums.

The code → channel table decides which PyTorch wheel index a GPU
install pulls from. The driver table maps each CUDA toolkit to the
minimum NVIDIA driver it needs.

Source: https://docs.nvidia.com/cuda/cuda-toolkit-release-notes/
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping, NamedTuple


class CudaChannel(NamedTuple):
    """One supported CUDA build of the framework."""

    code: str       # as typed on the command line, e.g. "111"
    channel: str    # wheel suffix and index path, e.g. "cu111"
    label: str      # e.g. "CUDA 11.1"
    toolkit: str    # e.g. "11.1"


CUDA_CHANNELS: Mapping[str, CudaChannel] = MappingProxyType({
    "102": CudaChannel("102", "cu102", "CUDA 10.2", "10.2"),
    "110": CudaChannel("110", "cu110", "CUDA 11.0", "11.0"),
    "111": CudaChannel("111", "cu111", "CUDA 11.1", "11.1"),
    "113": CudaChannel("113", "cu113", "CUDA 11.3", "11.3"),
})

DEFAULT_CUDA_CODE = "111"


_CUDA_DRIVER_COMPAT: list[tuple[str, str]] = [
    # (cuda_version, min_driver_version)
    ("11.3", "465.19"),
    ("11.2", "460.27"),
    ("11.1", "455.23"),
    ("11.0", "450.36"),
    ("10.2", "440.33"),
]


def min_driver_for(toolkit: str) -> str | None:
    """Minimum Linux driver version for a CUDA toolkit, or None if unknown."""
    for cuda_version, min_driver in _CUDA_DRIVER_COMPAT:
        if cuda_version == toolkit:
            return min_driver
    return None


def supported_codes_text() -> str:
    """Human-readable list of supported codes, e.g. ``102 (CUDA 10.2), 110 (CUDA 11.0)``."""
    return ", ".join(f"{c.code} ({c.label})" for c in CUDA_CHANNELS.values())
