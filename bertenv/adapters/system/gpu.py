"""
GPU driver adapter — advisory check before a CUDA install.

Reads the NVIDIA driver version from ``nvidia-smi`` and compares it
with the minimum driver the requested CUDA toolkit needs. The install
step does not depend on this; a failure here only becomes a warning.
"""

from __future__ import annotations

import logging
import re
import shutil
import subprocess

from bertenv.adapters.base import Adapter, ExecutionContext
from bertenv.core.data.cuda_channels import min_driver_for
from bertenv.core.models.action import Receipt

logger = logging.getLogger(__name__)


def _version_tuple(version: str) -> tuple[int, int]:
    parts = [int(x) for x in re.findall(r"\d+", version)[:2]]
    if len(parts) == 1:
        parts.append(0)
    return parts[0], parts[1]


def check_driver_compat(driver_version: str, toolkit: str) -> dict:
    """Compare a driver version against a CUDA toolkit's minimum.

    Returns::

        {"compatible": True}
        {"compatible": True, "unknown_cuda": "12.9"}
        {"compatible": False, "min_driver": "455.23", "message": "..."}
    """
    min_driver = min_driver_for(toolkit)
    if min_driver is None:
        return {"compatible": True, "unknown_cuda": toolkit}

    try:
        if _version_tuple(driver_version) >= _version_tuple(min_driver):
            return {"compatible": True, "min_driver": min_driver}
    except (ValueError, IndexError):
        return {"compatible": True, "unparsed_driver": driver_version}

    return {
        "compatible": False,
        "min_driver": min_driver,
        "message": (
            f"CUDA {toolkit} requires driver >= {min_driver}, "
            f"but installed driver is {driver_version}"
        ),
    }


class GpuDriverAdapter(Adapter):
    """Check the NVIDIA driver against a CUDA toolkit version.

    Action params:
        toolkit (str): CUDA toolkit version, e.g. ``"11.1"``.
    """

    @property
    def name(self) -> str:
        return "gpu-driver"

    def is_available(self) -> bool:
        return shutil.which("nvidia-smi") is not None

    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        if not context.params.get("toolkit"):
            return False, "Missing required param: 'toolkit'"
        return True, ""

    def execute(self, context: ExecutionContext) -> Receipt:
        toolkit = context.params["toolkit"]

        if not self.is_available():
            return Receipt.failure(
                adapter=self.name,
                action_id=context.action.id,
                error="nvidia-smi not found; no NVIDIA driver detected",
            )

        try:
            r = subprocess.run(
                ["nvidia-smi", "--query-gpu=driver_version,name",
                 "--format=csv,noheader,nounits"],
                capture_output=True, text=True, timeout=10,
            )
        except (OSError, subprocess.TimeoutExpired) as e:
            return Receipt.failure(
                adapter=self.name,
                action_id=context.action.id,
                error=f"nvidia-smi did not run: {e}",
            )

        if r.returncode != 0 or not r.stdout.strip():
            return Receipt.failure(
                adapter=self.name,
                action_id=context.action.id,
                error=f"nvidia-smi exited with code {r.returncode}",
            )

        first = r.stdout.strip().splitlines()[0]
        driver_version, _, gpu_name = (p.strip() for p in first.partition(","))
        compat = check_driver_compat(driver_version, toolkit)
        metadata = {"driver_version": driver_version, "gpu": gpu_name, **compat}
        logger.debug("nvidia-smi: driver=%s gpu=%s compat=%s", driver_version, gpu_name, compat)

        if not compat["compatible"]:
            return Receipt.failure(
                adapter=self.name,
                action_id=context.action.id,
                error=compat["message"],
                metadata=metadata,
            )

        return Receipt.success(
            adapter=self.name,
            action_id=context.action.id,
            output=f"NVIDIA driver {driver_version} ({gpu_name})",
            metadata=metadata,
        )
