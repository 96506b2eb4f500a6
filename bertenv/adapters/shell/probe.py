"""
Tool probe adapter — is a program on PATH, and which version is it?

Used before anything is created: the base interpreter for venv runs,
``conda`` for conda runs.
"""

from __future__ import annotations

import logging
import shutil
import subprocess

from bertenv.adapters.base import Adapter, ExecutionContext
from bertenv.core.models.action import Receipt

logger = logging.getLogger(__name__)


class ToolProbeAdapter(Adapter):
    """Check a tool is reachable and report its version line.

    Action params:
        tool (str): Program name to look up on PATH.
        version_args (list[str]): Arguments printing the version
            (default: ``["--version"]``).
    """

    @property
    def name(self) -> str:
        return "probe"

    def is_available(self) -> bool:
        return True

    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        if not context.params.get("tool"):
            return False, "Missing required param: 'tool'"
        return True, ""

    def execute(self, context: ExecutionContext) -> Receipt:
        tool = context.params["tool"]
        version_args = context.params.get("version_args", ["--version"])

        path = shutil.which(tool)
        if path is None:
            return Receipt.failure(
                adapter=self.name,
                action_id=context.action.id,
                error=f"{tool} not found on PATH",
                metadata={"tool": tool, "found": False},
            )

        try:
            r = subprocess.run(
                [path, *version_args],
                capture_output=True, text=True, timeout=30,
            )
        except (OSError, subprocess.TimeoutExpired) as e:
            return Receipt.failure(
                adapter=self.name,
                action_id=context.action.id,
                error=f"{tool} did not run: {e}",
                metadata={"tool": tool, "path": path, "found": True},
            )

        # Python 2 and some conda builds print the version on stderr
        text = (r.stdout or "").strip() or (r.stderr or "").strip()
        version = text.splitlines()[0] if text else tool

        if r.returncode != 0:
            return Receipt.failure(
                adapter=self.name,
                action_id=context.action.id,
                error=f"{tool} exited with code {r.returncode}",
                metadata={"tool": tool, "path": path, "found": True},
            )

        logger.debug("Probed %s at %s: %s", tool, path, version)
        return Receipt.success(
            adapter=self.name,
            action_id=context.action.id,
            output=version,
            metadata={"tool": tool, "path": path, "found": True},
        )
