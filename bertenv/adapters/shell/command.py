"""
Shell command adapter — run one external program and capture the result.

Every installer side effect (venv creation, conda create, pip install,
interpreter checks) goes through here. Commands are argv lists, never
shell strings, so the same plan runs on POSIX and Windows. Commands run
without a timeout.
"""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
import time
from pathlib import Path

from bertenv.adapters.base import Adapter, ExecutionContext
from bertenv.core.models.action import Receipt
from bertenv.core.observability.logging_config import log_output_tail

logger = logging.getLogger(__name__)

# Keep receipts small; pip can print thousands of lines.
_OUTPUT_TAIL = 4000


def resolve_executable(program: str, working_dir: str) -> str | None:
    """Resolve argv[0] to an executable path.

    Bare names are looked up on PATH (``shutil.which`` honours PATHEXT,
    so ``conda`` finds ``conda.bat`` on Windows). Anything containing a
    path separator is taken relative to ``working_dir``.
    """
    if os.sep in program or (os.altsep and os.altsep in program):
        candidate = Path(program)
        if not candidate.is_absolute():
            candidate = Path(working_dir) / candidate
        return str(candidate) if candidate.is_file() else None
    return shutil.which(program)


class ShellCommandAdapter(Adapter):
    """Execute a command and capture its output.

    Action params:
        argv (list[str]): Program and arguments.
        stream (bool): Let the child write straight to the terminal
            instead of capturing (default: False).
        requires_files (list[str]): Paths, relative to the working dir,
            that must exist before the command runs.
    """

    @property
    def name(self) -> str:
        return "shell"

    def is_available(self) -> bool:
        return True

    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        argv = context.params.get("argv") or []
        if not argv:
            return False, "Missing required param: 'argv'"

        if not Path(context.working_dir).is_dir():
            return False, f"Working directory does not exist: {context.working_dir}"

        for rel in context.params.get("requires_files", []):
            if not (Path(context.working_dir) / rel).is_file():
                return False, f"Required file not found: {rel}"

        if resolve_executable(str(argv[0]), context.working_dir) is None:
            return False, f"Executable not found: {argv[0]}"

        return True, ""

    def execute(self, context: ExecutionContext) -> Receipt:
        step = context.action.id
        argv = [str(a) for a in context.params.get("argv", [])]
        stream = bool(context.params.get("stream", False))
        cwd = context.working_dir

        executable = resolve_executable(argv[0], cwd) or argv[0]
        command = [executable] + argv[1:]
        display = " ".join(argv)

        logger.debug("Executing: %s (cwd=%s, stream=%s)", display, cwd, stream)
        start = time.monotonic()

        try:
            if stream:
                result = subprocess.run(command, cwd=cwd)
                output, stderr = "", ""
            else:
                result = subprocess.run(
                    command,
                    cwd=cwd,
                    capture_output=True,
                    text=True,
                )
                output = (result.stdout or "").strip()[-_OUTPUT_TAIL:]
                stderr = (result.stderr or "").strip()[-_OUTPUT_TAIL:]
        except OSError as e:
            logger.info("%s could not start: %s", step, e)
            return Receipt.failure(
                adapter=self.name,
                action_id=step,
                error=f"Command execution error: {e}",
                metadata={"command": display},
            )

        elapsed_ms = int((time.monotonic() - start) * 1000)
        logger.info("%s exited with code %d after %dms", step, result.returncode, elapsed_ms)
        log_output_tail(logger, f"{step} stderr", stderr)
        metadata = {"command": display, "return_code": result.returncode}

        if result.returncode == 0:
            if stderr:
                metadata["stderr"] = stderr
            return Receipt.success(
                adapter=self.name,
                action_id=step,
                output=output,
                duration_ms=elapsed_ms,
                metadata=metadata,
            )

        if output:
            log_output_tail(logger, f"{step} stdout", output)
            metadata["stdout"] = output
        return Receipt.failure(
            adapter=self.name,
            action_id=step,
            error=stderr or f"Command exited with code {result.returncode}",
            duration_ms=elapsed_ms,
            metadata=metadata,
        )
