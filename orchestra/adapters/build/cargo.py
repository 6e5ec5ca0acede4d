"""
Cargo adapter — run one module invocation through the build tool.

The adapter runs in the process working directory, which the module
runner has already moved into the module. Feature flags are passed as
a single space-separated ``--features`` value.
"""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
import time

from orchestra.adapters.base import Adapter, ExecutionContext
from orchestra.core.models.action import Receipt

logger = logging.getLogger(__name__)

# Lines of stderr kept on a failed receipt when output is captured
_ERROR_TAIL = 40


class CargoAdapter(Adapter):
    """Invoke ``cargo <subcommand> [--features "..."]``.

    Args:
        executable: Build tool binary (default: cargo).
    """

    def __init__(self, executable: str = "cargo"):
        self._executable = executable

    @property
    def name(self) -> str:
        return "cargo"

    def is_available(self) -> bool:
        return shutil.which(self._executable) is not None

    def build_command(self, context: ExecutionContext) -> list[str]:
        command = [self._executable, context.subcommand]
        if context.invocation is not None and context.invocation.features:
            command += ["--features", " ".join(context.invocation.features)]
        return command

    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        if context.invocation is None:
            return False, "Missing invocation"
        if not context.subcommand:
            return False, "Missing build subcommand"
        if not self.is_available():
            return False, f"'{self._executable}' not found on PATH"
        return True, ""

    def execute(self, context: ExecutionContext) -> Receipt:
        command = self.build_command(context)
        env = {**os.environ, **context.env}

        logger.debug("Executing: %s (cwd=%s)", " ".join(command), os.getcwd())
        start = time.monotonic()

        try:
            if context.capture_output:
                result = subprocess.run(command, env=env, capture_output=True, text=True)
            else:
                result = subprocess.run(command, env=env)
        except OSError as e:
            return Receipt.failure(
                adapter=self.name,
                action_id=context.action_id,
                error=f"Cannot start {self._executable}: {e}",
                metadata={"command": command},
            )

        elapsed_ms = int((time.monotonic() - start) * 1000)
        output = (result.stdout or "").strip()
        stderr = (result.stderr or "").strip()

        if result.returncode == 0:
            return Receipt.success(
                adapter=self.name,
                action_id=context.action_id,
                output=output,
                duration_ms=elapsed_ms,
                return_code=0,
                metadata={"command": command},
            )

        error = f"{' '.join(command)} exited with code {result.returncode}"
        if stderr:
            tail = "\n".join(stderr.splitlines()[-_ERROR_TAIL:])
            error = f"{error}\n{tail}"
        return Receipt.failure(
            adapter=self.name,
            action_id=context.action_id,
            error=error,
            duration_ms=elapsed_ms,
            return_code=result.returncode,
            metadata={"command": command, "stdout": output},
        )
