"""
Shell command adapter — run a plain argv command and capture output.

Used for the coverage stage: one instrumentation run per test binary
and one upload per run.
"""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
import time
from pathlib import Path

from orchestra.adapters.base import Adapter, ExecutionContext
from orchestra.core.models.action import Receipt

logger = logging.getLogger(__name__)


class ShellCommandAdapter(Adapter):
    """Execute ``context.command`` in ``context.working_dir``."""

    @property
    def name(self) -> str:
        return "shell"

    def is_available(self) -> bool:
        return True

    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        if not context.command:
            return False, "Missing command"

        if shutil.which(context.command[0]) is None:
            return False, f"'{context.command[0]}' not found on PATH"

        cwd = context.working_dir
        if cwd and not Path(cwd).is_dir():
            return False, f"Working directory does not exist: {cwd}"

        return True, ""

    def execute(self, context: ExecutionContext) -> Receipt:
        command = context.command
        cwd = context.working_dir
        env = {**os.environ, **context.env}

        logger.debug("Executing: %s (cwd=%s)", " ".join(command), cwd)
        start = time.monotonic()

        try:
            result = subprocess.run(
                command,
                cwd=cwd,
                env=env,
                capture_output=True,
                text=True,
            )
        except OSError as e:
            return Receipt.failure(
                adapter=self.name,
                action_id=context.action_id,
                error=f"Command execution error: {e}",
                metadata={"command": command},
            )

        elapsed_ms = int((time.monotonic() - start) * 1000)
        output = result.stdout.strip()
        stderr = result.stderr.strip()

        if result.returncode == 0:
            return Receipt.success(
                adapter=self.name,
                action_id=context.action_id,
                output=output,
                duration_ms=elapsed_ms,
                return_code=0,
                metadata={"command": command, "stderr": stderr},
            )
        return Receipt.failure(
            adapter=self.name,
            action_id=context.action_id,
            error=stderr or f"Command exited with code {result.returncode}",
            duration_ms=elapsed_ms,
            return_code=result.returncode,
            metadata={"command": command, "stdout": output},
        )
