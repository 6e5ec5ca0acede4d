"""
Mock adapter — test double for the build tool and shell commands.

Returns success for every call unless told otherwise. Records each
context it receives together with the working directory at call time,
so tests can check both order and directory handling.
"""

from __future__ import annotations

import os

from orchestra.adapters.base import Adapter, ExecutionContext
from orchestra.core.models.action import Receipt


class MockAdapter(Adapter):
    """Universal mock adapter for testing.

    Failures can be configured per action ID or per module name.
    """

    def __init__(
        self,
        adapter_name: str = "mock",
        available: bool = True,
        default_output: str = "[mock] executed",
    ):
        self._name = adapter_name
        self._available = available
        self._default_output = default_output
        self._responses: dict[str, Receipt] = {}
        self._failing_modules: dict[str, str] = {}
        self._call_log: list[ExecutionContext] = []
        self._cwd_log: list[str] = []

    @property
    def name(self) -> str:
        return self._name

    @property
    def call_log(self) -> list[ExecutionContext]:
        """All execution contexts this mock has received."""
        return self._call_log

    @property
    def cwd_log(self) -> list[str]:
        """Process working directory observed at each call."""
        return self._cwd_log

    @property
    def call_count(self) -> int:
        return len(self._call_log)

    @property
    def called_modules(self) -> list[str]:
        """Module names of every invocation received, in call order."""
        return [c.invocation.module for c in self._call_log if c.invocation is not None]

    def is_available(self) -> bool:
        return self._available

    def set_response(self, action_id: str, receipt: Receipt) -> None:
        """Set a custom response for a specific action ID."""
        self._responses[action_id] = receipt

    def set_failure(self, action_id: str, error: str = "Mock failure") -> None:
        """Configure a specific action to fail."""
        self._responses[action_id] = Receipt.failure(
            adapter=self._name,
            action_id=action_id,
            error=error,
            return_code=101,
        )

    def fail_module(self, module: str, error: str = "Mock failure") -> None:
        """Configure every invocation of a module to fail."""
        self._failing_modules[module] = error

    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        return True, ""

    def execute(self, context: ExecutionContext) -> Receipt:
        self._call_log.append(context)
        self._cwd_log.append(os.getcwd())

        if context.action_id in self._responses:
            return self._responses[context.action_id]

        module = context.invocation.module if context.invocation else None
        if module in self._failing_modules:
            return Receipt.failure(
                adapter=self._name,
                action_id=context.action_id,
                error=self._failing_modules[module],
                return_code=101,
            )

        return Receipt.success(
            adapter=self._name,
            action_id=context.action_id,
            output=self._default_output,
            metadata={"mock": True},
        )

    def reset(self) -> None:
        """Clear call logs and configured responses."""
        self._call_log.clear()
        self._cwd_log.clear()
        self._responses.clear()
        self._failing_modules.clear()
