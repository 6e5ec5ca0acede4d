"""
Adapter base — the protocol contract between engine and tools.

This defines the abstract interface that every adapter must implement.
The engine only talks to adapters through this protocol, never
directly to external tools.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path

from pydantic import BaseModel, Field

from orchestra.core.models.action import Receipt
from orchestra.core.models.invocation import Invocation


class ExecutionContext(BaseModel):
    """Everything an adapter needs to run one external command.

    Module invocations carry an ``invocation`` and a ``subcommand``;
    plain commands (coverage, upload) carry ``command`` instead.
    """

    action_id: str
    invocation: Invocation | None = None
    subcommand: str = ""
    command: list[str] = Field(default_factory=list)
    workspace_root: str = "."
    env: dict[str, str] = Field(default_factory=dict)
    capture_output: bool = True

    @property
    def working_dir(self) -> str:
        """Directory the command belongs to."""
        if self.invocation is not None:
            return str(Path(self.workspace_root) / self.invocation.module)
        return self.workspace_root


class Adapter(ABC):
    """Abstract base class for all adapters.

    Adapters perform external side effects and return receipts.
    They NEVER raise exceptions — failures are captured in the Receipt.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """The adapter identifier (e.g., 'cargo', 'shell')."""

    @abstractmethod
    def is_available(self) -> bool:
        """Check if this adapter's underlying tool is installed.

        Should be fast and never raise.
        """

    @abstractmethod
    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        """Validate that the command can be executed.

        Returns:
            (is_valid, error_message). error_message is empty if valid.
        """

    @abstractmethod
    def execute(self, context: ExecutionContext) -> Receipt:
        """Run the command and return a receipt.

        MUST never raise exceptions. All failures are captured
        in the Receipt with status='failed'.
        """

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"
