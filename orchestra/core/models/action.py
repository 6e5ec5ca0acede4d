"""
Action and Receipt models — the execution contract.

An Action is what the user asked for (build, test or lint). A Receipt is
what an adapter hands back after running an external tool: adapters
return Receipts, never exceptions.
"""

from __future__ import annotations

from datetime import UTC, datetime
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, Field

from orchestra.core.errors import ConfigError


def _now_iso() -> str:
    """Current UTC time as ISO string."""
    return datetime.now(UTC).isoformat()


class Action(str, Enum):
    """A requested workspace action.

    The value is the CLI token. Lint is exposed as ``clippy``.
    """

    BUILD = "build"
    TEST = "test"
    LINT = "clippy"

    @property
    def subcommand(self) -> str:
        """Build-tool subcommand issued for this action."""
        return _SUBCOMMANDS[self]

    @property
    def strict(self) -> bool:
        """Whether compiler warnings are promoted to errors."""
        return self in (Action.BUILD, Action.TEST)

    @classmethod
    def parse(cls, token: str | None) -> Action:
        """Resolve a CLI token into an Action.

        Raises:
            ConfigError: if the token is not a known action.
        """
        value = (token or "").strip().lower()
        for member in cls:
            if member.value == value:
                return member
        choices = ", ".join(m.value for m in cls)
        raise ConfigError(f"Unknown action '{token}' (expected one of: {choices})")


_SUBCOMMANDS: dict[Action, str] = {
    Action.BUILD: "build",
    Action.TEST: "test",
    Action.LINT: "clippy",
}


class Receipt(BaseModel):
    """Result of an adapter execution.

    The adapter NEVER raises — failures are captured here and turned
    into errors by the caller that knows what a failure means.
    """

    adapter: str
    action_id: str
    status: Literal["ok", "skipped", "failed"] = "ok"

    started_at: str = Field(default_factory=_now_iso)
    ended_at: str = Field(default_factory=_now_iso)
    duration_ms: int = 0

    output: str = ""
    error: str | None = None
    return_code: int | None = None

    metadata: dict[str, Any] = Field(default_factory=dict)

    @property
    def ok(self) -> bool:
        """Whether the action succeeded."""
        return self.status == "ok"

    @property
    def failed(self) -> bool:
        """Whether the action failed."""
        return self.status == "failed"

    @classmethod
    def success(
        cls,
        adapter: str,
        action_id: str,
        output: str = "",
        **kwargs: Any,
    ) -> Receipt:
        """Create a success receipt."""
        return cls(
            adapter=adapter,
            action_id=action_id,
            status="ok",
            output=output,
            **kwargs,
        )

    @classmethod
    def failure(
        cls,
        adapter: str,
        action_id: str,
        error: str,
        **kwargs: Any,
    ) -> Receipt:
        """Create a failure receipt."""
        return cls(
            adapter=adapter,
            action_id=action_id,
            status="failed",
            error=error,
            **kwargs,
        )

    @classmethod
    def skip(
        cls,
        adapter: str,
        action_id: str,
        reason: str = "",
        **kwargs: Any,
    ) -> Receipt:
        """Create a skip receipt."""
        return cls(
            adapter=adapter,
            action_id=action_id,
            status="skipped",
            output=reason,
            **kwargs,
        )
