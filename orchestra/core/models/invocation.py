"""
Invocation models — one planned module run and its record.

The planner emits Invocations; the module runner turns each one into
an InvocationRecord. A skipped invocation still produces a record so
that it counts toward completeness.
"""

from __future__ import annotations

from datetime import UTC, datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


def _now_iso() -> str:
    """Current UTC time as ISO string."""
    return datetime.now(UTC).isoformat()


class RecordStatus(str, Enum):
    EXECUTED = "executed"
    SKIPPED = "skipped"


class Invocation(BaseModel):
    """A single planned call of the build tool for one module."""

    model_config = ConfigDict(frozen=True)

    id: str                             # "<stage>:<module>[:<features>]"
    module: str
    stage: str = ""
    features: tuple[str, ...] = ()
    skipped: bool = False
    adapter: str = "cargo"

    @property
    def label(self) -> str:
        """Module name with its features, for display."""
        if self.features:
            return f"{self.module} [{' '.join(self.features)}]"
        return self.module


class InvocationRecord(BaseModel):
    """What actually happened to one invocation."""

    invocation_id: str
    module: str
    features: tuple[str, ...] = ()
    status: RecordStatus = RecordStatus.EXECUTED

    recorded_at: str = Field(default_factory=_now_iso)
    duration_ms: int = 0
    output: str = ""

    metadata: dict[str, Any] = Field(default_factory=dict)

    @property
    def skipped(self) -> bool:
        return self.status == RecordStatus.SKIPPED

    @classmethod
    def executed(cls, invocation: Invocation, **kwargs: Any) -> InvocationRecord:
        return cls(
            invocation_id=invocation.id,
            module=invocation.module,
            features=invocation.features,
            status=RecordStatus.EXECUTED,
            **kwargs,
        )

    @classmethod
    def skip(cls, invocation: Invocation, reason: str = "", **kwargs: Any) -> InvocationRecord:
        return cls(
            invocation_id=invocation.id,
            module=invocation.module,
            features=invocation.features,
            status=RecordStatus.SKIPPED,
            output=reason,
            **kwargs,
        )
