"""
Module runner — execute invocations one at a time, in plan order.

Each invocation enters its module directory for the duration of the
build-tool call and leaves it again on every exit path. A failure
raises ModuleBuildError and nothing after it runs. In registry mock mode
the directory is left alone, so a plan can be rehearsed outside a checkout.

Flow:
    invocation → (skipped? record) → chdir module → adapter → record | raise
"""

from __future__ import annotations

import contextlib
import logging
from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass, field
from pathlib import Path

from orchestra.adapters.base import ExecutionContext
from orchestra.adapters.registry import AdapterRegistry
from orchestra.core.errors import ModuleBuildError
from orchestra.core.models.action import Action
from orchestra.core.models.algorithm import AlgorithmSelection
from orchestra.core.models.invocation import Invocation, InvocationRecord
from orchestra.core.models.workspace import WorkspaceConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RunContext:
    """Everything that stays fixed for the length of one run."""

    action: Action
    selection: AlgorithmSelection
    workspace_root: Path
    env: Mapping[str, str] = field(default_factory=dict)
    capture_output: bool = False

    @classmethod
    def for_workspace(
        cls,
        action: Action,
        selection: AlgorithmSelection,
        workspace_root: Path,
        workspace: WorkspaceConfig,
    ) -> RunContext:
        """Build the context, enabling warnings-as-errors for strict actions."""
        env = dict(workspace.tools.strict_env) if action.strict else {}
        return cls(
            action=action,
            selection=selection,
            workspace_root=workspace_root,
            env=env,
            capture_output=workspace.tools.capture_output,
        )


class InvocationLog:
    """Append-only, in-memory record of one run."""

    def __init__(self) -> None:
        self._records: list[InvocationRecord] = []

    def append(self, record: InvocationRecord) -> None:
        self._records.append(record)

    @property
    def records(self) -> list[InvocationRecord]:
        return list(self._records)

    def accounted_modules(self) -> frozenset[str]:
        """Modules with at least one record, executed or skipped."""
        return frozenset(r.module for r in self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[InvocationRecord]:
        return iter(self._records)


class ModuleRunner:
    """Run single invocations through the adapter registry.

    Args:
        registry: Dispatches to the build-tool adapter.
        context: Fixed run parameters.
        log: Where records are appended (a fresh log by default).
    """

    def __init__(
        self,
        registry: AdapterRegistry,
        context: RunContext,
        log: InvocationLog | None = None,
    ):
        self.registry = registry
        self.context = context
        self.log = log if log is not None else InvocationLog()

    def run(self, invocation: Invocation) -> InvocationRecord:
        """Execute or skip one invocation and record it.

        Raises:
            ModuleBuildError: if the module directory is missing or the
                build tool reports failure.
        """
        if invocation.skipped:
            record = InvocationRecord.skip(
                invocation,
                reason=f"{self.context.action.value} skipped for stage '{invocation.stage}'",
            )
            self.log.append(record)
            logger.info("⊘ %s (skipped)", invocation.label)
            return record

        module_dir = self.context.workspace_root / invocation.module
        exec_context = ExecutionContext(
            action_id=invocation.id,
            invocation=invocation,
            subcommand=self.context.action.subcommand,
            workspace_root=str(self.context.workspace_root),
            env=dict(self.context.env),
            capture_output=self.context.capture_output,
        )

        # Mock runs answer without touching the module directory.
        enter = contextlib.nullcontext() if self.registry.mock_mode else contextlib.chdir(module_dir)
        try:
            with enter:
                receipt = self.registry.execute(invocation.adapter, exec_context)
        except OSError as e:
            raise ModuleBuildError(
                invocation.module,
                invocation.features,
                f"cannot enter {module_dir}: {e.strerror or e}",
            ) from e

        if receipt.failed:
            logger.info("✗ %s", invocation.label)
            raise ModuleBuildError(invocation.module, invocation.features, receipt.error or "")

        record = InvocationRecord.executed(
            invocation,
            duration_ms=receipt.duration_ms,
            output=receipt.output,
            metadata={"adapter": receipt.adapter, "return_code": receipt.return_code},
        )
        self.log.append(record)
        logger.info("✓ %s (%dms)", invocation.label, receipt.duration_ms)
        return record


def execute_plan(
    invocations: list[Invocation],
    runner: ModuleRunner,
    on_invocation: Callable[[Invocation], None] | None = None,
) -> InvocationLog:
    """Run invocations strictly in order, stopping at the first failure.

    Args:
        invocations: Plan order.
        runner: The module runner (its log collects the records).
        on_invocation: Called before each invocation starts.

    Raises:
        ModuleBuildError: from the first failing invocation.
    """
    for invocation in invocations:
        if on_invocation is not None:
            on_invocation(invocation)
        runner.run(invocation)
    return runner.log
