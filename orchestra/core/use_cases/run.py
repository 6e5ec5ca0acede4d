"""
Run use case — dispatch one workspace action end to end.

This is the top-level orchestrator: it validates the request, resolves
algorithms, materializes the plan, runs it fail-fast, checks that the
workspace inventory was fully accounted for, and optionally uploads
coverage.

States:
    idle → validating_args → running_plan → checking_completeness → done | failed

Coverage runs after ``done`` and cannot move the run back to ``failed``.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from orchestra.adapters.build.cargo import CargoAdapter
from orchestra.adapters.registry import AdapterRegistry
from orchestra.adapters.shell.command import ShellCommandAdapter
from orchestra.core.config.loader import BUILTIN_CONFIG, WORKSPACE_CONFIG_FILE, resolve_workspace
from orchestra.core.engine.coverage import CoverageReport, CoverageUploader
from orchestra.core.engine.planner import ExecutionPlan, build_plan
from orchestra.core.engine.runner import ModuleRunner, RunContext, execute_plan
from orchestra.core.engine.selector import resolve_selection
from orchestra.core.engine.validator import check_completeness, scan_inventory
from orchestra.core.errors import (
    ConfigError,
    InventoryMismatchError,
    ModuleBuildError,
    OrchestraError,
)
from orchestra.core.models.action import Action
from orchestra.core.models.algorithm import AlgorithmSelection
from orchestra.core.models.invocation import Invocation, InvocationRecord
from orchestra.core.models.workspace import WorkspaceConfig

logger = logging.getLogger(__name__)


class RunState(str, Enum):
    IDLE = "idle"
    VALIDATING_ARGS = "validating_args"
    RUNNING_PLAN = "running_plan"
    CHECKING_COMPLETENESS = "checking_completeness"
    DONE = "done"
    FAILED = "failed"


@dataclass
class RunResult:
    """Result of dispatching one action."""

    state: RunState = RunState.IDLE
    action: Action | None = None
    selection: AlgorithmSelection | None = None
    workspace: WorkspaceConfig | None = None
    workspace_root: Path | None = None
    plan: ExecutionPlan | None = None
    records: list[InvocationRecord] = field(default_factory=list)
    failed_module: str | None = None
    unaccounted: list[str] = field(default_factory=list)
    coverage: CoverageReport | None = None
    error: str | None = None
    error_type: str | None = None

    @property
    def ok(self) -> bool:
        return self.state == RunState.DONE

    @property
    def exit_code(self) -> int:
        return 0 if self.ok else 1

    @property
    def executed(self) -> int:
        return sum(1 for r in self.records if not r.skipped)

    @property
    def skipped(self) -> int:
        return sum(1 for r in self.records if r.skipped)

    def advance(self, state: RunState) -> None:
        logger.debug("Run state: %s → %s", self.state.value, state.value)
        self.state = state

    def fail(self, error: OrchestraError) -> RunResult:
        self.error = str(error)
        self.error_type = type(error).__name__
        logger.error("%s", error)
        self.advance(RunState.FAILED)
        return self

    def to_dict(self) -> dict:
        result: dict = {
            "state": self.state.value,
            "ok": self.ok,
            "action": self.action.value if self.action else None,
        }
        if self.error:
            result["error"] = self.error
            result["error_type"] = self.error_type
        if self.selection:
            result["hash"] = self.selection.hash.value
            result["crypto"] = self.selection.crypto.value
        if self.workspace_root:
            result["workspace_root"] = str(self.workspace_root)
        if self.plan:
            result["planned"] = self.plan.total
        result["executed"] = self.executed
        result["skipped"] = self.skipped
        result["records"] = [r.model_dump(mode="json") for r in self.records]
        if self.failed_module:
            result["failed_module"] = self.failed_module
        if self.unaccounted:
            result["unaccounted"] = self.unaccounted
        if self.coverage:
            result["coverage"] = self.coverage.to_dict()
        return result


def default_registry(workspace: WorkspaceConfig, mock_mode: bool = False) -> AdapterRegistry:
    """Registry with the build-tool and shell adapters."""
    registry = AdapterRegistry(mock_mode=mock_mode)
    registry.register(CargoAdapter(executable=workspace.tools.build))
    registry.register(ShellCommandAdapter())
    return registry


def _plan_label(plan_file: Path) -> str:
    # The built-in plan can't be edited in place; point at the override file.
    if plan_file == BUILTIN_CONFIG:
        return WORKSPACE_CONFIG_FILE
    return str(plan_file)


def run_action(
    action: str,
    hash_name: str | None = None,
    crypto_name: str | None = None,
    upload: bool = False,
    config_path: Path | None = None,
    registry: AdapterRegistry | None = None,
    mock_mode: bool = False,
    on_invocation: Callable[[Invocation], None] | None = None,
) -> RunResult:
    """Run an action across the workspace.

    Args:
        action: Action token ('build', 'test' or 'clippy').
        hash_name: Hash algorithm name, empty for the default.
        crypto_name: Crypto algorithm name, empty for the default.
        upload: Upload coverage afterwards (test action only).
        config_path: Optional explicit path to orchestra.yml.
        registry: Optional pre-configured adapter registry.
        mock_mode: If True, every external call succeeds without running.
        on_invocation: Called before each invocation starts.

    Returns:
        RunResult in state ``done`` or ``failed``.
    """
    result = RunResult()

    # ── Validate arguments ───────────────────────────────────────
    result.advance(RunState.VALIDATING_ARGS)
    try:
        parsed = Action.parse(action)
        result.action = parsed
        workspace, workspace_root, plan_file = resolve_workspace(config_path)
        result.workspace = workspace
        result.workspace_root = workspace_root
        selection = resolve_selection(hash_name, crypto_name)
        result.selection = selection
    except ConfigError as e:
        return result.fail(e)

    plan = build_plan(parsed, selection, workspace)
    result.plan = plan

    if registry is None:
        registry = default_registry(workspace, mock_mode=mock_mode)

    context = RunContext.for_workspace(parsed, selection, workspace_root, workspace)
    runner = ModuleRunner(registry, context)

    # ── Run the plan, fail-fast ──────────────────────────────────
    result.advance(RunState.RUNNING_PLAN)
    try:
        execute_plan(plan.invocations, runner, on_invocation=on_invocation)
    except ModuleBuildError as e:
        result.records = runner.log.records
        result.failed_module = e.module
        return result.fail(e)
    result.records = runner.log.records

    # ── Completeness ─────────────────────────────────────────────
    result.advance(RunState.CHECKING_COMPLETENESS)
    try:
        inventory = scan_inventory(
            workspace_root,
            build_output_dirs=workspace.build_output_dirs,
            ignore_dirs=workspace.ignore_dirs,
        )
        check_completeness(
            inventory,
            runner.log.accounted_modules(),
            plan_file=_plan_label(plan_file),
        )
    except InventoryMismatchError as e:
        result.unaccounted = e.modules
        return result.fail(e)

    result.advance(RunState.DONE)

    # ── Coverage (best-effort) ───────────────────────────────────
    if upload:
        if parsed is Action.TEST:
            uploader = CoverageUploader(registry, workspace.coverage, workspace_root)
            result.coverage = uploader.run()
        else:
            logger.info("Coverage upload only applies to 'test'; ignored for '%s'", parsed.value)

    return result
