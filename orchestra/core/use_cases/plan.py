"""
Plan use case — show what a run would do, without running it.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from orchestra.core.config.loader import resolve_workspace
from orchestra.core.engine.planner import ExecutionPlan, build_plan
from orchestra.core.engine.selector import resolve_selection
from orchestra.core.errors import ConfigError
from orchestra.core.models.action import Action
from orchestra.core.models.workspace import WorkspaceConfig


@dataclass
class PlanResult:
    """Result of planning an action."""

    plan: ExecutionPlan | None = None
    workspace: WorkspaceConfig | None = None
    workspace_root: Path | None = None
    error: str | None = None

    def to_dict(self) -> dict:
        if self.error:
            return {"error": self.error}
        result: dict = {
            "workspace": self.workspace.name if self.workspace else "",
            "workspace_root": str(self.workspace_root),
        }
        if self.plan:
            result["plan"] = self.plan.to_dict()
        return result


def preview_plan(
    action: str,
    hash_name: str | None = None,
    crypto_name: str | None = None,
    config_path: Path | None = None,
) -> PlanResult:
    """Materialize the plan for an action and algorithm selection."""
    result = PlanResult()

    try:
        parsed = Action.parse(action)
        workspace, workspace_root, _ = resolve_workspace(config_path)
        selection = resolve_selection(hash_name, crypto_name)
    except ConfigError as e:
        result.error = str(e)
        return result

    result.workspace = workspace
    result.workspace_root = workspace_root
    result.plan = build_plan(parsed, selection, workspace)
    return result
