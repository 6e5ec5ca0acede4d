"""
Inventory use case — compare workspace directories against the plan.

The same reconciliation a run performs at the end, available up front
so a new crate can be wired in before anything is built.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from orchestra.core.config.loader import resolve_workspace
from orchestra.core.engine.planner import build_plan
from orchestra.core.engine.validator import find_unaccounted, scan_inventory
from orchestra.core.errors import ConfigError
from orchestra.core.models.action import Action
from orchestra.core.models.algorithm import AlgorithmSelection


@dataclass
class InventoryResult:
    """Workspace modules versus planned modules."""

    action: Action | None = None
    workspace_root: Path | None = None
    inventory: list[str] = field(default_factory=list)
    planned: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    unaccounted: list[str] = field(default_factory=list)
    missing_on_disk: list[str] = field(default_factory=list)
    error: str | None = None

    @property
    def complete(self) -> bool:
        return self.error is None and not self.unaccounted

    def to_dict(self) -> dict:
        if self.error:
            return {"error": self.error}
        return {
            "action": self.action.value if self.action else None,
            "workspace_root": str(self.workspace_root),
            "complete": self.complete,
            "inventory": self.inventory,
            "planned": self.planned,
            "skipped": self.skipped,
            "unaccounted": self.unaccounted,
            "missing_on_disk": self.missing_on_disk,
        }


def check_inventory(action: str = "build", config_path: Path | None = None) -> InventoryResult:
    """Reconcile the workspace inventory with the plan for an action.

    Skipped modules count as accounted for, exactly as in a real run.
    Algorithm choice doesn't change which modules are planned, so the
    defaults are used.
    """
    result = InventoryResult()

    try:
        parsed = Action.parse(action)
        workspace, workspace_root, _ = resolve_workspace(config_path)
    except ConfigError as e:
        result.error = str(e)
        return result

    result.action = parsed
    result.workspace_root = workspace_root

    plan = build_plan(parsed, AlgorithmSelection(), workspace)
    inventory = scan_inventory(
        workspace_root,
        build_output_dirs=workspace.build_output_dirs,
        ignore_dirs=workspace.ignore_dirs,
    )

    result.inventory = sorted(inventory)
    result.planned = plan.modules
    result.skipped = list(dict.fromkeys(i.module for i in plan.invocations if i.skipped))
    result.unaccounted = find_unaccounted(inventory, plan.modules)
    result.missing_on_disk = [m for m in plan.modules if m not in inventory]
    return result
