"""
Planner — turn the workspace declaration into an ordered invocation list.

Order is exactly the declared stage order, then module order within a
stage. The filesystem is never consulted here.

Expansion per stage kind:
    plain        one invocation, no features
    matrix       one invocation per declared feature, in declared order
    hash         one invocation with the selected hash feature
    crypto       one invocation with the selected crypto feature
    hash_crypto  one invocation with both

Stages whose kind is in the action's skip-set produce the same
invocations, flagged ``skipped``.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from orchestra.core.models.action import Action
from orchestra.core.models.algorithm import AlgorithmSelection
from orchestra.core.models.invocation import Invocation
from orchestra.core.models.module import Module
from orchestra.core.models.workspace import StageKind, WorkspaceConfig

logger = logging.getLogger(__name__)

FeatureSets = list[tuple[str, ...]]

_EXPANDERS: dict[StageKind, Callable[[Module, AlgorithmSelection], FeatureSets]] = {
    StageKind.PLAIN: lambda module, sel: [()],
    StageKind.MATRIX: lambda module, sel: [(feature,) for feature in module.features],
    StageKind.HASH: lambda module, sel: [(sel.hash.value,)],
    StageKind.CRYPTO: lambda module, sel: [(sel.crypto.value,)],
    StageKind.HASH_CRYPTO: lambda module, sel: [(sel.hash.value, sel.crypto.value)],
}


@dataclass
class ExecutionPlan:
    """An ordered list of invocations for one action."""

    action: Action
    selection: AlgorithmSelection
    invocations: list[Invocation] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.invocations)

    @property
    def executed(self) -> int:
        return sum(1 for i in self.invocations if not i.skipped)

    @property
    def skipped(self) -> int:
        return sum(1 for i in self.invocations if i.skipped)

    @property
    def modules(self) -> list[str]:
        """Module names in first-appearance order."""
        return list(dict.fromkeys(i.module for i in self.invocations))

    def for_module(self, name: str) -> list[Invocation]:
        return [i for i in self.invocations if i.module == name]

    def to_dict(self) -> dict:
        return {
            "action": self.action.value,
            "hash": self.selection.hash.value,
            "crypto": self.selection.crypto.value,
            "total": self.total,
            "executed": self.executed,
            "skipped": self.skipped,
            "invocations": [i.model_dump(mode="json") for i in self.invocations],
        }


def expand_features(kind: StageKind, module: Module, selection: AlgorithmSelection) -> FeatureSets:
    """Feature sets for one module, one entry per invocation."""
    return _EXPANDERS[kind](module, selection)


def invocation_id(stage: str, module: str, features: tuple[str, ...]) -> str:
    if features:
        return f"{stage}:{module}:{'+'.join(features)}"
    return f"{stage}:{module}"


def build_plan(
    action: Action,
    selection: AlgorithmSelection,
    workspace: WorkspaceConfig,
) -> ExecutionPlan:
    """Materialize the plan for an action and algorithm selection.

    Args:
        action: The requested action.
        selection: Resolved hash/crypto algorithms.
        workspace: Declared stages and skip-set.

    Returns:
        ExecutionPlan with invocations in run order.
    """
    plan = ExecutionPlan(action=action, selection=selection)
    skipped_kinds = workspace.skipped_kinds(action)

    for stage in workspace.stages:
        skip = stage.kind in skipped_kinds
        for module in stage.modules:
            for features in expand_features(stage.kind, module, selection):
                plan.invocations.append(
                    Invocation(
                        id=invocation_id(stage.name, module.name, features),
                        module=module.name,
                        stage=stage.name,
                        features=features,
                        skipped=skip,
                    )
                )

    logger.info(
        "Planned %s: %d invocations (%d skipped) across %d modules",
        action.value,
        plan.total,
        plan.skipped,
        len(plan.modules),
    )
    return plan
