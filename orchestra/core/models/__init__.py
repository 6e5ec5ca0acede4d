"""
Domain models — Pydantic types for the orchestrator.

All models are re-exported here for convenient access:

    from orchestra.core.models import Action, Invocation, WorkspaceConfig
"""

from orchestra.core.models.action import Action, Receipt
from orchestra.core.models.algorithm import (
    AlgorithmSelection,
    CryptoAlgorithm,
    HashAlgorithm,
)
from orchestra.core.models.invocation import Invocation, InvocationRecord, RecordStatus
from orchestra.core.models.module import Module
from orchestra.core.models.workspace import (
    CoverageSettings,
    Stage,
    StageKind,
    ToolSettings,
    WorkspaceConfig,
)

__all__ = [
    # action.py
    "Action",
    # algorithm.py
    "AlgorithmSelection",
    "CoverageSettings",
    "CryptoAlgorithm",
    "HashAlgorithm",
    # invocation.py
    "Invocation",
    "InvocationRecord",
    # module.py
    "Module",
    "Receipt",
    "RecordStatus",
    # workspace.py
    "Stage",
    "StageKind",
    "ToolSettings",
    "WorkspaceConfig",
]
