"""
Workspace model — the hand-maintained orchestration plan.

Loaded from orchestra.yml, this is the canonical truth about which
modules exist, in which order they are built, and which of them take
feature flags. If a module isn't declared here, a run will refuse to
pass.
"""

from __future__ import annotations

from enum import Enum
from string import Formatter
from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator

from orchestra.core.models.action import Action
from orchestra.core.models.module import Module


class StageKind(str, Enum):
    """How the modules of a stage are expanded into invocations."""

    PLAIN = "plain"              # once, no features
    MATRIX = "matrix"            # once per declared feature
    HASH = "hash"                # once, with the selected hash feature
    CRYPTO = "crypto"            # once, with the selected crypto feature
    HASH_CRYPTO = "hash_crypto"  # once, with both


ALGORITHM_KINDS = frozenset({StageKind.HASH, StageKind.CRYPTO, StageKind.HASH_CRYPTO})

_PLACEHOLDERS = frozenset({"artifact", "artifact_name", "output_dir"})


class Stage(BaseModel):
    """An ordered group of modules sharing one expansion rule."""

    name: str
    kind: StageKind = StageKind.PLAIN
    description: str = ""
    modules: list[Module] = Field(default_factory=list)

    @field_validator("modules", mode="before")
    @classmethod
    def _coerce_names(cls, value: Any) -> Any:
        # Plain strings are shorthand for featureless modules.
        if isinstance(value, list):
            return [{"name": item} if isinstance(item, str) else item for item in value]
        return value

    @model_validator(mode="after")
    def _check_features(self) -> Stage:
        for module in self.modules:
            if self.kind == StageKind.MATRIX and not module.features:
                raise ValueError(
                    f"module '{module.name}' in matrix stage '{self.name}' declares no features"
                )
            if self.kind != StageKind.MATRIX and module.features:
                raise ValueError(
                    f"module '{module.name}' declares features but stage "
                    f"'{self.name}' is '{self.kind.value}', not 'matrix'"
                )
        return self

    @property
    def module_names(self) -> list[str]:
        return [m.name for m in self.modules]


class ToolSettings(BaseModel):
    """External build tool settings."""

    build: str = "cargo"
    capture_output: bool = False
    strict_env: dict[str, str] = Field(default_factory=lambda: {"RUSTFLAGS": "-D warnings"})


class CoverageSettings(BaseModel):
    """Coverage instrumentation and upload commands.

    Command templates accept ``{artifact}``, ``{artifact_name}`` and
    ``{output_dir}`` placeholders.
    """

    artifacts_dir: str = "target/debug/deps"
    output_dir: str = "target/cov"
    command: list[str] = Field(
        default_factory=lambda: [
            "kcov",
            "--exclude-pattern=/.cargo,/usr/lib",
            "--verify",
            "{output_dir}/{artifact_name}",
            "{artifact}",
        ]
    )
    upload_command: list[str] = Field(
        default_factory=lambda: ["codecov", "--dir", "{output_dir}"]
    )

    @field_validator("command", "upload_command")
    @classmethod
    def _known_placeholders(cls, value: list[str]) -> list[str]:
        if not value:
            raise ValueError("command must not be empty")
        for part in value:
            for _, placeholder, _, _ in Formatter().parse(part):
                if placeholder is not None and placeholder not in _PLACEHOLDERS:
                    raise ValueError(f"unknown placeholder '{{{placeholder}}}' in '{part}'")
        return value


def _default_skips() -> dict[Action, list[StageKind]]:
    # Lint coverage of the algorithm-parameterized modules is still pending.
    return {Action.LINT: sorted(ALGORITHM_KINDS, key=lambda k: k.value)}


class WorkspaceConfig(BaseModel):
    """Root workspace declaration — loaded from orchestra.yml."""

    version: int = 1

    name: str
    description: str = ""

    build_output_dirs: list[str] = Field(default_factory=lambda: ["target"])
    ignore_dirs: list[str] = Field(default_factory=list)

    tools: ToolSettings = Field(default_factory=ToolSettings)
    stages: list[Stage] = Field(default_factory=list)
    skip: dict[Action, list[StageKind]] = Field(default_factory=_default_skips)
    coverage: CoverageSettings = Field(default_factory=CoverageSettings)

    @model_validator(mode="after")
    def _unique_names(self) -> WorkspaceConfig:
        seen_stages: set[str] = set()
        seen_modules: dict[str, str] = {}
        for stage in self.stages:
            if stage.name in seen_stages:
                raise ValueError(f"duplicate stage '{stage.name}'")
            seen_stages.add(stage.name)
            for name in stage.module_names:
                if name in seen_modules:
                    raise ValueError(
                        f"module '{name}' declared in both '{seen_modules[name]}' "
                        f"and '{stage.name}'"
                    )
                seen_modules[name] = stage.name
        return self

    def module_names(self) -> list[str]:
        """All declared modules, in plan order."""
        return [name for stage in self.stages for name in stage.module_names]

    def get_stage(self, name: str) -> Stage | None:
        for stage in self.stages:
            if stage.name == name:
                return stage
        return None

    def skipped_kinds(self, action: Action) -> frozenset[StageKind]:
        """Stage kinds recorded as skipped for the given action."""
        return frozenset(self.skip.get(action, ()))
