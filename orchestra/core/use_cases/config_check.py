"""
Config check use case — validate orchestra.yml and report issues.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from orchestra.core.config.loader import BUILTIN_CONFIG, find_workspace_file, load_workspace
from orchestra.core.errors import ConfigError
from orchestra.core.models.workspace import WorkspaceConfig


@dataclass
class ConfigCheckResult:
    """Result of configuration validation."""

    valid: bool = False
    workspace: WorkspaceConfig | None = None
    config_path: Path | None = None
    builtin: bool = False
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "valid": self.valid,
            "config_path": str(self.config_path) if self.config_path else None,
            "builtin": self.builtin,
            "errors": self.errors,
            "warnings": self.warnings,
            "workspace_name": self.workspace.name if self.workspace else None,
            "stage_count": len(self.workspace.stages) if self.workspace else 0,
            "module_count": len(self.workspace.module_names()) if self.workspace else 0,
        }


def check_config(config_path: Path | None = None) -> ConfigCheckResult:
    """Validate the workspace plan and report issues.

    Args:
        config_path: Optional explicit path to orchestra.yml.

    Returns:
        ConfigCheckResult with validation status and any issues.
    """
    result = ConfigCheckResult()

    if config_path is None:
        config_path = find_workspace_file()
    if config_path is None:
        config_path = BUILTIN_CONFIG
        result.builtin = True
        result.warnings.append("No orchestra.yml found, checking the built-in plan.")
    result.config_path = config_path

    try:
        workspace = load_workspace(config_path)
        result.workspace = workspace
    except ConfigError as e:
        result.errors.append(str(e))
        return result

    if not workspace.stages:
        result.warnings.append("No stages defined. Every run will fail the inventory check.")

    for stage in workspace.stages:
        if not stage.modules:
            result.warnings.append(f"Stage '{stage.name}' has no modules.")

    declared_kinds = {stage.kind for stage in workspace.stages}
    for action, kinds in workspace.skip.items():
        for kind in kinds:
            if kind not in declared_kinds:
                result.warnings.append(
                    f"Skip-set for '{action.value}' names '{kind.value}' but no stage has that kind."
                )

    # Module directories are only checked against a real workspace root.
    if not result.builtin:
        workspace_root = config_path.parent
        for name in workspace.module_names():
            if not (workspace_root / name).is_dir():
                result.warnings.append(f"Module '{name}' has no directory in the workspace.")

    result.valid = len(result.errors) == 0
    return result
