"""
Configuration loader — reads orchestra.yml into domain models.

This is the primary entry point for loading the workspace plan. It
reads YAML, validates against Pydantic schemas, and returns typed
domain objects. When no orchestra.yml exists, the built-in plan that
ships with the package is used.
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml

from orchestra.core.errors import ConfigError
from orchestra.core.models.workspace import WorkspaceConfig

logger = logging.getLogger(__name__)

# Default config filename
WORKSPACE_CONFIG_FILE = "orchestra.yml"

# Built-in plan, used when the workspace has no orchestra.yml
BUILTIN_CONFIG = Path(__file__).resolve().parent.parent / "data" / "workspace.yml"

__all__ = [
    "BUILTIN_CONFIG",
    "ConfigError",
    "WORKSPACE_CONFIG_FILE",
    "find_workspace_file",
    "load_workspace",
    "resolve_workspace",
]


def find_workspace_file(start_dir: Path | None = None) -> Path | None:
    """Search for orchestra.yml starting from the given directory, walking up.

    This allows running commands from inside a module and still finding
    the workspace root.

    Args:
        start_dir: Directory to start searching from (default: cwd).

    Returns:
        Path to orchestra.yml, or None if not found.
    """
    current = (start_dir or Path.cwd()).resolve()

    for _ in range(20):  # safety limit
        candidate = current / WORKSPACE_CONFIG_FILE
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            break  # filesystem root
        current = parent

    return None


def load_workspace(path: Path) -> WorkspaceConfig:
    """Load and validate a workspace plan file.

    Args:
        path: Path to an orchestra.yml (or the built-in plan).

    Returns:
        Validated WorkspaceConfig.

    Raises:
        ConfigError: If the file is missing, unreadable, or invalid.
    """
    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    # The YAML may wrap everything under a "workspace" key or be flat
    workspace_data = data.get("workspace", data) if "workspace" in data else data
    if not isinstance(workspace_data, dict):
        raise ConfigError(
            f"Expected a mapping under 'workspace' in {path}, "
            f"got {type(workspace_data).__name__}: {workspace_data!r}"
        )
    workspace_data = dict(workspace_data)

    for key in ("version", "stages", "skip", "tools", "coverage"):
        if key in data and key not in workspace_data:
            workspace_data[key] = data[key]

    try:
        workspace = WorkspaceConfig.model_validate(workspace_data)
    except Exception as e:
        raise ConfigError(f"Invalid workspace configuration: {e}") from e

    logger.info(
        "Loaded workspace '%s' with %d stages, %d modules",
        workspace.name,
        len(workspace.stages),
        len(workspace.module_names()),
    )
    return workspace


def resolve_workspace(config_path: Path | None = None) -> tuple[WorkspaceConfig, Path, Path]:
    """Locate and load the workspace plan.

    Returns:
        (workspace, workspace_root, plan_file). The root is the directory
        holding orchestra.yml, or the current directory when the built-in
        plan is used.
    """
    if config_path is None:
        config_path = find_workspace_file()

    if config_path is None:
        logger.debug("No %s found, using built-in plan", WORKSPACE_CONFIG_FILE)
        return load_workspace(BUILTIN_CONFIG), Path.cwd().resolve(), BUILTIN_CONFIG

    workspace = load_workspace(config_path)
    return workspace, config_path.parent.resolve(), config_path
