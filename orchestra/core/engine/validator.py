"""
Completeness validator — every workspace module must be accounted for.

This is a check on the orchestrator itself: a crate added to the
workspace but never wired into orchestra.yml would otherwise go
unbuilt and untested without anyone noticing.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from orchestra.core.errors import InventoryMismatchError

logger = logging.getLogger(__name__)


def scan_inventory(
    workspace_root: Path,
    build_output_dirs: Iterable[str] = ("target",),
    ignore_dirs: Iterable[str] = (),
) -> frozenset[str]:
    """Top-level module directories of the workspace.

    Hidden directories, build-output directories and explicitly ignored
    directories are left out.
    """
    excluded = set(build_output_dirs) | set(ignore_dirs)
    inventory = frozenset(
        entry.name
        for entry in workspace_root.iterdir()
        if entry.is_dir() and not entry.name.startswith(".") and entry.name not in excluded
    )
    logger.debug("Inventory of %s: %d modules", workspace_root, len(inventory))
    return inventory


def find_unaccounted(inventory: Iterable[str], accounted: Iterable[str]) -> list[str]:
    """Inventory entries with no record, sorted by name."""
    return sorted(set(inventory) - set(accounted))


def check_completeness(
    inventory: Iterable[str],
    accounted: Iterable[str],
    plan_file: str = "orchestra.yml",
) -> None:
    """Fail if any inventory entry is missing from the run's records.

    Raises:
        InventoryMismatchError: naming every unaccounted module.
    """
    missing = find_unaccounted(inventory, accounted)
    if missing:
        for name in missing:
            logger.error("Module '%s' is in the workspace but not in %s", name, plan_file)
        raise InventoryMismatchError(missing, plan_file=plan_file)
