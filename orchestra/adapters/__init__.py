"""Adapters — bindings for the external build and coverage tools.

Public re-exports for convenient access.
"""

from orchestra.adapters.base import Adapter, ExecutionContext
from orchestra.adapters.build.cargo import CargoAdapter
from orchestra.adapters.mock import MockAdapter
from orchestra.adapters.registry import AdapterRegistry
from orchestra.adapters.shell.command import ShellCommandAdapter

__all__ = [
    "Adapter",
    "AdapterRegistry",
    "CargoAdapter",
    "ExecutionContext",
    "MockAdapter",
    "ShellCommandAdapter",
]
