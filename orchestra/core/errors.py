"""
Error taxonomy for an orchestration run.

Three of these abort the run at the point of detection:

    ConfigError             bad action, algorithm or workspace config
    ModuleBuildError        the build tool failed for one module/feature
    InventoryMismatchError  a workspace module is missing from the plan

UploadError is confined to the coverage stage and never changes the
outcome of a run.
"""

from __future__ import annotations


class OrchestraError(Exception):
    """Base class for all orchestration errors."""


class ConfigError(OrchestraError):
    """Raised when an action, algorithm or workspace config is invalid."""


class ModuleBuildError(OrchestraError):
    """Raised when the build tool reports failure for a module."""

    def __init__(self, module: str, features: tuple[str, ...] = (), detail: str = ""):
        self.module = module
        self.features = tuple(features)
        self.detail = detail
        label = module
        if self.features:
            label = f"{module} [{' '.join(self.features)}]"
        message = f"Module '{label}' failed"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class InventoryMismatchError(OrchestraError):
    """Raised when workspace modules were never accounted for by the plan."""

    def __init__(self, modules: list[str], plan_file: str = "orchestra.yml"):
        self.modules = list(modules)
        self.plan_file = plan_file
        names = ", ".join(self.modules)
        super().__init__(
            f"Module(s) not covered by the orchestration plan: {names}. "
            f"Add them to {plan_file}."
        )

    @property
    def module(self) -> str:
        """The first unaccounted module."""
        return self.modules[0] if self.modules else ""


class UploadError(OrchestraError):
    """Raised when the coverage upload fails. Never fatal."""
