"""
Module model — one independently buildable member of the workspace.

Modules are declared by hand in the workspace plan. A module may carry
optional backend features; those are built one at a time, never
together.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator


class Module(BaseModel):
    """A workspace module and its optional backend features."""

    name: str
    features: list[str] = Field(default_factory=list)
    description: str = ""

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("module name must not be empty")
        return value

    @field_validator("features")
    @classmethod
    def _features_unique(cls, value: list[str]) -> list[str]:
        duplicates = sorted({f for f in value if value.count(f) > 1})
        if duplicates:
            raise ValueError(f"duplicate features: {', '.join(duplicates)}")
        return value
