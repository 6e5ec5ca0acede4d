"""Workspace Orchestra — ordered build/test/lint runs across a Cargo workspace."""

__version__ = "0.1.0"
