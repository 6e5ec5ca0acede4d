"""
Shared test fixtures and configuration.
"""

import textwrap
from pathlib import Path

import pytest

from orchestra.adapters.mock import MockAdapter
from orchestra.adapters.registry import AdapterRegistry
from orchestra.core.config.loader import load_workspace
from orchestra.core.models.workspace import WorkspaceConfig

SAMPLE_MODULES = [
    "types",
    "logger",
    "pubsub",
    "util",
    "hashable",
    "crypto",
    "proto",
]

SAMPLE_WORKSPACE_YML = textwrap.dedent("""\
    name: sample
    stages:
      - name: foundation
        kind: plain
        modules: [types, logger]
      - name: transports
        kind: matrix
        modules:
          - name: pubsub
            features: [rabbitmq, zeromq, kafka]
      - name: core
        kind: plain
        modules: [util]
      - name: hashing
        kind: hash
        modules: [hashable]
      - name: signing
        kind: crypto
        modules: [crypto]
      - name: protocol
        kind: hash_crypto
        modules: [proto]
""")


@pytest.fixture
def workspace_root(tmp_path: Path) -> Path:
    """A workspace with one directory per sample module plus noise."""
    root = tmp_path / "ws"
    root.mkdir()
    for name in SAMPLE_MODULES:
        (root / name).mkdir()
    (root / "target").mkdir()
    (root / ".git").mkdir()
    (root / "Cargo.toml").write_text("[workspace]\n")
    (root / "orchestra.yml").write_text(SAMPLE_WORKSPACE_YML)
    return root


@pytest.fixture
def workspace_yml(workspace_root: Path) -> Path:
    return workspace_root / "orchestra.yml"


@pytest.fixture
def workspace(workspace_yml: Path) -> WorkspaceConfig:
    return load_workspace(workspace_yml)


@pytest.fixture
def cargo_mock() -> MockAdapter:
    return MockAdapter(adapter_name="cargo")


@pytest.fixture
def shell_mock() -> MockAdapter:
    return MockAdapter(adapter_name="shell")


@pytest.fixture
def registry(cargo_mock: MockAdapter, shell_mock: MockAdapter) -> AdapterRegistry:
    reg = AdapterRegistry()
    reg.register(cargo_mock)
    reg.register(shell_mock)
    return reg
