"""Pytest configuration and fixtures for PropFlow tests.

This module provides shared fixtures for the PropFlow test suite: host nodes
sharing a context registry, a NodeProperties factory and declaration files
written to a temporary directory.
"""

import json
from typing import Any

import pytest
from ruamel.yaml import YAML

from propflow import ContextRegistry, Node, NodeProperties, PropertiesConfig


@pytest.fixture
def contexts():
    """Shared owner of flow and global stores."""
    return ContextRegistry()


@pytest.fixture
def node(contexts):
    """A host node in flow ``f1``."""
    return Node(node_id="n1", flow_id="f1", name="test-node", contexts=contexts)


@pytest.fixture
def settings():
    """Default dispatch settings, independent of the environment."""
    return PropertiesConfig()


@pytest.fixture
def make_props(node, settings):
    """Factory building NodeProperties on the shared test node."""

    def _make(properties: dict[str, Any], config: dict[str, Any] | None = None, **kwargs) -> NodeProperties:
        kwargs.setdefault("settings", settings)
        return NodeProperties(node, config or {}, properties, **kwargs)

    return _make


@pytest.fixture
def recorder():
    """Handler that records every call it receives."""

    class Recorder:
        def __init__(self):
            self.calls: list[tuple[Any, Any, str]] = []

        def __call__(self, value, event, name):
            self.calls.append((value, event, name))

        @property
        def values(self) -> list[Any]:
            return [call[0] for call in self.calls]

    return Recorder()


@pytest.fixture
def declarations_data() -> dict[str, Any]:
    return {
        "properties": {
            "mode": {"value": "auto"},
            "target": {"scope": "flow"},
            "count": None,
        },
        "config": {"target": 21},
    }


@pytest.fixture
def declarations_file(tmp_path, declarations_data):
    """Declarations written as YAML."""
    path = tmp_path / "declarations.yaml"
    yaml = YAML()
    yaml.default_flow_style = False
    with open(path, "w", encoding="utf-8") as f:
        yaml.dump(declarations_data, f)
    return path


@pytest.fixture
def events_file(tmp_path):
    """Events written as JSON."""
    path = tmp_path / "events.json"
    events = [
        {"mode": "manual"},
        {"topic": "count", "payload": 3},
        {"topic": "unknown", "payload": 1},
        {"target": 19, "topic": "target", "payload": 23},
    ]
    path.write_text(json.dumps(events), encoding="utf-8")
    return path
