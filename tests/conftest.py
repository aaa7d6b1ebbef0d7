"""Shared test fixtures for rustgeiger tests."""

import pytest

from rustgeiger.scanning.models import ParseFailure
from rustgeiger.scanning.treesitter_parser import RustParser


@pytest.fixture
def parse_rust():
    """Parse Rust source, failing the test on a syntax error."""

    def _parse(source: str):
        result = RustParser().parse(source)
        assert not isinstance(result, ParseFailure), f"unexpected parse failure: {result}"
        return result

    return _parse


@pytest.fixture
def find_node():
    """Return the first node of a given type, in pre-order."""

    def _find(node, node_type: str, name: str = None):
        if node.type == node_type:
            name_node = node.child_by_field_name("name")
            if name is None or (name_node is not None and name_node.text.decode() == name):
                return node
        for child in node.children:
            found = _find(child, node_type, name)
            if found is not None:
                return found
        return None

    return _find


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """Isolate config discovery from the user's home, cwd and environment."""
    import os
    from pathlib import Path

    for key in list(os.environ):
        if key.startswith("RUSTGEIGER_"):
            monkeypatch.delenv(key, raising=False)
    home = tmp_path / "home"
    home.mkdir()
    project = tmp_path / "project"
    project.mkdir()
    monkeypatch.setattr(Path, "home", classmethod(lambda cls: home))
    monkeypatch.chdir(project)
    return {"home": home, "project": project}
