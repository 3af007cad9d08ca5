"""Shared fixtures for dupescan tests."""

import pathlib

import pytest


@pytest.fixture
def tmp_source(tmp_path: pathlib.Path) -> pathlib.Path:
    """Create a temporary source directory to scan."""
    source = tmp_path / "source"
    source.mkdir()
    return source


@pytest.fixture
def make_file(tmp_source: pathlib.Path):
    """Return a factory writing *content* to a file relative to tmp_source."""

    def _make(rel: str, content: bytes) -> pathlib.Path:
        p = tmp_source / rel
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_bytes(content)
        return p

    return _make
