"""Tests for :mod:`react_boundary.resources`."""

from __future__ import annotations

import pytest

from react_boundary.resources import get_resource


def test_get_resource_missing_file_raises() -> None:
    with pytest.raises(FileNotFoundError):
        get_resource("does-not-exist.toml")


def test_get_resource_returns_packaged_defaults() -> None:
    resource = get_resource("react_boundary.defaults.toml")

    assert "[analyzer]" in resource.read_text(encoding="utf-8")
