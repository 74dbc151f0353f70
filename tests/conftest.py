"""Shared pytest fixtures for react-boundary tests."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path

import pytest
import structlog

FIXTURES_DIR = Path(__file__).parent / "fixtures"


def _clear_root_handlers() -> None:
    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    root.setLevel(logging.WARNING)


@pytest.fixture(autouse=True)
def reset_logging_state() -> Iterator[None]:
    """Ensure each test runs with a clean logging configuration."""

    _clear_root_handlers()
    yield
    _clear_root_handlers()
    structlog.reset_defaults()


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the directory holding sample ``.tsx`` modules."""

    return FIXTURES_DIR
