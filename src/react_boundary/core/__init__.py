"""Core utilities shared across :mod:`react_boundary` modules.

The core namespace provides the configuration loading and logging setup used
by both the analysis service and the CLI.

Example:
    >>> from react_boundary.core import get_logger
    >>> logger = get_logger(__name__)
    >>> isinstance(logger, object)
    True
"""

from __future__ import annotations

from .config import AnalyzerSettings, AppConfig, load_config
from .logging import configure_logging, get_logger

__all__ = [
    "AnalyzerSettings",
    "AppConfig",
    "configure_logging",
    "get_logger",
    "load_config",
]
