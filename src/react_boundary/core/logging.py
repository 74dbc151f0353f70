"""Logging helpers for :mod:`react_boundary`.

structlog events are routed through stdlib logging. Until
:func:`configure_logging` installs handlers, the stdlib defaults apply:
warnings and errors reach stderr through ``logging.lastResort`` and
everything below is dropped, so library callers never see log output on
stdout.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Iterable

from rich.console import Console
from rich.logging import RichHandler
import structlog

Logger = structlog.stdlib.BoundLogger

_TIMESTAMPER = structlog.processors.TimeStamper(fmt="iso", utc=True)
_PRE_CHAIN = [
    structlog.contextvars.merge_contextvars,
    structlog.stdlib.add_log_level,
    _TIMESTAMPER,
]


def _level_number(level: str) -> int:
    """Translate a level name such as ``"debug"`` to its numeric value.

    Raises:
        ValueError: If the level name is not recognized.
    """

    value = logging.getLevelName(level.strip().upper())
    if not isinstance(value, int):
        raise ValueError(f"Unsupported log level: {level!r}")
    return value


def _install_handlers(
    root: logging.Logger,
    handlers: Iterable[logging.Handler],
) -> None:
    for existing in list(root.handlers):
        root.removeHandler(existing)
        try:
            existing.close()
        except OSError:  # pragma: no cover - stream already gone
            pass
    for handler in handlers:
        root.addHandler(handler)


def _configure_structlog() -> None:
    structlog.reset_defaults()
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *_PRE_CHAIN,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def _file_handler(log_file: Path, level: int) -> logging.FileHandler:
    """Return a handler appending one JSON object per event to ``log_file``."""

    handler = logging.FileHandler(log_file, encoding="utf-8", delay=True)
    handler.setLevel(level)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=structlog.processors.JSONRenderer(sort_keys=True),
            foreign_pre_chain=_PRE_CHAIN,
        )
    )
    return handler


def _console_handler(level: int, console: Console | None) -> RichHandler:
    handler = RichHandler(
        console=console or Console(stderr=True),
        rich_tracebacks=True,
        show_path=False,
        markup=False,
        log_time_format="%H:%M:%S",
    )
    handler.setLevel(level)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=structlog.dev.ConsoleRenderer(colors=False),
            foreign_pre_chain=_PRE_CHAIN,
        )
    )
    return handler


def configure_logging(
    *,
    level: str = "INFO",
    log_file: str | Path | None = None,
    console: Console | None = None,
) -> None:
    """Send structlog events to a Rich console and, optionally, a JSON file.

    Console output goes to stderr so that analysis results printed on stdout
    stay machine readable.

    Args:
        level: Log level name to apply to the root logger (case-insensitive).
        log_file: Optional path of a JSON-lines log file; parents are created.
        console: Optional Rich console override, primarily for testing.

    Raises:
        ValueError: If ``level`` is not a recognized log level name.
    """

    log_level = _level_number(level)

    handlers: list[logging.Handler] = [_console_handler(log_level, console)]
    if log_file is not None:
        target = Path(log_file).expanduser().resolve(strict=False)
        target.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(_file_handler(target, log_level))

    root = logging.getLogger()
    root.setLevel(log_level)
    _configure_structlog()
    _install_handlers(root, handlers)
    logging.captureWarnings(True)


def get_logger(name: str | None = None, **initial_context: Any) -> Logger:
    """Return a structured logger bound to an optional context.

    Example:
        >>> logger = get_logger(__name__, extension="tsx")
        >>> logger.debug("dropped-until-configured")
    """

    if not structlog.is_configured():
        _configure_structlog()
    return structlog.get_logger(name).bind(**initial_context)


__all__ = ["Logger", "configure_logging", "get_logger"]
