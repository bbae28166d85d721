"""Structured file logging for the CLI and the HTTP server.

Loggers are built with ``structlog.wrap_logger`` around a file writer, so
nothing here touches the global structlog or stdlib logging configuration.
Console output stays reserved for command results; logs only go to files.
"""

import logging
from os import getenv
from pathlib import Path
from typing import TYPE_CHECKING, cast

import structlog

from ._paths import get_cli_log_file, get_server_log_file

if TYPE_CHECKING:
    from structlog.typing import FilteringBoundLogger, Processor

DEBUG_ENV_VAR = "CAP_MANAGER_DEBUG"

_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


def _log_level_from_string(level: str, *, respect_env: bool = False) -> int:
    """Map a configured level name to its numeric threshold.

    Unknown names fall back to INFO. With ``respect_env``, a non-empty
    CAP_MANAGER_DEBUG forces DEBUG.
    """
    if respect_env and getenv(DEBUG_ENV_VAR):
        return logging.DEBUG
    return _LEVELS.get(level.lower(), logging.INFO)


def _processor_chain(log_format: str) -> list["Processor"]:
    chain: list[Processor] = [
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]
    if log_format == "text":
        chain += [
            structlog.processors.format_exc_info,
            structlog.dev.ConsoleRenderer(colors=False),
        ]
    else:
        chain += [
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(),
        ]
    return chain


def build_file_logger(
    path: Path,
    *,
    level: str = "info",
    log_format: str = "json",
    **context: object,
) -> "FilteringBoundLogger":  # noqa: UP037
    """Build a logger appending one line per event to ``path``.

    Args:
        path: Log file; parent directories are created as needed.
        level: Threshold name (debug, info, warning, error).
        log_format: ``json`` for JSON lines, ``text`` for key=value lines.
        **context: Key/value pairs bound to every entry.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    factory = structlog.WriteLoggerFactory(file=path.open("a", encoding="utf-8"))
    logger = structlog.wrap_logger(
        factory(),
        processors=_processor_chain(log_format),
        wrapper_class=structlog.make_filtering_bound_logger(
            _log_level_from_string(level, respect_env=True)
        ),
        context_class=dict,
    )
    bound = logger.bind(**context) if context else logger
    return cast("FilteringBoundLogger", bound)


def create_cli_logger(
    *,
    level: str = "info",
    log_format: str = "json",
    log_file: str = "",
    command: str = "",
) -> "FilteringBoundLogger":  # noqa: UP037
    """Create the logger used by CLI commands.

    An empty ``log_file`` means ``cli.log`` in the platform log directory.
    When ``command`` is given it is attached to every entry.
    """
    path = Path(log_file) if log_file else get_cli_log_file()
    context = {"command": command} if command else {}
    return build_file_logger(path, level=level, log_format=log_format, **context)


def create_server_logger(
    *,
    level: str = "info",
    log_format: str = "json",
    log_file: str = "",
) -> "FilteringBoundLogger":  # noqa: UP037
    """Create the logger used by the HTTP server.

    An empty ``log_file`` means ``server.log`` in the platform log directory.
    Every entry carries ``component="server"``.
    """
    path = Path(log_file) if log_file else get_server_log_file()
    return build_file_logger(
        path, level=level, log_format=log_format, component="server"
    )
