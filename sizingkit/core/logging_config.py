"""Logging setup for sizingkit.

Events are structured with structlog and rendered to stderr, either for a
terminal or as JSON lines. An optional log file receives one JSON object
per record through python-json-logger. Calling setup_logging again
replaces the handlers installed by the previous call.
"""
import logging
import sys
from pathlib import Path

import structlog
from pythonjsonlogger.json import JsonFormatter

from .exceptions import ConfigurationError

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

_handlers: list[logging.Handler] = []


def _reset_handlers() -> None:
    for handler in _handlers:
        logging.root.removeHandler(handler)
        handler.close()
    _handlers.clear()


def _install(handler: logging.Handler, formatter: logging.Formatter) -> None:
    handler.setFormatter(formatter)
    logging.root.addHandler(handler)
    _handlers.append(handler)


def setup_logging(
    log_level: str = "INFO",
    json_logs: bool = False,
    log_file: Path | str | None = None
) -> None:
    """Configure structured logging for the CLI and library callers.

    Args:
        log_level: One of DEBUG, INFO, WARNING, ERROR, CRITICAL
        json_logs: Render stderr output as JSON lines instead of console text
        log_file: Optional path that receives JSON records

    Raises:
        ConfigurationError: log_level is not a known level name
    """
    level_name = log_level.upper()
    if level_name not in LOG_LEVELS:
        raise ConfigurationError("log_level", f"unknown level {log_level!r}")

    _reset_handlers()
    logging.root.setLevel(getattr(logging, level_name))

    _install(logging.StreamHandler(sys.stderr), logging.Formatter("%(message)s"))

    if log_file:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        _install(
            logging.FileHandler(log_file, encoding="utf-8"),
            JsonFormatter(
                "%(asctime)s %(name)s %(levelname)s %(message)s",
                rename_fields={"asctime": "timestamp", "levelname": "level"},
            )
        )

    renderer = (
        structlog.processors.JSONRenderer() if json_logs
        else structlog.dev.ConsoleRenderer(colors=False)
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str) -> structlog.BoundLogger:
    """Get a logger instance for a module.

    Args:
        name: Logger name (usually __name__)

    Returns:
        Configured logger instance
    """
    return structlog.get_logger(name)
