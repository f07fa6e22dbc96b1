"""
Structured logging for the top-up pipeline using structlog.

Diagnostics (missing inputs, malformed JSON, failed writes) are log events
carrying the offending file path. They go to stderr by default so the
report file and the CLI's result table never interleave with them.
"""

import logging
import sys
from pathlib import PurePath
from typing import IO, TYPE_CHECKING, Any

import structlog

if TYPE_CHECKING:
    from topup.config.settings import LoggingConfig


def stringify_paths(
    _logger: Any, _method_name: str, event_dict: structlog.types.EventDict
) -> structlog.types.EventDict:
    """Render path values as plain strings so JSON output stays readable."""
    for key, value in event_dict.items():
        if isinstance(value, PurePath):
            event_dict[key] = str(value)
    return event_dict


def configure_logging(
    level: str = "INFO",
    json_output: bool = False,
    stream: IO[str] | None = None,
) -> None:
    """
    Configure structured logging for the application.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        json_output: If True, emit one JSON object per line.
        stream: Destination for log lines. Defaults to stderr.
    """
    out = stream if stream is not None else sys.stderr
    log_level = getattr(logging, level.upper(), logging.INFO)

    processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        stringify_paths,
    ]
    if json_output:
        processors += [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=out.isatty()))

    # Uncached so structlog.testing.capture_logs can swap module loggers.
    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=out),
        cache_logger_on_first_use=False,
    )


def configure_logging_from(
    config: "LoggingConfig", stream: IO[str] | None = None
) -> None:
    """Apply a LoggingConfig section."""
    configure_logging(
        level=config.level, json_output=config.json_output, stream=stream
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a logger for a module, typically ``get_logger(__name__)``."""
    return structlog.get_logger(name)


def log_context(**kwargs: Any) -> structlog.contextvars.bound_contextvars:
    """
    Bind values to every log event emitted inside the block.

    Example:
        with log_context(output_path="output.txt"):
            log.error("Unable to write report")  # carries output_path
    """
    return structlog.contextvars.bound_contextvars(**kwargs)
