"""Structured logging configuration for ledgerpilot.

Every module logs through ``structlog.get_logger(__name__)``. Until the CLI
calls :func:`configure_logging`, those events are handed to the standard
``logging`` tree under the ``ledgerpilot`` logger, which carries a
``NullHandler``; an application embedding the library decides where they go.
"""

import logging
import sys
from typing import Literal

import structlog

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]
LogFormat = Literal["json", "console"]

DEFAULT_LOG_LEVEL: LogLevel = "WARNING"
PACKAGE_LOGGER = "ledgerpilot"


def configure_default_logging() -> None:
    """Route structlog events into stdlib logging, unless structlog is already set up."""
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    if not any(isinstance(h, logging.NullHandler) for h in package_logger.handlers):
        package_logger.addHandler(logging.NullHandler())
    if structlog.is_configured():
        return

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_log_level,
            structlog.processors.KeyValueRenderer(key_order=["event"]),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
    )


def _renderer(log_format: LogFormat) -> structlog.types.Processor:
    if log_format == "json":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(
        colors=sys.stderr.isatty(),
        exception_formatter=structlog.dev.plain_traceback,
    )


def configure_logging(
    level: LogLevel | None = None,
    format: LogFormat | None = None,
) -> None:
    """Configure structured logging for a CLI run.

    Log output goes to stderr so command output on stdout stays clean.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR). Defaults to WARNING.
        format: Output format (json or console). Defaults to console.
    """
    log_level = (level or DEFAULT_LOG_LEVEL).upper()

    # force rebinds the handler to the current stderr on every invocation
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, log_level),
        force=True,
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            _renderer(format or "console"),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
