"""
Structured logging configuration for the brainscreen biomarker system.
"""

import logging
import sys

import structlog
from structlog.types import Processor

from brainscreen.core.config import settings


def _shared_processors() -> list[Processor]:
    """Processors applied before rendering, regardless of output format."""
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]


def configure_logging(log_level: str | None = None, log_format: str | None = None) -> None:
    """
    Configure structured logging for the application.

    Args:
        log_level: Overrides ``settings.log_level`` when given
        log_format: ``"json"`` or ``"console"``; overrides ``settings.log_format``
    """
    level_name = (log_level or ("DEBUG" if settings.debug else settings.log_level)).upper()
    fmt = log_format or settings.log_format

    renderer: Processor
    if fmt == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    structlog.configure(
        processors=_shared_processors() + [renderer],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # stdout is reserved for CLI output
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, level_name, logging.INFO),
        force=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """
    Get a logger instance.

    Args:
        name: Logger name (typically __name__ of the module)

    Returns:
        Configured logger instance

    Example:
        logger = get_logger(__name__)
        logger.info("capture_processed", n_samples=2048, success=True)
    """
    return structlog.get_logger(name)


# Initialize logging on module import
configure_logging()
