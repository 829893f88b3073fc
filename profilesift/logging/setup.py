"""Structlog configuration for profilesift."""

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager

import structlog

from profilesift.config import AnalyzerConfig, LogFormat


def configure_logging(config: AnalyzerConfig | None = None) -> None:
    """
    Configure structlog with appropriate processors and output format.

    Args:
        config: AnalyzerConfig instance, uses defaults if None
    """
    if config is None:
        config = AnalyzerConfig()

    log_level = getattr(logging, config.log_level.upper(), logging.INFO)
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=log_level,
    )

    processors: list = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if config.log_format == LogFormat.JSON:
        processors.extend([
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ])
    else:
        processors.extend([
            structlog.dev.set_exc_info,
            structlog.dev.ConsoleRenderer(colors=True),
        ])

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str | None = None) -> structlog.BoundLogger:
    """
    Get a configured structlog logger.

    Args:
        name: Optional logger name for context

    Returns:
        Configured structlog BoundLogger
    """
    logger = structlog.get_logger()
    if name:
        logger = logger.bind(logger_name=name)
    return logger


@contextmanager
def analysis_context(url: str, **extra) -> Iterator[None]:
    """
    Bind the profile URL (and any extra keys) to every log line emitted
    while one analysis runs, including those from the pipeline stages.

    The binding lives in contextvars, so concurrent analyses in separate
    tasks do not see each other's context.
    """
    with structlog.contextvars.bound_contextvars(profile_url=url, **extra):
        yield
