"""structlog setup for the command line entry point."""

import logging
import sys

import structlog


def configure_logging(level: str = "info") -> None:
    """Render structlog events to stderr, dropping those below level."""
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(level.upper())
        ),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
    )
