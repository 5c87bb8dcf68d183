"""
structlog setup shared by the CLI and the bridge worker.

Logs always go to stderr: the bridge worker's stdout carries the response line
and nothing else, and get-config prints the config tree on stdout.
"""

import logging
import os
import sys

import structlog

LOG_LEVEL_VARIABLE = "SECRET_TREE_LOG_LEVEL"


def configure_logging(level: str | None = None, *, use_json: bool = False) -> None:
    """Configure structlog processors and the minimum level.

    Args:
        level:    Level name (DEBUG, INFO, ...). Defaults to $SECRET_TREE_LOG_LEVEL,
                  then WARNING.
        use_json: JSON lines when True (machines), console renderer otherwise.
    """
    level_name = (level or os.environ.get(LOG_LEVEL_VARIABLE) or "WARNING").upper()
    numeric_level = logging.getLevelName(level_name)
    if not isinstance(numeric_level, int):
        numeric_level = logging.WARNING

    processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]
    if use_json:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )
