"""
Core Module - Logging Setup.

============================================================
RESPONSIBILITY
============================================================
Configures root logging for command-line entry points.

- JSON-shaped or pipe-separated text lines on stderr, so
  reports printed on stdout stay machine-readable
- Every line names the command that produced it
- Level selected by name
- Libraries only ever call logging.getLogger(__name__)

============================================================
"""

import json
import logging
import sys


LOGGER_NAME = "survey_shell"


def build_formatter(log_format: str, command: str) -> logging.Formatter:
    """Get the line formatter for a log format."""
    if log_format == "json":
        # escape the command once; the record fields are filled in per line
        return logging.Formatter(
            json.dumps({
                "timestamp": "%(asctime)s",
                "level": "%(levelname)s",
                "command": command,
                "logger": "%(name)s",
                "message": "%(message)s",
            })
        )
    return logging.Formatter(
        f"%(asctime)s | %(levelname)-8s | {command} | %(name)s | %(message)s"
    )


def setup_logging(
    level: str = "WARNING",
    log_format: str = "text",
    command: str = LOGGER_NAME,
) -> logging.Logger:
    """
    Set up logging for one command-line run.

    Args:
        level: Log level name (unknown names fall back to WARNING)
        log_format: Output format (json or text)
        command: Command name stamped on every line

    Returns:
        The shell logger
    """
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(build_formatter(log_format, command))

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper(), logging.WARNING))
    root_logger.handlers = [handler]

    return logging.getLogger(LOGGER_NAME)


__all__ = ["LOGGER_NAME", "build_formatter", "setup_logging"]
