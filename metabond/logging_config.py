"""
Structured logging configuration for metabond.

Provides JSON-formatted logs with trace_id support so every log line of a
command can be tied to the week or project it concerns.

Environment Variables:
    METABOND_LOG_LEVEL: Log level (DEBUG, INFO, WARNING, ERROR) - default: INFO
    METABOND_LOG_FORMAT: Log format (json, text) - default: json

Usage:
    from metabond.logging_config import setup_logging, get_logger

    setup_logging()
    logger = get_logger(__name__, trace_id="week-12")
    logger.info("Checkpoint appended")
"""

import logging
import sys
from typing import Optional

from pythonjsonlogger import jsonlogger

LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


class TraceIDFilter(logging.Filter):
    """
    Logging filter that adds trace_id to all log records.

    Ensures all logs have a trace_id field, even if not set via LoggerAdapter.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "trace_id"):
            record.trace_id = "N/A"  # type: ignore
        return True


def setup_logging(level: str = "INFO", fmt: str = "json", stream=None) -> None:
    """
    Configure root logger with structured logging.

    Args:
        level: DEBUG, INFO, WARNING, ERROR (unknown values mean INFO)
        fmt: "json" or "text"
        stream: Output stream (default: stderr, keeps stdout free for CLI output)
    """
    log_level = LEVELS.get(level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setLevel(log_level)
    handler.addFilter(TraceIDFilter())

    if fmt.lower() == "json":
        formatter = jsonlogger.JsonFormatter(
            "%(asctime)s %(name)s %(levelname)s %(message)s %(trace_id)s",
            rename_fields={
                "asctime": "timestamp",
                "name": "logger",
                "levelname": "level",
            },
        )
    else:
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s [trace_id=%(trace_id)s]",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    handler.setFormatter(formatter)
    root_logger.addHandler(handler)


def get_logger(name: str, trace_id: Optional[str] = None) -> logging.LoggerAdapter:
    """
    Get a logger with optional trace_id for correlation.

    Args:
        name: Logger name (typically __name__)
        trace_id: Trace ID (e.g. "week-12" or a project id)

    Returns:
        LoggerAdapter with trace_id in extra fields
    """
    logger = logging.getLogger(name)
    return logging.LoggerAdapter(logger, {"trace_id": trace_id or "N/A"})
