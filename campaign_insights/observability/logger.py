"""
Structured logging for campaign-insights

Every module logs through ``get_logger(__name__)``. Records are emitted as
JSON lines (python-json-logger) or as plain text, on stderr so the CLI can
keep stdout for its JSON output.
"""
import logging
import os
import sys
import time

from pythonjsonlogger import jsonlogger

DEFAULT_LOGGER_NAME = "campaign-insights"
PACKAGE_PREFIX = "campaign_insights"

LOG_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}

JSON_FORMAT = "%(timestamp)s %(level)s %(logger)s %(component)s %(message)s"
TEXT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(funcName)s - %(message)s"


def component_of(logger_name: str) -> str:
    """
    Engine component a logger belongs to.

    "campaign_insights.core.metrics.engine" -> "metrics",
    "campaign_insights.batch.pipeline" -> "pipeline".
    """
    parts = logger_name.split(".")
    if parts[0] != PACKAGE_PREFIX or len(parts) < 2:
        return logger_name
    if parts[1] == "core" and len(parts) > 2:
        return parts[2]
    return parts[-1]


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """
    JSON formatter adding the fields the engine's log consumers filter on

    Adds: timestamp, level, logger, component and function
    """

    def add_fields(self, log_record: dict, record: logging.LogRecord, message_dict: dict) -> None:
        super().add_fields(log_record, record, message_dict)

        log_record["timestamp"] = log_record.get("timestamp") or self.formatTime(record, self.datefmt)
        log_record["level"] = (log_record.get("level") or record.levelname).upper()
        log_record["logger"] = record.name
        log_record["component"] = component_of(record.name)
        log_record["function"] = record.funcName


def build_formatter(format_type: str) -> logging.Formatter:
    """Formatter for "json" (default) or "text" output."""
    if format_type == "text":
        return logging.Formatter(fmt=TEXT_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
    return CustomJsonFormatter(fmt=JSON_FORMAT, datefmt="%Y-%m-%dT%H:%M:%S")


def setup_logger(
    name: str = DEFAULT_LOGGER_NAME,
    level: str | None = None,
    format_type: str | None = None,
) -> logging.Logger:
    """
    Configure a logger with a single stderr handler

    Args:
        name: Logger name
        level: DEBUG, INFO, WARNING, ERROR or CRITICAL; falls back to $LOG_LEVEL, then INFO
        format_type: "json" or "text"; falls back to $LOG_FORMAT, then "json"

    Returns:
        Configured logger instance
    """
    level_name = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    log_level = LOG_LEVELS.get(level_name, logging.INFO)

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(log_level)
    handler.setFormatter(build_formatter(format_type or os.getenv("LOG_FORMAT", "json")))

    logger = logging.getLogger(name)
    logger.setLevel(log_level)
    logger.handlers.clear()
    logger.addHandler(handler)
    logger.propagate = False

    return logger


def get_logger(name: str = DEFAULT_LOGGER_NAME) -> logging.Logger:
    """Return the named logger, configuring it from the environment on first use."""
    logger = logging.getLogger(name)
    return logger if logger.handlers else setup_logger(name)


def configure_package_logging(level: str | None = None, format_type: str | None = None) -> None:
    """
    Reconfigure every campaign_insights logger created so far.

    Used by the CLI after parsing --log-level / --log-format.
    """
    for name in list(logging.root.manager.loggerDict):
        if name == DEFAULT_LOGGER_NAME or name.startswith(PACKAGE_PREFIX):
            setup_logger(name, level=level, format_type=format_type)


class log_operation:
    """
    Context manager timing one unit of work and logging its outcome

    Start is logged at DEBUG, success at INFO and failure at ERROR with the
    traceback attached. Exceptions are never suppressed. The elapsed time is
    kept on ``duration`` after the block exits.

    Usage:
        with log_operation("Ingesting export", logger=logger, source_file="export.csv"):
            ...
    """

    def __init__(self, operation_name: str, logger: logging.Logger | None = None, **extra_fields):
        self.operation_name = operation_name
        self.logger = logger or get_logger()
        self.extra_fields = extra_fields
        self.start_time = None
        self.duration = None

    def _fields(self, **fields) -> dict:
        return {"operation": self.operation_name, **fields, **self.extra_fields}

    def __enter__(self):
        self.start_time = time.perf_counter()
        self.logger.debug(f"Starting: {self.operation_name}", extra=self._fields())
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.duration = time.perf_counter() - self.start_time
        elapsed = round(self.duration, 3)

        if exc_type is None:
            self.logger.info(
                f"Completed: {self.operation_name}",
                extra=self._fields(duration_seconds=elapsed, status="success"),
            )
            return False

        self.logger.error(
            f"Failed: {self.operation_name}",
            extra=self._fields(
                duration_seconds=elapsed,
                status="error",
                error_type=exc_type.__name__,
                error_message=str(exc_val),
            ),
            exc_info=(exc_type, exc_val, exc_tb),
        )
        return False
