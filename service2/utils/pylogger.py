"""Logging utilities for service2.

This module provides comprehensive logging functionality including trace-aware
formatters, configuration utilities, and shared logging components used across
the service2 service.
"""

from __future__ import annotations

import logging.config
import os
import socket
import tempfile
import warnings

from tqdm import tqdm

from service2.utils.constants import (
    DEFAULT_LOG_DATE_FORMAT,
    DEFAULT_LOG_FORMAT,
    LOG_ROTATION_CONFIG,
    LOGGER,
)
from service2.utils.trace_context import (
    get_active_span_id,
    get_active_trace_id,
    get_log_context,
    get_trace_id,
)


def _is_writable(path: str) -> bool:
    try:
        with open(path, "a"):
            pass
    except (OSError, PermissionError):
        return False
    return True


def get_log_file_path(default_path: str = "/etc/logs/app.log") -> str:
    """Get the log file path with directory creation and fallback handling.

    Args:
        default_path: Default log file path if LOG_FILE_PATH env var is not set

    Returns:
        Valid log file path that can be written to

    Raises:
        PermissionError: If neither the requested path nor the temp directory
            fallback can be written to.
    """
    log_file_path = os.environ.get("LOG_FILE_PATH", default_path)
    fallback_path = os.path.join(tempfile.gettempdir(), "app.log")

    # Ensure log directory exists
    log_dir = os.path.dirname(log_file_path)
    if log_dir and not os.path.exists(log_dir):
        try:
            os.makedirs(log_dir, exist_ok=True)
        except (OSError, PermissionError) as e:
            warnings.warn(
                f"Cannot create log directory {log_dir} ({e}). "
                f"Falling back to temp directory: {fallback_path}",
                UserWarning,
                stacklevel=2,
            )
            return fallback_path

    if _is_writable(log_file_path):
        return log_file_path

    warnings.warn(
        f"Cannot write to log file {log_file_path}. "
        f"Falling back to temp directory: {fallback_path}",
        UserWarning,
        stacklevel=2,
    )
    if not _is_writable(fallback_path):
        raise PermissionError(
            f"Cannot write to either requested log path {log_file_path} "
            f"or fallback path {fallback_path}"
        )
    return fallback_path


class TqdmLoggingHandler(logging.StreamHandler):
    """Custom logging handler that uses tqdm.write to avoid interfering with progress bars."""

    def emit(self, record):
        """Emit a log record using tqdm.write to avoid progress bar interference."""
        try:
            msg = self.format(record)
            tqdm.write(msg)
        except Exception:
            self.handleError(record)


class TraceFormatter(logging.Formatter):
    """Custom formatter that includes trace/span IDs, request information, hostname, and environment in log messages."""

    def format(self, record):
        """Format the log record with trace context information."""
        # Prefer the request's trace ID, then whatever span is active
        record.trace_id = get_trace_id() or get_active_trace_id() or "no-trace"
        record.span_id = get_active_span_id() or "no-span"

        # Get log context from context variable
        log_context = get_log_context()

        record.client_name = log_context.get("client_name", "unknown")
        record.client_version = log_context.get("client_version", "unknown")
        record.http_origin = log_context.get("http_origin", "unknown")
        record.http_method = log_context.get("http_method", "unknown")
        record.http_path = log_context.get("http_path", "unknown")
        record.user_agent = log_context.get("user_agent", "unknown")

        # Add hostname/pod name
        record.hostname = os.environ.get("HOSTNAME", socket.gethostname())

        # Add environment from APP_ENV
        record.environment = os.environ.get("APP_ENV", "local")

        return super().format(record)


def configure_logging(
    log_level="INFO",
    log_format=None,
    log_date_format=None,
    enable_file_logging=True,
):
    """Configure logging for the entire application.

    This should be called once at application startup.
    Supports both console and file logging with the same format, optimized for Splunk ingestion.
    """
    log_level = log_level.upper()
    log_file_path = get_log_file_path() if enable_file_logging else None

    # Use default formats if not provided
    if log_format is None:
        log_format = DEFAULT_LOG_FORMAT
    if log_date_format is None:
        log_date_format = DEFAULT_LOG_DATE_FORMAT

    formatters = {
        LOGGER: {
            "()": TraceFormatter,
            "format": log_format,
            "datefmt": log_date_format,
        }
    }

    handlers = {
        "tqdm_console": {
            "level": log_level,
            "()": TqdmLoggingHandler,
            "formatter": LOGGER,
        },
    }

    # Add file handler if enabled
    if enable_file_logging:
        handlers["file"] = {
            "level": log_level,
            "class": "logging.handlers.RotatingFileHandler",
            "formatter": LOGGER,
            "filename": log_file_path,
            **LOG_ROTATION_CONFIG,
        }

    # Configure root handlers
    root_handlers = ["tqdm_console"]
    if enable_file_logging:
        root_handlers.append("file")

    logger_config = {
        "version": 1,
        "formatters": formatters,
        "handlers": handlers,
        "root": {
            "level": log_level,
            "handlers": root_handlers,
        },
        "disable_existing_loggers": False,
    }

    logging.config.dictConfig(logger_config)


def get_python_logger(name=None):
    """Get a logger with the specified name.

    Args:
        name: The name of the logger. If None, uses the default root logger.
              It's recommended to use __name__ to get module-specific loggers.

    Returns:
        logging.Logger: Configured logger instance
    """
    if name is None:
        name = LOGGER
    return logging.getLogger(name)
