"""Uvicorn logging configuration utilities.

uvicorn configures its own loggers before the application module is
imported, so service2 hands it a dictConfig that routes the server, access,
outbound HTTP and application loggers through the same trace-aware formatter.
"""

from __future__ import annotations

import json
import os
import tempfile

from service2.utils.constants import (
    DEFAULT_LOG_DATE_FORMAT,
    DEFAULT_LOG_FORMAT,
    LOG_ROTATION_CONFIG,
    LOGGER,
)
from service2.utils.pylogger import get_log_file_path

# Loggers that follow PYTHON_LOG_LEVEL
SERVER_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access", "uvicorn.asgi", "service2")

# Chatty libraries pinned to WARNING regardless of the configured level
QUIET_LOGGERS = ("httpx", "httpcore", "opentelemetry")


def _logger_entry(level: str, handlers: list) -> dict:
    return {"handlers": list(handlers), "level": level, "propagate": False}


def get_uvicorn_log_config(
    log_level: str | None = None, enable_file_logging: bool = True
) -> dict:
    """Return a uvicorn-compatible logging configuration.

    Args:
        log_level: Level for the server and application loggers. Defaults to
            the PYTHON_LOG_LEVEL environment variable, then INFO.
        enable_file_logging: When False no rotating file handler is defined
            and the log file path is never touched.

    Returns:
        A ``logging.config.dictConfig`` dictionary writing to the console and,
        when enabled, the rotating log file.
    """
    log_level = (log_level or os.environ.get("PYTHON_LOG_LEVEL", "INFO")).upper()

    handlers = {
        "console": {
            "formatter": LOGGER,
            "()": "service2.utils.pylogger.TqdmLoggingHandler",
        },
    }
    if enable_file_logging:
        handlers["file"] = {
            "formatter": LOGGER,
            "class": "logging.handlers.RotatingFileHandler",
            "filename": get_log_file_path(),
            **LOG_ROTATION_CONFIG,
        }
    handler_names = list(handlers)

    loggers = {name: _logger_entry(log_level, handler_names) for name in SERVER_LOGGERS}
    loggers.update({name: _logger_entry("WARNING", handler_names) for name in QUIET_LOGGERS})

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            LOGGER: {
                "()": "service2.utils.pylogger.TraceFormatter",
                "format": DEFAULT_LOG_FORMAT,
                "datefmt": DEFAULT_LOG_DATE_FORMAT,
            },
        },
        "handlers": handlers,
        "loggers": loggers,
        "root": {
            "level": log_level,
            "handlers": handler_names,
        },
    }


def write_uvicorn_log_config_file(
    log_level: str | None = None, enable_file_logging: bool = True
) -> str:
    """Write the uvicorn logging configuration to a JSON file and return its path.

    Useful for ``uvicorn --log-config`` when the server is started from a shell.
    """
    config = get_uvicorn_log_config(log_level, enable_file_logging)

    with tempfile.NamedTemporaryFile(
        mode="w", suffix="_uvicorn_log_config.json", delete=False
    ) as f:
        json.dump(config, f, indent=2)
        return f.name
