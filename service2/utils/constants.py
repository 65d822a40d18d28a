"""Application constants.

This module defines global constants used throughout the service2 application.
"""

from __future__ import annotations

LOGGER = "service2-logger"
SERVICE = "service2"
BAGGAGE_KEY = "key"
SECOND_SPAN_NAME = "second_span"
FOO_RESPONSE_TEMPLATE = (
    "Hello from service2, response from service3 [%s] and from service4 [%s]"
)
BLOW_UP_MESSAGE = "Should blow up"
DEFAULT_LOG_FORMAT = "timestamp=%(asctime)s.%(msecs)03d log_level=%(levelname)s hostname=%(hostname)s environment=%(environment)s trace_id=%(trace_id)s span_id=%(span_id)s client.name=%(client_name)s client.version=%(client_version)s http.origin=%(http_origin)s http.method=%(http_method)s http.path=%(http_path)s user_agent=%(user_agent)s class=%(module)s function=%(funcName)s log_message=%(message)s"
DEFAULT_LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LOG_ROTATION_CONFIG = {"maxBytes": 52428800, "backupCount": 5, "encoding": "utf-8"}
