"""Trace context management utilities.

This module provides context variable management for the request log context,
and a thin accessor over the OpenTelemetry API for the parts of the ambient
trace that service2 consumes: baggage lookup, explicit child span creation,
scoped activation and guaranteed finish.
"""

from __future__ import annotations

import contextvars
import os
import uuid
from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional

from opentelemetry import baggage, trace
from opentelemetry.trace import Span, Tracer

from service2.utils.constants import SERVICE

# Context variable to store trace ID for the current request
trace_id_context: contextvars.ContextVar[Optional[str]] = contextvars.ContextVar(
    "trace_id", default=None
)

# Context variable to store log context for the current request
log_context_var: contextvars.ContextVar[Optional[Dict[str, Any]]] = (
    contextvars.ContextVar("log_context", default=None)
)


def generate_trace_id() -> str:
    """Generate a new trace ID using UUID4."""
    app_env = os.environ.get("APP_ENV", "local")
    return SERVICE + "-" + app_env + "-" + str(uuid.uuid4())


def set_trace_id(trace_id: Optional[str]) -> None:
    """Set the trace ID for the current context."""
    trace_id_context.set(trace_id)


def get_trace_id() -> Optional[str]:
    """Get the trace ID from the current context."""
    return trace_id_context.get()


def get_active_trace_id() -> Optional[str]:
    """Return the hex trace ID of the active OpenTelemetry span, if any."""
    span_context = trace.get_current_span().get_span_context()
    if not span_context.is_valid:
        return None
    return trace.format_trace_id(span_context.trace_id)


def get_active_span_id() -> Optional[str]:
    """Return the hex span ID of the active OpenTelemetry span, if any."""
    span_context = trace.get_current_span().get_span_context()
    if not span_context.is_valid:
        return None
    return trace.format_span_id(span_context.span_id)


def get_trace_id_or_generate() -> str:
    """Get the current trace ID, adopting the active span's or generating one."""
    trace_id = get_trace_id()
    if trace_id is None:
        trace_id = get_active_trace_id() or generate_trace_id()
        set_trace_id(trace_id)
    return trace_id


def set_log_context(log_context: Dict[str, Any]) -> None:
    """Set the log context for the current request."""
    log_context_var.set(log_context)


def get_log_context() -> Dict[str, Any]:
    """Get the log context from the current context."""
    context = log_context_var.get()
    if context is None:
        # Return default context if none is set
        return {
            "client_name": "unknown",
            "client_version": "unknown",
            "http_origin": "unknown",
            "http_method": "unknown",
            "http_path": "unknown",
            "user_agent": "unknown",
        }
    return context


class TraceContextAccessor:
    """Read baggage and manage explicit child spans on the ambient trace.

    Propagation of the trace and its baggage across hops is left to the
    OpenTelemetry propagators installed on the server and the HTTP client.
    """

    def __init__(self, tracer: Optional[Tracer] = None):
        self._tracer = tracer or trace.get_tracer(SERVICE)

    def get_baggage(self, key: str) -> Optional[str]:
        """Return the baggage value for ``key``, or None when it is absent."""
        value = baggage.get_baggage(key)
        if value is None:
            return None
        return str(value)

    def next_span(self, name: str) -> Span:
        """Create a child of the current span without activating it."""
        return self._tracer.start_span(name)

    def span_in_scope(self, span: Span):
        """Make ``span`` current for the enclosed block; never ends it."""
        return trace.use_span(span, end_on_exit=False)

    @contextmanager
    def finishing(self, span: Span) -> Iterator[Span]:
        """Finish ``span`` once the enclosed block exits, however it exits."""
        try:
            yield span
        finally:
            span.end()
