"""Tests for the trace_context module."""

from unittest.mock import patch
from uuid import UUID

import pytest
from opentelemetry import baggage, context, trace

from service2.utils.trace_context import (
    TraceContextAccessor,
    generate_trace_id,
    get_active_span_id,
    get_active_trace_id,
    get_log_context,
    get_trace_id,
    get_trace_id_or_generate,
    log_context_var,
    set_log_context,
    set_trace_id,
    trace_id_context,
)

DEFAULT_LOG_CONTEXT = {
    "client_name": "unknown",
    "client_version": "unknown",
    "http_origin": "unknown",
    "http_method": "unknown",
    "http_path": "unknown",
    "user_agent": "unknown",
}


class TestTraceIdFunctions:
    """Test cases for trace ID related functions."""

    def test_generate_trace_id_default_env(self):
        """Test generate_trace_id with a configured environment."""
        with patch.dict("os.environ", {"APP_ENV": "test"}):
            trace_id = generate_trace_id()

            assert trace_id.startswith("service2-test-")
            # Verify UUID part is valid
            uuid_part = trace_id.split("-", 2)[-1]
            UUID(uuid_part)

    def test_generate_trace_id_no_env(self):
        """Test generate_trace_id without APP_ENV set."""
        with patch.dict("os.environ", {}, clear=True):
            trace_id = generate_trace_id()

            assert trace_id.startswith("service2-local-")

    def test_set_and_get_trace_id(self):
        set_trace_id("test-trace-123")

        assert get_trace_id() == "test-trace-123"

    def test_get_trace_id_when_none_set(self):
        trace_id_context.set(None)

        assert get_trace_id() is None

    def test_get_trace_id_or_generate_existing(self):
        set_trace_id("existing-trace-123")

        assert get_trace_id_or_generate() == "existing-trace-123"

    def test_get_trace_id_or_generate_new(self):
        """Test a new trace ID is generated and stored when there is no active span."""
        trace_id_context.set(None)

        with patch.dict("os.environ", {"APP_ENV": "test"}):
            result = get_trace_id_or_generate()

            assert result.startswith("service2-test-")
            assert get_trace_id() == result

    def test_get_trace_id_or_generate_adopts_active_span(self, tracing):
        """Test the active span's trace ID wins over a generated one."""
        trace_id_context.set(None)
        span = tracing.next_span("server")

        with tracing.finishing(span), tracing.span_in_scope(span):
            result = get_trace_id_or_generate()

        assert result == trace.format_trace_id(span.get_span_context().trace_id)
        assert len(result) == 32


class TestActiveSpanIds:
    """Test cases for reading IDs off the active OpenTelemetry span."""

    def test_no_active_span(self):
        assert get_active_trace_id() is None
        assert get_active_span_id() is None

    def test_active_span(self, tracing):
        span = tracing.next_span("active")

        with tracing.finishing(span), tracing.span_in_scope(span):
            span_context = span.get_span_context()
            assert get_active_trace_id() == trace.format_trace_id(span_context.trace_id)
            assert get_active_span_id() == trace.format_span_id(span_context.span_id)


class TestLogContextFunctions:
    """Test cases for log context related functions."""

    def test_set_and_get_log_context(self):
        test_context = {
            "client_name": "test-client",
            "client_version": "1.0.0",
            "http_origin": "https://example.com",
            "http_method": "GET",
            "http_path": "/foo",
            "user_agent": "TestAgent/1.0",
        }

        set_log_context(test_context)

        assert get_log_context() == test_context

    def test_get_log_context_when_none_set(self):
        """Test the default context is returned with 'unknown' values."""
        log_context_var.set(None)

        assert get_log_context() == DEFAULT_LOG_CONTEXT

    def test_partial_log_context(self):
        partial_context = {"client_name": "partial-client"}

        set_log_context(partial_context)

        assert get_log_context() == partial_context


class TestContextVariables:
    """Test cases for context variables behavior."""

    def test_trace_id_context_isolation(self):
        """Test that trace ID context is isolated between concurrent tasks."""
        import asyncio

        async def set_trace_in_context(trace_id):
            set_trace_id(trace_id)
            await asyncio.sleep(0)
            return get_trace_id()

        async def run_isolated():
            return await asyncio.gather(
                asyncio.create_task(set_trace_in_context("trace-1")),
                asyncio.create_task(set_trace_in_context("trace-2")),
            )

        result1, result2 = asyncio.run(run_isolated())

        assert result1 == "trace-1"
        assert result2 == "trace-2"


class TestTraceContextAccessor:
    """Test cases for TraceContextAccessor."""

    def test_get_baggage_present(self, tracing):
        token = context.attach(baggage.set_baggage("key", "value-from-service1"))
        try:
            assert tracing.get_baggage("key") == "value-from-service1"
        finally:
            context.detach(token)

    def test_get_baggage_absent_returns_none(self, tracing):
        """Test a missing baggage entry reads as None without raising."""
        assert tracing.get_baggage("key") is None

    def test_get_baggage_empty_string(self, tracing):
        token = context.attach(baggage.set_baggage("key", ""))
        try:
            assert tracing.get_baggage("key") == ""
        finally:
            context.detach(token)

    def test_next_span_is_child_of_current_and_not_active(self, tracing):
        parent = tracing.next_span("parent")

        with tracing.finishing(parent), tracing.span_in_scope(parent):
            child = tracing.next_span("second_span")
            try:
                assert child.parent.span_id == parent.get_span_context().span_id
                assert trace.get_current_span() is parent
            finally:
                child.end()

    def test_span_in_scope_does_not_finish_span(self, tracing, span_exporter):
        span = tracing.next_span("scoped")

        with tracing.span_in_scope(span):
            assert trace.get_current_span() is span

        assert trace.get_current_span() is not span
        assert span_exporter.get_finished_spans() == ()
        span.end()

    def test_finishing_ends_span_on_exception(self, tracing, span_exporter):
        span = tracing.next_span("failing")

        with pytest.raises(RuntimeError):
            with tracing.finishing(span):
                raise RuntimeError("boom")

        finished = span_exporter.get_finished_spans()
        assert len(finished) == 1
        assert finished[0].name == "failing"

    def test_finishing_ends_span_exactly_once(self, tracing, span_exporter):
        span = tracing.next_span("once")

        with tracing.finishing(span) as yielded:
            assert yielded is span

        assert len(span_exporter.get_finished_spans()) == 1

    def test_default_tracer_uses_global_provider(self):
        accessor = TraceContextAccessor()
        span = accessor.next_span("global")
        span.end()
