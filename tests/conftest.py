"""Shared fixtures for the service2 test suite."""

import os

# Keep the application module from writing to /etc/logs on import
os.environ.setdefault("ENABLE_FILE_LOGGING", "false")

import httpx
import pytest
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter

from service2.src.core.http_client import DownstreamClient, build_timeout
from service2.src.settings import Settings
from service2.utils.trace_context import TraceContextAccessor


@pytest.fixture
def span_exporter():
    return InMemorySpanExporter()


@pytest.fixture
def tracing(span_exporter):
    """Accessor backed by a private SDK provider so finished spans are observable."""
    provider = TracerProvider()
    provider.add_span_processor(SimpleSpanProcessor(span_exporter))
    return TraceContextAccessor(provider.get_tracer("service2-tests"))


@pytest.fixture
def test_settings():
    return Settings(
        SERVICE3_ADDRESS="service3.test:8083",
        SERVICE4_ADDRESS="service4.test:8084",
        SERVER_PORT=8082,
    )


@pytest.fixture
def make_client():
    """Factory for DownstreamClients whose requests are answered by ``handler``."""

    def _make(handler) -> DownstreamClient:
        return DownstreamClient(
            httpx.AsyncClient(
                transport=httpx.MockTransport(handler),
                timeout=build_timeout(2000, 3000),
            )
        )

    return _make
