"""OpenTelemetry bootstrap for service2.

Installs the tracer provider and instruments both sides of every hop: inbound
FastAPI requests extract ``traceparent``/``baggage`` headers, outbound httpx
requests inject them. That is how the ``key`` baggage reaches service3 and
service4 without the request chain handler touching headers.
"""

from __future__ import annotations

from fastapi import FastAPI
from opentelemetry import trace
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.httpx import HTTPXClientInstrumentor
from opentelemetry.sdk.resources import SERVICE_NAME, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import ConsoleSpanExporter, SimpleSpanProcessor

from service2.src.settings import Settings
from service2.utils.pylogger import get_python_logger

logger = get_python_logger(__name__)


def configure_tracing(settings: Settings) -> TracerProvider:
    """Install a global tracer provider for this service.

    If a provider is already installed (for example by the
    ``opentelemetry-instrument`` launcher), it is kept.
    """
    current = trace.get_tracer_provider()
    if isinstance(current, TracerProvider):
        logger.info("Tracer provider already configured, keeping it")
        return current

    provider = TracerProvider(
        resource=Resource.create({SERVICE_NAME: settings.OTEL_SERVICE_NAME})
    )
    if settings.OTEL_CONSOLE_EXPORT:
        provider.add_span_processor(SimpleSpanProcessor(ConsoleSpanExporter()))
    trace.set_tracer_provider(provider)
    logger.info("Tracing configured for service_name=%s", settings.OTEL_SERVICE_NAME)
    return provider


def instrument_app(app: FastAPI) -> None:
    """Extract the incoming trace context and baggage on every request."""
    FastAPIInstrumentor.instrument_app(app, excluded_urls="health")


def instrument_http_client() -> None:
    """Inject the trace context and baggage on every outbound httpx request.

    Must run before the shared ``httpx.AsyncClient`` is created.
    """
    instrumentor = HTTPXClientInstrumentor()
    if not instrumentor.is_instrumented_by_opentelemetry:
        instrumentor.instrument()
