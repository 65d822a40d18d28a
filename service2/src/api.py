"""FastAPI server implementation for service2.

This module provides the main FastAPI application setup, including
middleware configuration, route registration, exception mapping and
application lifecycle management for the service2 service.
"""

import time
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Callable

import httpx
from fastapi import FastAPI, Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse

from service2.src.core.exceptions.exceptions import AppException, AppExceptionCode
from service2.src.core.http_client import DownstreamClient
from service2.src.core.request_chain import RequestChainHandler
from service2.src.core.tracing import configure_tracing, instrument_app, instrument_http_client
from service2.src.middleware.trace_middleware import TraceMiddleware
from service2.src.routes.chain import router as chain_router
from service2.src.routes.health import router as health_router
from service2.src.settings import settings
from service2.utils.pylogger import configure_logging, get_python_logger
from service2.utils.trace_context import TraceContextAccessor

# Initialize logger
configure_logging(
    log_level=settings.PYTHON_LOG_LEVEL,
    enable_file_logging=settings.ENABLE_FILE_LOGGING,
)

logger = get_python_logger(__name__)

configure_tracing(settings)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware to log all incoming requests and outgoing responses."""

    async def dispatch(self, request: Request, call_next: Callable):
        """Process and log incoming requests and outgoing responses."""
        if not settings.REQUEST_LOGGING_ENABLED:
            return await call_next(request)

        start_time = time.time()

        request_data = {
            "method": request.method,
            "path": request.url.path,
            "client_ip": request.client.host if request.client else None,
            "query_params": dict(request.query_params)
            if request.query_params
            else None,
        }

        # Baggage and traceparent headers show up here when enabled
        if settings.REQUEST_LOG_HEADERS:
            request_data["headers"] = dict(request.headers)

        logger.info("Incoming request: %s", request_data)

        response = await call_next(request)

        duration_ms = (time.time() - start_time) * 1000
        response_data = {
            "method": request.method,
            "path": request.url.path,
            "status_code": response.status_code,
            "duration_ms": round(duration_ms, 2),
        }

        if settings.REQUEST_LOG_HEADERS:
            response_data["headers"] = dict(response.headers)

        logger.info("Outgoing response: %s", response_data)

        return response


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Configure application lifespan.

    Creates the shared downstream HTTP client and the request chain handler
    on startup, and closes the client's connection pool on shutdown.

    Args:
        app: The FastAPI application instance to manage.

    Yields:
        None: The lifespan context for the application.
    """
    logger.info("service2 starting up on port %s", settings.SERVER_PORT)

    # Instrument before the client exists so outbound calls carry baggage
    instrument_http_client()
    client = DownstreamClient.from_settings(settings)
    app.state.request_chain_handler = RequestChainHandler(
        client, TraceContextAccessor(), settings
    )
    logger.info(
        "service2 ready - service3=%s service4=%s connect_timeout_ms=%s read_timeout_ms=%s",
        settings.SERVICE3_ADDRESS,
        settings.SERVICE4_ADDRESS,
        settings.CONNECT_TIMEOUT_MS,
        settings.READ_TIMEOUT_MS,
    )
    try:
        yield
    finally:
        await client.aclose()
        logger.info("service2 shutting down")


def _error_response(code: AppExceptionCode, detail_message: str) -> JSONResponse:
    return JSONResponse(
        status_code=code.response_code,
        content={
            "detail_message": detail_message,
            "message": code.message,
            "error_code": code.error_code,
        },
    )


# Create FastAPI application with lifespan management
app = FastAPI(lifespan=lifespan)

# Register request logging middleware first to capture all requests
app.add_middleware(RequestLoggingMiddleware)

# Configure application logger
app.logger = logger

app.add_middleware(TraceMiddleware)

instrument_app(app)

# Register all route handlers
app.include_router(health_router)
app.include_router(chain_router)


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception):
    """Generic exception handler for unhandled exceptions."""
    logger.exception(
        "Unhandled exception occurred for request_method=%s, request_path=%s, error=%s",
        request.method,
        request.url.path,
        exc,
    )
    return _error_response(AppExceptionCode.INTERNAL_SERVER_ERROR, str(exc))


@app.exception_handler(AppException)
async def app_exception_handler(request: Request, exc: AppException):
    """App exception handler for service2's own exceptions."""
    logger.warning(
        "App exception occurred for request_method=%s, request_path=%s, error=%s",
        request.method,
        request.url.path,
        exc,
    )
    return _error_response(exc.app_exception_code, exc.detail_message)


@app.exception_handler(httpx.TimeoutException)
async def downstream_timeout_handler(request: Request, exc: httpx.TimeoutException):
    """Connect or read timeout on an outbound call."""
    logger.warning(
        "Downstream timeout for request_method=%s, request_path=%s, error=%r",
        request.method,
        request.url.path,
        exc,
    )
    return _error_response(AppExceptionCode.DOWNSTREAM_TIMEOUT_ERROR, str(exc) or type(exc).__name__)


@app.exception_handler(httpx.HTTPStatusError)
async def downstream_status_handler(request: Request, exc: httpx.HTTPStatusError):
    """Non-2xx response from a downstream call."""
    logger.warning(
        "Downstream error response for request_method=%s, request_path=%s, status=%s",
        request.method,
        request.url.path,
        exc.response.status_code,
    )
    return _error_response(AppExceptionCode.DOWNSTREAM_HTTP_ERROR, str(exc))


@app.exception_handler(httpx.TransportError)
async def downstream_transport_handler(request: Request, exc: httpx.TransportError):
    """Connection failures other than timeouts."""
    logger.warning(
        "Downstream transport error for request_method=%s, request_path=%s, error=%r",
        request.method,
        request.url.path,
        exc,
    )
    return _error_response(AppExceptionCode.DOWNSTREAM_HTTP_ERROR, str(exc) or type(exc).__name__)
