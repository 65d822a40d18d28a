from __future__ import annotations

import time

from fastapi import Request
from fastapi import Response
from starlette.middleware.base import BaseHTTPMiddleware

from service2.utils.pylogger import get_python_logger
from service2.utils.trace_context import get_trace_id_or_generate, set_log_context, set_trace_id

logger = get_python_logger(__name__)


class TraceMiddleware(BaseHTTPMiddleware):
    """Middleware to bind the request's trace ID and log context for logging."""

    def _extract_client_info(self, request: Request) -> tuple[str, str]:
        """Extract client name and version from request headers."""
        client_name = (
            request.headers.get("x-client-name")
            or request.headers.get("client-name")
            or request.headers.get("x-app-name")
            or "unknown"
        )

        client_version = (
            request.headers.get("x-client-version")
            or request.headers.get("client-version")
            or request.headers.get("x-app-version")
            or "unknown"
        )

        return client_name, client_version

    def _create_log_context(self, request: Request) -> dict:
        """Create logging context with all required fields."""
        client_name, client_version = self._extract_client_info(request)

        http_origin = (
            request.headers.get("origin")
            or request.headers.get("host")
            or "unknown"
        )

        return {
            "client_name": client_name,
            "client_version": client_version,
            "http_origin": http_origin,
            "http_method": request.method,
            "http_path": request.url.path,
            "user_agent": request.headers.get("user-agent", "unknown"),
        }

    async def dispatch(self, request: Request, call_next):
        # Adopt the server span's trace ID when instrumentation has started one
        set_trace_id(None)
        trace_id = get_trace_id_or_generate()
        request.state.trace_id = trace_id

        log_context = self._create_log_context(request)
        set_log_context(log_context)
        request.state.log_context = log_context

        start_time = time.time()
        logger.info(f"Request started: {request.method} {request.url.path}")

        try:
            response: Response = await call_next(request)
        except Exception as e:
            process_time = time.time() - start_time
            logger.error(
                f"Request failed: {request.method} {request.url.path} - Error: {str(e)} - Duration: {process_time:.3f}s"
            )
            raise

        response.headers["X-Trace-ID"] = trace_id

        process_time = time.time() - start_time
        logger.info(
            f"Request completed: {request.method} {request.url.path} - Status: {response.status_code} - Duration: {process_time:.3f}s"
        )
        return response
