"""Downstream HTTP client for service2.

Wraps a single ``httpx.AsyncClient`` configured with the connect and read
timeouts every outbound call must honour, and with the error classification
used to decide whether a downstream response is a failure. Requests are
single-attempt: nothing here retries.
"""

from __future__ import annotations

from enum import Enum

import httpx

from service2.src.core.exceptions.exceptions import DownstreamHTTPException
from service2.src.settings import Settings
from service2.utils.pylogger import get_python_logger

logger = get_python_logger(__name__)


class ResponseClassification(Enum):
    OK = "ok"
    ERROR = "error"


def build_timeout(connect_timeout_ms: int, read_timeout_ms: int) -> httpx.Timeout:
    """Build the outbound timeout; write and pool waits share the read limit."""
    return httpx.Timeout(
        read_timeout_ms / 1000,
        connect=connect_timeout_ms / 1000,
        read=read_timeout_ms / 1000,
    )


def classify_response(response: httpx.Response) -> ResponseClassification:
    """Decide whether ``response`` is an error.

    A failure of the check itself counts as an error, never as success.
    """
    try:
        is_error = response.is_error
    except Exception:
        logger.warning("Could not classify response, treating it as an error", exc_info=True)
        return ResponseClassification.ERROR
    return ResponseClassification.ERROR if is_error else ResponseClassification.OK


def handle_error(response: httpx.Response) -> None:
    """Raise the exception describing an error response.

    Whatever is raised is logged with its message and re-raised unchanged.
    """
    try:
        response.raise_for_status()
        # Classified as an error, but the status itself is not a 4xx/5xx
        raise DownstreamHTTPException(
            f"Unknown status code [{response.status_code}] from {response.request.url}",
            status_code=response.status_code,
        )
    except Exception as e:
        logger.error(
            "Exception [%s] occurred while trying to send the request", e, exc_info=True
        )
        raise


class DownstreamClient:
    """Sequential, single-attempt GET client for downstream services."""

    def __init__(self, client: httpx.AsyncClient):
        self._client = client

    @classmethod
    def from_settings(
        cls, settings: Settings, transport: httpx.AsyncBaseTransport | None = None
    ) -> "DownstreamClient":
        timeout = build_timeout(settings.CONNECT_TIMEOUT_MS, settings.READ_TIMEOUT_MS)
        return cls(
            httpx.AsyncClient(timeout=timeout, follow_redirects=True, transport=transport)
        )

    @property
    def timeout(self) -> httpx.Timeout:
        return self._client.timeout

    async def get_text(self, url: str) -> str:
        """GET ``url`` and return the full body as text.

        Raises:
            httpx.TimeoutException: The connect or read timeout was exceeded.
            httpx.HTTPStatusError: The downstream answered with a 4xx/5xx status.
            DownstreamHTTPException: The response was an error of unknown status.
        """
        try:
            response = await self._client.get(url)
        except httpx.TransportError as e:
            logger.error("Request to %s failed: %r", url, e)
            raise

        if classify_response(response) is ResponseClassification.ERROR:
            handle_error(response)
        return response.text

    async def aclose(self) -> None:
        await self._client.aclose()
