"""Request chaining for service2.

``RequestChainHandler`` calls service3 and then service4 for ``/foo``, and
calls the service's own ``/blowup`` endpoint for ``/readtimeout`` to exercise
the outbound read timeout. Failures are logged where they happen and re-raised
unchanged; nothing is retried and no partial result is ever returned.
"""

from __future__ import annotations

import asyncio

from service2.src.core.exceptions.exceptions import BlowUpException
from service2.src.core.http_client import DownstreamClient
from service2.src.settings import Settings
from service2.utils.constants import (
    BAGGAGE_KEY,
    BLOW_UP_MESSAGE,
    FOO_RESPONSE_TEMPLATE,
    SECOND_SPAN_NAME,
)
from service2.utils.pylogger import get_python_logger
from service2.utils.trace_context import TraceContextAccessor

logger = get_python_logger(__name__)

# Simulated processing latency, in seconds
FOO_DELAY = 0.2
READ_TIMEOUT_DELAY = 0.5
BLOW_UP_DELAY = 4.0


class RequestChainHandler:
    def __init__(
        self,
        client: DownstreamClient,
        tracing: TraceContextAccessor,
        settings: Settings,
    ):
        self.client = client
        self.tracing = tracing
        self.settings = settings

    async def foo(self) -> str:
        """Call service3, then service4, and combine both bodies.

        service4 is only called once service3 has answered successfully.
        """
        await asyncio.sleep(FOO_DELAY)
        logger.info(
            "Service2: Baggage for [%s] is [%s]",
            BAGGAGE_KEY,
            self.tracing.get_baggage(BAGGAGE_KEY),
        )
        logger.info("Hello from service2. Calling service3 and then service4")
        service3 = await self.client.get_text(self.settings.service3_url)
        logger.info("Got response from service3 [%s]", service3)
        service4 = await self.client.get_text(self.settings.service4_url)
        logger.info("Got response from service4 [%s]", service4)
        return FOO_RESPONSE_TEMPLATE % (service3, service4)

    async def read_timeout(self) -> str:
        """Call this service's /blowup inside an explicit ``second_span``.

        The span is finished exactly once however this method exits.
        """
        span = self.tracing.next_span(SECOND_SPAN_NAME)
        with self.tracing.finishing(span):
            await asyncio.sleep(READ_TIMEOUT_DELAY)
            with self.tracing.span_in_scope(span):
                try:
                    logger.info("Calling a missing service")
                    await self.client.get_text(self.settings.blow_up_url)
                    return BLOW_UP_MESSAGE
                except Exception:
                    logger.exception(
                        "Exception occurred while trying to send a request to a missing service"
                    )
                    raise

    async def blow_up(self) -> str:
        """Sleep past the outbound read timeout, then fail.

        Calling this only creates the coroutine; the delay and the failure are
        observed by whoever awaits it.
        """
        await asyncio.sleep(BLOW_UP_DELAY)
        raise BlowUpException(BLOW_UP_MESSAGE)
