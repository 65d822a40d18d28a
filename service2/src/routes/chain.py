"""Request chain routes for the service2 API.

These endpoints expose ``RequestChainHandler``: ``/foo`` chains service3 and
service4, ``/readtimeout`` calls this service's ``/blowup`` and ``/blowup``
sleeps past the outbound read timeout before failing.
"""

from fastapi import APIRouter, Request
from fastapi.responses import PlainTextResponse

from service2.src.core.request_chain import RequestChainHandler

router = APIRouter()


def get_request_chain_handler(request: Request) -> RequestChainHandler:
    return request.app.state.request_chain_handler


@router.get("/foo", response_class=PlainTextResponse)
async def foo(request: Request) -> str:
    """Return the greeting built from the service3 and service4 responses."""
    return await get_request_chain_handler(request).foo()


@router.get("/readtimeout", response_class=PlainTextResponse)
async def read_timeout(request: Request) -> str:
    """Call /blowup on this service; expected to fail with a read timeout."""
    return await get_request_chain_handler(request).read_timeout()


@router.get("/blowup", response_class=PlainTextResponse)
async def blow_up(request: Request) -> str:
    return await get_request_chain_handler(request).blow_up()
