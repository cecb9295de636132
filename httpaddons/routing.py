"""Writer-style endpoints.

``WriterEndpoint`` turns ``async def handler(request, writer)`` into an
ASGI app, so a handler can drive the response through a
``ResponseWriter`` (usually via ``HTTPRenderer``) instead of returning a
``Response``. Register it like any ASGI endpoint::

    router.add_route("/export", WriterEndpoint(export), methods=["GET"])
"""

import functools
from typing import Awaitable, Callable

from starlette.requests import Request
from starlette.types import Receive, Scope, Send

from httpaddons.writer import ResponseWriter

WriterHandler = Callable[[Request, ResponseWriter], Awaitable[None]]


class WriterEndpoint:
    """ASGI adapter for a ``(request, writer)`` handler."""

    def __init__(self, handler: WriterHandler) -> None:
        self.handler = handler
        functools.update_wrapper(self, handler)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        request = Request(scope, receive)
        writer = ResponseWriter(send)
        await self.handler(request, writer)
        await writer.finish()
