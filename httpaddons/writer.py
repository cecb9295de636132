"""Response writers over the ASGI ``send`` channel.

``ResponseWriter`` gives handlers an explicit header / status / body API
instead of returning a ``Response`` object. ``StatusCapturingWriter``
decorates any writer and records the status code and byte count without
touching what goes over the wire.

Both writers are also valid ASGI ``send`` callables, so ordinary Starlette
responses pass through the same methods and are observed the same way.
"""

import logging

from starlette.datastructures import MutableHeaders
from starlette.types import Message, Send

logger = logging.getLogger(__name__)


class BaseWriter:
    """Translates raw ASGI response messages into writer calls."""

    headers: MutableHeaders

    async def write_header(self, status_code: int) -> None:
        raise NotImplementedError

    async def write(self, data: bytes) -> int:
        raise NotImplementedError

    async def finish(self) -> None:
        raise NotImplementedError

    async def forward(self, message: Message) -> None:
        raise NotImplementedError

    async def __call__(self, message: Message) -> None:
        message_type = message["type"]
        if message_type == "http.response.start":
            for key, value in message.get("headers", []):
                self.headers.append(key.decode("latin-1"), value.decode("latin-1"))
            await self.write_header(message["status"])
        elif message_type == "http.response.body":
            body = message.get("body", b"")
            if body:
                await self.write(body)
            if not message.get("more_body", False):
                await self.finish()
        else:
            await self.forward(message)


class ResponseWriter(BaseWriter):
    """Writer bound to one request's ASGI ``send``.

    Headers must be set before ``write_header`` (or the first ``write``);
    the start message is sent at that point and later header changes are
    not transmitted.
    """

    def __init__(self, send: Send) -> None:
        self._send = send
        self.headers = MutableHeaders()
        self.status_code = 0
        self.header_written = False
        self.finished = False

    async def write_header(self, status_code: int) -> None:
        if self.header_written:
            logger.warning(
                "superfluous write_header call (status %d, already sent %d)",
                status_code,
                self.status_code,
            )
            return
        self.header_written = True
        self.status_code = status_code
        await self._send(
            {
                "type": "http.response.start",
                "status": status_code,
                "headers": list(self.headers.raw),
            }
        )

    async def write(self, data: bytes) -> int:
        if self.finished:
            raise RuntimeError("write after response body was closed")
        if not self.header_written:
            await self.write_header(200)
        if not data:
            return 0
        await self._send({"type": "http.response.body", "body": data, "more_body": True})
        return len(data)

    async def finish(self) -> None:
        if self.finished:
            return
        if not self.header_written:
            await self.write_header(200)
        self.finished = True
        await self._send({"type": "http.response.body", "body": b"", "more_body": False})

    async def forward(self, message: Message) -> None:
        await self._send(message)


class StatusCapturingWriter(BaseWriter):
    """Records the final status code and total bytes written.

    ``status`` stays 0 until a status is written explicitly or the first
    body write implies 200. Callers must treat 0 as "not determined".
    Every call is forwarded to the wrapped writer unchanged.
    """

    def __init__(self, inner: BaseWriter) -> None:
        self._inner = inner
        self._status = 0
        self._length = 0

    @property
    def headers(self) -> MutableHeaders:
        return self._inner.headers

    @property
    def status(self) -> int:
        return self._status

    @property
    def length(self) -> int:
        return self._length

    async def write_header(self, status_code: int) -> None:
        self._status = status_code
        await self._inner.write_header(status_code)

    async def write(self, data: bytes) -> int:
        if self._status == 0:
            self._status = 200
        written = await self._inner.write(data)
        self._length += written
        return written

    async def finish(self) -> None:
        await self._inner.finish()

    async def forward(self, message: Message) -> None:
        await self._inner.forward(message)
