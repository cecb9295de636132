"""Access log middleware.

Wraps the response channel in a ``StatusCapturingWriter`` for the whole
request, then writes one colourised line per request::

    2024/05/01 12:00:00 10.0.0.1 GET [200] /articles?page=2 0.734ms

Requests to skip paths (health checks by default) produce no output.
Implemented as a pure ASGI middleware rather than ``BaseHTTPMiddleware``
so the status and byte count are observed on the real ``send`` channel,
including for handlers that write through a ``ResponseWriter``.
"""

import datetime
import logging
import sys
import time
from typing import Callable, Iterable, Mapping, Optional

from starlette.requests import Request
from starlette.types import ASGIApp, Receive, Scope, Send

from httpaddons.utils import colors
from httpaddons.utils.datetime_helpers import elapsed_ms, format_log_timestamp, now_local
from httpaddons.utils.net import client_ip
from httpaddons.writer import ResponseWriter, StatusCapturingWriter

DEFAULT_SKIP_PATHS = frozenset({
    "/health",
    "/status",
})

LogSink = Callable[[str], None]

logger = logging.getLogger("httpaddons.access")


def _setup_access_logger() -> None:
    """Send access lines to stdout verbatim, one record per request."""
    if logger.handlers:
        return
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.setLevel(logging.INFO)
    logger.propagate = False


def stdout_sink(line: str) -> None:
    """Default sink: the ``httpaddons.access`` logger on stdout."""
    _setup_access_logger()
    logger.info(line)


class AccessLogMiddleware:
    """Logs every HTTP request with time, client, method, status, URI and latency."""

    def __init__(
        self,
        app: ASGIApp,
        skip_paths: Iterable[str] = DEFAULT_SKIP_PATHS,
        sink: Optional[LogSink] = None,
        color: bool = True,
        method_colors: Mapping[str, str] = colors.METHOD_COLORS,
        status_colors: Mapping[tuple, str] = colors.STATUS_COLORS,
    ) -> None:
        self.app = app
        self.skip_paths = frozenset(skip_paths)
        self.sink = sink or stdout_sink
        self.color = color
        self.method_colors = method_colors
        self.status_colors = status_colors

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        started_at = now_local()
        start = time.perf_counter()

        writer = StatusCapturingWriter(ResponseWriter(send))
        await self.app(scope, receive, writer)

        if scope["path"] in self.skip_paths:
            return

        self.sink(self.format_line(Request(scope), writer.status, started_at, elapsed_ms(start)))

    def format_line(
        self,
        request: Request,
        status: int,
        started_at: datetime.datetime,
        elapsed: str,
    ) -> str:
        method = request.method
        method_text = colors.render(
            method,
            colors.color_for_method(method, self.method_colors),
            self.color,
        )
        # 0 means no status was ever sent; never show it as a code.
        status_text = colors.render(
            str(status) if status else "-",
            colors.color_for_status(status, self.status_colors),
            self.color,
        )
        return "%s %s %s [%s] %s %sms" % (
            format_log_timestamp(started_at),
            client_ip(request),
            method_text,
            status_text,
            _request_uri(request.scope),
            elapsed,
        )


def _request_uri(scope: Scope) -> str:
    """Raw request target: path plus query string, as sent by the client."""
    raw_path = scope.get("raw_path")
    if raw_path and b"?" in raw_path:
        return raw_path.decode("latin-1")
    path = raw_path.decode("latin-1") if raw_path else scope["path"]
    query = scope.get("query_string", b"")
    if query:
        return f"{path}?{query.decode('latin-1')}"
    return path
