"""Content-type aware response rendering.

``HTTPRenderer`` exposes one coroutine per content type. Each sets its
headers, writes the status once, then writes the body once, always in that
order: the start message is sent with the status, so headers set later
would never reach the client.

Usage::

    renderer = HTTPRenderer()

    async def show(request, writer):
        await renderer.json(writer, 200, {"id": 1})

    with open("./README.md", "rb") as f:
        await renderer.binary(writer, 200, f, "readme.md", inline=True)

Failures are raised to the caller. Serialization happens after the status
line has gone out (except for ``binary``, which reads its source first), so
a failed render can leave a response with headers but no body.
"""

import inspect
import json
from dataclasses import dataclass, field, fields
from types import MappingProxyType
from typing import Any, Callable, Dict, Mapping, Optional

from fastapi.encoders import jsonable_encoder

from httpaddons.errors import InvalidArgumentError, SerializationError, SourceReadError
from httpaddons.render.xml_encoder import encode_xml
from httpaddons.writer import BaseWriter

CONTENT_TYPE = "Content-Type"
CONTENT_DISPOSITION = "Content-Disposition"

CONTENT_TEXT = "text/plain"
CONTENT_JSON = "application/json"
CONTENT_JSONP = "application/javascript"
CONTENT_XML = "application/xml"
CONTENT_HTML = "text/html"
CONTENT_BINARY = "application/octet-stream"

DISPOSITION_INLINE = "inline"
DISPOSITION_ATTACHMENT = "attachment"

DEFAULT_CHARSET = "UTF-8"

REQUIRED_TYPES = frozenset({"text", "json", "jsonp", "xml", "binary"})

# Logical types that get "; charset=..." when append_charset is on.
# text always carries it; binary never does.
CHARSET_TYPES = frozenset({"json", "jsonp", "xml", "html"})


def _default_content_types() -> Dict[str, str]:
    return {
        "text": CONTENT_TEXT,
        "json": CONTENT_JSON,
        "jsonp": CONTENT_JSONP,
        "xml": CONTENT_XML,
        "html": CONTENT_HTML,
        "binary": CONTENT_BINARY,
    }


@dataclass
class RenderOptions:
    """Renderer configuration, editable only inside the constructor callback."""

    content_types: Dict[str, str] = field(default_factory=_default_content_types)
    default_charset: str = DEFAULT_CHARSET
    append_charset: bool = False
    json_indent: Optional[int] = None
    xml_root: str = "response"


@dataclass(frozen=True)
class FrozenRenderOptions:
    """Read-only copy of the scalar options held by a built renderer."""

    default_charset: str
    append_charset: bool
    json_indent: Optional[int]
    xml_root: str


class HTTPRenderer:
    """Stateless after construction; safe to share between requests."""

    def __init__(self, config: Optional[Callable[[RenderOptions], None]] = None) -> None:
        opts = RenderOptions()
        if config is not None:
            config(opts)

        missing = REQUIRED_TYPES - set(opts.content_types)
        if missing:
            raise ValueError(f"content types missing from renderer options: {sorted(missing)}")

        self._content_types: Mapping[str, str] = MappingProxyType(dict(opts.content_types))
        # Snapshot the scalars so a reference kept by the callback cannot change them.
        self._opts = FrozenRenderOptions(
            **{f.name: getattr(opts, f.name) for f in fields(FrozenRenderOptions)}
        )

    @property
    def content_types(self) -> Mapping[str, str]:
        return self._content_types

    @property
    def default_charset(self) -> str:
        return self._opts.default_charset

    @property
    def append_charset(self) -> bool:
        return self._opts.append_charset

    def content_type(self, kind: str) -> str:
        """Resolved ``Content-Type`` value for a logical content type."""
        mime = self._content_types[kind]
        if kind == "text" or (self._opts.append_charset and kind in CHARSET_TYPES):
            return f"{mime}; charset={self._opts.default_charset}"
        return mime

    # ---- Encoders ----

    def encode_json(self, value: Any, indent: Optional[int] = None) -> bytes:
        try:
            data = jsonable_encoder(value)
            if indent is None:
                text = json.dumps(data, ensure_ascii=False, allow_nan=False, separators=(",", ":"))
            else:
                text = json.dumps(data, ensure_ascii=False, allow_nan=False, indent=indent)
        except (TypeError, ValueError, RecursionError) as exc:
            raise SerializationError(f"cannot encode value as JSON: {exc}") from exc
        return text.encode(self._opts.default_charset)

    # ---- Renderers ----

    async def empty(self, w: BaseWriter) -> None:
        """Alias of ``no_content``."""
        await self.no_content(w)

    async def no_content(self, w: BaseWriter) -> None:
        """204 with no body."""
        await w.write_header(204)

    async def string(self, w: BaseWriter, status: int, value: str) -> None:
        """Alias of ``text``."""
        await self.text(w, status, value)

    async def text(self, w: BaseWriter, status: int, value: str) -> None:
        w.headers[CONTENT_TYPE] = self.content_type("text")
        await w.write_header(status)
        await w.write(value.encode(self._opts.default_charset))

    async def html(self, w: BaseWriter, status: int, value: str) -> None:
        w.headers[CONTENT_TYPE] = self.content_type("html")
        await w.write_header(status)
        await w.write(value.encode(self._opts.default_charset))

    async def json(self, w: BaseWriter, status: int, value: Any) -> None:
        w.headers[CONTENT_TYPE] = self.content_type("json")
        await w.write_header(status)
        await w.write(self.encode_json(value, self._opts.json_indent))

    async def jsonp(self, w: BaseWriter, status: int, callback: str, value: Any) -> None:
        w.headers[CONTENT_TYPE] = self.content_type("jsonp")
        await w.write_header(status)

        payload = self.encode_json(value)
        if not callback:
            raise InvalidArgumentError("renderer: callback can not be empty")

        prefix = (callback + "(").encode(self._opts.default_charset)
        await w.write(prefix + payload + b");")

    async def xml(self, w: BaseWriter, status: int, value: Any) -> None:
        w.headers[CONTENT_TYPE] = self.content_type("xml")
        await w.write_header(status)
        await w.write(encode_xml(value, self._opts.xml_root, self._opts.default_charset))

    async def binary(
        self,
        w: BaseWriter,
        status: int,
        source: Any,
        out_name: str,
        inline: bool = False,
    ) -> None:
        """Serve a readable source as a download or inline file.

        ``source`` is read completely before any header is touched, so a
        read failure leaves the response untouched.
        """
        data = await _read_all(source)
        if isinstance(data, str):
            data = data.encode(self._opts.default_charset)

        disposition = DISPOSITION_INLINE if inline else DISPOSITION_ATTACHMENT

        w.headers[CONTENT_TYPE] = self.content_type("binary")
        w.headers[CONTENT_DISPOSITION] = f"{disposition}; filename={out_name}"
        await w.write_header(status)
        await w.write(data)


async def _read_all(source: Any):
    """Read a sync or async file-like object to the end."""
    read = getattr(source, "read", None)
    if read is None:
        raise SourceReadError(f"binary source has no read method: {type(source).__name__}")
    try:
        data = read()
        if inspect.isawaitable(data):
            data = await data
    except (OSError, ValueError) as exc:
        raise SourceReadError(f"cannot read binary source: {exc}") from exc
    return data
