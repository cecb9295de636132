"""Content rendering routes.

One route per ``HTTPRenderer`` method. Handlers receive the request and a
``ResponseWriter``; the renderer lives on ``app.state.renderer``.
"""

import io

from fastapi import APIRouter
from starlette.requests import Request

from httpaddons.render.http_renderer import HTTPRenderer
from httpaddons.routing import WriterEndpoint
from httpaddons.writer import ResponseWriter

router = APIRouter(tags=["render"])

SAMPLE = {
    "name": "httpaddons",
    "formats": ["text", "html", "json", "jsonp", "xml", "binary"],
    "charset": "UTF-8",
}

SAMPLE_FILE = b"httpaddons sample download\n"
SAMPLE_FILE_NAME = "sample.txt"


def _renderer(request: Request) -> HTTPRenderer:
    return request.app.state.renderer


def _is_true(value: str) -> bool:
    return value.lower() in ("1", "true", "yes", "on")


async def render_empty(request: Request, writer: ResponseWriter) -> None:
    await _renderer(request).empty(writer)


async def render_text(request: Request, writer: ResponseWriter) -> None:
    value = request.query_params.get("value", "hello")
    await _renderer(request).text(writer, 200, value)


async def render_html(request: Request, writer: ResponseWriter) -> None:
    await _renderer(request).html(writer, 200, "<h1>httpaddons</h1>")


async def render_json(request: Request, writer: ResponseWriter) -> None:
    await _renderer(request).json(writer, 200, SAMPLE)


async def render_jsonp(request: Request, writer: ResponseWriter) -> None:
    renderer = _renderer(request)
    callback = request.query_params.get("callback", "")
    # The renderer raises only after the status is sent, so reject up front.
    if not callback:
        await renderer.text(writer, 400, "callback query parameter is required")
        return
    await renderer.jsonp(writer, 200, callback, SAMPLE)


async def render_xml(request: Request, writer: ResponseWriter) -> None:
    await _renderer(request).xml(writer, 200, {"sample": SAMPLE})


async def render_file(request: Request, writer: ResponseWriter) -> None:
    inline = _is_true(request.query_params.get("inline", "false"))
    await _renderer(request).binary(writer, 200, io.BytesIO(SAMPLE_FILE), SAMPLE_FILE_NAME, inline)


router.add_route("/api/render/empty", WriterEndpoint(render_empty), methods=["GET"])
router.add_route("/api/render/text", WriterEndpoint(render_text), methods=["GET"])
router.add_route("/api/render/html", WriterEndpoint(render_html), methods=["GET"])
router.add_route("/api/render/json", WriterEndpoint(render_json), methods=["GET"])
router.add_route("/api/render/jsonp", WriterEndpoint(render_jsonp), methods=["GET"])
router.add_route("/api/render/xml", WriterEndpoint(render_xml), methods=["GET"])
router.add_route("/api/render/file", WriterEndpoint(render_file), methods=["GET"])
