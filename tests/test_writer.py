"""Tests for ResponseWriter and StatusCapturingWriter."""

import logging

import pytest
from starlette.responses import PlainTextResponse, Response

from conftest import RecordingSend, empty_receive, make_scope
from httpaddons.writer import ResponseWriter, StatusCapturingWriter


class FailingSend(RecordingSend):
    """Accepts the start message, then fails every body write."""

    async def __call__(self, message):
        if message["type"] == "http.response.body":
            raise OSError("client disconnected")
        await super().__call__(message)


class TestResponseWriter:
    @pytest.mark.asyncio
    async def test_write_header_sends_start_with_headers(self, writer, sent):
        writer.headers["Content-Type"] = "text/plain"
        await writer.write_header(201)
        assert sent.status == 201
        assert sent.headers["content-type"] == "text/plain"

    @pytest.mark.asyncio
    async def test_first_write_implies_200(self, writer, sent):
        written = await writer.write(b"hello")
        assert written == 5
        assert sent.status == 200
        assert sent.body == b"hello"

    @pytest.mark.asyncio
    async def test_second_write_header_is_ignored(self, writer, sent, caplog):
        await writer.write_header(404)
        with caplog.at_level(logging.WARNING, logger="httpaddons.writer"):
            await writer.write_header(500)
        assert len(sent.starts) == 1
        assert sent.status == 404
        assert "superfluous write_header" in caplog.text

    @pytest.mark.asyncio
    async def test_finish_closes_body_once(self, writer, sent):
        await writer.write(b"x")
        await writer.finish()
        await writer.finish()
        assert sent.closed
        closing = [m for m in sent.messages if m["type"] == "http.response.body" and not m["more_body"]]
        assert len(closing) == 1

    @pytest.mark.asyncio
    async def test_finish_without_writes_sends_200(self, writer, sent):
        await writer.finish()
        assert sent.status == 200
        assert sent.body == b""

    @pytest.mark.asyncio
    async def test_write_after_finish_raises(self, writer):
        await writer.finish()
        with pytest.raises(RuntimeError):
            await writer.write(b"late")

    @pytest.mark.asyncio
    async def test_empty_write_sends_no_body_chunk(self, writer, sent):
        assert await writer.write(b"") == 0
        assert sent.status == 200
        assert sent.body_messages == []

    @pytest.mark.asyncio
    async def test_starlette_response_flows_through_writer(self, writer, sent):
        response = PlainTextResponse("from starlette", status_code=202)
        await response(make_scope(), empty_receive, writer)
        assert sent.status == 202
        assert sent.headers["content-type"].startswith("text/plain")
        assert sent.headers["content-length"] == str(len(b"from starlette"))
        assert sent.body == b"from starlette"
        assert sent.closed


class TestStatusCapturingWriter:
    @pytest.mark.asyncio
    async def test_status_is_zero_before_anything_is_sent(self, writer):
        capturing = StatusCapturingWriter(writer)
        assert capturing.status == 0
        assert capturing.length == 0

    @pytest.mark.asyncio
    async def test_write_without_status_records_200(self, writer, sent):
        capturing = StatusCapturingWriter(writer)
        await capturing.write(b"body")
        assert capturing.status == 200
        assert sent.status == 200

    @pytest.mark.asyncio
    async def test_explicit_status_is_kept_after_write(self, writer, sent):
        capturing = StatusCapturingWriter(writer)
        await capturing.write_header(404)
        await capturing.write(b"missing")
        assert capturing.status == 404
        assert sent.status == 404

    @pytest.mark.asyncio
    async def test_length_is_sum_of_written_bytes(self, writer, sent):
        capturing = StatusCapturingWriter(writer)
        chunks = [b"a", b"", b"bcd", b"\x00\xff" * 10]
        total = 0
        for chunk in chunks:
            total += await capturing.write(chunk)
        assert capturing.length == total == sum(len(c) for c in chunks)
        assert sent.body == b"".join(chunks)

    @pytest.mark.asyncio
    async def test_headers_are_shared_with_inner_writer(self, writer, sent):
        capturing = StatusCapturingWriter(writer)
        capturing.headers["X-Trace"] = "abc"
        await capturing.write_header(200)
        assert writer.headers["x-trace"] == "abc"
        assert sent.headers["x-trace"] == "abc"

    @pytest.mark.asyncio
    async def test_write_error_propagates_unchanged(self):
        capturing = StatusCapturingWriter(ResponseWriter(FailingSend()))
        with pytest.raises(OSError, match="client disconnected"):
            await capturing.write(b"data")
        assert capturing.status == 200
        assert capturing.length == 0

    @pytest.mark.asyncio
    async def test_observes_plain_asgi_responses(self, writer, sent):
        capturing = StatusCapturingWriter(writer)
        response = Response(b"created", status_code=201)
        await response(make_scope(), empty_receive, capturing)
        assert capturing.status == 201
        assert capturing.length == len(b"created")
        assert sent.body == b"created"
        assert sent.closed

    @pytest.mark.asyncio
    async def test_unknown_messages_are_forwarded(self, writer, sent):
        capturing = StatusCapturingWriter(writer)
        await capturing({"type": "http.response.trailers", "headers": [], "more_trailers": False})
        assert sent.messages == [{"type": "http.response.trailers", "headers": [], "more_trailers": False}]
        assert capturing.status == 0
