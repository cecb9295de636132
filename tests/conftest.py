"""Shared pytest fixtures for httpaddons tests.

Writers and the renderer are exercised against a recording ASGI ``send``;
the full app is exercised through FastAPI's TestClient with the access log
redirected to an in-memory list.
"""

import os

import pytest
from fastapi.testclient import TestClient

# Keep a developer's .env / environment from leaking into tests
os.environ["ACCESS_LOG_COLOR"] = "false"
os.environ["ACCESS_LOG_SKIP_PATHS"] = "/health,/status"

from httpaddons.config import Settings
from httpaddons.main import create_app
from httpaddons.render.http_renderer import HTTPRenderer
from httpaddons.writer import ResponseWriter


class RecordingSend:
    """ASGI ``send`` that keeps every message for inspection."""

    def __init__(self):
        self.messages = []

    async def __call__(self, message):
        self.messages.append(message)

    @property
    def starts(self):
        return [m for m in self.messages if m["type"] == "http.response.start"]

    @property
    def status(self):
        return self.starts[0]["status"] if self.starts else None

    @property
    def headers(self):
        if not self.starts:
            return {}
        return {k.decode("latin-1"): v.decode("latin-1") for k, v in self.starts[0]["headers"]}

    @property
    def body(self):
        return b"".join(m.get("body", b"") for m in self.messages if m["type"] == "http.response.body")

    @property
    def body_messages(self):
        return [m for m in self.messages if m["type"] == "http.response.body" and m.get("body")]

    @property
    def closed(self):
        last = self.messages[-1] if self.messages else None
        return bool(last and last["type"] == "http.response.body" and not last.get("more_body", False))


def make_scope(path="/", method="GET", query_string=b"", headers=None, client=("127.0.0.1", 50000)):
    """Minimal HTTP scope for driving ASGI apps directly."""
    return {
        "type": "http",
        "asgi": {"version": "3.0"},
        "http_version": "1.1",
        "method": method,
        "scheme": "http",
        "path": path,
        "raw_path": path.encode("latin-1"),
        "query_string": query_string,
        "root_path": "",
        "headers": [(k.lower().encode("latin-1"), v.encode("latin-1")) for k, v in (headers or {}).items()],
        "client": client,
        "server": ("testserver", 80),
    }


async def empty_receive():
    return {"type": "http.request", "body": b"", "more_body": False}


@pytest.fixture
def sent():
    return RecordingSend()


@pytest.fixture
def writer(sent):
    return ResponseWriter(sent)


@pytest.fixture
def renderer():
    return HTTPRenderer()


@pytest.fixture
def access_lines():
    """Collected access log lines for the ``client`` fixture."""
    return []


@pytest.fixture
def settings():
    return Settings(access_log_color=False)


@pytest.fixture(scope="function")
def client(settings, access_lines):
    """TestClient over a fresh app whose access log goes to ``access_lines``."""
    app = create_app(settings, access_log_sink=access_lines.append)
    with TestClient(app) as c:
        yield c
