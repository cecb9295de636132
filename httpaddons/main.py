"""httpaddons: request logging and response rendering for FastAPI/Starlette apps.

Application setup with:
  - Access log middleware (colourised one-line log per request)
  - Shared HTTP renderer on ``app.state.renderer``
  - Health and status endpoints (never logged)
  - Reference routes for every renderer content type
"""

import logging
from typing import Optional

import uvicorn
from fastapi import FastAPI

from httpaddons.config import Settings, get_settings
from httpaddons.middleware.request_logging import AccessLogMiddleware, LogSink
from httpaddons.render.http_renderer import HTTPRenderer, RenderOptions
from httpaddons.routers import content

logger = logging.getLogger(__name__)

VERSION = "1.0.0"


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def build_renderer(settings: Settings) -> HTTPRenderer:
    """Renderer configured from settings."""

    def _configure(opts: RenderOptions) -> None:
        opts.default_charset = settings.render_default_charset
        opts.append_charset = settings.render_append_charset
        opts.json_indent = settings.render_json_indent

    return HTTPRenderer(_configure)


def create_app(
    settings: Optional[Settings] = None,
    access_log_sink: Optional[LogSink] = None,
) -> FastAPI:
    """Build the application. ``access_log_sink`` replaces stdout for access lines."""
    if settings is None:
        settings = get_settings()
    configure_logging(settings)

    app = FastAPI(
        title="httpaddons",
        description="Request logging and response rendering add-ons",
        version=VERSION,
    )
    app.state.renderer = build_renderer(settings)

    # ---- Middleware (last added = first executed) ----
    if settings.access_log_enabled:
        app.add_middleware(
            AccessLogMiddleware,
            skip_paths=settings.skip_paths,
            color=settings.access_log_color,
            sink=access_log_sink,
        )
    else:
        logger.info("Access log disabled (ACCESS_LOG_ENABLED=false)")

    # ---- Routers ----
    app.include_router(content.router)

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy", "version": VERSION}

    @app.get("/status")
    async def status():
        """Runtime configuration summary."""
        renderer: HTTPRenderer = app.state.renderer
        return {
            "status": "ok",
            "access_log": settings.access_log_enabled,
            "skip_paths": sorted(settings.skip_paths),
            "charset": renderer.default_charset,
            "append_charset": renderer.append_charset,
        }

    return app


app = create_app()


def main() -> None:
    """Run the app with uvicorn on the configured host and port."""
    settings = get_settings()
    uvicorn.run(app, host=settings.app_host, port=settings.app_port, access_log=False)


if __name__ == "__main__":
    main()
