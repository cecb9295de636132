"""Application configuration loaded from environment variables.

Centralised settings for the access log and the response renderer.
Values are read once when the app is built; the middleware and renderer
only ever see plain, read-only copies.
"""

from functools import lru_cache
from typing import FrozenSet, Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # ---- Access log ----
    access_log_enabled: bool = True
    access_log_skip_paths: str = "/health,/status"  # Comma-separated exact paths
    access_log_color: bool = True

    # ---- Renderer ----
    render_default_charset: str = "UTF-8"
    render_append_charset: bool = False  # Add "; charset=" to JSON/JSONP/XML/HTML
    render_json_indent: Optional[int] = None  # Compact JSON when unset

    # ---- App ----
    app_host: str = "0.0.0.0"
    app_port: int = 8000
    log_level: str = "INFO"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}

    @property
    def skip_paths(self) -> FrozenSet[str]:
        return frozenset(p.strip() for p in self.access_log_skip_paths.split(",") if p.strip())


@lru_cache()
def get_settings() -> Settings:
    """Cached singleton accessor for application settings."""
    return Settings()
