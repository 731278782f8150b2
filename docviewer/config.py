"""Application settings."""
import os
from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings."""

    landing_ai_api_key: str = ""

    # Route calls through the proxy backend; the chat endpoints only exist there
    use_backend: bool = True
    backend_url: str = "http://localhost:5000/api/landing"
    direct_api_base_url: str = "https://api.va.landing.ai"
    api_path: str = "/v1/tools/agentic-document-analysis"
    request_timeout_seconds: float = 300.0  # Extraction of large PDFs is slow

    # Upload limits
    max_file_size_mb: int = 250
    max_pages: int = 50  # Enforced by the server, shown to the user

    # Return canned sample data when the API is unreachable
    sample_fallback_enabled: bool = True

    # Viewer rendering
    render_dpi: int = 150
    viewer_width: int = 700

    log_level: str = "INFO"

    # OpenTelemetry tracing configuration
    tracing_enabled: bool = False
    otlp_endpoint: str = ""  # OTLP endpoint URL (empty = use console exporter)

    class Config:
        env_file = os.path.join(os.path.dirname(__file__), "..", ".env")
        env_file_encoding = 'utf-8'
        case_sensitive = False
        extra = "ignore"

    @property
    def api_base_url(self) -> str:
        """Base URL for extraction calls, proxy or direct."""
        base = self.backend_url if self.use_backend else self.direct_api_base_url
        return base.rstrip("/")

    @property
    def max_file_size_bytes(self) -> int:
        return self.max_file_size_mb * 1024 * 1024


@lru_cache()
def get_settings() -> Settings:
    """Get the cached settings instance."""
    return Settings()
