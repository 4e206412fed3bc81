"""Application configuration (settings and environment).

Single source of truth for all configuration. Uses pydantic-settings
with .env support. Values are validated at load time.
"""

from functools import lru_cache

from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment and .env.

    Every setting has a default so the app starts with only a local Redis
    available. REDIS_URL selects the key-value store.
    """

    # App
    app_name: str = "propdesk"
    app_version: str = "1.0.0"
    debug: bool = False

    # CORS
    allowed_origins: str = "http://localhost:3000"

    # Request / middleware
    request_timeout_seconds: int = 60
    request_id_header: str = "X-Request-ID"

    # Redis cache and rate limiting
    redis_enabled: bool = True
    redis_url: str = "redis://localhost:6379/0"
    redis_connect_timeout: float = 1.0
    # Per-command timeout; without it a hung server stalls every request.
    redis_socket_timeout: float = 1.0
    redis_max_retries: int = Field(default=2, ge=0)
    cache_delete_batch_size: int = Field(default=500, gt=0)

    # Payment webhook (POST /invoices/{id}/paid); unset disables the endpoint.
    payment_webhook_secret: SecretStr | None = None

    # OpenTelemetry
    telemetry_enabled: bool = False
    telemetry_exporter: str = "console"
    telemetry_otlp_endpoint: str | None = None
    telemetry_sample_rate: float = 1.0
    telemetry_environment: str = "development"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @model_validator(mode="after")
    def validate_redis_and_telemetry(self) -> "Settings":
        """Validate the store URL scheme and telemetry exporter."""
        if self.redis_enabled and not self.redis_url.startswith(
            ("redis://", "rediss://", "unix://")
        ):
            raise ValueError(
                f"REDIS_URL must use redis://, rediss:// or unix://, got: {self.redis_url!r}"
            )
        if self.telemetry_exporter not in ("console", "otlp", "none"):
            raise ValueError(
                f"Invalid telemetry_exporter '{self.telemetry_exporter}'. "
                "Must be one of: 'console', 'otlp', 'none'"
            )
        return self


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings (single instance per process).

    Validation runs on first call, not at import time. In tests, call
    get_settings.cache_clear() before overriding env vars so the next
    get_settings() uses the new values.

    Returns:
        Loaded and validated Settings instance.
    """
    return Settings()
