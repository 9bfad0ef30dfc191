# kafka_records/core/config.py
import json
from functools import lru_cache
from typing import Annotated

from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict
from pydantic import Field, field_validator


class Settings(BaseSettings):
    """
    Central application settings loaded from environment variables (and .env).

    Notes
    -----
    - `poll_timeout_ms` bounds the single poll of a records read; it is the
      only blocking step of the read path besides client metadata calls.
    - `producer_close_timeout_sec` is the grace period given to a producer
      once its send has settled (0 closes without waiting).
    - `cors_allow_origins` accepts JSON array or comma-separated string.
    """
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ---------- Kafka client ----------
    kafka_bootstrap: str = Field("localhost:9092")
    kafka_api_version: str | None = None
    client_id: str = "kafka-records-api"

    # Client timeouts (ms)
    request_timeout_ms: int = 20_000
    metadata_max_age_ms: int = 30_000
    api_version_auto_timeout_ms: int = 10_000

    # ---------- Security (set when using SASL/SSL) ----------
    security_protocol: str = "PLAINTEXT"   # e.g. "SASL_SSL", "SSL"
    sasl_mechanism: str | None = None
    sasl_plain_username: str | None = None
    sasl_plain_password: str | None = None
    ssl_cafile: str | None = None

    # ---------- Records ----------
    poll_timeout_ms: int = Field(default=2_000, ge=0)
    producer_close_timeout_sec: float = Field(default=0.0, ge=0)
    default_limit: int = Field(default=50, ge=1)
    max_limit: int = Field(default=500, ge=1)

    # ---------- CORS ----------
    cors_allow_origins: Annotated[list[str] | None, NoDecode] = None

    @field_validator("cors_allow_origins", mode="before")
    def _parse_cors_origins(cls, v):
        """Accept JSON array or comma-separated string."""
        if v is None:
            return None
        if isinstance(v, str):
            try:
                parsed = json.loads(v)  # JSON array
                if isinstance(parsed, list):
                    return [str(s).strip() for s in parsed if str(s).strip()]
            except ValueError:
                pass
            return [s.strip() for s in v.split(",") if s.strip()]
        return v


@lru_cache
def get_settings() -> Settings:
    """Return a cached Settings instance."""
    return Settings()


settings = get_settings()
