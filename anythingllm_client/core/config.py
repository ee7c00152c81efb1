"""
Client configuration using pydantic and pydantic-settings.

WHAT: Immutable per-client config plus environment-backed settings
WHY: Type-safe, validated config with sensible defaults
HOW: Frozen pydantic model for the client, BaseSettings reads .env and environment
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ClientConfig(BaseModel):
    """Configuration for one AnythingLLMClient instance (immutable)."""

    model_config = ConfigDict(frozen=True)

    base_url: str = Field(..., description="Server address, e.g. http://localhost:3001")
    api_key: str = Field(..., description="Bearer credential")
    timeout_ms: int = Field(default=30000, gt=0, description="Request timeout in milliseconds")
    retries: int = Field(default=3, ge=0, description="Max retries for idempotent requests")
    debug: bool = False

    # Backoff bounds for the HTTP retry policy (seconds)
    retry_min_delay: float = Field(default=1.0, ge=0)
    retry_max_delay: float = Field(default=10.0, ge=0)

    # WebSocket reconnection
    ws_max_reconnects: int = Field(default=5, ge=1)
    ws_base_delay: float = Field(default=1.0, ge=0)

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Require an http(s) address and strip trailing slashes."""
        v = v.strip()
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"base_url must start with http:// or https://, got {v!r}")
        return v.rstrip("/")

    @field_validator("api_key")
    @classmethod
    def validate_api_key(cls, v: str) -> str:
        """Reject empty credentials."""
        if not v or not v.strip():
            raise ValueError("api_key must not be empty")
        return v.strip()

    @property
    def timeout_seconds(self) -> float:
        return self.timeout_ms / 1000.0

    @property
    def api_base_url(self) -> str:
        """Versioned REST prefix."""
        return f"{self.base_url}/api/v1"


class Settings(BaseSettings):
    """Settings loaded from environment (ANYTHINGLLM_* variables)."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    ANYTHINGLLM_BASE_URL: str = "http://localhost:3001"
    ANYTHINGLLM_API_KEY: str = ""
    ANYTHINGLLM_TIMEOUT_MS: int = 30000
    ANYTHINGLLM_RETRIES: int = 3
    ANYTHINGLLM_DEBUG: bool = False

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FILE: str = ""

    def to_client_config(self) -> ClientConfig:
        """Build a ClientConfig from these settings."""
        return ClientConfig(
            base_url=self.ANYTHINGLLM_BASE_URL,
            api_key=self.ANYTHINGLLM_API_KEY,
            timeout_ms=self.ANYTHINGLLM_TIMEOUT_MS,
            retries=self.ANYTHINGLLM_RETRIES,
            debug=self.ANYTHINGLLM_DEBUG,
        )


def get_settings() -> Settings:
    """Load settings fresh from the environment."""
    return Settings()
