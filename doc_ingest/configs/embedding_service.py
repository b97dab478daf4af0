"""
Embedding service configuration.

Settings for the external HTTP embedding service and the local fallback
used when it is unreachable.

Dependencies: pydantic_settings
System role: Embedding backend configuration
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class EmbeddingServiceSettings(BaseSettings):
    """Settings for the external embedding service."""

    model_config = SettingsConfigDict(
        env_prefix="EMBEDDING_SERVICE_",
        case_sensitive=False,
        extra="ignore",
    )

    base_url: str = Field(
        default="http://localhost:3002",
        description="Base URL of the service exposing POST /embeddings",
    )
    timeout_seconds: float = Field(
        default=30.0,
        description="Timeout for a single embedding call",
    )
    health_timeout_seconds: float = Field(
        default=5.0,
        description="Timeout for the GET /health check",
    )
    fallback_dimension: int = Field(
        default=384,
        description="Dimension of locally generated fallback vectors",
    )
    request_delay_seconds: float = Field(
        default=0.1,
        description="Pause between consecutive chunk calls (rate limiting)",
    )
