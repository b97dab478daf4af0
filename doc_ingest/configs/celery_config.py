"""
Celery configuration settings.

Broker, result backend, queue name and retry policy for the ingest worker.

Dependencies: pydantic, pydantic_settings
System role: Async job queue configuration for document ingestion
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class CelerySettings(BaseSettings):
    """Celery and Redis configuration."""

    model_config = SettingsConfigDict(
        env_prefix="CELERY_",
        case_sensitive=False,
        extra="ignore",
    )

    redis_host: str = Field(default="localhost", description="Redis host")
    redis_port: int = Field(default=6379, description="Redis port")
    broker_db: int = Field(default=0, description="Redis database for the broker")
    result_backend_db: int = Field(default=1, description="Redis database for results")

    queue_name: str = Field(default="ingest", description="Queue consumed by the worker")
    worker_concurrency: int = Field(
        default=3,
        description="Jobs processed in parallel by one worker",
    )

    task_serializer: str = Field(default="json", description="Task serialization format")
    result_serializer: str = Field(default="json", description="Result serialization format")
    accept_content: list[str] = Field(
        default=["json"],
        description="Accepted content types",
    )
    timezone: str = Field(default="UTC", description="Celery timezone")

    # Retry policy
    max_attempts: int = Field(default=3, description="Total attempts per job, first run included")
    retry_backoff_seconds: int = Field(
        default=2,
        description="Backoff base in seconds; doubles on every retry",
    )
    retry_backoff_max_seconds: int = Field(
        default=600,
        description="Maximum retry backoff in seconds",
    )

    @property
    def broker_url(self) -> str:
        """
        Construct Redis broker URL.

        Returns:
            str: Celery-compatible broker URL
        """
        return f"redis://{self.redis_host}:{self.redis_port}/{self.broker_db}"

    @property
    def result_backend_url(self) -> str:
        """
        Construct Redis result backend URL.

        Returns:
            str: Celery-compatible result backend URL
        """
        return f"redis://{self.redis_host}:{self.redis_port}/{self.result_backend_db}"

    @property
    def max_retries(self) -> int:
        """Retries after the first attempt."""
        return max(self.max_attempts - 1, 0)
