"""
Configuration settings for document processing pipeline.

Chunking window and document-level concurrency for the ingestion pipeline.

Dependencies: pydantic, pydantic_settings
System role: Centralized pipeline configuration
"""

from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DocumentPipelineSettings(BaseSettings):
    """Settings for document ingestion pipeline."""

    model_config = SettingsConfigDict(
        env_prefix="DOC_PIPELINE_",
        case_sensitive=False,
        extra="ignore",
    )

    # Chunking settings
    chunk_size: int = Field(
        default=500,
        description="Window size in characters",
    )
    chunk_overlap: int = Field(
        default=50,
        description="Characters shared by consecutive chunks",
    )
    min_chunk_length: int = Field(
        default=10,
        description="Segments shorter than this after trimming are dropped",
    )

    # Batch settings
    max_concurrent_documents: int = Field(
        default=3,
        description="Documents processed at once by process_batch",
        ge=1,
    )

    @model_validator(mode="after")
    def _check_window(self) -> "DocumentPipelineSettings":
        if self.chunk_overlap >= self.chunk_size:
            raise ValueError("chunk_overlap must be smaller than chunk_size")
        return self


@lru_cache
def get_pipeline_settings() -> DocumentPipelineSettings:
    """
    Get cached pipeline settings instance.

    Returns:
        DocumentPipelineSettings: Singleton settings loaded from environment
    """
    return DocumentPipelineSettings()
