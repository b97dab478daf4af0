"""
Pipeline result model for document processing.

Represents the outcome of processing a document through the pipeline.

Dependencies: pydantic
System role: Return type for DocumentPipeline.process()
"""

from typing import Any, Literal

from pydantic import BaseModel, Field

from .chunk import DocumentChunk


class PipelineResult(BaseModel):
    """Result of document processing pipeline execution."""

    document_id: str = Field(description="Unique document identifier")
    filename: str = Field(description="Resolved filename")
    content_type: str = Field(description="Resolved MIME type")
    status: Literal["completed", "failed"] = Field(description="Final document status")
    extracted_text: str = Field(description="Full extracted text")
    chunks: list[DocumentChunk] = Field(default_factory=list, description="Chunks in source order")
    total_pages: int | None = Field(default=None, description="Page count for paginated formats")
    processing_duration: int = Field(description="Wall-clock pipeline time in milliseconds")
    metadata: dict[str, Any] = Field(
        default_factory=dict,
        description="processed_at, chunk_count, text_length",
    )

    @property
    def chunk_count(self) -> int:
        return len(self.chunks)

    @property
    def embedded_chunk_count(self) -> int:
        return sum(1 for chunk in self.chunks if chunk.embedding is not None)
