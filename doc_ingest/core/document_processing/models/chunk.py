"""
Chunk domain model for document processing pipeline.

A bounded, overlapping slice of a document's extracted text. The chunk id is
derived from the parent document id and the chunk position, so re-processing
a document produces the same ids.

Dependencies: pydantic
System role: Unit of embedding, persistence and retrieval
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


def make_chunk_id(document_id: str, chunk_index: int) -> str:
    """Build the composite chunk id for a document position."""
    return f"{document_id}_chunk_{chunk_index}"


class DocumentChunk(BaseModel):
    """Document chunk with optional embedding vector."""

    model_config = ConfigDict(from_attributes=True)

    id: str = Field(description="Composite id: {document_id}_chunk_{chunk_index}")
    document_id: str = Field(description="Parent document id")
    text: str = Field(description="Trimmed chunk text")
    chunk_index: int = Field(ge=0, description="Position among the document's chunks")
    page_number: int | None = Field(default=None, description="Source page, when known")
    embedding: list[float] | None = Field(
        default=None,
        description="Embedding vector; None when generation failed or was skipped",
    )
    metadata: dict = Field(
        default_factory=dict,
        description="Open map; always carries start_char/end_char offsets",
    )
    created_at: datetime | None = Field(default=None, description="Set when persisted")

    @property
    def start_char(self) -> int:
        return self.metadata.get("start_char", 0)

    @property
    def end_char(self) -> int:
        return self.metadata.get("end_char", 0)
