"""
Vector store schemas.

Pydantic models returned by the vector store: stored documents, search
hits, list pages and aggregate statistics.

Dependencies: pydantic
System role: Type definitions for vector store operations
"""

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, Field

from doc_ingest.core.document_processing.models import DocumentChunk

DocumentStatus = Literal["completed", "failed"]


class ProcessedDocument(BaseModel):
    """Stored document record."""

    document_id: str = Field(description="Externally assigned document id")
    filename: str
    content_type: str
    status: DocumentStatus
    extracted_text: str
    total_pages: int | None = None
    processing_duration: int = Field(description="Pipeline time in milliseconds")
    metadata: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime
    updated_at: datetime


class VectorSearchResult(BaseModel):
    """Single result from vector search."""

    chunk: DocumentChunk = Field(description="Matching chunk, embedding included")
    score: float = Field(description="Cosine similarity with the query (-1.0 to 1.0)")


class DocumentPage(BaseModel):
    """One page of list_documents plus the unpaginated total."""

    documents: list[ProcessedDocument]
    total: int


class StoreStats(BaseModel):
    """Aggregate counts over the store."""

    total_documents: int
    total_chunks: int
    chunks_with_embeddings: int
    average_chunks_per_document: float
