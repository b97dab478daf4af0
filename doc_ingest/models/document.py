"""
Document domain models and schemas.

Request/response schemas for document retrieval, search and ingestion.

Dependencies: pydantic
System role: Document API contracts
"""

from typing import Any

from pydantic import BaseModel, Field, model_validator

from doc_ingest.boundary.vdb.vector_schemas import VectorSearchResult


class SearchRequest(BaseModel):
    """Similarity search by query text or by a ready-made vector."""

    query: str | None = Field(default=None, min_length=1, description="Text to embed and search for")
    embedding: list[float] | None = Field(default=None, min_length=1, description="Query vector")
    top_k: int = Field(default=5, ge=1, le=100, description="Maximum number of results")
    document_id: str | None = Field(default=None, description="Only search this document")

    @model_validator(mode="after")
    def _exactly_one_query(self) -> "SearchRequest":
        if (self.query is None) == (self.embedding is None):
            raise ValueError("Provide exactly one of 'query' or 'embedding'")
        return self


class SearchResponse(BaseModel):
    """Search hits, best first."""

    results: list[VectorSearchResult]
    total: int


class IngestRequest(BaseModel):
    """Request schema for queueing a document for ingestion."""

    document_id: str = Field(..., min_length=1, description="Document id in the metadata store")
    filename: str | None = Field(default=None, description="Original filename")
    content_type: str | None = Field(default=None, description="Declared MIME type")
    metadata: dict[str, Any] = Field(default_factory=dict, description="Extras stored with the document")


class IngestResponse(BaseModel):
    """Queued job handle."""

    job_id: str
    document_id: str
    status: str = "queued"


class JobStatusResponse(BaseModel):
    """Lifecycle status of one job."""

    job_id: str
    status: str


class DeleteDocumentResponse(BaseModel):
    """Result of a document delete."""

    document_id: str
    deleted: bool
