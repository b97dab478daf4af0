"""API request/response schemas."""

from doc_ingest.models.document import (
    DeleteDocumentResponse,
    IngestRequest,
    IngestResponse,
    JobStatusResponse,
    SearchRequest,
    SearchResponse,
)
from doc_ingest.models.health import PipelineHealthResponse, VectorStoreHealthResponse

__all__ = [
    "DeleteDocumentResponse",
    "IngestRequest",
    "IngestResponse",
    "JobStatusResponse",
    "SearchRequest",
    "SearchResponse",
    "PipelineHealthResponse",
    "VectorStoreHealthResponse",
]
