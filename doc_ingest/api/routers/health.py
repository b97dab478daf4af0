"""
Health check API endpoints.

Routes: GET /health, GET /health/vector-store

Dependencies: doc_ingest.core, doc_ingest.boundary
System role: Health check HTTP API
"""

from fastapi import APIRouter, Depends

from doc_ingest.api.deps import get_pipeline, get_vector_store
from doc_ingest.boundary.vdb import VectorStore
from doc_ingest.core.document_processing.entrypoint import DocumentPipeline
from doc_ingest.models.health import PipelineHealthResponse, VectorStoreHealthResponse

router = APIRouter(prefix="/health", tags=["health"])


@router.get("", response_model=PipelineHealthResponse)
async def health_check(
    pipeline: DocumentPipeline = Depends(get_pipeline),
) -> PipelineHealthResponse:
    """
    Pipeline health.

    Healthy when the vector store answers and the embedding service is
    reachable, degraded otherwise. Always returns 200 so callers can read
    the per-service breakdown.
    """
    return PipelineHealthResponse(**await pipeline.health_check())


@router.get("/vector-store", response_model=VectorStoreHealthResponse)
async def health_check_vector_store(
    vector_store: VectorStore = Depends(get_vector_store),
) -> VectorStoreHealthResponse:
    """Vector store connectivity and statistics."""
    return VectorStoreHealthResponse(**await vector_store.health_check())
