"""
Document API endpoints.

Routes:
- GET /documents - List processed documents, newest first
- GET /documents/stats - Store statistics
- POST /documents/search - Similarity search by query text or vector
- POST /documents/ingest - Queue a document for ingestion
- GET /documents/{id} - Get processed document
- GET /documents/{id}/chunks - Get document chunks in order
- DELETE /documents/{id} - Delete document and chunks

Dependencies: doc_ingest.boundary.vdb, doc_ingest.core, doc_ingest.models
System role: Document HTTP API
"""

import logging
from typing import Callable

from fastapi import APIRouter, Depends, HTTPException, Query, status

from doc_ingest.api.deps import get_embedding_task, get_job_enqueuer, get_vector_store
from doc_ingest.boundary.vdb import DocumentPage, ProcessedDocument, StoreStats, VectorStore
from doc_ingest.core.document_processing.models import DocumentChunk
from doc_ingest.core.document_processing.tasks import EmbeddingTask
from doc_ingest.core.exceptions import DocumentNotFoundError, EmbeddingUnavailableError
from doc_ingest.models.document import (
    DeleteDocumentResponse,
    IngestRequest,
    IngestResponse,
    SearchRequest,
    SearchResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/documents", tags=["documents"])


@router.get("", response_model=DocumentPage)
async def list_documents(
    limit: int = Query(default=50, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    status_filter: str | None = Query(default=None, alias="status"),
    vector_store: VectorStore = Depends(get_vector_store),
) -> DocumentPage:
    """List processed documents with the total count for pagination."""
    return await vector_store.list_documents(limit=limit, offset=offset, status=status_filter)


@router.get("/stats", response_model=StoreStats)
async def get_stats(vector_store: VectorStore = Depends(get_vector_store)) -> StoreStats:
    """Document and chunk counts."""
    return await vector_store.get_stats()


@router.post("/search", response_model=SearchResponse)
async def search_documents(
    request: SearchRequest,
    vector_store: VectorStore = Depends(get_vector_store),
    embedding_task: EmbeddingTask = Depends(get_embedding_task),
) -> SearchResponse:
    """
    Rank stored chunks by cosine similarity.

    Args:
        request: Query text or vector, top_k and optional document filter
        vector_store: Injected vector store
        embedding_task: Injected embedding client, used for query text

    Returns:
        SearchResponse: Hits, best first

    Raises:
        HTTPException(503): Query text could not be embedded
    """
    query_embedding = request.embedding
    if query_embedding is None:
        try:
            query_embedding = await embedding_task.embed_query(request.query)
        except EmbeddingUnavailableError as e:
            raise HTTPException(status_code=503, detail=str(e))

    results = await vector_store.vector_search(
        query_embedding,
        top_k=request.top_k,
        document_id=request.document_id,
    )
    return SearchResponse(results=results, total=len(results))


@router.post("/ingest", response_model=IngestResponse, status_code=status.HTTP_202_ACCEPTED)
async def ingest_document(
    request: IngestRequest,
    enqueue: Callable = Depends(get_job_enqueuer),
) -> IngestResponse:
    """
    Queue a document for background ingestion.

    The document must already exist in the metadata store with a file key;
    a missing one is reported by the job, not here.

    Returns:
        IngestResponse: Job id for GET /jobs/{job_id}
    """
    async_result = enqueue(
        request.document_id,
        filename=request.filename,
        content_type=request.content_type,
        metadata=request.metadata,
    )
    logger.info(
        "Ingest job queued",
        extra={"document_id": request.document_id, "job_id": async_result.id},
    )
    return IngestResponse(job_id=async_result.id, document_id=request.document_id)


@router.get("/{document_id}", response_model=ProcessedDocument)
async def get_document(
    document_id: str,
    vector_store: VectorStore = Depends(get_vector_store),
) -> ProcessedDocument:
    """Get a processed document; 404 until its job has completed."""
    document = await vector_store.get_document(document_id)
    if document is None:
        raise DocumentNotFoundError(document_id)
    return document


@router.get("/{document_id}/chunks", response_model=list[DocumentChunk])
async def get_document_chunks(
    document_id: str,
    vector_store: VectorStore = Depends(get_vector_store),
) -> list[DocumentChunk]:
    """Get a document's chunks ordered by chunk_index."""
    if await vector_store.get_document(document_id) is None:
        raise DocumentNotFoundError(document_id)
    return await vector_store.get_document_chunks(document_id)


@router.delete("/{document_id}", response_model=DeleteDocumentResponse)
async def delete_document(
    document_id: str,
    vector_store: VectorStore = Depends(get_vector_store),
) -> DeleteDocumentResponse:
    """
    Delete a document and its chunks.

    Deleting an unknown id succeeds with deleted=false.

    Raises:
        PartialDeletionError: Only part of the document was removed (500)
    """
    deleted = await vector_store.delete_document(document_id)
    return DeleteDocumentResponse(document_id=document_id, deleted=deleted)
