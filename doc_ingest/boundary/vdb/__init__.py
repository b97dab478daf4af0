"""
Vector database boundary layer.

SQL-backed storage for processed documents and embedded chunks, with
exhaustive cosine similarity search.

Dependencies: sqlalchemy, pydantic, numpy
System role: Vector store adapter for ingestion and retrieval
"""

from doc_ingest.boundary.vdb.similarity import cosine_scores, cosine_similarity
from doc_ingest.boundary.vdb.vector_schemas import (
    DocumentPage,
    ProcessedDocument,
    StoreStats,
    VectorSearchResult,
)
from doc_ingest.boundary.vdb.vector_store import VectorStore

__all__ = [
    "VectorStore",
    "ProcessedDocument",
    "VectorSearchResult",
    "DocumentPage",
    "StoreStats",
    "cosine_similarity",
    "cosine_scores",
]
