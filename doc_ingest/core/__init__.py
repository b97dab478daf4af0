"""
Core business logic module.

Contains the ingestion pipeline and the exception hierarchy.
"""

from doc_ingest.core.exceptions import (
    DependencyUnavailableError,
    DocIngestException,
    DocumentAlreadyStoredError,
    DocumentNotFoundError,
    DocumentProcessingError,
    EmbeddingUnavailableError,
    ExtractionError,
    PartialDeletionError,
    PersistenceError,
    VectorStoreError,
)

__all__ = [
    "DocIngestException",
    "DocumentProcessingError",
    "DocumentNotFoundError",
    "ExtractionError",
    "EmbeddingUnavailableError",
    "VectorStoreError",
    "PersistenceError",
    "DocumentAlreadyStoredError",
    "PartialDeletionError",
    "DependencyUnavailableError",
]
