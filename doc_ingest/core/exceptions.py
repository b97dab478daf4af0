"""
Exception hierarchy for the document ingestion pipeline.

Every error carries a details dict for observability. Whether an error is
fatal for a job or absorbed locally is decided by the caller, not here.

Dependencies: None (pure domain layer)
System role: Centralized exception handling across the application
"""

from typing import Any


class DocIngestException(Exception):
    """Base exception for all ingestion pipeline errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize base exception with message and optional context.

        Args:
            message: Human-readable error message
            details: Optional dictionary of additional context for debugging
        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation including details."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class DocumentProcessingError(DocIngestException):
    """Base exception for document processing errors."""

    def __init__(
        self,
        message: str,
        document_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize document processing error.

        Args:
            message: Error message
            document_id: ID of the document that failed
            details: Additional context
        """
        details = details or {}
        if document_id:
            details["document_id"] = document_id
        self.document_id = document_id
        super().__init__(message, details)


class DocumentNotFoundError(DocumentProcessingError):
    """Raised when a document or its file reference cannot be resolved."""

    def __init__(self, document_id: str, reason: str = "document not found") -> None:
        """
        Initialize not found error.

        Args:
            document_id: ID of the missing document
            reason: What exactly was missing
        """
        super().__init__(f"Cannot resolve document {document_id}: {reason}", document_id)


class ExtractionError(DocumentProcessingError):
    """Raised when text cannot be decoded or parsed from the raw bytes."""

    def __init__(
        self,
        message: str,
        document_id: str | None = None,
        content_type: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize extraction error.

        Args:
            message: Error message
            document_id: ID of the document
            content_type: Declared content type of the buffer
            details: Additional context
        """
        details = details or {}
        if content_type:
            details["content_type"] = content_type
        super().__init__(message, document_id, details)


class EmbeddingUnavailableError(DocumentProcessingError):
    """Raised when one chunk could not be embedded. Never fails a job."""

    pass


class VectorStoreError(DocIngestException):
    """Raised when vector store operations fail."""

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize vector store error.

        Args:
            message: Error message
            operation: Operation that failed (store, search, delete)
            details: Additional context
        """
        details = details or {}
        if operation:
            details["operation"] = operation
        super().__init__(message, details)


class PersistenceError(VectorStoreError):
    """Raised when writing a processed document or its chunks fails."""

    def __init__(self, message: str, document_id: str, details: dict[str, Any] | None = None) -> None:
        details = details or {}
        details["document_id"] = document_id
        self.document_id = document_id
        super().__init__(message, "store", details)


class DocumentAlreadyStoredError(PersistenceError):
    """Raised when a redelivered job targets a document that is already stored."""

    def __init__(self, document_id: str) -> None:
        super().__init__(f"Document {document_id} is already stored", document_id)


class PartialDeletionError(VectorStoreError):
    """Raised when only one of the document/chunk deletes went through."""

    def __init__(
        self,
        document_id: str,
        document_deleted: bool,
        chunks_deleted: bool,
    ) -> None:
        """
        Initialize partial deletion error.

        Args:
            document_id: Document whose removal was interrupted
            document_deleted: Whether the document row delete succeeded
            chunks_deleted: Whether the chunk rows delete succeeded
        """
        self.document_id = document_id
        self.document_deleted = document_deleted
        self.chunks_deleted = chunks_deleted
        super().__init__(
            f"Delete of {document_id} left orphaned data",
            "delete",
            {
                "document_id": document_id,
                "document_deleted": document_deleted,
                "chunks_deleted": chunks_deleted,
            },
        )


class DependencyUnavailableError(DocIngestException):
    """Raised at worker startup when a required store cannot be reached."""

    def __init__(self, dependency: str, reason: str) -> None:
        """
        Initialize dependency error.

        Args:
            dependency: Name of the unreachable dependency
            reason: Underlying error text
        """
        self.dependency = dependency
        super().__init__(f"{dependency} is not reachable", {"dependency": dependency, "reason": reason})
