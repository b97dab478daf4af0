"""ORM models owned by the document metadata store."""

from doc_ingest.boundary.db.models.document_model import DocumentModel

__all__ = ["DocumentModel"]
