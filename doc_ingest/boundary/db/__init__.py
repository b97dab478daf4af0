"""
Database boundary layer: ORM base, connection management and the
read-only document metadata lookup.

Dependencies: sqlalchemy, doc_ingest.configs
System role: Database adapter for the metadata store
"""

from doc_ingest.boundary.db.base import Base, TimestampMixin
from doc_ingest.boundary.db.connection import (
    get_async_engine,
    get_async_session_factory,
)
from doc_ingest.boundary.db.models.document_model import DocumentModel
from doc_ingest.boundary.db.CRUD import (
    BaseCRUD,
    DocumentCRUD,
    FileReference,
    document_crud,
)

__all__ = [
    "Base",
    "TimestampMixin",
    "get_async_engine",
    "get_async_session_factory",
    "DocumentModel",
    "BaseCRUD",
    "DocumentCRUD",
    "FileReference",
    "document_crud",
]
