"""
Uploaded document ORM model.

The metadata record created when a file is uploaded. The ingestion pipeline
only reads it, to find the object store key and the declared filename
before download.

Dependencies: sqlalchemy, doc_ingest.boundary.db.base
System role: Read-only view of the document metadata store
"""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from doc_ingest.boundary.db.base import Base, TimestampMixin


class DocumentModel(Base, TimestampMixin):
    """
    Uploaded document metadata.

    Attributes:
        id: Externally assigned document id (also the job's document_id)
        filename: Original filename
        content_type: MIME type declared at upload
        file_key: Object store key of the raw bytes; NULL until upload completes
        created_at: Upload timestamp (UTC)
        updated_at: Last modification timestamp (UTC)
    """

    __tablename__ = "documents"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)

    filename: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        doc="Original filename",
    )

    content_type: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
    )

    file_key: Mapped[str | None] = mapped_column(
        String(1024),
        nullable=True,
        doc="S3 object key for the raw document",
    )
