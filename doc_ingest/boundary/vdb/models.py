"""
Vector store ORM models.

processed_documents holds one row per successfully ingested file;
document_chunks holds its chunks. Chunks point back at their document by
document_id without a foreign key: the two tables are written together but
deleted independently.

Dependencies: sqlalchemy, doc_ingest.boundary.db.base
System role: Persistence schema for documents, chunks and embeddings
"""

from datetime import datetime

from sqlalchemy import JSON, DateTime, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from doc_ingest.boundary.db.base import Base, TimestampMixin, utc_now


class ProcessedDocumentModel(Base, TimestampMixin):
    """
    Processed document record.

    Attributes:
        id: Surrogate primary key
        document_id: Externally assigned document id (unique)
        filename: Original filename
        content_type: MIME type used for extraction
        status: completed | failed
        extracted_text: Full extracted text
        total_pages: Page count for paginated formats
        processing_duration: Pipeline wall-clock time in milliseconds
        doc_metadata: Open map stored in the "metadata" column
    """

    __tablename__ = "processed_documents"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    document_id: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    filename: Mapped[str] = mapped_column(String(255), nullable=False)
    content_type: Mapped[str] = mapped_column(String(255), nullable=False)
    status: Mapped[str] = mapped_column(String(32), nullable=False, index=True)
    extracted_text: Mapped[str] = mapped_column(Text, nullable=False, default="")
    total_pages: Mapped[int | None] = mapped_column(Integer, nullable=True)
    processing_duration: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    doc_metadata: Mapped[dict] = mapped_column("metadata", JSON, nullable=False, default=dict)

    __table_args__ = (Index("ix_processed_documents_created_at", "created_at"),)


class ChunkModel(Base):
    """
    Document chunk with optional embedding.

    Attributes:
        id: Composite id "{document_id}_chunk_{chunk_index}" (primary key)
        document_id: Parent document id (indexed)
        text: Trimmed chunk text
        chunk_index: Position among the document's chunks
        page_number: Source page when known
        embedding: Vector as a JSON array; SQL NULL when absent
        chunk_metadata: Open map stored in the "metadata" column
        created_at: Insert timestamp (UTC)
    """

    __tablename__ = "document_chunks"

    id: Mapped[str] = mapped_column(String(320), primary_key=True)
    document_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    text: Mapped[str] = mapped_column(Text, nullable=False)
    chunk_index: Mapped[int] = mapped_column(Integer, nullable=False)
    page_number: Mapped[int | None] = mapped_column(Integer, nullable=True)
    embedding: Mapped[list[float] | None] = mapped_column(JSON(none_as_null=True), nullable=True)
    chunk_metadata: Mapped[dict] = mapped_column("metadata", JSON, nullable=False, default=dict)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        nullable=False,
    )
