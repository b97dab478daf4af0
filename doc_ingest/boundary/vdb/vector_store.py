"""
SQL-backed vector store.

Persists processed documents and their chunks, and answers similarity
queries by scanning every stored embedding. There is no approximate index:
each search loads the candidate chunks and scores them with cosine
similarity.

One VectorStore owns one async engine. Open it once per process and close
it on shutdown (it is also an async context manager).

Dependencies: sqlalchemy, doc_ingest.boundary.vdb
System role: Persistence and retrieval for documents, chunks and embeddings
"""

import logging
from typing import Any

from sqlalchemy import delete, func, insert, select, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker

from doc_ingest.boundary.db.base import utc_now
from doc_ingest.boundary.db.connection import get_async_engine, get_async_session_factory
from doc_ingest.configs.database import DatabaseSettings
from doc_ingest.core.document_processing.models import DocumentChunk
from doc_ingest.core.exceptions import (
    DocumentAlreadyStoredError,
    PartialDeletionError,
    PersistenceError,
    VectorStoreError,
)

from .models import ChunkModel, ProcessedDocumentModel
from .similarity import cosine_scores, rank_scores
from .vector_schemas import DocumentPage, ProcessedDocument, StoreStats, VectorSearchResult

logger = logging.getLogger(__name__)

# Partial index over chunks that can take part in a search
_EMBEDDED_CHUNKS_INDEX = (
    "CREATE INDEX IF NOT EXISTS ix_document_chunks_embedded "
    "ON document_chunks (document_id) WHERE embedding IS NOT NULL"
)


def _to_document(model: ProcessedDocumentModel) -> ProcessedDocument:
    return ProcessedDocument(
        document_id=model.document_id,
        filename=model.filename,
        content_type=model.content_type,
        status=model.status,
        extracted_text=model.extracted_text,
        total_pages=model.total_pages,
        processing_duration=model.processing_duration,
        metadata=model.doc_metadata or {},
        created_at=model.created_at,
        updated_at=model.updated_at,
    )


def _to_chunk(model: ChunkModel) -> DocumentChunk:
    return DocumentChunk(
        id=model.id,
        document_id=model.document_id,
        text=model.text,
        chunk_index=model.chunk_index,
        page_number=model.page_number,
        embedding=model.embedding,
        metadata=model.chunk_metadata or {},
        created_at=model.created_at,
    )


class VectorStore:
    """Document and chunk persistence with exhaustive similarity search."""

    def __init__(self, engine: AsyncEngine) -> None:
        """
        Initialize the store on an existing engine.

        Args:
            engine: Async engine shared by all callers in this process
        """
        self._engine = engine
        self._session_factory: async_sessionmaker = get_async_session_factory(engine)

    @classmethod
    def from_settings(cls, db_config: DatabaseSettings | None = None) -> "VectorStore":
        """Create a store with its own engine built from settings."""
        return cls(get_async_engine(db_config))

    @property
    def engine(self) -> AsyncEngine:
        return self._engine

    async def __aenter__(self) -> "VectorStore":
        await self.initialize()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def initialize(self) -> None:
        """
        Create tables and indices.

        The document_id unique constraint, the chunk id primary key and the
        chunk document_id index come from the ORM models. The partial
        index over embedded chunks is optional: searches work without it,
        so a failure to create it is logged and ignored.
        """
        async with self._engine.begin() as conn:
            await conn.run_sync(
                ProcessedDocumentModel.metadata.create_all,
                tables=[ProcessedDocumentModel.__table__, ChunkModel.__table__],
            )

        try:
            async with self._engine.begin() as conn:
                await conn.execute(text(_EMBEDDED_CHUNKS_INDEX))
            logger.info("Vector search index created")
        except SQLAlchemyError as e:
            logger.warning(
                "Vector search index creation failed",
                extra={"error": str(e)},
            )

        logger.info("Vector storage initialized successfully")

    async def close(self) -> None:
        """Dispose of the engine and its pooled connections."""
        await self._engine.dispose()
        logger.info("Vector storage connection closed")

    async def store_processed_document(
        self,
        document_id: str,
        filename: str,
        content_type: str,
        extracted_text: str,
        chunks: list[DocumentChunk],
        metadata: dict[str, Any],
    ) -> ProcessedDocument:
        """
        Store a processed document and its chunks.

        The document row and the chunk batch are committed together, so
        readers never see a document without its chunks.

        Args:
            document_id: Document id (must not already be stored)
            filename: Original filename
            content_type: MIME type used for extraction
            extracted_text: Full extracted text
            chunks: Chunks in source order
            metadata: Open map; total_pages and processing_duration are
                also copied to their own columns

        Returns:
            ProcessedDocument: The stored record

        Raises:
            DocumentAlreadyStoredError: When document_id is already stored
            PersistenceError: When the insert fails
        """
        now = utc_now()
        document = ProcessedDocumentModel(
            document_id=document_id,
            filename=filename,
            content_type=content_type,
            status="completed",
            extracted_text=extracted_text,
            total_pages=metadata.get("total_pages"),
            processing_duration=int(metadata.get("processing_duration") or 0),
            doc_metadata=metadata,
            created_at=now,
            updated_at=now,
        )
        chunk_rows = [
            {
                "id": chunk.id,
                "document_id": document_id,
                "text": chunk.text,
                "chunk_index": chunk.chunk_index,
                "page_number": chunk.page_number,
                "embedding": chunk.embedding,
                "chunk_metadata": chunk.metadata,
                "created_at": now,
            }
            for chunk in chunks
        ]

        async with self._session_factory() as session:
            try:
                existing = await session.scalar(
                    select(ProcessedDocumentModel.id).where(
                        ProcessedDocumentModel.document_id == document_id
                    )
                )
                if existing is not None:
                    raise DocumentAlreadyStoredError(document_id)
                session.add(document)
                await session.flush()
                if chunk_rows:
                    await session.execute(insert(ChunkModel), chunk_rows)
                else:
                    logger.warning(
                        "No chunks to store",
                        extra={"document_id": document_id, "text_length": len(extracted_text)},
                    )
                await session.commit()
            except SQLAlchemyError as e:
                await session.rollback()
                logger.error(
                    "Failed to store processed document",
                    extra={"document_id": document_id, "error": str(e)},
                )
                raise PersistenceError(
                    f"Failed to store processed document: {e}",
                    document_id,
                    {"chunk_count": len(chunk_rows)},
                ) from e

        logger.info(
            "Stored processed document",
            extra={
                "document_id": document_id,
                "chunk_count": len(chunk_rows),
                "embedded_chunks": sum(1 for row in chunk_rows if row["embedding"] is not None),
            },
        )
        return _to_document(document)

    async def vector_search(
        self,
        query_embedding: list[float],
        top_k: int = 5,
        document_id: str | None = None,
    ) -> list[VectorSearchResult]:
        """
        Rank stored chunks by cosine similarity to a query vector.

        Every chunk with an embedding (restricted to one document when
        document_id is given) is scored. Ties keep document/chunk order.

        Args:
            query_embedding: Query vector
            top_k: Maximum number of results
            document_id: Only search this document's chunks

        Returns:
            list[VectorSearchResult]: Highest scores first, at most top_k

        Raises:
            VectorStoreError: When the chunks cannot be loaded
        """
        if top_k <= 0:
            return []

        stmt = select(ChunkModel).where(ChunkModel.embedding.is_not(None))
        if document_id is not None:
            stmt = stmt.where(ChunkModel.document_id == document_id)
        stmt = stmt.order_by(ChunkModel.document_id, ChunkModel.chunk_index)

        try:
            async with self._session_factory() as session:
                candidates = (await session.execute(stmt)).scalars().all()
        except SQLAlchemyError as e:
            raise VectorStoreError(f"Vector search failed: {e}", "search") from e

        if not candidates:
            logger.warning("No chunks with embeddings found for vector search")
            return []

        scores = cosine_scores(query_embedding, [candidate.embedding for candidate in candidates])
        top_results = [
            VectorSearchResult(chunk=_to_chunk(candidates[i]), score=float(scores[i]))
            for i in rank_scores(scores, top_k)
        ]

        logger.info(
            "Vector search completed",
            extra={
                "query_dimension": len(query_embedding),
                "total_chunks": len(candidates),
                "top_k": top_k,
                "result_count": len(top_results),
                "top_score": top_results[0].score,
            },
        )
        return top_results

    async def get_document(self, document_id: str) -> ProcessedDocument | None:
        """Get a stored document by id, or None."""
        stmt = select(ProcessedDocumentModel).where(
            ProcessedDocumentModel.document_id == document_id
        )
        async with self._session_factory() as session:
            model = (await session.execute(stmt)).scalar_one_or_none()
        return _to_document(model) if model is not None else None

    async def get_document_chunks(self, document_id: str) -> list[DocumentChunk]:
        """Get a document's chunks ordered by chunk_index."""
        stmt = (
            select(ChunkModel)
            .where(ChunkModel.document_id == document_id)
            .order_by(ChunkModel.chunk_index)
        )
        async with self._session_factory() as session:
            models = (await session.execute(stmt)).scalars().all()
        return [_to_chunk(model) for model in models]

    async def list_documents(
        self,
        limit: int = 50,
        offset: int = 0,
        status: str | None = None,
    ) -> DocumentPage:
        """
        List stored documents, newest first.

        Args:
            limit: Page size
            offset: Number of documents to skip
            status: Only documents with this status

        Returns:
            DocumentPage: The page and the total number of matching documents
        """
        stmt = select(ProcessedDocumentModel)
        count_stmt = select(func.count()).select_from(ProcessedDocumentModel)
        if status is not None:
            stmt = stmt.where(ProcessedDocumentModel.status == status)
            count_stmt = count_stmt.where(ProcessedDocumentModel.status == status)
        stmt = (
            stmt.order_by(
                ProcessedDocumentModel.created_at.desc(),
                ProcessedDocumentModel.id.desc(),
            )
            .offset(offset)
            .limit(limit)
        )

        async with self._session_factory() as session:
            models = (await session.execute(stmt)).scalars().all()
            total = (await session.execute(count_stmt)).scalar_one()

        return DocumentPage(documents=[_to_document(m) for m in models], total=total)

    async def delete_document(self, document_id: str) -> bool:
        """
        Delete a document and all of its chunks.

        Runs two separate deletes (document row, then chunk rows). They are
        not atomic: if one fails the other is still attempted and the
        failure is reported as PartialDeletionError. Deleting an absent
        document is not an error.

        Args:
            document_id: Document id

        Returns:
            bool: True if a document row or any chunk was removed

        Raises:
            PartialDeletionError: When exactly one of the two deletes failed
            VectorStoreError: When both deletes failed
        """
        document_removed = await self._delete_rows(
            delete(ProcessedDocumentModel).where(ProcessedDocumentModel.document_id == document_id),
            document_id,
            "document",
        )
        chunks_removed = await self._delete_rows(
            delete(ChunkModel).where(ChunkModel.document_id == document_id),
            document_id,
            "chunks",
        )

        if document_removed is None and chunks_removed is None:
            raise VectorStoreError(
                f"Failed to delete document {document_id}",
                "delete",
                {"document_id": document_id},
            )
        if document_removed is None or chunks_removed is None:
            raise PartialDeletionError(
                document_id,
                document_deleted=document_removed is not None,
                chunks_deleted=chunks_removed is not None,
            )

        logger.info(
            "Document deleted",
            extra={"document_id": document_id, "chunks_removed": chunks_removed},
        )
        return bool(document_removed or chunks_removed)

    async def _delete_rows(self, stmt, document_id: str, target: str) -> int | None:
        # Row count on success, None on failure
        try:
            async with self._session_factory() as session:
                result = await session.execute(stmt)
                await session.commit()
                return result.rowcount
        except SQLAlchemyError as e:
            logger.error(
                "Failed to delete document rows",
                extra={"document_id": document_id, "target": target, "error": str(e)},
            )
            return None

    async def get_stats(self) -> StoreStats:
        """Return document and chunk counts."""
        async with self._session_factory() as session:
            total_documents = (
                await session.execute(select(func.count()).select_from(ProcessedDocumentModel))
            ).scalar_one()
            total_chunks = (
                await session.execute(select(func.count()).select_from(ChunkModel))
            ).scalar_one()
            chunks_with_embeddings = (
                await session.execute(
                    select(func.count())
                    .select_from(ChunkModel)
                    .where(ChunkModel.embedding.is_not(None))
                )
            ).scalar_one()

        return StoreStats(
            total_documents=total_documents,
            total_chunks=total_chunks,
            chunks_with_embeddings=chunks_with_embeddings,
            average_chunks_per_document=(
                total_chunks / total_documents if total_documents > 0 else 0.0
            ),
        )

    async def ping(self) -> bool:
        """Return True if the database answers SELECT 1."""
        try:
            async with self._engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except (SQLAlchemyError, OSError) as e:
            logger.warning("Vector store ping failed", extra={"error": str(e)})
            return False
        return True

    async def health_check(self) -> dict[str, Any]:
        """
        Connectivity plus aggregate statistics.

        Returns:
            dict: {"connected": bool, "stats": StoreStats | None}
        """
        if not await self.ping():
            return {"connected": False, "stats": None}
        return {"connected": True, "stats": await self.get_stats()}
