"""
Document pipeline orchestrator.

Coordinates metadata lookup, S3 download, text extraction, chunking,
embedding, and persistence for one document at a time.

Dependencies: All task modules, doc_ingest.boundary
System role: Pipeline orchestration (coordinates only)
"""

import asyncio
import logging
import time
from typing import Any

from sqlalchemy.ext.asyncio import async_sessionmaker

from doc_ingest.boundary.db.base import utc_now
from doc_ingest.boundary.db.CRUD import FileReference, document_crud
from doc_ingest.boundary.vdb import VectorStore
from doc_ingest.configs import get_settings
from doc_ingest.core.exceptions import DocumentAlreadyStoredError, DocumentNotFoundError

from .configs import DocumentPipelineSettings, get_pipeline_settings
from .models import IngestJob, PipelineResult
from .tasks import ChunkingTask, EmbeddingTask, ParsingTask, S3DownloadTask

logger = logging.getLogger(__name__)

DEFAULT_FILENAME = "unknown"
DEFAULT_CONTENT_TYPE = "application/octet-stream"


class DocumentPipeline:
    """Orchestrate document ingestion: resolve -> download -> extract -> chunk -> embed -> store."""

    def __init__(
        self,
        vector_store: VectorStore,
        metadata_session_factory: async_sessionmaker,
        settings: DocumentPipelineSettings | None = None,
        s3_download_task: S3DownloadTask | None = None,
        parsing_task: ParsingTask | None = None,
        chunking_task: ChunkingTask | None = None,
        embedding_task: EmbeddingTask | None = None,
    ) -> None:
        """
        Initialize pipeline with its collaborators.

        Tasks left as None are built from application settings.

        Args:
            vector_store: Store that receives the processed document
            metadata_session_factory: Sessions for the document metadata lookup
            settings: Pipeline settings (uses defaults if None)
            s3_download_task: Object store download
            parsing_task: Text extraction
            chunking_task: Text chunking
            embedding_task: Chunk embedding
        """
        self._settings = settings or get_pipeline_settings()
        self._vector_store = vector_store
        self._session_factory = metadata_session_factory

        if s3_download_task is None:
            s3_settings = get_settings().s3_documents
            s3_download_task = S3DownloadTask(
                bucket=s3_settings.bucket,
                region=s3_settings.region,
                endpoint_url=s3_settings.endpoint_url,
            )
        if embedding_task is None:
            embedding_settings = get_settings().embedding_service
            embedding_task = EmbeddingTask(
                base_url=embedding_settings.base_url,
                timeout=embedding_settings.timeout_seconds,
                fallback_dimension=embedding_settings.fallback_dimension,
                request_delay=embedding_settings.request_delay_seconds,
                health_timeout=embedding_settings.health_timeout_seconds,
            )

        self._s3_download_task = s3_download_task
        self._parsing_task = parsing_task or ParsingTask()
        self._chunking_task = chunking_task or ChunkingTask(
            chunk_size=self._settings.chunk_size,
            chunk_overlap=self._settings.chunk_overlap,
            min_chunk_length=self._settings.min_chunk_length,
        )
        self._embedding_task = embedding_task
        self._batch_semaphore = asyncio.Semaphore(self._settings.max_concurrent_documents)

    @property
    def embedding_task(self) -> EmbeddingTask:
        return self._embedding_task

    async def process(self, job: IngestJob) -> PipelineResult:
        """
        Process one document through the full pipeline.

        Nothing is persisted unless every stage before storage succeeds.
        Per-chunk embedding failures do not fail the run.

        Args:
            job: Queue payload naming the document

        Returns:
            PipelineResult: Stored document summary with its chunks

        Raises:
            DocumentAlreadyStoredError: Document was stored by an earlier delivery
            DocumentNotFoundError: Metadata record, file key or S3 object missing
            S3DownloadError: S3 download failed
            ExtractionError: Text could not be extracted
            PersistenceError: Document or chunks could not be stored
        """
        start_time = time.perf_counter()
        document_id = job.document_id
        logger.info("Starting document processing", extra={"document_id": document_id})

        # Redelivered after commit; skip the download and embedding calls
        if await self._vector_store.get_document(document_id) is not None:
            raise DocumentAlreadyStoredError(document_id)

        reference = await self._resolve_reference(document_id)
        filename = job.filename or reference.filename or DEFAULT_FILENAME
        content_type = job.content_type or reference.content_type or DEFAULT_CONTENT_TYPE

        # boto3 is blocking
        buffer = await asyncio.to_thread(
            self._s3_download_task.download, reference.file_key, document_id
        )

        extraction = self._parsing_task.extract(
            buffer,
            content_type,
            filename=filename,
            document_id=document_id,
        )
        chunks = self._chunking_task.chunk(
            extraction.text,
            document_id,
            page_offsets=extraction.page_offsets,
        )
        chunks = await self._embedding_task.embed(chunks)

        processing_duration = int((time.perf_counter() - start_time) * 1000)
        metadata: dict[str, Any] = {
            **job.metadata,
            "total_pages": extraction.total_pages,
            "processing_duration": processing_duration,
            "processed_at": utc_now().isoformat(),
            "chunk_count": len(chunks),
            "text_length": len(extraction.text),
        }

        stored = await self._vector_store.store_processed_document(
            document_id=document_id,
            filename=filename,
            content_type=content_type,
            extracted_text=extraction.text,
            chunks=chunks,
            metadata=metadata,
        )

        result = PipelineResult(
            document_id=document_id,
            filename=filename,
            content_type=content_type,
            status=stored.status,
            extracted_text=extraction.text,
            chunks=chunks,
            total_pages=extraction.total_pages,
            processing_duration=processing_duration,
            metadata=metadata,
        )
        logger.info(
            "Document processing completed",
            extra={
                "document_id": document_id,
                "chunk_count": result.chunk_count,
                "embedded_chunks": result.embedded_chunk_count,
                "processing_duration": processing_duration,
            },
        )
        return result

    async def process_batch(self, jobs: list[IngestJob]) -> list[PipelineResult | BaseException]:
        """
        Process several documents concurrently.

        At most max_concurrent_documents run at once; the rest wait for a
        slot. One document failing does not affect the others.

        Args:
            jobs: Queue payloads

        Returns:
            list: PipelineResult or the raised exception, in input order
        """

        async def _bounded(job: IngestJob) -> PipelineResult:
            async with self._batch_semaphore:
                return await self.process(job)

        results = await asyncio.gather(*(_bounded(job) for job in jobs), return_exceptions=True)

        failed = sum(1 for r in results if isinstance(r, BaseException))
        logger.info(
            "Batch processing completed",
            extra={"total": len(jobs), "succeeded": len(jobs) - failed, "failed": failed},
        )
        return results

    async def health_check(self) -> dict[str, Any]:
        """
        Classify pipeline health.

        Returns:
            dict: {"status": "healthy" | "degraded", "services": {...}}.
            Healthy needs the vector store plus at least one upstream.
        """
        store_ok, embedding_ok = await asyncio.gather(
            self._vector_store.ping(),
            self._embedding_task.is_available(),
        )
        services = {"vector_store": store_ok, "embedding_service": embedding_ok}
        status = "healthy" if store_ok and embedding_ok else "degraded"
        if status == "degraded":
            logger.warning("Pipeline health degraded", extra={"services": services})
        return {"status": status, "services": services}

    async def _resolve_reference(self, document_id: str) -> FileReference:
        async with self._session_factory() as session:
            reference = await document_crud.get_file_reference(session, document_id)

        if reference is None:
            raise DocumentNotFoundError(document_id)
        if not reference.file_key:
            raise DocumentNotFoundError(document_id, "document has no file key")
        return reference
