"""
Dependency injection container.

Factory functions for FastAPI dependencies. The vector store, embedding
client and pipeline are created once per API process and shared by all
requests.

Dependencies: doc_ingest.configs, doc_ingest.core, doc_ingest.boundary
System role: DI container for service injection
"""

from typing import Callable

from doc_ingest.configs import get_settings


class ServiceCache:
    """Container for cached service instances."""

    def __init__(self):
        self._vector_store = None
        self._embedding_task = None
        self._pipeline = None

    @property
    def vector_store(self):
        """Get cached vector store."""
        if self._vector_store is None:
            from doc_ingest.boundary.vdb import VectorStore

            self._vector_store = VectorStore.from_settings(get_settings().database)
        return self._vector_store

    @property
    def embedding_task(self):
        """Get cached embedding client."""
        if self._embedding_task is None:
            from doc_ingest.core.document_processing.tasks import EmbeddingTask

            embedding_settings = get_settings().embedding_service
            self._embedding_task = EmbeddingTask(
                base_url=embedding_settings.base_url,
                timeout=embedding_settings.timeout_seconds,
                fallback_dimension=embedding_settings.fallback_dimension,
                request_delay=embedding_settings.request_delay_seconds,
                health_timeout=embedding_settings.health_timeout_seconds,
            )
        return self._embedding_task

    @property
    def pipeline(self):
        """Get cached document pipeline."""
        if self._pipeline is None:
            from doc_ingest.boundary.db import get_async_session_factory
            from doc_ingest.core.document_processing.entrypoint import DocumentPipeline

            self._pipeline = DocumentPipeline(
                vector_store=self.vector_store,
                metadata_session_factory=get_async_session_factory(self.vector_store.engine),
                embedding_task=self.embedding_task,
            )
        return self._pipeline

    async def aclose(self) -> None:
        """Release open connections and clear all cached instances."""
        if self._embedding_task is not None:
            await self._embedding_task.aclose()
        if self._vector_store is not None:
            await self._vector_store.close()
        self.clear()

    def clear(self) -> None:
        """Clear all cached instances."""
        self._vector_store = None
        self._embedding_task = None
        self._pipeline = None


# Global service cache
_service_cache = ServiceCache()


def get_service_cache() -> ServiceCache:
    """Get service cache singleton."""
    return _service_cache


def get_vector_store():
    """Get the shared vector store."""
    return get_service_cache().vector_store


def get_embedding_task():
    """Get the shared embedding client."""
    return get_service_cache().embedding_task


def get_pipeline():
    """Get the shared document pipeline."""
    return get_service_cache().pipeline


def get_job_enqueuer() -> Callable:
    """
    Get the function that puts ingest jobs on the queue.

    Imported lazily so the API only needs the broker when a job is sent.

    Returns:
        Callable: enqueue_document(document_id, filename, content_type, metadata)
    """
    from doc_ingest.workers.tasks.document_ingestion import enqueue_document

    return enqueue_document


def get_job_status_reader() -> Callable:
    """
    Get the function that reads a job's lifecycle status.

    Returns:
        Callable: get_job_status(task_id) -> JobStatus
    """
    from doc_ingest.workers.tasks.document_ingestion import get_job_status

    return get_job_status
