"""
Per-process worker runtime.

Celery prefork children run synchronous tasks, while the pipeline is
async. Each child keeps one event loop and one engine for its whole life
so the connection pool is reused across jobs instead of being rebuilt per
task.

Lifecycle: started on worker_process_init (or lazily on first use) and
stopped on worker_process_shutdown.

Dependencies: celery, sqlalchemy, doc_ingest.core, doc_ingest.boundary
System role: Resource lifecycle for ingest workers
"""

import asyncio
import logging
from typing import Any, Coroutine, TypeVar

from celery.signals import worker_process_init, worker_process_shutdown
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from doc_ingest.boundary.db import DocumentModel, get_async_engine, get_async_session_factory
from doc_ingest.boundary.vdb import VectorStore
from doc_ingest.configs import Settings, get_settings
from doc_ingest.core.document_processing.entrypoint import DocumentPipeline
from doc_ingest.core.exceptions import DependencyUnavailableError
from doc_ingest.observability import configure_logging

logger = logging.getLogger(__name__)

T = TypeVar("T")


class WorkerRuntime:
    """Event loop, vector store and pipeline owned by one worker process."""

    def __init__(self, settings: Settings | None = None) -> None:
        self._settings = settings or get_settings()
        self._loop: asyncio.AbstractEventLoop | None = None
        self._vector_store: VectorStore | None = None
        self._pipeline: DocumentPipeline | None = None

    @property
    def started(self) -> bool:
        return self._loop is not None

    @property
    def pipeline(self) -> DocumentPipeline:
        if self._pipeline is None:
            raise RuntimeError("Worker runtime is not started")
        return self._pipeline

    @property
    def vector_store(self) -> VectorStore:
        if self._vector_store is None:
            raise RuntimeError("Worker runtime is not started")
        return self._vector_store

    def start(self) -> None:
        """
        Open the store, build the pipeline and verify dependencies.

        Raises:
            DependencyUnavailableError: When the metadata store or the
                vector store cannot be reached; nothing stays open
        """
        if self.started:
            return

        self._loop = asyncio.new_event_loop()
        engine = get_async_engine(self._settings.database)
        self._vector_store = VectorStore(engine)
        self._pipeline = DocumentPipeline(
            vector_store=self._vector_store,
            metadata_session_factory=get_async_session_factory(engine),
        )

        try:
            self.run(self._check_dependencies())
        except DependencyUnavailableError:
            self.stop()
            raise

        logger.info("Worker runtime started")

    async def _check_dependencies(self) -> None:
        try:
            await self._vector_store.initialize()
        except SQLAlchemyError as e:
            raise DependencyUnavailableError("vector store", str(e)) from e
        if not await self._vector_store.ping():
            raise DependencyUnavailableError("vector store", "ping failed")

        session_factory = get_async_session_factory(self._vector_store.engine)
        try:
            async with session_factory() as session:
                await session.execute(select(DocumentModel.id).limit(1))
        except SQLAlchemyError as e:
            raise DependencyUnavailableError("metadata store", str(e)) from e

    def run(self, coro: Coroutine[Any, Any, T]) -> T:
        """Run a coroutine to completion on this process's loop."""
        if self._loop is None:
            raise RuntimeError("Worker runtime is not started")
        return self._loop.run_until_complete(coro)

    def stop(self) -> None:
        """Release the HTTP client, the engine and the loop."""
        if self._loop is None:
            return
        try:
            if self._pipeline is not None:
                self._loop.run_until_complete(self._pipeline.embedding_task.aclose())
            if self._vector_store is not None:
                self._loop.run_until_complete(self._vector_store.close())
        finally:
            self._loop.close()
            self._loop = None
            self._pipeline = None
            self._vector_store = None
            logger.info("Worker runtime stopped")


_runtime: WorkerRuntime | None = None


def get_runtime() -> WorkerRuntime:
    """Get this process's runtime, starting it on first use."""
    global _runtime
    if _runtime is None:
        runtime = WorkerRuntime()
        runtime.start()
        _runtime = runtime
    return _runtime


def shutdown_runtime() -> None:
    """Stop and forget this process's runtime, if any."""
    global _runtime
    if _runtime is not None:
        _runtime.stop()
        _runtime = None


@worker_process_init.connect
def _init_worker_process(**kwargs) -> None:
    configure_logging(get_settings().log_level)
    get_runtime()


@worker_process_shutdown.connect
def _shutdown_worker_process(**kwargs) -> None:
    shutdown_runtime()
