"""
Document ingestion Celery task.

Task: ingest_document(payload) with payload = IngestJob JSON
Flow: resolve -> download -> extract -> chunk -> embed -> store

Retry policy: 3 attempts in total, waiting 2 s then 4 s between them.
Missing documents and malformed payloads fail immediately. A redelivered
job for a document that is already stored completes without reprocessing.

Dependencies: celery, doc_ingest.core, doc_ingest.workers
System role: Async document processing task
"""

import logging
from typing import Any

from celery.result import AsyncResult
from pydantic import ValidationError

from doc_ingest.core.document_processing.models import IngestJob
from doc_ingest.core.exceptions import DocumentAlreadyStoredError, DocumentNotFoundError
from doc_ingest.observability import clear_correlation_id, set_correlation_id
from doc_ingest.observability.log_utils import log_exception_with_context
from doc_ingest.workers import celery_app, celery_config
from doc_ingest.workers.events import INGEST_TASK_NAME, JobStatus, job_status_from_celery_state
from doc_ingest.workers.runtime import WorkerRuntime, get_runtime

logger = logging.getLogger(__name__)


def run_ingest_job(job: IngestJob, runtime: WorkerRuntime) -> dict[str, Any]:
    """
    Run one job on a worker runtime.

    Args:
        job: Validated queue payload
        runtime: Started per-process runtime

    Returns:
        dict: JSON-serializable job summary stored as the task result
    """
    try:
        result = runtime.run(runtime.pipeline.process(job))
    except DocumentAlreadyStoredError:
        logger.info(
            "Document already stored, skipping redelivered job",
            extra={"document_id": job.document_id},
        )
        return {"document_id": job.document_id, "status": "completed", "skipped": True}
    except Exception as e:
        log_exception_with_context(logger, "Ingest job failed", e, document_id=job.document_id)
        raise
    return {
        "document_id": result.document_id,
        "status": result.status,
        "chunk_count": result.chunk_count,
        "embedded_chunk_count": result.embedded_chunk_count,
        "total_pages": result.total_pages,
        "processing_duration": result.processing_duration,
    }


@celery_app.task(
    bind=True,
    name=INGEST_TASK_NAME,
    autoretry_for=(Exception,),
    dont_autoretry_for=(DocumentNotFoundError, DocumentAlreadyStoredError, ValidationError),
    max_retries=celery_config.max_retries,
    retry_backoff=celery_config.retry_backoff_seconds,
    retry_backoff_max=celery_config.retry_backoff_max_seconds,
    retry_jitter=False,
)
def ingest_document(self, payload: dict) -> dict[str, Any]:
    """
    Ingest one document.

    Args:
        payload: IngestJob fields, snake_case or camelCase

    Returns:
        dict: Ingestion summary with chunk counts and duration
    """
    job = IngestJob.model_validate(payload)
    set_correlation_id(self.request.id)
    try:
        return run_ingest_job(job, get_runtime())
    finally:
        clear_correlation_id()


def enqueue_document(
    document_id: str,
    filename: str | None = None,
    content_type: str | None = None,
    metadata: dict[str, Any] | None = None,
) -> AsyncResult:
    """
    Put an ingest job on the queue.

    Args:
        document_id: Document id known to the metadata store
        filename: Original filename, if the caller knows it
        content_type: Declared MIME type, if the caller knows it
        metadata: Extras merged into the stored document metadata

    Returns:
        AsyncResult: Handle whose id is the job id
    """
    job = IngestJob(
        document_id=document_id,
        filename=filename,
        content_type=content_type,
        metadata=metadata or {},
    )
    return ingest_document.apply_async(
        args=[job.model_dump(mode="json")],
        queue=celery_config.queue_name,
    )


def get_job_status(task_id: str) -> JobStatus:
    """Current lifecycle status of a queued job."""
    return job_status_from_celery_state(AsyncResult(task_id, app=celery_app).state)
