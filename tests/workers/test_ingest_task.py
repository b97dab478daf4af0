"""Tests for the ingest Celery task, its retry policy and the producer helper."""

import asyncio
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from celery.utils.time import get_exponential_backoff_interval
from pydantic import ValidationError

from doc_ingest.core.document_processing.models import IngestJob, PipelineResult
from doc_ingest.core.exceptions import DocumentAlreadyStoredError, DocumentNotFoundError
from doc_ingest.workers import celery_app
from doc_ingest.workers.events import JobStatus, subscribe
from doc_ingest.workers.tasks.document_ingestion import (
    enqueue_document,
    get_job_status,
    ingest_document,
    run_ingest_job,
)


class _InlineRuntime:
    """Runtime stand-in running coroutines on a fresh loop."""

    def __init__(self, pipeline) -> None:
        self.pipeline = pipeline

    def run(self, coro):
        return asyncio.run(coro)


@pytest.fixture
def pipeline_result() -> PipelineResult:
    return PipelineResult(
        document_id="doc-1",
        filename="notes.txt",
        content_type="text/plain",
        status="completed",
        extracted_text="a" * 1000,
        chunks=[],
        total_pages=None,
        processing_duration=25,
    )


@pytest.fixture
def runtime(pipeline_result: PipelineResult) -> _InlineRuntime:
    pipeline = MagicMock()
    pipeline.process = AsyncMock(return_value=pipeline_result)
    return _InlineRuntime(pipeline)


@pytest.fixture
def events():
    """Collect job events published during the test."""
    collected = []
    unsubscribe = subscribe(collected.append)
    yield collected
    unsubscribe()


class TestRetryPolicy:
    """Test queue and retry configuration."""

    def test_task_should_be_registered_under_stable_name(self) -> None:
        assert ingest_document.name == "doc_ingest.ingest_document"
        assert "doc_ingest.ingest_document" in celery_app.tasks

    def test_task_should_allow_three_attempts(self) -> None:
        assert ingest_document.max_retries == 2
        assert ingest_document.autoretry_for == (Exception,)
        assert ingest_document.retry_jitter is False

    def test_backoff_should_wait_2s_then_4s(self) -> None:
        delays = [
            get_exponential_backoff_interval(
                factor=ingest_document.retry_backoff,
                retries=retries,
                maximum=ingest_document.retry_backoff_max,
                full_jitter=ingest_document.retry_jitter,
            )
            for retries in range(ingest_document.max_retries)
        ]

        assert delays == [2, 4]

    def test_missing_documents_should_not_be_retried(self) -> None:
        assert DocumentNotFoundError in ingest_document.dont_autoretry_for
        assert ValidationError in ingest_document.dont_autoretry_for
        assert DocumentAlreadyStoredError in ingest_document.dont_autoretry_for

    def test_app_should_consume_ingest_queue(self) -> None:
        conf = celery_app.conf

        assert conf.task_default_queue == "ingest"
        assert conf.worker_concurrency == 3
        assert conf.task_acks_late is True
        assert conf.worker_prefetch_multiplier == 1


class TestRunIngestJob:
    """Test running a job on a runtime."""

    def test_run_ingest_job_should_return_summary(self, runtime: _InlineRuntime) -> None:
        # Act
        summary = run_ingest_job(IngestJob(document_id="doc-1"), runtime)

        # Assert
        assert summary == {
            "document_id": "doc-1",
            "status": "completed",
            "chunk_count": 0,
            "embedded_chunk_count": 0,
            "total_pages": None,
            "processing_duration": 25,
        }
        runtime.pipeline.process.assert_awaited_once()

    def test_run_ingest_job_should_propagate_pipeline_errors(self, runtime: _InlineRuntime) -> None:
        runtime.pipeline.process.side_effect = DocumentNotFoundError("doc-1")

        with pytest.raises(DocumentNotFoundError):
            run_ingest_job(IngestJob(document_id="doc-1"), runtime)


class TestIngestDocumentTask:
    """Test the task body run eagerly."""

    def test_task_should_complete_and_publish_events(self, runtime: _InlineRuntime, events) -> None:
        # Act
        with patch(
            "doc_ingest.workers.tasks.document_ingestion.get_runtime",
            return_value=runtime,
        ):
            result = ingest_document.apply(args=[{"documentId": "doc-1"}])

        # Assert
        assert result.successful()
        assert result.get()["document_id"] == "doc-1"
        assert [e.status for e in events] == [JobStatus.ACTIVE, JobStatus.COMPLETED]
        assert all(e.document_id == "doc-1" for e in events)

    def test_task_should_fail_without_retry_for_missing_document(
        self,
        runtime: _InlineRuntime,
        events,
    ) -> None:
        # Arrange
        runtime.pipeline.process.side_effect = DocumentNotFoundError("doc-1")

        # Act
        with patch(
            "doc_ingest.workers.tasks.document_ingestion.get_runtime",
            return_value=runtime,
        ):
            result = ingest_document.apply(args=[{"document_id": "doc-1"}])

        # Assert
        assert result.failed()
        assert isinstance(result.result, DocumentNotFoundError)
        assert runtime.pipeline.process.await_count == 1
        assert events[-1].status is JobStatus.FAILED

    def test_task_should_complete_redelivered_job_without_reprocessing(
        self,
        runtime: _InlineRuntime,
        events,
    ) -> None:
        # Arrange
        runtime.pipeline.process.side_effect = DocumentAlreadyStoredError("doc-1")

        # Act
        with patch(
            "doc_ingest.workers.tasks.document_ingestion.get_runtime",
            return_value=runtime,
        ):
            result = ingest_document.apply(args=[{"document_id": "doc-1"}])

        # Assert
        assert result.successful()
        assert result.result == {"document_id": "doc-1", "status": "completed", "skipped": True}
        assert runtime.pipeline.process.await_count == 1
        assert events[-1].status is JobStatus.COMPLETED

    def test_task_should_reject_invalid_payload(self) -> None:
        with patch("doc_ingest.workers.tasks.document_ingestion.get_runtime") as mock_get_runtime:
            result = ingest_document.apply(args=[{"filename": "no-id.txt"}])

        assert result.failed()
        mock_get_runtime.assert_not_called()


class TestEnqueueDocument:
    """Test the producer helper."""

    def test_enqueue_should_send_payload_to_ingest_queue(self) -> None:
        # Arrange
        with patch("doc_ingest.workers.tasks.document_ingestion.ingest_document") as mock_task:
            mock_task.apply_async.return_value = MagicMock(id="job-1")

            # Act
            async_result = enqueue_document("doc-1", filename="a.pdf", content_type="application/pdf")

        # Assert
        assert async_result.id == "job-1"
        kwargs = mock_task.apply_async.call_args.kwargs
        assert kwargs["queue"] == "ingest"
        payload = kwargs["args"][0]
        assert payload["document_id"] == "doc-1"
        assert payload["filename"] == "a.pdf"
        assert payload["content_type"] == "application/pdf"
        assert payload["metadata"] == {}
        assert "timestamp" in payload
        assert IngestJob.model_validate(payload).document_id == "doc-1"

    def test_get_job_status_should_map_celery_state(self) -> None:
        with patch(
            "doc_ingest.workers.tasks.document_ingestion.AsyncResult",
            return_value=MagicMock(state="STARTED"),
        ):
            assert get_job_status("job-1") is JobStatus.ACTIVE
