"""Tests for DocumentPipeline orchestration against an in-memory store."""

import asyncio
from unittest.mock import MagicMock

import pytest

from doc_ingest.core.document_processing.configs import DocumentPipelineSettings
from doc_ingest.core.document_processing.entrypoint import DocumentPipeline
from doc_ingest.core.document_processing.models import IngestJob, PipelineResult
from doc_ingest.core.exceptions import (
    DocumentAlreadyStoredError,
    DocumentNotFoundError,
    ExtractionError,
)


@pytest.fixture
def s3_download() -> MagicMock:
    """S3 download task returning 1,000 characters of text."""
    task = MagicMock()
    task.download.return_value = b"a" * 1000
    return task


@pytest.fixture
def make_pipeline(vector_store, session_factory, s3_download, make_embedding_task):
    """
    Build a pipeline on the test store with mocked S3 and embeddings.

    Returns:
        Callable: make(handler, **settings) -> DocumentPipeline
    """

    def _make(handler, **settings) -> DocumentPipeline:
        return DocumentPipeline(
            vector_store=vector_store,
            metadata_session_factory=session_factory,
            settings=DocumentPipelineSettings(**settings),
            s3_download_task=s3_download,
            embedding_task=make_embedding_task(handler),
        )

    return _make


class TestProcessSuccess:
    """Test complete pipeline runs."""

    @pytest.mark.asyncio
    async def test_process_should_ingest_1000_char_text(
        self,
        make_pipeline,
        embedding_service,
        add_uploaded_document,
        vector_store,
        s3_download,
    ) -> None:
        """Three chunks with service embeddings are stored and returned."""
        # Arrange
        await add_uploaded_document("doc-1", "notes.txt", "uploads/doc-1.txt", "text/plain")
        pipeline = make_pipeline(embedding_service)

        # Act
        result = await pipeline.process(IngestJob(document_id="doc-1"))

        # Assert
        assert isinstance(result, PipelineResult)
        assert result.status == "completed"
        assert result.filename == "notes.txt"
        assert result.content_type == "text/plain"
        assert [(c.start_char, c.end_char) for c in result.chunks] == [
            (0, 500),
            (450, 950),
            (900, 1000),
        ]
        assert all(len(c.embedding) == 384 for c in result.chunks)
        assert result.metadata["chunk_count"] == 3
        assert result.metadata["text_length"] == 1000
        assert "processed_at" in result.metadata
        s3_download.download.assert_called_once_with("uploads/doc-1.txt", "doc-1")

        stored = await vector_store.get_document("doc-1")
        assert stored.status == "completed"
        assert stored.extracted_text == "a" * 1000
        stored_chunks = await vector_store.get_document_chunks("doc-1")
        assert [c.id for c in stored_chunks] == ["doc-1_chunk_0", "doc-1_chunk_1", "doc-1_chunk_2"]
        assert all(len(c.embedding) == 384 for c in stored_chunks)

    @pytest.mark.asyncio
    async def test_process_should_complete_when_embedding_service_unreachable(
        self,
        make_pipeline,
        refused_service,
        add_uploaded_document,
        vector_store,
    ) -> None:
        """Degraded run stores fallback embeddings and still completes."""
        # Arrange
        await add_uploaded_document("doc-2")

        # Act
        result = await make_pipeline(refused_service).process(IngestJob(document_id="doc-2"))

        # Assert
        assert result.status == "completed"
        assert result.embedded_chunk_count == 3
        for chunk in result.chunks:
            assert len(chunk.embedding) == 384
            assert all(-0.5 <= v < 0.5 for v in chunk.embedding)
        assert (await vector_store.get_stats()).chunks_with_embeddings == 3

    @pytest.mark.asyncio
    async def test_process_should_store_chunks_without_embeddings_on_service_error(
        self,
        make_pipeline,
        add_uploaded_document,
        vector_store,
    ) -> None:
        """Per-chunk failures leave embedding empty and never fail the job."""
        import httpx

        def failing(request: httpx.Request) -> httpx.Response:
            return httpx.Response(500)

        await add_uploaded_document("doc-3")

        result = await make_pipeline(failing).process(IngestJob(document_id="doc-3"))

        assert result.status == "completed"
        assert result.embedded_chunk_count == 0
        assert len(await vector_store.get_document_chunks("doc-3")) == 3

    @pytest.mark.asyncio
    async def test_process_should_read_unknown_content_type_as_text(
        self,
        make_pipeline,
        embedding_service,
        add_uploaded_document,
        s3_download,
    ) -> None:
        """Unknown types are decoded as UTF-8 and processed normally."""
        # Arrange
        await add_uploaded_document("doc-4", "data.bin", "uploads/data.bin", None)
        s3_download.download.return_value = b"Readable text inside an odd file type."

        # Act
        result = await make_pipeline(embedding_service).process(
            IngestJob(document_id="doc-4", content_type="application/x-unknown")
        )

        # Assert
        assert result.status == "completed"
        assert result.content_type == "application/x-unknown"
        assert result.extracted_text == "Readable text inside an odd file type."
        assert result.chunk_count == 1

    @pytest.mark.asyncio
    async def test_process_should_prefer_job_fields_and_merge_extras(
        self,
        make_pipeline,
        embedding_service,
        add_uploaded_document,
        vector_store,
    ) -> None:
        """Job filename wins over the record; caller extras reach the stored metadata."""
        # Arrange
        await add_uploaded_document("doc-5", "stored-name.txt")
        job = IngestJob.model_validate(
            {"documentId": "doc-5", "filename": "renamed.txt", "metadata": {"source": "mail"}}
        )

        # Act
        await make_pipeline(embedding_service).process(job)

        # Assert
        stored = await vector_store.get_document("doc-5")
        assert stored.filename == "renamed.txt"
        assert stored.metadata["source"] == "mail"
        assert stored.metadata["chunk_count"] == 3

    @pytest.mark.asyncio
    async def test_process_should_default_missing_content_type(
        self,
        make_pipeline,
        embedding_service,
        add_uploaded_document,
    ) -> None:
        """No declared type anywhere resolves to application/octet-stream."""
        await add_uploaded_document("doc-6", "blob", "uploads/blob", None)

        result = await make_pipeline(embedding_service).process(IngestJob(document_id="doc-6"))

        assert result.content_type == "application/octet-stream"


class TestProcessFailures:
    """Test failures that abort the job without persisting anything."""

    @pytest.mark.asyncio
    async def test_process_should_raise_not_found_for_unknown_document(
        self,
        make_pipeline,
        embedding_service,
        vector_store,
        s3_download,
    ) -> None:
        """Missing metadata record is fatal and nothing is downloaded."""
        # Act
        with pytest.raises(DocumentNotFoundError):
            await make_pipeline(embedding_service).process(IngestJob(document_id="ghost"))

        # Assert
        s3_download.download.assert_not_called()
        assert await vector_store.get_document("ghost") is None

    @pytest.mark.asyncio
    async def test_process_should_raise_not_found_without_file_key(
        self,
        make_pipeline,
        embedding_service,
        add_uploaded_document,
    ) -> None:
        """A record whose upload never finished cannot be processed."""
        await add_uploaded_document("doc-7", file_key=None)

        with pytest.raises(DocumentNotFoundError):
            await make_pipeline(embedding_service).process(IngestJob(document_id="doc-7"))

    @pytest.mark.asyncio
    async def test_process_should_not_store_document_when_extraction_fails(
        self,
        make_pipeline,
        embedding_service,
        add_uploaded_document,
        vector_store,
        s3_download,
    ) -> None:
        """Document stays invisible when the run fails."""
        # Arrange
        await add_uploaded_document("doc-8", "scan.pdf", "uploads/scan.pdf", "application/pdf")
        s3_download.download.return_value = b"corrupt pdf bytes"

        # Act
        with pytest.raises(ExtractionError):
            await make_pipeline(embedding_service).process(IngestJob(document_id="doc-8"))

        # Assert
        assert await vector_store.get_document("doc-8") is None
        assert await vector_store.get_document_chunks("doc-8") == []

    @pytest.mark.asyncio
    async def test_process_should_stop_early_on_second_run_of_same_document(
        self,
        make_pipeline,
        embedding_service,
        add_uploaded_document,
        vector_store,
        s3_download,
    ) -> None:
        """Redelivered jobs are refused before download and embedding."""
        # Arrange
        await add_uploaded_document("doc-9")
        pipeline = make_pipeline(embedding_service)
        await pipeline.process(IngestJob(document_id="doc-9"))
        embedded_texts = len(embedding_service.texts)

        # Act
        with pytest.raises(DocumentAlreadyStoredError):
            await pipeline.process(IngestJob(document_id="doc-9"))

        # Assert
        assert s3_download.download.call_count == 1
        assert len(embedding_service.texts) == embedded_texts
        assert len(await vector_store.get_document_chunks("doc-9")) == 3


class TestDocumentVisibility:
    """Test that documents appear only after a full run."""

    @pytest.mark.asyncio
    async def test_document_should_be_absent_before_and_present_after(
        self,
        make_pipeline,
        embedding_service,
        add_uploaded_document,
        vector_store,
    ) -> None:
        await add_uploaded_document("doc-10")
        assert await vector_store.get_document("doc-10") is None

        await make_pipeline(embedding_service).process(IngestJob(document_id="doc-10"))

        assert (await vector_store.get_document("doc-10")).document_id == "doc-10"


class TestProcessBatch:
    """Test concurrent document processing."""

    @pytest.mark.asyncio
    async def test_process_batch_should_return_results_in_input_order(
        self,
        make_pipeline,
        embedding_service,
        add_uploaded_document,
    ) -> None:
        """Failures are returned in place without affecting other documents."""
        # Arrange
        await add_uploaded_document("doc-a")
        await add_uploaded_document("doc-c")
        jobs = [IngestJob(document_id=d) for d in ("doc-a", "doc-b", "doc-c")]

        # Act
        results = await make_pipeline(embedding_service).process_batch(jobs)

        # Assert
        assert results[0].document_id == "doc-a"
        assert isinstance(results[1], DocumentNotFoundError)
        assert results[2].document_id == "doc-c"

    @pytest.mark.asyncio
    async def test_process_batch_should_bound_concurrency(self, make_pipeline, embedding_service) -> None:
        """No more than max_concurrent_documents run at once."""
        # Arrange
        pipeline = make_pipeline(embedding_service, max_concurrent_documents=2)
        running = 0
        peak = 0

        async def fake_process(job: IngestJob) -> str:
            nonlocal running, peak
            running += 1
            peak = max(peak, running)
            await asyncio.sleep(0.01)
            running -= 1
            return job.document_id

        pipeline.process = fake_process
        jobs = [IngestJob(document_id=f"doc-{i}") for i in range(6)]

        # Act
        results = await pipeline.process_batch(jobs)

        # Assert
        assert peak == 2
        assert results == [f"doc-{i}" for i in range(6)]


class TestHealthCheck:
    """Test pipeline health classification."""

    @pytest.mark.asyncio
    async def test_health_check_should_be_healthy_with_all_services(
        self,
        make_pipeline,
        embedding_service,
    ) -> None:
        health = await make_pipeline(embedding_service).health_check()

        assert health == {
            "status": "healthy",
            "services": {"vector_store": True, "embedding_service": True},
        }

    @pytest.mark.asyncio
    async def test_health_check_should_be_degraded_without_embedding_service(
        self,
        make_pipeline,
        refused_service,
    ) -> None:
        health = await make_pipeline(refused_service).health_check()

        assert health["status"] == "degraded"
        assert health["services"]["embedding_service"] is False
        assert health["services"]["vector_store"] is True
