"""Fixtures for API tests: app with mocked services."""

from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from doc_ingest.api.deps import (
    get_embedding_task,
    get_job_enqueuer,
    get_job_status_reader,
    get_pipeline,
    get_vector_store,
)
from doc_ingest.api.main import create_app
from doc_ingest.boundary.vdb import ProcessedDocument


@pytest.fixture
def sample_document() -> ProcessedDocument:
    now = datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc)
    return ProcessedDocument(
        document_id="doc-1",
        filename="notes.txt",
        content_type="text/plain",
        status="completed",
        extracted_text="hello world",
        total_pages=None,
        processing_duration=20,
        metadata={"chunk_count": 1},
        created_at=now,
        updated_at=now,
    )


@pytest.fixture
def mock_vector_store() -> MagicMock:
    store = MagicMock()
    for name in (
        "list_documents",
        "get_document",
        "get_document_chunks",
        "delete_document",
        "get_stats",
        "vector_search",
        "health_check",
    ):
        setattr(store, name, AsyncMock())
    return store


@pytest.fixture
def mock_embedding_task() -> MagicMock:
    task = MagicMock()
    task.embed_query = AsyncMock(return_value=[1.0, 0.0])
    return task


@pytest.fixture
def mock_pipeline() -> MagicMock:
    pipeline = MagicMock()
    pipeline.health_check = AsyncMock()
    return pipeline


@pytest.fixture
def mock_enqueue() -> MagicMock:
    return MagicMock(return_value=MagicMock(id="job-123"))


@pytest.fixture
def mock_status_reader() -> MagicMock:
    return MagicMock()


@pytest.fixture
def client(mock_vector_store, mock_embedding_task, mock_pipeline, mock_enqueue, mock_status_reader):
    app = create_app()
    app.dependency_overrides[get_vector_store] = lambda: mock_vector_store
    app.dependency_overrides[get_embedding_task] = lambda: mock_embedding_task
    app.dependency_overrides[get_pipeline] = lambda: mock_pipeline
    app.dependency_overrides[get_job_enqueuer] = lambda: mock_enqueue
    app.dependency_overrides[get_job_status_reader] = lambda: mock_status_reader
    return TestClient(app)
