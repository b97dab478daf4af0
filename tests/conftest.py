"""
Shared test fixtures and configuration for entire test suite.

Provides: in-memory SQLite engine, vector store, metadata session factory,
mocked embedding service transports
Dependencies: pytest, pytest-asyncio, sqlalchemy, aiosqlite, httpx
System role: Test infrastructure and fixture management
"""

import random
from datetime import datetime, timezone

import httpx
import pytest


@pytest.fixture
async def test_engine():
    """
    Create in-memory SQLite async engine with every table created.

    Yields:
        AsyncEngine: Engine shared by the vector store and metadata lookups
    """
    from sqlalchemy.ext.asyncio import create_async_engine
    from sqlalchemy.pool import StaticPool

    from doc_ingest.boundary.db.base import Base

    # Registers the vector store tables on Base.metadata
    import doc_ingest.boundary.vdb.models  # noqa: F401

    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
async def vector_store(test_engine):
    """Initialized VectorStore on the test engine."""
    from doc_ingest.boundary.vdb import VectorStore

    store = VectorStore(test_engine)
    await store.initialize()
    return store


@pytest.fixture
def session_factory(test_engine):
    """Session factory for metadata lookups on the test engine."""
    from doc_ingest.boundary.db.connection import get_async_session_factory

    return get_async_session_factory(test_engine)


@pytest.fixture
def add_uploaded_document(session_factory):
    """
    Insert a metadata record as the upload flow would.

    Returns:
        Callable: async add(document_id, filename, file_key, content_type)
    """
    from doc_ingest.boundary.db.models.document_model import DocumentModel

    async def _add(
        document_id: str,
        filename: str = "notes.txt",
        file_key: str | None = "uploads/notes.txt",
        content_type: str | None = "text/plain",
    ) -> None:
        now = datetime.now(timezone.utc)
        async with session_factory() as session:
            session.add(
                DocumentModel(
                    id=document_id,
                    filename=filename,
                    file_key=file_key,
                    content_type=content_type,
                    created_at=now,
                    updated_at=now,
                )
            )
            await session.commit()

    return _add


class RecordingEmbeddingService:
    """Mock embedding service; answers every POST /embeddings with a constant vector."""

    def __init__(self, dimension: int = 384, value: float = 0.01) -> None:
        self.dimension = dimension
        self.value = value
        self.texts: list[str] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        if request.url.path == "/health":
            return httpx.Response(200, json={"status": "ok"})
        self.texts.append(request.read().decode())
        return httpx.Response(200, json={"embedding": [self.value] * self.dimension})


@pytest.fixture
def embedding_service() -> RecordingEmbeddingService:
    """Healthy embedding service returning 384-dim vectors."""
    return RecordingEmbeddingService()


@pytest.fixture
def refused_service():
    """Transport handler simulating a service that refuses connections."""

    def _handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("Connection refused", request=request)

    return _handler


@pytest.fixture
def make_embedding_task():
    """
    Build an EmbeddingTask on a mock transport with no inter-call delay.

    Returns:
        Callable: make(handler) -> EmbeddingTask
    """
    from doc_ingest.core.document_processing.tasks import EmbeddingTask

    def _make(handler) -> EmbeddingTask:
        client = httpx.AsyncClient(
            transport=httpx.MockTransport(handler),
            base_url="http://embeddings.test",
        )
        return EmbeddingTask(
            base_url="http://embeddings.test",
            request_delay=0,
            client=client,
            rng=random.Random(42),
        )

    return _make
