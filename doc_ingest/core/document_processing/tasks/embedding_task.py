"""
Embedding generation task backed by an external HTTP service.

Chunks are embedded one at a time with a pause between calls to stay under
the service's rate limit. When the service refuses connections a random
vector of the expected dimension is used instead so the chunk stays
searchable; any other failure leaves the chunk without an embedding.

Dependencies: httpx
System role: Third stage of document ingestion pipeline
"""

import asyncio
import logging
import random

import httpx

from doc_ingest.core.exceptions import EmbeddingUnavailableError

from ..models import DocumentChunk

logger = logging.getLogger(__name__)

FALLBACK_DIMENSION = 384


class EmbeddingTask:
    """Generate chunk embeddings through POST /embeddings."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        fallback_dimension: int = FALLBACK_DIMENSION,
        request_delay: float = 0.1,
        health_timeout: float = 5.0,
        client: httpx.AsyncClient | None = None,
        rng: random.Random | None = None,
    ) -> None:
        """
        Initialize embedding task.

        Args:
            base_url: Base URL of the embedding service
            timeout: Per-call timeout in seconds
            fallback_dimension: Length of locally generated vectors
            request_delay: Seconds to wait between consecutive chunk calls
            health_timeout: Timeout for the health check
            client: Preconfigured HTTP client (created lazily when None)
            rng: Random source for fallback vectors

        Raises:
            ValueError: When base_url is empty
        """
        if not base_url:
            raise ValueError("base_url cannot be empty")

        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._fallback_dimension = fallback_dimension
        self._request_delay = request_delay
        self._health_timeout = health_timeout
        self._client = client
        self._rng = rng or random.Random()

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self._base_url,
                headers={"Content-Type": "application/json"},
            )
        return self._client

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def embed(self, chunks: list[DocumentChunk]) -> list[DocumentChunk]:
        """
        Attach embeddings to chunks where possible.

        Args:
            chunks: Chunks in source order

        Returns:
            list[DocumentChunk]: Same chunks, same order; embedding is None
            for chunks the service could not embed
        """
        logger.info("Generating embeddings for chunks", extra={"chunk_count": len(chunks)})

        embedded: list[DocumentChunk] = []
        for position, chunk in enumerate(chunks):
            if position and self._request_delay > 0:
                await asyncio.sleep(self._request_delay)

            try:
                vector = await self.embed_text(chunk.text)
            except EmbeddingUnavailableError as e:
                logger.error(
                    "Failed to generate embedding for chunk",
                    extra={"chunk_id": chunk.id, "error": str(e)},
                )
                embedded.append(chunk)
                continue

            embedded.append(chunk.model_copy(update={"embedding": vector}))

        logger.info(
            "Embedding generation completed",
            extra={
                "total_chunks": len(chunks),
                "successful_embeddings": sum(1 for c in embedded if c.embedding is not None),
            },
        )
        return embedded

    async def embed_text(self, text: str) -> list[float]:
        """
        Embed one chunk of text.

        Args:
            text: Text to embed

        Returns:
            list[float]: Service vector, or a fallback vector when the
            service is unreachable

        Raises:
            EmbeddingUnavailableError: On any failure other than a refused connection
        """
        try:
            return await self._request_embedding(text)
        except httpx.ConnectError:
            logger.warning(
                "Embedding service not available, using fallback embedding generation",
                extra={"base_url": self._base_url},
            )
            return self.fallback_embedding()

    async def embed_query(self, text: str) -> list[float]:
        """
        Embed a search query.

        A random vector would rank the store against noise, so a refused
        connection is an error here rather than a fallback.

        Args:
            text: Query text

        Returns:
            list[float]: Service vector

        Raises:
            EmbeddingUnavailableError: When the service cannot embed the query
        """
        try:
            return await self._request_embedding(text)
        except httpx.ConnectError as e:
            raise EmbeddingUnavailableError(f"Embedding service unreachable: {e}") from e

    async def _request_embedding(self, text: str) -> list[float]:
        # ConnectError propagates; callers decide whether to fall back
        try:
            response = await self._get_client().post(
                "/embeddings",
                json={"text": text},
                timeout=self._timeout,
            )
            response.raise_for_status()
            return self._parse_embedding(response.json())
        except httpx.ConnectError:
            raise
        except (httpx.HTTPError, ValueError) as e:
            raise EmbeddingUnavailableError(f"Embedding request failed: {e}") from e

    def fallback_embedding(self) -> list[float]:
        """
        Build a placeholder vector.

        Returns:
            list[float]: fallback_dimension components uniform in [-0.5, 0.5)
        """
        return [self._rng.random() - 0.5 for _ in range(self._fallback_dimension)]

    async def is_available(self) -> bool:
        """Return True if GET /health answers 200."""
        try:
            response = await self._get_client().get("/health", timeout=self._health_timeout)
        except httpx.HTTPError:
            return False
        return response.status_code == 200

    @staticmethod
    def _parse_embedding(payload) -> list[float]:
        embedding = payload.get("embedding") if isinstance(payload, dict) else None
        if not isinstance(embedding, list) or not embedding:
            raise ValueError("response has no 'embedding' list")
        if not all(isinstance(v, (int, float)) and not isinstance(v, bool) for v in embedding):
            raise ValueError("embedding contains non-numeric values")
        return [float(v) for v in embedding]
