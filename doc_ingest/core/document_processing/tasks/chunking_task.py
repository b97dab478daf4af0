"""
Sliding-window text chunking task.

Splits extracted text into fixed-size overlapping windows so the tail of one
chunk reappears at the head of the next. Near-empty windows are dropped and
chunk indices stay contiguous regardless.

Dependencies: bisect
System role: Second stage of document ingestion pipeline
"""

import bisect
import logging

from ..models import DocumentChunk
from ..models.chunk import make_chunk_id

logger = logging.getLogger(__name__)


class ChunkingTask:
    """Split text into overlapping fixed-size chunks."""

    def __init__(
        self,
        chunk_size: int = 500,
        chunk_overlap: int = 50,
        min_chunk_length: int = 10,
    ) -> None:
        """
        Initialize chunking task with window configuration.

        Args:
            chunk_size: Window size in characters
            chunk_overlap: Characters shared by consecutive windows
            min_chunk_length: Minimum trimmed length for a window to be kept

        Raises:
            ValueError: When the window cannot advance
        """
        if chunk_size <= 0:
            raise ValueError("chunk_size must be positive")
        if not 0 <= chunk_overlap < chunk_size:
            raise ValueError("chunk_overlap must be in [0, chunk_size)")

        self._chunk_size = chunk_size
        self._chunk_overlap = chunk_overlap
        self._min_chunk_length = min_chunk_length

    @property
    def step(self) -> int:
        return self._chunk_size - self._chunk_overlap

    def chunk(
        self,
        text: str,
        document_id: str,
        page_offsets: list[int] | None = None,
    ) -> list[DocumentChunk]:
        """
        Split text into chunks.

        Args:
            text: Full extracted text
            document_id: Parent document id used to derive chunk ids
            page_offsets: Start offset of every page in text, ascending

        Returns:
            list[DocumentChunk]: Chunks in source order, indexed from 0
        """
        chunks: list[DocumentChunk] = []
        text_length = len(text)

        for start in range(0, text_length, self.step):
            end = min(start + self._chunk_size, text_length)
            segment = text[start:end].strip()
            if len(segment) < self._min_chunk_length:
                continue

            chunk_index = len(chunks)
            chunks.append(
                DocumentChunk(
                    id=make_chunk_id(document_id, chunk_index),
                    document_id=document_id,
                    text=segment,
                    chunk_index=chunk_index,
                    page_number=self._page_for(start, page_offsets),
                    metadata={"start_char": start, "end_char": end},
                )
            )

        logger.info(
            "Text chunking completed",
            extra={
                "document_id": document_id,
                "text_length": text_length,
                "chunk_count": len(chunks),
            },
        )
        return chunks

    @staticmethod
    def _page_for(offset: int, page_offsets: list[int] | None) -> int | None:
        # Pages are 1-based; a chunk belongs to the page it starts on
        if not page_offsets:
            return None
        return max(bisect.bisect_right(page_offsets, offset), 1)
