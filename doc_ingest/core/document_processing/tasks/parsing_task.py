"""
Text extraction task.

Turns a raw file buffer into plain text based on its declared content type.
PDFs are parsed page by page with pypdf; everything else is decoded as UTF-8,
including unknown types, so unusual uploads are still indexed.

Dependencies: pypdf
System role: First stage of document ingestion pipeline
"""

import io
import logging
from pathlib import PurePosixPath

from pypdf import PdfReader

from doc_ingest.core.exceptions import ExtractionError

from ..models import ExtractionResult

logger = logging.getLogger(__name__)

PDF_CONTENT_TYPE = "application/pdf"
TEXT_CONTENT_TYPE = "text/plain"

_SUFFIX_CONTENT_TYPES = {
    ".pdf": PDF_CONTENT_TYPE,
    ".txt": TEXT_CONTENT_TYPE,
}


def normalize_content_type(content_type: str | None, filename: str | None = None) -> str | None:
    """
    Reduce a MIME type to its lowercase base type.

    Falls back to the filename suffix when no content type was declared.

    Args:
        content_type: Declared type, possibly with parameters ("; charset=...")
        filename: Original filename

    Returns:
        str | None: Base content type, or None when nothing is known
    """
    if content_type:
        base = content_type.split(";", 1)[0].strip().lower()
        if base:
            return base
    if filename:
        return _SUFFIX_CONTENT_TYPES.get(PurePosixPath(filename).suffix.lower())
    return None


class ParsingTask:
    """Extract plain text from PDF, text and unknown buffers."""

    def extract(
        self,
        buffer: bytes,
        content_type: str | None,
        filename: str | None = None,
        document_id: str | None = None,
    ) -> ExtractionResult:
        """
        Extract text from a raw buffer.

        Args:
            buffer: Raw file bytes
            content_type: Declared MIME type
            filename: Original filename, used when content_type is missing
            document_id: Document id for error context

        Returns:
            ExtractionResult: Text plus page information for PDFs

        Raises:
            ExtractionError: When the buffer cannot be parsed at all
        """
        resolved = normalize_content_type(content_type, filename)

        if resolved == PDF_CONTENT_TYPE:
            logger.info("Extracting text from PDF", extra={"document_id": document_id})
            return self._extract_pdf(buffer, document_id)

        if resolved != TEXT_CONTENT_TYPE:
            logger.warning(
                "Unknown file type, attempting to read as text",
                extra={"document_id": document_id, "content_type": content_type},
            )
        return ExtractionResult(text=self._decode_text(buffer, document_id, content_type))

    def _extract_pdf(self, buffer: bytes, document_id: str | None) -> ExtractionResult:
        try:
            reader = PdfReader(io.BytesIO(buffer))
            page_texts = [page.extract_text() or "" for page in reader.pages]
        except Exception as e:
            raise ExtractionError(
                f"Failed to parse PDF: {e}",
                document_id=document_id,
                content_type=PDF_CONTENT_TYPE,
            ) from e

        page_offsets = []
        position = 0
        for page_text in page_texts:
            page_offsets.append(position)
            position += len(page_text) + 1

        return ExtractionResult(
            text="\n".join(page_texts),
            total_pages=len(page_texts),
            page_offsets=page_offsets,
        )

    def _decode_text(
        self,
        buffer: bytes,
        document_id: str | None,
        content_type: str | None,
    ) -> str:
        try:
            return buffer.decode("utf-8")
        except UnicodeDecodeError:
            logger.warning(
                "Buffer is not valid UTF-8, replacing undecodable bytes",
                extra={"document_id": document_id, "content_type": content_type},
            )
        except (AttributeError, TypeError) as e:
            raise ExtractionError(
                f"Cannot decode buffer of type {type(buffer).__name__}",
                document_id=document_id,
                content_type=content_type,
            ) from e
        return buffer.decode("utf-8", errors="replace")
