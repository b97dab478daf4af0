"""
Document metadata lookups.

Resolves a document id to the object store key and declared filename the
pipeline needs before download.

Dependencies: sqlalchemy, doc_ingest.boundary.db.models
System role: Document metadata read path
"""

from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from doc_ingest.boundary.db.CRUD.base_crud import BaseCRUD
from doc_ingest.boundary.db.models.document_model import DocumentModel


class FileReference(BaseModel):
    """Where a document's bytes live and what it was called."""

    document_id: str
    file_key: str | None
    filename: str
    content_type: str | None = None


class DocumentCRUD(BaseCRUD[DocumentModel]):
    """Lookups on the uploaded documents table."""

    def __init__(self) -> None:
        """Initialize DocumentCRUD with DocumentModel."""
        super().__init__(DocumentModel)

    async def get_file_reference(
        self,
        session: AsyncSession,
        document_id: str,
    ) -> FileReference | None:
        """
        Look up the file reference for a document.

        Args:
            session: Async database session
            document_id: Document id

        Returns:
            FileReference if the record exists (file_key may still be None),
            None otherwise
        """
        document = await self.get_by_id(session, document_id)
        if document is None:
            return None
        return FileReference(
            document_id=document.id,
            file_key=document.file_key,
            filename=document.filename,
            content_type=document.content_type,
        )


document_crud = DocumentCRUD()
