"""
CRUD operations for the document metadata store.

Exports: BaseCRUD, DocumentCRUD, FileReference, document_crud
"""

from doc_ingest.boundary.db.CRUD.base_crud import BaseCRUD
from doc_ingest.boundary.db.CRUD.document_crud import DocumentCRUD, FileReference, document_crud

__all__ = ["BaseCRUD", "DocumentCRUD", "FileReference", "document_crud"]
