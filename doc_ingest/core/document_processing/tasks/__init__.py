"""
Task modules for document processing pipeline.

Exports: S3DownloadTask, ParsingTask, ChunkingTask, EmbeddingTask
"""

from .chunking_task import ChunkingTask
from .embedding_task import FALLBACK_DIMENSION, EmbeddingTask
from .parsing_task import ParsingTask, normalize_content_type
from .s3_download_task import S3DownloadError, S3DownloadTask

__all__ = [
    "S3DownloadTask",
    "S3DownloadError",
    "ParsingTask",
    "normalize_content_type",
    "ChunkingTask",
    "EmbeddingTask",
    "FALLBACK_DIMENSION",
]
