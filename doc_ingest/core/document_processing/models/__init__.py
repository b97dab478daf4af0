"""
Models for document processing pipeline.

Exports: DocumentChunk, ExtractionResult, IngestJob, PipelineResult
"""

from .chunk import DocumentChunk
from .extraction import ExtractionResult
from .ingest_job import IngestJob
from .pipeline_result import PipelineResult

__all__ = [
    "DocumentChunk",
    "ExtractionResult",
    "IngestJob",
    "PipelineResult",
]
