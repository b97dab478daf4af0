"""
Document processing pipeline for ingestion.

Download, extract, chunk and embed one document, then hand it to the
vector store. The orchestrator lives in .entrypoint (DocumentPipeline).

Dependencies: boto3, pypdf, httpx, pydantic
System role: Document ingestion pipeline
"""

from .configs import (
    DocumentPipelineSettings,
    get_pipeline_settings,
)
from .models import DocumentChunk, ExtractionResult, IngestJob, PipelineResult

__all__ = [
    "DocumentPipelineSettings",
    "get_pipeline_settings",
    "DocumentChunk",
    "ExtractionResult",
    "IngestJob",
    "PipelineResult",
]
