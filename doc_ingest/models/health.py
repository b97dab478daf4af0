"""
Health check schemas.

Dependencies: pydantic
System role: Health API contracts
"""

from typing import Literal

from pydantic import BaseModel

from doc_ingest.boundary.vdb.vector_schemas import StoreStats


class PipelineHealthResponse(BaseModel):
    """Pipeline classification with per-service reachability."""

    status: Literal["healthy", "degraded"]
    services: dict[str, bool]


class VectorStoreHealthResponse(BaseModel):
    """Vector store connectivity and counts."""

    connected: bool
    stats: StoreStats | None = None
