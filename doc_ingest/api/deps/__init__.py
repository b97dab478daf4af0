"""API-specific dependencies."""

# Re-export common dependencies
from .dependencies import (
    get_embedding_task,
    get_job_enqueuer,
    get_job_status_reader,
    get_pipeline,
    get_service_cache,
    get_vector_store,
)

__all__ = [
    "get_embedding_task",
    "get_job_enqueuer",
    "get_job_status_reader",
    "get_pipeline",
    "get_service_cache",
    "get_vector_store",
]
