"""
Job API endpoints.

Routes: GET /jobs/{job_id}

Dependencies: doc_ingest.workers
System role: Job status HTTP API
"""

from typing import Callable

from fastapi import APIRouter, Depends

from doc_ingest.api.deps import get_job_status_reader
from doc_ingest.models.document import JobStatusResponse

router = APIRouter(prefix="/jobs", tags=["jobs"])


@router.get("/{job_id}", response_model=JobStatusResponse)
async def get_job_status(
    job_id: str,
    read_status: Callable = Depends(get_job_status_reader),
) -> JobStatusResponse:
    """
    Get job status for polling.

    Unknown ids report "queued": the result backend cannot tell an unknown
    job from one that has not started yet.

    Args:
        job_id: Id returned by POST /documents/ingest
        read_status: Injected status reader

    Returns:
        JobStatusResponse: queued, active, completed or failed
    """
    return JobStatusResponse(job_id=job_id, status=read_status(job_id).value)
