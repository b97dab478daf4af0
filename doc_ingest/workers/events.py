"""
Job event stream.

Turns Celery task signals for the ingest task into JobEvents, logs them and
hands them to registered listeners. Purely observational: listeners cannot
change the outcome of a job.

Dependencies: celery, doc_ingest.observability
System role: Job lifecycle notifications
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable

from celery import states
from celery.signals import task_failure, task_prerun, task_retry, task_success

from doc_ingest.observability.log_utils import log_with_context

logger = logging.getLogger(__name__)

INGEST_TASK_NAME = "doc_ingest.ingest_document"


class JobStatus(str, Enum):
    """Lifecycle of an ingest job."""

    QUEUED = "queued"
    ACTIVE = "active"
    COMPLETED = "completed"
    FAILED = "failed"


_CELERY_STATE_TO_STATUS = {
    states.PENDING: JobStatus.QUEUED,
    states.RECEIVED: JobStatus.QUEUED,
    states.RETRY: JobStatus.QUEUED,
    states.STARTED: JobStatus.ACTIVE,
    states.SUCCESS: JobStatus.COMPLETED,
    states.FAILURE: JobStatus.FAILED,
    states.REVOKED: JobStatus.FAILED,
}


def job_status_from_celery_state(state: str) -> JobStatus:
    """
    Map a Celery task state to a job status.

    Unknown states (custom or not yet reported) count as queued.
    """
    return _CELERY_STATE_TO_STATUS.get(state, JobStatus.QUEUED)


@dataclass
class JobEvent:
    """One transition of an ingest job."""

    task_id: str
    status: JobStatus
    document_id: str | None = None
    attempt: int = 1
    result: dict[str, Any] | None = None
    error: str | None = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


JobEventListener = Callable[[JobEvent], None]

_listeners: list[JobEventListener] = []


def subscribe(listener: JobEventListener) -> Callable[[], None]:
    """
    Register a listener for job events.

    Returns:
        Callable: Call it to unsubscribe
    """
    _listeners.append(listener)

    def _unsubscribe() -> None:
        if listener in _listeners:
            _listeners.remove(listener)

    return _unsubscribe


def publish(event: JobEvent) -> None:
    """Log an event and deliver it to every listener."""
    log_with_context(
        logger,
        logging.ERROR if event.status is JobStatus.FAILED else logging.INFO,
        f"Job {event.status.value}",
        task_id=event.task_id,
        document_id=event.document_id,
        attempt=event.attempt,
        error=event.error,
    )
    for listener in list(_listeners):
        try:
            listener(event)
        except Exception:
            logger.exception("Job event listener failed", extra={"task_id": event.task_id})


def _document_id(args) -> str | None:
    if not args or not isinstance(args[0], dict):
        return None
    payload = args[0]
    return payload.get("document_id") or payload.get("documentId")


def _attempt(request) -> int:
    return (getattr(request, "retries", 0) or 0) + 1


def _is_ingest_task(task) -> bool:
    return getattr(task, "name", None) == INGEST_TASK_NAME


@task_prerun.connect
def _on_prerun(sender=None, task_id=None, task=None, args=None, **kwargs) -> None:
    if not _is_ingest_task(task):
        return
    publish(
        JobEvent(
            task_id=task_id,
            status=JobStatus.ACTIVE,
            document_id=_document_id(args),
            attempt=_attempt(task.request),
        )
    )


@task_success.connect
def _on_success(sender=None, result=None, **kwargs) -> None:
    if not _is_ingest_task(sender):
        return
    request = sender.request
    publish(
        JobEvent(
            task_id=request.id,
            status=JobStatus.COMPLETED,
            document_id=_document_id(request.args),
            attempt=_attempt(request),
            result=result if isinstance(result, dict) else None,
        )
    )


@task_retry.connect
def _on_retry(sender=None, request=None, reason=None, **kwargs) -> None:
    if not _is_ingest_task(sender):
        return
    publish(
        JobEvent(
            task_id=request.id,
            status=JobStatus.QUEUED,
            document_id=_document_id(request.args),
            attempt=_attempt(request),
            error=str(reason),
        )
    )


@task_failure.connect
def _on_failure(sender=None, task_id=None, exception=None, args=None, **kwargs) -> None:
    if not _is_ingest_task(sender):
        return
    publish(
        JobEvent(
            task_id=task_id,
            status=JobStatus.FAILED,
            document_id=_document_id(args),
            attempt=_attempt(sender.request),
            error=str(exception),
        )
    )
