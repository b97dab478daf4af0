"""
Celery workers module.

Background ingestion of uploaded documents from the "ingest" queue.

Dependencies: celery, doc_ingest.configs
System role: Background task processing
"""

from celery import Celery

from doc_ingest.configs import get_settings

settings = get_settings()
celery_config = settings.celery

celery_app = Celery(
    "doc_ingest",
    broker=celery_config.broker_url,
    backend=celery_config.result_backend_url,
    include=["doc_ingest.workers.tasks.document_ingestion"],
)

celery_app.conf.update(
    task_serializer=celery_config.task_serializer,
    result_serializer=celery_config.result_serializer,
    accept_content=celery_config.accept_content,
    timezone=celery_config.timezone,
    task_default_queue=celery_config.queue_name,
    worker_concurrency=celery_config.worker_concurrency,
    # A job is only acknowledged once it finished, so a crashed worker's job is redelivered
    task_acks_late=True,
    worker_prefetch_multiplier=1,
    task_track_started=True,
)

# Signal handlers register on import
from doc_ingest.workers import events, runtime  # noqa: E402,F401

__all__ = ["celery_app"]
