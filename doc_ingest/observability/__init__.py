"""
Observability module.

Provides logging configuration, job correlation ids and safe
structured-logging helpers.
"""

from doc_ingest.observability.correlation import (
    clear_correlation_id,
    get_correlation_id,
    set_correlation_id,
)
from doc_ingest.observability.logger import configure_logging

__all__ = [
    "configure_logging",
    "set_correlation_id",
    "get_correlation_id",
    "clear_correlation_id",
]
