"""
Ingest job payload schema.

Validates messages placed on the ingest queue. Producers written against
the camelCase wire shape ({"documentId": ...}) are accepted as well as
snake_case.

Dependencies: pydantic
System role: Data validation and contract definition for queued jobs
"""

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class IngestJob(BaseModel):
    """Queue message asking for one document to be ingested."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "documentId": "6650c1f2a9d3e41b8c7f0a12",
                "filename": "contract.pdf",
                "contentType": "application/pdf",
                "timestamp": "2025-01-01T12:00:00+00:00",
            }
        },
    )

    document_id: str = Field(..., min_length=1, description="Externally assigned document id")
    filename: str | None = Field(default=None, description="Original filename")
    content_type: str | None = Field(default=None, description="Declared MIME type")
    timestamp: str = Field(
        default_factory=_utc_now_iso,
        description="Enqueue time as ISO-8601",
    )
    metadata: dict[str, Any] = Field(
        default_factory=dict,
        description="Caller extras merged into the stored document metadata",
    )
