"""
Text extraction result model.

Dependencies: pydantic
System role: Output of the parsing stage
"""

from pydantic import BaseModel, Field


class ExtractionResult(BaseModel):
    """Plain text pulled out of a raw file buffer."""

    text: str = Field(description="Extracted plain text")
    total_pages: int | None = Field(
        default=None,
        description="Page count, only for paginated formats",
    )
    page_offsets: list[int] | None = Field(
        default=None,
        description="Start offset of each page within text",
    )
