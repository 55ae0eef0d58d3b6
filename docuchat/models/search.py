"""
Search result schemas.

Ephemeral passages returned by the knowledge base; never persisted.

Dependencies: pydantic
System role: Retrieval data structures
"""

from pydantic import Field

from docuchat.models.common import CamelModel


class SearchMetadata(CamelModel):
    """Passage metadata as indexed alongside the uploaded blob."""

    file_name: str = Field(description="Original file name of the source document")
    session_id: str = Field(description="Session the document belongs to")
    page_number: int | None = Field(default=None, description="Page number in source")
    section: str | None = Field(default=None, description="Section heading if available")


class DocumentSearchResult(CamelModel):
    """Single passage with the index's relevance score."""

    content: str
    metadata: SearchMetadata
    score: float = 0.0
