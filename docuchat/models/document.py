"""
Document domain models and schemas.

Upload inputs and processing results for the document pipeline.

Dependencies: pydantic
System role: Document API contracts
"""

from enum import Enum

from pydantic import BaseModel, Field

from docuchat.models.common import CamelModel


class DocumentUpload(BaseModel):
    """File received from the client, fully buffered."""

    file_name: str = Field(min_length=1)
    content: bytes
    content_type: str = "application/octet-stream"

    @property
    def size(self) -> int:
        return len(self.content)


class UploadResult(BaseModel):
    """Location of a stored blob."""

    blob_name: str
    url: str


class IndexingStatus(str, Enum):
    """Outcome of waiting for uploaded content to become searchable."""

    READY = "ready"
    NOT_YET_INDEXED = "not_yet_indexed"
    FAILED = "failed"


class IndexingWait(BaseModel):
    """Result of a bounded wait for content, with probe statistics."""

    status: IndexingStatus
    attempts: int = 0
    detail: str | None = None

    @property
    def ready(self) -> bool:
        return self.status == IndexingStatus.READY


class IngestionJob(CamelModel):
    """Snapshot of a knowledge base ingestion job."""

    job_id: str
    status: str
    failure_reasons: list[str] = Field(default_factory=list)
    statistics: dict = Field(default_factory=dict)

    @property
    def finished(self) -> bool:
        return self.status in {"COMPLETE", "FAILED", "STOPPED"}


class DocumentProcessingResult(CamelModel):
    """Result of the complete upload pipeline."""

    success: bool
    document_id: str
    document_name: str
    summary: str | None = None
    topics: list[str] | None = None
    error: str | None = None


class UploadResponseData(CamelModel):
    """Payload of a successful upload."""

    document_id: str
    document_name: str
    summary: str | None = None
    topics: list[str] | None = None


class UploadResponse(CamelModel):
    """Upload endpoint response: status is "success" or "error"."""

    status: str
    message: str
    data: UploadResponseData | None = None


class SessionDocumentsResponse(CamelModel):
    """Documents stored for a session."""

    success: bool = True
    documents: list[dict]


class BlobMetadataResponse(CamelModel):
    """User metadata of a stored document; success=false when it does not exist."""

    success: bool
    metadata: dict[str, str] | None = None
