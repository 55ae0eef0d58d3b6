"""
Document API endpoints.

Routes:
- POST /documents/upload - Upload and process a document (multipart)
- GET /documents/session/{id} - List a session's stored documents
- GET /documents/metadata?blobName= - Stored metadata of one document
- GET /documents/stats - Bucket document count and size
- GET /documents/indexing/jobs - Recent ingestion jobs
- GET /documents/indexing/jobs/{job_id} - Ingestion job status, optionally waiting for completion

Dependencies: fastapi, docuchat.application.services.document_service
System role: Document upload HTTP API
"""

import logging

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse

from docuchat.api.deps import ServiceContainer, get_container, get_document_service, get_indexer, get_storage
from docuchat.application.services.document_service import DocumentProcessingService
from docuchat.boundary.aws.s3_client import S3DocumentClient
from docuchat.core.exceptions import ValidationError
from docuchat.core.indexing import IndexerPoller
from docuchat.models.document import (
    BlobMetadataResponse,
    DocumentUpload,
    IndexingWait,
    IngestionJob,
    SessionDocumentsResponse,
    UploadResponse,
    UploadResponseData,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/documents", tags=["documents"])


@router.post("/upload", response_model=UploadResponse)
async def upload_document(
    file: UploadFile | None = File(default=None),
    session_id: str | None = Form(default=None, alias="sessionId"),
    document_service: DocumentProcessingService = Depends(get_document_service),
):
    """
    Upload a document and run the processing pipeline.

    Returns 500 with status="error" when storage or indexing fails.

    Raises:
        ValidationError: Missing file or session id (400)
    """
    if file is None or not file.filename:
        raise ValidationError("No files received.", field="file")
    if not session_id:
        raise ValidationError("Session ID is required.", field="sessionId")

    document = DocumentUpload(
        file_name=file.filename,
        content=await file.read(),
        content_type=file.content_type or "application/octet-stream",
    )
    result = await document_service.process_document(document, session_id)

    if not result.success:
        body = UploadResponse(status="error", message=result.error or "Document processing failed")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=body.model_dump(by_alias=True, exclude_none=True),
        )

    return UploadResponse(
        status="success",
        message="Document processed successfully",
        data=UploadResponseData(
            document_id=result.document_id,
            document_name=result.document_name,
            summary=result.summary,
            topics=result.topics,
        ),
    )


@router.get("/session/{session_id}", response_model=SessionDocumentsResponse)
async def list_session_documents(
    session_id: str,
    storage: S3DocumentClient = Depends(get_storage),
) -> SessionDocumentsResponse:
    """List documents uploaded for a session."""
    documents = await run_in_threadpool(storage.list_session_blobs, session_id)
    return SessionDocumentsResponse(documents=documents)


@router.get("/metadata", response_model=BlobMetadataResponse)
async def blob_metadata(
    blob_name: str = Query(alias="blobName", min_length=1),
    storage: S3DocumentClient = Depends(get_storage),
) -> BlobMetadataResponse:
    """Metadata of a stored document; success=false when the key does not exist."""
    metadata = await run_in_threadpool(storage.get_blob_metadata, blob_name)
    return BlobMetadataResponse(success=metadata is not None, metadata=metadata)


@router.get("/stats")
async def bucket_stats(storage: S3DocumentClient = Depends(get_storage)) -> dict:
    """Document count and total bytes in the bucket."""
    return await run_in_threadpool(storage.get_bucket_stats)


@router.get("/indexing/jobs", response_model=list[IngestionJob])
async def list_indexing_jobs(indexer: IndexerPoller = Depends(get_indexer)) -> list[IngestionJob]:
    """Recent ingestion jobs, newest first."""
    return await indexer.list_indexing_jobs()


@router.get("/indexing/jobs/{job_id}")
async def get_indexing_job(
    job_id: str,
    wait: bool = Query(default=False),
    container: ServiceContainer = Depends(get_container),
) -> IngestionJob | IndexingWait:
    """
    Read an ingestion job, or wait for it to finish when wait=true.

    Waiting polls at the pipeline's completion timeout (default 60 s).
    """
    if wait:
        return await container.indexer.wait_for_indexer_completion(
            job_id,
            timeout=container.settings.pipeline.indexer_completion_timeout,
        )
    return await container.indexer.get_indexing_status(job_id)
