"""
Document processing service.

Runs the upload pipeline: store the file, trigger indexing, wait for the
content to become searchable, extract it, summarize it, and record the
results in the chat session.

Dependencies: fastapi.concurrency, docuchat.core, docuchat.boundary.aws
System role: Document upload orchestration
"""

import logging

from fastapi.concurrency import run_in_threadpool

from docuchat.application.services.session_service import SessionService
from docuchat.boundary.aws.s3_client import S3DocumentClient
from docuchat.boundary.db.base import utcnow
from docuchat.configs.pipeline import PipelineSettings
from docuchat.core.exceptions import IndexingError, PersistenceError, SearchError, UploadError
from docuchat.core.indexing import IndexerPoller
from docuchat.core.retriever import ContentRetriever
from docuchat.core.summarizer import EMPTY_SUMMARY, DocumentSummarizer
from docuchat.models.document import DocumentProcessingResult, DocumentUpload, IndexingStatus
from docuchat.models.session import Message

logger = logging.getLogger(__name__)


class DocumentProcessingService:
    """
    Document upload pipeline.

    Storage and indexing failures end the run with success=False.
    Missing content, summary failures and session update failures only
    drop the corresponding fields.
    """

    def __init__(
        self,
        session_service: SessionService,
        storage: S3DocumentClient,
        indexer: IndexerPoller,
        retriever: ContentRetriever,
        summarizer: DocumentSummarizer,
        pipeline: PipelineSettings,
    ) -> None:
        """
        Initialize document processing service.

        Args:
            session_service: Session store for summary/topic messages
            storage: S3 document client
            indexer: Ingestion trigger and poller
            retriever: Content retriever for extraction
            summarizer: Summary and topic generator
            pipeline: Pipeline timing and size settings
        """
        self.session_service = session_service
        self._storage = storage
        self._indexer = indexer
        self._retriever = retriever
        self._summarizer = summarizer
        self._pipeline = pipeline

    async def process_document(self, document: DocumentUpload, session_id: str) -> DocumentProcessingResult:
        """
        Process an uploaded document end to end.

        Flow:
        1. Upload to S3 under the session prefix
        2. Start a knowledge base ingestion job
        3. Wait (bounded) for the content to become searchable
        4. Extract the session's passages for this file
        5. Summarize and extract topics
        6. Append summary/topics to the chat session

        Args:
            document: Buffered upload
            session_id: Owning session

        Returns:
            DocumentProcessingResult: documentId is `<sessionId>-<fileName>` on success
        """
        file_name = document.file_name
        logger.info(
            f"{__name__}:process_document - Starting",
            extra={"session_id": session_id, "file_name": file_name, "size": document.size},
        )

        try:
            upload = await run_in_threadpool(self._storage.upload, document, session_id)
            logger.info(f"{__name__}:process_document - Uploaded", extra={"blob_name": upload.blob_name})

            job_id = await self._indexer.trigger_indexing()
            wait = await self._indexer.wait_for_content(
                session_id,
                file_name,
                timeout=self._pipeline.index_wait_timeout,
                poll_interval=self._pipeline.index_poll_interval,
                job_id=job_id,
            )
        except (UploadError, IndexingError) as e:
            logger.error(f"{__name__}:process_document - Pipeline aborted: {e}", extra={"session_id": session_id})
            return DocumentProcessingResult(
                success=False,
                document_id="",
                document_name=file_name,
                error=e.message,
            )

        if wait.status == IndexingStatus.FAILED:
            return DocumentProcessingResult(
                success=False,
                document_id="",
                document_name=file_name,
                error=wait.detail or "Document indexing failed",
            )

        content = await self._extract_content(session_id, file_name)

        summary: str | None = None
        topics: list[str] | None = None
        if content:
            summary = await self._summarizer.summarize(content, file_name)
            if summary == EMPTY_SUMMARY:
                summary = None
            topics = await self._summarizer.extract_topics(content) or None

        await self._record_in_session(session_id, file_name, summary, topics)

        logger.info(f"{__name__}:process_document - Completed", extra={"session_id": session_id})
        return DocumentProcessingResult(
            success=True,
            document_id=f"{session_id}-{file_name}",
            document_name=file_name,
            summary=summary,
            topics=topics,
        )

    async def _extract_content(self, session_id: str, file_name: str) -> str | None:
        try:
            results = await self._retriever.get_all_for_session(
                session_id,
                file_name=file_name,
                limit=self._pipeline.bulk_limit,
            )
        except SearchError as e:
            logger.error(f"{__name__}:_extract_content - {e}")
            return None

        if not results:
            logger.warning(f"{__name__}:_extract_content - No content found", extra={"session_id": session_id})
            return None
        return "\n\n".join(r.content for r in results)

    async def _record_in_session(
        self,
        session_id: str,
        file_name: str,
        summary: str | None,
        topics: list[str] | None,
    ) -> None:
        millis = int(utcnow().timestamp() * 1000)
        try:
            await self.session_service.initialize_session(session_id, file_name)
            if summary:
                await self.session_service.add_message(
                    session_id,
                    Message(
                        id=f"summary-{millis}",
                        content=f"Document Summary: {file_name}\n\n{summary}",
                        is_user=False,
                    ),
                )
            if topics:
                await self.session_service.add_message(
                    session_id,
                    Message(
                        id=f"topics-{millis}",
                        content=f"Key Topics in {file_name}: {', '.join(topics)}",
                        is_user=False,
                    ),
                )
        except PersistenceError as e:
            logger.error(f"{__name__}:_record_in_session - Session update failed: {e}")
