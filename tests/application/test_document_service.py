"""
Test suite for DocumentProcessingService.

Runs the upload pipeline with mocked storage, indexing and models over an
in-memory session store.

System role: Verification of the upload pipeline
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from botocore.exceptions import EndpointConnectionError

from docuchat.application.services.document_service import DocumentProcessingService
from docuchat.boundary.aws.s3_client import S3DocumentClient
from docuchat.configs.pipeline import PipelineSettings
from docuchat.core.exceptions import IndexingError, SearchError, UploadError
from docuchat.core.summarizer import EMPTY_SUMMARY
from docuchat.models.document import DocumentUpload, IndexingStatus, IndexingWait, UploadResult


@pytest.fixture
def document() -> DocumentUpload:
    return DocumentUpload(file_name="report.pdf", content=b"%PDF-1.4", content_type="application/pdf")


@pytest.fixture
def storage() -> MagicMock:
    mock = MagicMock()
    mock.upload.return_value = UploadResult(
        blob_name="s1/report_1.pdf",
        url="https://docs.s3.us-east-1.amazonaws.com/s1/report_1.pdf",
    )
    return mock


@pytest.fixture
def indexer() -> MagicMock:
    mock = MagicMock()
    mock.trigger_indexing = AsyncMock(return_value="JOB1234567")
    mock.wait_for_content = AsyncMock(return_value=IndexingWait(status=IndexingStatus.READY, attempts=1))
    return mock


@pytest.fixture
def retriever(make_result) -> MagicMock:
    mock = MagicMock()
    mock.get_all_for_session = AsyncMock(
        return_value=[make_result(content="Page one.", page_number=1), make_result(content="Page two.", page_number=2)]
    )
    return mock


@pytest.fixture
def summarizer() -> MagicMock:
    mock = MagicMock()
    mock.summarize = AsyncMock(return_value="A quarterly report.")
    mock.extract_topics = AsyncMock(return_value=["revenue", "costs"])
    return mock


@pytest.fixture
def pipeline() -> PipelineSettings:
    return PipelineSettings(index_wait_timeout=5, index_poll_interval=1, bulk_limit=50)


@pytest.fixture
def document_service(session_service, storage, indexer, retriever, summarizer, pipeline) -> DocumentProcessingService:
    return DocumentProcessingService(session_service, storage, indexer, retriever, summarizer, pipeline)


class TestProcessDocument:
    """Test suite for DocumentProcessingService.process_document()."""

    @pytest.mark.asyncio
    async def test_success_should_record_summary_and_topics(
        self,
        document_service,
        session_service,
        document,
        indexer,
        retriever,
        summarizer,
    ) -> None:
        """Test a full run stores welcome, summary and topics messages."""
        # Act
        result = await document_service.process_document(document, "s1")

        # Assert
        assert result.success is True
        assert result.document_id == "s1-report.pdf"
        assert result.summary == "A quarterly report."
        assert result.topics == ["revenue", "costs"]

        indexer.wait_for_content.assert_awaited_once_with(
            "s1", "report.pdf", timeout=5, poll_interval=1, job_id="JOB1234567"
        )
        retriever.get_all_for_session.assert_awaited_once_with("s1", file_name="report.pdf", limit=50)
        summarizer.summarize.assert_awaited_once_with("Page one.\n\nPage two.", "report.pdf")

        session = await session_service.get_session("s1")
        contents = [m.content for m in session.messages]
        assert len(contents) == 3
        assert contents[1] == "Document Summary: report.pdf\n\nA quarterly report."
        assert contents[2] == "Key Topics in report.pdf: revenue, costs"
        assert session.messages[1].id.startswith("summary-")
        assert session.messages[2].id.startswith("topics-")
        assert await session_service.get_document_summary("s1") == contents[1]

    @pytest.mark.asyncio
    async def test_upload_failure_should_abort(self, document_service, storage, indexer, document) -> None:
        """Test storage failures return success=False before indexing."""
        storage.upload.side_effect = UploadError("bucket gone", file_name="report.pdf")

        result = await document_service.process_document(document, "s1")

        assert result.success is False
        assert result.document_id == ""
        assert result.error == "bucket gone"
        indexer.trigger_indexing.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unreachable_bucket_should_abort(
        self,
        session_service,
        indexer,
        retriever,
        summarizer,
        pipeline,
        document,
    ) -> None:
        """Test a connection failure while checking the bucket returns success=False."""
        boto_client = MagicMock()
        boto_client.head_bucket.side_effect = EndpointConnectionError(endpoint_url="https://docs.s3.eu-west-1.amazonaws.com")
        storage = S3DocumentClient("docs", region="eu-west-1", client=boto_client)
        service = DocumentProcessingService(session_service, storage, indexer, retriever, summarizer, pipeline)

        result = await service.process_document(document, "s1")

        assert result.success is False
        assert result.document_id == ""
        assert result.error.startswith("Document bucket unavailable")
        boto_client.put_object.assert_not_called()
        indexer.trigger_indexing.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_indexing_start_failure_should_abort(self, document_service, indexer, document) -> None:
        indexer.trigger_indexing.side_effect = IndexingError("no data source", operation="ingest")

        result = await document_service.process_document(document, "s1")

        assert result.success is False
        assert result.error == "no data source"

    @pytest.mark.asyncio
    async def test_failed_ingestion_should_abort(self, document_service, indexer, summarizer, document) -> None:
        indexer.wait_for_content.return_value = IndexingWait(
            status=IndexingStatus.FAILED, attempts=1, detail="Unsupported file"
        )

        result = await document_service.process_document(document, "s1")

        assert result.success is False
        assert result.error == "Unsupported file"
        summarizer.summarize.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_not_yet_indexed_should_still_succeed(
        self,
        document_service,
        session_service,
        indexer,
        retriever,
        summarizer,
        document,
    ) -> None:
        """Test a deadline miss continues without summary or topics."""
        # Arrange
        indexer.wait_for_content.return_value = IndexingWait(status=IndexingStatus.NOT_YET_INDEXED, attempts=5)
        retriever.get_all_for_session.return_value = []

        # Act
        result = await document_service.process_document(document, "s1")

        # Assert
        assert result.success is True
        assert result.summary is None
        assert result.topics is None
        summarizer.summarize.assert_not_awaited()
        session = await session_service.get_session("s1")
        assert len(session.messages) == 1

    @pytest.mark.asyncio
    async def test_extraction_error_should_skip_summary(self, document_service, retriever, summarizer, document) -> None:
        retriever.get_all_for_session.side_effect = SearchError("throttled")

        result = await document_service.process_document(document, "s1")

        assert result.success is True
        assert result.summary is None
        summarizer.extract_topics.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_summary_failure_should_keep_topics(
        self,
        document_service,
        session_service,
        summarizer,
        document,
    ) -> None:
        """Test a placeholder summary is dropped while topics are kept."""
        summarizer.summarize.return_value = EMPTY_SUMMARY

        result = await document_service.process_document(document, "s1")

        assert result.success is True
        assert result.summary is None
        assert result.topics == ["revenue", "costs"]
        session = await session_service.get_session("s1")
        assert session.messages[-1].content == "Key Topics in report.pdf: revenue, costs"

    @pytest.mark.asyncio
    async def test_empty_topics_should_be_none(self, document_service, summarizer, document) -> None:
        summarizer.extract_topics.return_value = []

        result = await document_service.process_document(document, "s1")

        assert result.topics is None

    @pytest.mark.asyncio
    async def test_existing_session_should_not_get_second_welcome(
        self,
        document_service,
        session_service,
        document,
    ) -> None:
        # Arrange
        await session_service.initialize_session("s1", "report.pdf")

        # Act
        await document_service.process_document(document, "s1")

        # Assert
        session = await session_service.get_session("s1")
        assert sum(m.id.startswith("service-welcome-") for m in session.messages) == 1
