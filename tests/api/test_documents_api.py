"""
Test suite for document endpoints.

System role: Verification of the upload HTTP contract
"""

from unittest.mock import AsyncMock

import pytest

from docuchat.core.exceptions import SearchError
from docuchat.models.document import DocumentProcessingResult, IndexingStatus, IndexingWait, IngestionJob


class TestUploadEndpoint:
    """Test suite for POST /documents/upload."""

    @pytest.mark.asyncio
    async def test_success_should_return_summary_and_topics(self, client, document_service) -> None:
        # Arrange
        document_service.process_document.return_value = DocumentProcessingResult(
            success=True,
            document_id="s1-spec.txt",
            document_name="spec.txt",
            summary="Short.",
            topics=["a", "b"],
        )

        # Act
        response = await client.post(
            "/api/v1/documents/upload",
            files={"file": ("spec.txt", b"hello world", "text/plain")},
            data={"sessionId": "s1"},
        )

        # Assert
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "success"
        assert body["data"]["documentId"] == "s1-spec.txt"
        assert body["data"]["topics"] == ["a", "b"]
        document, session_id = document_service.process_document.await_args.args
        assert session_id == "s1"
        assert document.file_name == "spec.txt"
        assert document.content == b"hello world"
        assert document.content_type == "text/plain"

    @pytest.mark.asyncio
    async def test_pipeline_failure_should_return_500(self, client, document_service) -> None:
        document_service.process_document.return_value = DocumentProcessingResult(
            success=False,
            document_id="",
            document_name="spec.txt",
            error="bucket gone",
        )

        response = await client.post(
            "/api/v1/documents/upload",
            files={"file": ("spec.txt", b"hello", "text/plain")},
            data={"sessionId": "s1"},
        )

        assert response.status_code == 500
        assert response.json() == {"status": "error", "message": "bucket gone"}

    @pytest.mark.asyncio
    async def test_missing_file_should_return_400(self, client) -> None:
        response = await client.post("/api/v1/documents/upload", data={"sessionId": "s1"})

        assert response.status_code == 400
        assert response.json()["error"] == "No files received."

    @pytest.mark.asyncio
    async def test_missing_session_should_return_400(self, client) -> None:
        response = await client.post(
            "/api/v1/documents/upload",
            files={"file": ("spec.txt", b"hello", "text/plain")},
        )

        assert response.status_code == 400
        assert response.json()["error"] == "Session ID is required."


class TestIndexingEndpoints:
    """Test suite for document listing and indexing job routes."""

    @pytest.mark.asyncio
    async def test_session_documents(self, client, container) -> None:
        container.storage.list_session_blobs.return_value = [{"key": "s1/a_1.pdf", "size": 10}]

        response = await client.get("/api/v1/documents/session/s1")

        assert response.json() == {"success": True, "documents": [{"key": "s1/a_1.pdf", "size": 10}]}

    @pytest.mark.asyncio
    async def test_job_status(self, client, container) -> None:
        container.indexer.get_indexing_status = AsyncMock(
            return_value=IngestionJob(job_id="JOB1234567", status="IN_PROGRESS")
        )

        response = await client.get("/api/v1/documents/indexing/jobs/JOB1234567")

        assert response.json()["status"] == "IN_PROGRESS"

    @pytest.mark.asyncio
    async def test_job_wait_should_use_completion_timeout(self, client, container) -> None:
        container.settings.pipeline.indexer_completion_timeout = 60.0
        container.indexer.wait_for_indexer_completion = AsyncMock(
            return_value=IndexingWait(status=IndexingStatus.READY)
        )

        response = await client.get("/api/v1/documents/indexing/jobs/JOB1234567", params={"wait": "true"})

        assert response.json()["status"] == "ready"
        container.indexer.wait_for_indexer_completion.assert_awaited_once_with("JOB1234567", timeout=60.0)

    @pytest.mark.asyncio
    async def test_listing_failure_should_map_to_502(self, client, container) -> None:
        """Test a failed job listing surfaces as a structured 502."""
        container.indexer.list_indexing_jobs = AsyncMock(side_effect=SearchError("denied", operation="list"))

        response = await client.get("/api/v1/documents/indexing/jobs")

        assert response.status_code == 502
        assert response.json() == {
            "success": False,
            "error": "denied",
            "details": {"operation": "list"},
        }


class TestMetadataEndpoint:
    """Test suite for GET /documents/metadata."""

    @pytest.mark.asyncio
    async def test_should_return_stored_metadata(self, client, container) -> None:
        container.storage.get_blob_metadata.return_value = {"sessionid": "s1", "originalname": "my file.pdf"}

        response = await client.get("/api/v1/documents/metadata", params={"blobName": "s1/my file_1.pdf"})

        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "metadata": {"sessionid": "s1", "originalname": "my file.pdf"},
        }
        container.storage.get_blob_metadata.assert_called_once_with("s1/my file_1.pdf")

    @pytest.mark.asyncio
    async def test_missing_blob_should_report_failure(self, client, container) -> None:
        container.storage.get_blob_metadata.return_value = None

        response = await client.get("/api/v1/documents/metadata", params={"blobName": "s1/gone.pdf"})

        assert response.status_code == 200
        assert response.json() == {"success": False, "metadata": None}
