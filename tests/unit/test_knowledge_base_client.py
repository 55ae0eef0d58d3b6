"""
Test suite for KnowledgeBaseClient.

System role: Verification of the managed search adapter
"""

from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError

from docuchat.boundary.aws.knowledge_base_client import KnowledgeBaseClient
from docuchat.core.exceptions import IndexingError, SearchError


def _client_error(code: str, operation: str) -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": code}}, operation)


@pytest.fixture
def agent() -> MagicMock:
    return MagicMock()


@pytest.fixture
def runtime() -> MagicMock:
    return MagicMock()


@pytest.fixture
def kb_client(agent, runtime) -> KnowledgeBaseClient:
    return KnowledgeBaseClient("KB12345678", "DS12345678", agent_client=agent, runtime_client=runtime)


class TestIngestion:
    """Test suite for ingestion job calls."""

    def test_start_should_return_job_id(self, kb_client, agent) -> None:
        agent.start_ingestion_job.return_value = {"ingestionJob": {"ingestionJobId": "JOB1234567"}}

        assert kb_client.start_ingestion_job() == "JOB1234567"
        agent.start_ingestion_job.assert_called_once_with(knowledgeBaseId="KB12345678", dataSourceId="DS12345678")

    def test_start_conflict_should_return_none(self, kb_client, agent) -> None:
        """Test an already-running job is not an error."""
        agent.start_ingestion_job.side_effect = _client_error("ConflictException", "StartIngestionJob")

        assert kb_client.start_ingestion_job() is None

    def test_start_failure_should_raise(self, kb_client, agent) -> None:
        agent.start_ingestion_job.side_effect = _client_error("AccessDeniedException", "StartIngestionJob")

        with pytest.raises(IndexingError):
            kb_client.start_ingestion_job()

    def test_get_job_should_map_fields(self, kb_client, agent) -> None:
        agent.get_ingestion_job.return_value = {
            "ingestionJob": {
                "ingestionJobId": "JOB1234567",
                "status": "FAILED",
                "failureReasons": ["bad file"],
                "statistics": {"numberOfDocumentsFailed": 1},
            }
        }

        job = kb_client.get_ingestion_job("JOB1234567")

        assert job.status == "FAILED"
        assert job.finished is True
        assert job.failure_reasons == ["bad file"]

    def test_list_jobs_should_sort_newest_first(self, kb_client, agent) -> None:
        agent.list_ingestion_jobs.return_value = {
            "ingestionJobSummaries": [{"ingestionJobId": "JOB1234567", "status": "COMPLETE"}]
        }

        jobs = kb_client.list_ingestion_jobs(5)

        assert [j.job_id for j in jobs] == ["JOB1234567"]
        kwargs = agent.list_ingestion_jobs.call_args.kwargs
        assert kwargs["sortBy"] == {"attribute": "STARTED_AT", "order": "DESCENDING"}
        assert kwargs["maxResults"] == 5


class TestRetrieve:
    """Test suite for KnowledgeBaseClient.retrieve()."""

    def test_should_send_filter(self, kb_client, runtime) -> None:
        runtime.retrieve.return_value = {"retrievalResults": [{"content": {"text": "x"}}]}
        metadata_filter = {"equals": {"key": "sessionId", "value": "s1"}}

        results = kb_client.retrieve("q", 3, metadata_filter)

        assert results == [{"content": {"text": "x"}}]
        runtime.retrieve.assert_called_once_with(
            knowledgeBaseId="KB12345678",
            retrievalQuery={"text": "q"},
            retrievalConfiguration={
                "vectorSearchConfiguration": {"numberOfResults": 3, "filter": metadata_filter}
            },
        )

    def test_failure_should_raise_search_error(self, kb_client, runtime) -> None:
        runtime.retrieve.side_effect = _client_error("ThrottlingException", "Retrieve")

        with pytest.raises(SearchError) as exc_info:
            kb_client.retrieve("q", 3)

        assert exc_info.value.details["operation"] == "retrieve"

    def test_test_connection(self, kb_client, agent) -> None:
        agent.get_knowledge_base.return_value = {"knowledgeBase": {"status": "ACTIVE"}}

        assert kb_client.test_connection() == {"success": True, "status": "ACTIVE"}
