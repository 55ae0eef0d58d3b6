"""
Bedrock Knowledge Base client.

Starts and inspects ingestion jobs on the S3 data source and runs
session-filtered retrieval against the knowledge base.

Dependencies: boto3
System role: Managed search and indexing adapter
"""

import logging
from typing import Any

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from docuchat.core.exceptions import IndexingError, SearchError
from docuchat.models.document import IngestionJob

logger = logging.getLogger(__name__)


def _error_code(error: ClientError) -> str:
    return error.response.get("Error", {}).get("Code", "")


def _to_job(payload: dict[str, Any]) -> IngestionJob:
    return IngestionJob(
        job_id=payload["ingestionJobId"],
        status=payload.get("status", "UNKNOWN"),
        failure_reasons=payload.get("failureReasons", []),
        statistics=payload.get("statistics", {}),
    )


class KnowledgeBaseClient:
    """Thin wrapper over the bedrock-agent and bedrock-agent-runtime clients."""

    def __init__(
        self,
        knowledge_base_id: str,
        data_source_id: str,
        region: str = "us-east-1",
        agent_client: Any | None = None,
        runtime_client: Any | None = None,
    ) -> None:
        """
        Initialize Knowledge Base clients.

        Args:
            knowledge_base_id: Bedrock Knowledge Base ID
            data_source_id: S3 data source ID inside the knowledge base
            region: AWS region of the knowledge base
            agent_client: Pre-built bedrock-agent client (tests)
            runtime_client: Pre-built bedrock-agent-runtime client (tests)
        """
        self.knowledge_base_id = knowledge_base_id
        self.data_source_id = data_source_id
        self._agent = agent_client or boto3.client("bedrock-agent", region_name=region)
        self._runtime = runtime_client or boto3.client("bedrock-agent-runtime", region_name=region)

    def start_ingestion_job(self) -> str | None:
        """
        Start an ingestion job on the data source.

        Returns:
            str | None: Job ID, or None when a job is already running

        Raises:
            IndexingError: If the job cannot be started
        """
        try:
            response = self._agent.start_ingestion_job(
                knowledgeBaseId=self.knowledge_base_id,
                dataSourceId=self.data_source_id,
            )
        except ClientError as e:
            if _error_code(e) == "ConflictException":
                logger.warning(f"{__name__}:start_ingestion_job - Ingestion already in progress: {e}")
                return None
            raise IndexingError(f"Failed to start ingestion job: {e}", operation="ingest") from e
        except BotoCoreError as e:
            raise IndexingError(f"Failed to start ingestion job: {e}", operation="ingest") from e

        job_id = response["ingestionJob"]["ingestionJobId"]
        logger.info(f"{__name__}:start_ingestion_job - Started ingestion job {job_id}")
        return job_id

    def get_ingestion_job(self, job_id: str) -> IngestionJob:
        """
        Fetch the current state of an ingestion job.

        Raises:
            SearchError: If the job cannot be read
        """
        try:
            response = self._agent.get_ingestion_job(
                knowledgeBaseId=self.knowledge_base_id,
                dataSourceId=self.data_source_id,
                ingestionJobId=job_id,
            )
        except (ClientError, BotoCoreError) as e:
            raise SearchError(f"Failed to read ingestion job {job_id}: {e}", operation="status") from e
        return _to_job(response["ingestionJob"])

    def list_ingestion_jobs(self, max_results: int = 10) -> list[IngestionJob]:
        """
        List recent ingestion jobs, newest first.

        Raises:
            SearchError: If listing fails
        """
        try:
            response = self._agent.list_ingestion_jobs(
                knowledgeBaseId=self.knowledge_base_id,
                dataSourceId=self.data_source_id,
                sortBy={"attribute": "STARTED_AT", "order": "DESCENDING"},
                maxResults=max_results,
            )
        except (ClientError, BotoCoreError) as e:
            raise SearchError(f"Failed to list ingestion jobs: {e}", operation="list") from e
        return [_to_job(summary) for summary in response.get("ingestionJobSummaries", [])]

    def retrieve(
        self,
        query: str,
        number_of_results: int,
        metadata_filter: dict[str, Any] | None = None,
    ) -> list[dict[str, Any]]:
        """
        Run a vector retrieval against the knowledge base.

        Args:
            query: Free-text query
            number_of_results: Maximum passages to return
            metadata_filter: Bedrock RetrievalFilter expression

        Returns:
            list[dict]: Raw retrievalResults entries

        Raises:
            SearchError: If the retrieval call fails
        """
        vector_config: dict[str, Any] = {"numberOfResults": number_of_results}
        if metadata_filter:
            vector_config["filter"] = metadata_filter

        try:
            response = self._runtime.retrieve(
                knowledgeBaseId=self.knowledge_base_id,
                retrievalQuery={"text": query},
                retrievalConfiguration={"vectorSearchConfiguration": vector_config},
            )
        except (ClientError, BotoCoreError) as e:
            raise SearchError(f"Knowledge base retrieval failed: {e}", operation="retrieve") from e
        return response.get("retrievalResults", [])

    def test_connection(self) -> dict[str, Any]:
        """Check knowledge base reachability; returns {success, status?, error?}."""
        try:
            response = self._agent.get_knowledge_base(knowledgeBaseId=self.knowledge_base_id)
            return {"success": True, "status": response["knowledgeBase"].get("status")}
        except (ClientError, BotoCoreError) as e:
            logger.warning(f"{__name__}:test_connection - Knowledge base unreachable: {e}")
            return {"success": False, "error": str(e)}
