"""
Indexer trigger and poller.

Starts knowledge base ingestion and waits, with a bounded backing-off
retry loop, until newly uploaded content becomes searchable.

Dependencies: tenacity, fastapi.concurrency, docuchat.boundary.aws
System role: Bridges asynchronous vendor indexing into the upload pipeline
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable

from fastapi.concurrency import run_in_threadpool
from tenacity import (
    AsyncRetrying,
    retry_if_exception,
    retry_if_result,
    stop_after_attempt,
    stop_before_delay,
    wait_exponential,
    wait_fixed,
)

from docuchat.boundary.aws.knowledge_base_client import KnowledgeBaseClient
from docuchat.core.exceptions import IndexingError, SearchError, ValidationError
from docuchat.core.retriever import ContentRetriever
from docuchat.models.document import IndexingStatus, IndexingWait, IngestionJob

logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[None]]

FAILED_JOB_STATES = {"FAILED", "STOPPED"}


class _ContentNotReady(Exception):
    """Probe found no passages yet."""


def _is_retryable_probe_error(error: BaseException) -> bool:
    if isinstance(error, IndexingError):
        return False
    return isinstance(error, (_ContentNotReady, SearchError))


def _poll_budget(
    timeout: float,
    poll_interval: float,
    backoff_factor: float,
    max_interval: float,
) -> int:
    """
    Count the probes that start before the deadline.

    Probe n starts after the sum of the first n-1 waits; a probe is
    counted while that sum is below the timeout.

    Raises:
        ValidationError: If poll_interval is not positive
    """
    if poll_interval <= 0:
        raise ValidationError("poll_interval must be positive", field="poll_interval")

    attempts = 0
    elapsed = 0.0
    wait = poll_interval
    while elapsed < timeout:
        attempts += 1
        elapsed += min(wait, max_interval)
        wait *= backoff_factor
    return max(attempts, 1)


class IndexerPoller:
    """Ingestion trigger and content-availability poller."""

    def __init__(
        self,
        kb_client: KnowledgeBaseClient,
        retriever: ContentRetriever,
        backoff_factor: float = 1.5,
        max_poll_interval: float = 8.0,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        """
        Initialize poller.

        Args:
            kb_client: Knowledge base client
            retriever: Retriever used for content probes
            backoff_factor: Growth factor between probe intervals (1 = fixed)
            max_poll_interval: Cap on a single interval in seconds
            sleep: Awaitable sleep used between probes
        """
        self._kb = kb_client
        self._retriever = retriever
        self._backoff_factor = backoff_factor
        self._max_poll_interval = max_poll_interval
        self._sleep = sleep

    async def trigger_indexing(self) -> str | None:
        """
        Start an ingestion job on the configured data source.

        Returns:
            str | None: Job ID, None if a job was already running

        Raises:
            IndexingError: If the job cannot be started
        """
        job_id = await run_in_threadpool(self._kb.start_ingestion_job)
        logger.info(f"{__name__}:trigger_indexing - Indexing triggered", extra={"job_id": job_id})
        return job_id

    async def wait_for_content(
        self,
        session_id: str,
        probe_query: str,
        timeout: float = 30.0,
        poll_interval: float = 2.0,
        job_id: str | None = None,
    ) -> IndexingWait:
        """
        Probe the index until the session's content is searchable.

        Probe errors count as "not yet". When job_id is given, a failed
        ingestion job ends the wait early with FAILED.

        Args:
            session_id: Session whose content is expected
            probe_query: Query used for probing (usually the file name)
            timeout: Deadline in seconds
            poll_interval: First interval between probes in seconds
            job_id: Ingestion job to watch for failure

        Returns:
            IndexingWait: READY, NOT_YET_INDEXED or FAILED with probe count
        """
        budget = _poll_budget(timeout, poll_interval, self._backoff_factor, self._max_poll_interval)
        attempts = 0

        retrying = AsyncRetrying(
            retry=retry_if_exception(_is_retryable_probe_error),
            wait=wait_exponential(
                multiplier=poll_interval,
                exp_base=self._backoff_factor,
                max=self._max_poll_interval,
            ),
            stop=stop_after_attempt(budget) | stop_before_delay(timeout),
            sleep=self._sleep,
            reraise=True,
        )

        try:
            async for attempt in retrying:
                with attempt:
                    attempts += 1
                    await self._probe(session_id, probe_query, job_id)
        except IndexingError as e:
            logger.error(
                f"{__name__}:wait_for_content - Ingestion failed",
                extra={"session_id": session_id, "job_id": job_id, "attempts": attempts},
            )
            return IndexingWait(status=IndexingStatus.FAILED, attempts=attempts, detail=e.message)
        except (_ContentNotReady, SearchError) as e:
            logger.warning(
                f"{__name__}:wait_for_content - Content not indexed before deadline, continuing",
                extra={"session_id": session_id, "attempts": attempts},
            )
            detail = e.message if isinstance(e, SearchError) else None
            return IndexingWait(status=IndexingStatus.NOT_YET_INDEXED, attempts=attempts, detail=detail)

        logger.info(
            f"{__name__}:wait_for_content - Content indexed",
            extra={"session_id": session_id, "attempts": attempts},
        )
        return IndexingWait(status=IndexingStatus.READY, attempts=attempts)

    async def _probe(self, session_id: str, probe_query: str, job_id: str | None) -> None:
        if job_id:
            job = await self.get_indexing_status(job_id)
            if job.status in FAILED_JOB_STATES:
                raise IndexingError(
                    f"Ingestion job {job_id} ended with status {job.status}",
                    session_id=session_id,
                    operation="ingest",
                    details={"failure_reasons": job.failure_reasons},
                )

        results = await self._retriever.search(probe_query, session_id=session_id, top=1)
        if not results:
            raise _ContentNotReady(session_id)

    async def get_indexing_status(self, job_id: str) -> IngestionJob:
        """
        Read an ingestion job's current state.

        Raises:
            SearchError: If the job cannot be read
        """
        return await run_in_threadpool(self._kb.get_ingestion_job, job_id)

    async def list_indexing_jobs(self, max_results: int = 10) -> list[IngestionJob]:
        """
        List recent ingestion jobs, newest first.

        Raises:
            SearchError: If listing fails
        """
        return await run_in_threadpool(self._kb.list_ingestion_jobs, max_results)

    async def wait_for_indexer_completion(
        self,
        job_id: str,
        timeout: float = 60.0,
        poll_interval: float = 2.0,
    ) -> IndexingWait:
        """
        Poll an ingestion job at a fixed interval until it finishes.

        Args:
            job_id: Ingestion job ID
            timeout: Deadline in seconds
            poll_interval: Interval between status reads

        Returns:
            IndexingWait: READY on COMPLETE, FAILED on FAILED/STOPPED,
            NOT_YET_INDEXED when the deadline passes or status reads fail
        """
        budget = _poll_budget(timeout, poll_interval, 1.0, poll_interval)
        retrying = AsyncRetrying(
            retry=retry_if_result(lambda job: not job.finished),
            wait=wait_fixed(poll_interval),
            stop=stop_after_attempt(budget) | stop_before_delay(timeout),
            sleep=self._sleep,
            retry_error_callback=lambda state: state.outcome.result(),
        )

        try:
            job = await retrying(self.get_indexing_status, job_id)
        except SearchError as e:
            return IndexingWait(status=IndexingStatus.NOT_YET_INDEXED, detail=e.message)

        if job.status == "COMPLETE":
            return IndexingWait(status=IndexingStatus.READY)
        if job.status in FAILED_JOB_STATES:
            return IndexingWait(
                status=IndexingStatus.FAILED,
                detail="; ".join(job.failure_reasons) or f"Ingestion job ended with status {job.status}",
            )
        return IndexingWait(
            status=IndexingStatus.NOT_YET_INDEXED,
            detail=f"Ingestion job {job_id} did not complete within {timeout}s",
        )

    async def test_connection(self) -> dict[str, Any]:
        """Check knowledge base reachability."""
        return await run_in_threadpool(self._kb.test_connection)
