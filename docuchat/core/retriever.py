"""
Retrieval logic with session filtering.

Queries the knowledge base for passages scoped to a session and maps raw
retrieval results to DocumentSearchResult.

Dependencies: docuchat.boundary.aws, fastapi.concurrency
System role: RAG retrieval business logic
"""

import logging
import posixpath
from typing import Any

from fastapi.concurrency import run_in_threadpool

from docuchat.boundary.aws.knowledge_base_client import KnowledgeBaseClient
from docuchat.core.exceptions import SearchError, ValidationError
from docuchat.models.search import DocumentSearchResult, SearchMetadata

logger = logging.getLogger(__name__)

PAGE_NUMBER_KEY = "x-amz-bedrock-kb-document-page-number"
SOURCE_URI_KEY = "x-amz-bedrock-kb-source-uri"
SORTABLE_FIELDS = {"score", "pageNumber", "fileName"}
BULK_QUERY = "*"


def session_filter(session_id: str | None, file_name: str | None = None) -> dict[str, Any] | None:
    """
    Build a Bedrock retrieval filter for session and optional file name.

    Args:
        session_id: Session to scope to
        file_name: Original file name to scope to

    Returns:
        dict | None: Filter expression, None when unscoped
    """
    conditions = []
    if session_id:
        conditions.append({"equals": {"key": "sessionId", "value": session_id}})
    if file_name:
        conditions.append({"equals": {"key": "originalName", "value": file_name}})

    if not conditions:
        return None
    if len(conditions) == 1:
        return conditions[0]
    return {"andAll": conditions}


def _source_uri(raw: dict[str, Any]) -> str:
    location = raw.get("location") or {}
    uri = (location.get("s3Location") or {}).get("uri")
    return uri or (raw.get("metadata") or {}).get(SOURCE_URI_KEY, "")


def to_search_result(raw: dict[str, Any], session_id: str | None = None) -> DocumentSearchResult:
    """
    Map one Bedrock retrieval result to a DocumentSearchResult.

    fileName comes from the sidecar's originalName, falling back to the
    object key's basename; pageNumber from the parser's page attribute.

    Args:
        raw: retrievalResults entry
        session_id: Session used for the query, when metadata lacks one

    Returns:
        DocumentSearchResult
    """
    metadata = raw.get("metadata") or {}
    file_name = metadata.get("originalName") or posixpath.basename(_source_uri(raw)) or "Unknown"

    page = metadata.get(PAGE_NUMBER_KEY)
    page_number = int(page) if page is not None else None

    return DocumentSearchResult(
        content=(raw.get("content") or {}).get("text", ""),
        metadata=SearchMetadata(
            file_name=file_name,
            session_id=metadata.get("sessionId") or session_id or "",
            page_number=page_number,
            section=metadata.get("section"),
        ),
        score=float(raw.get("score") or 0.0),
    )


def _parse_order_by(order_by: str) -> tuple[str, bool]:
    parts = order_by.split()
    field = parts[0] if parts else ""
    direction = parts[1].lower() if len(parts) > 1 else "asc"
    if field not in SORTABLE_FIELDS or direction not in ("asc", "desc") or len(parts) > 2:
        raise ValidationError(
            f"Unsupported order_by: {order_by!r}",
            field="order_by",
            details={"allowed": sorted(SORTABLE_FIELDS)},
        )
    return field, direction == "desc"


def sort_results(results: list[DocumentSearchResult], order_by: str) -> list[DocumentSearchResult]:
    """
    Re-sort results by `"<field> [asc|desc]"`.

    Results without a page number sort after those with one.

    Raises:
        ValidationError: If the field or direction is unsupported
    """
    field, descending = _parse_order_by(order_by)
    if field == "score":
        return sorted(results, key=lambda r: r.score, reverse=descending)
    if field == "fileName":
        return sorted(results, key=lambda r: r.metadata.file_name, reverse=descending)

    paged = [r for r in results if r.metadata.page_number is not None]
    unpaged = [r for r in results if r.metadata.page_number is None]
    return sorted(paged, key=lambda r: r.metadata.page_number, reverse=descending) + unpaged


class ContentRetriever:
    """Session-scoped passage retrieval over the knowledge base."""

    def __init__(self, kb_client: KnowledgeBaseClient, max_results: int = 100) -> None:
        """
        Initialize retriever.

        Args:
            kb_client: Knowledge base client
            max_results: Upper bound the knowledge base accepts per call
        """
        self._kb = kb_client
        self._max_results = max_results

    async def search(
        self,
        query: str,
        session_id: str | None = None,
        top: int = 10,
        skip: int = 0,
        order_by: str | None = None,
    ) -> list[DocumentSearchResult]:
        """
        Retrieve passages for a free-text query.

        Args:
            query: Query text
            session_id: Restrict to a session's documents
            top: Maximum results to return
            skip: Results to skip after ordering
            order_by: Optional `"score|pageNumber|fileName asc|desc"`

        Returns:
            list[DocumentSearchResult]: Highest score first unless re-sorted

        Raises:
            SearchError: If the knowledge base call fails
            ValidationError: If order_by is unsupported
        """
        if top <= 0:
            return []

        requested = min(top + max(skip, 0), self._max_results)
        raw_results = await self._retrieve(query, requested, session_filter(session_id), session_id)

        results = [to_search_result(raw, session_id) for raw in raw_results]
        results.sort(key=lambda r: r.score, reverse=True)
        if order_by:
            results = sort_results(results, order_by)

        logger.info(
            f"{__name__}:search - Retrieved {len(results)} passages",
            extra={"session_id": session_id, "top": top, "skip": skip},
        )
        return results[skip:skip + top]

    async def get_all_for_session(
        self,
        session_id: str,
        file_name: str | None = None,
        limit: int = 50,
    ) -> list[DocumentSearchResult]:
        """
        Bulk-retrieve a session's passages for content extraction.

        Args:
            session_id: Session to read
            file_name: Restrict to one uploaded file
            limit: Maximum passages

        Returns:
            list[DocumentSearchResult]: Ordered by page number

        Raises:
            SearchError: If the knowledge base call fails
        """
        query = file_name or BULK_QUERY
        raw_results = await self._retrieve(
            query,
            min(limit, self._max_results),
            session_filter(session_id, file_name),
            session_id,
        )
        results = [to_search_result(raw, session_id) for raw in raw_results]
        return sort_results(results, "pageNumber asc")

    async def _retrieve(
        self,
        query: str,
        number_of_results: int,
        metadata_filter: dict[str, Any] | None,
        session_id: str | None,
    ) -> list[dict[str, Any]]:
        try:
            return await run_in_threadpool(self._kb.retrieve, query, number_of_results, metadata_filter)
        except SearchError as e:
            if session_id and "session_id" not in e.details:
                e.details["session_id"] = session_id
            logger.error(f"{__name__}:_retrieve - {e}")
            raise
        except Exception as e:
            logger.error(f"{__name__}:_retrieve - Unexpected retrieval failure: {e}", exc_info=True)
            raise SearchError(f"Retrieval failed: {e}", session_id=session_id, operation="retrieve") from e
