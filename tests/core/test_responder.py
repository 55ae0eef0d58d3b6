"""
Test suite for ContextualResponder.

System role: Verification of retrieval-grounded answering
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from langchain_core.messages import AIMessage, HumanMessage, SystemMessage

from docuchat.core.exceptions import SearchError
from docuchat.core.responder import ContextualResponder, build_context, build_history
from docuchat.models.chat import (
    FALLBACK_RESPONSE,
    HistoryEntry,
    ResponseOutcome,
    UpstreamErrorKind,
    to_legacy_response,
)


@pytest.fixture
def retriever() -> MagicMock:
    mock = MagicMock()
    mock.search = AsyncMock(return_value=[])
    return mock


@pytest.fixture
def recording_model() -> MagicMock:
    model = MagicMock()
    model.ainvoke = AsyncMock(return_value=AIMessage(content="Revenue grew 12%."))
    return model


class TestBuildHelpers:
    """Test suite for prompt building helpers."""

    def test_build_context_should_label_sources(self, make_result) -> None:
        """Test passages are rendered with their file names."""
        context = build_context([make_result(content="alpha"), make_result(content="beta", file_name="b.pdf")])

        assert context == "Source: report.pdf\nContent: alpha\n\nSource: b.pdf\nContent: beta"

    def test_build_history_should_keep_last_non_blank_entries(self) -> None:
        """Test the window keeps the newest 10 non-blank entries in order."""
        # Arrange
        history = [HistoryEntry(content=f"turn {i}", is_user=i % 2 == 0) for i in range(14)]
        history.insert(12, HistoryEntry(content="   ", is_user=True))

        # Act
        messages = build_history(history, window=10)

        # Assert
        assert [m.content for m in messages] == [f"turn {i}" for i in range(4, 14)]
        assert isinstance(messages[0], HumanMessage)
        assert isinstance(messages[1], AIMessage)


class TestRespond:
    """Test suite for ContextualResponder.respond()."""

    @pytest.mark.asyncio
    async def test_answer_should_carry_citations(self, retriever, recording_model, make_result) -> None:
        """Test citations are formatted per passage and de-duplicated."""
        # Arrange
        retriever.search.return_value = [
            make_result(page_number=3, score=0.9),
            make_result(page_number=None, score=0.8),
            make_result(page_number=3, score=0.7),
        ]
        responder = ContextualResponder(retriever, recording_model)

        # Act
        result = await responder.respond("s1", "How did revenue change?", [])

        # Assert
        assert result.outcome == ResponseOutcome.ANSWERED
        assert result.response == "Revenue grew 12%."
        assert result.citations == ["report.pdf (Page 3)", "report.pdf"]
        assert len(result.sources) == 3
        retriever.search.assert_awaited_once_with("How did revenue change?", session_id="s1", top=5)

    @pytest.mark.asyncio
    async def test_prompt_should_include_context_history_and_question(
        self,
        retriever,
        recording_model,
        make_result,
    ) -> None:
        """Test the model receives system context, history and the new question."""
        # Arrange
        retriever.search.return_value = [make_result(content="Revenue grew 12%.")]
        history = [
            HistoryEntry(content="Hi", is_user=True),
            HistoryEntry(content="Hello!", is_user=False),
        ]
        responder = ContextualResponder(retriever, recording_model)

        # Act
        await responder.respond("s1", "What about costs?", history)

        # Assert
        messages = recording_model.ainvoke.await_args.args[0]
        assert isinstance(messages[0], SystemMessage)
        assert "Source: report.pdf\nContent: Revenue grew 12%." in messages[0].content
        assert [m.content for m in messages[1:]] == ["Hi", "Hello!", "What about costs?"]

    @pytest.mark.asyncio
    async def test_no_passages_should_yield_no_content(self, retriever, fake_chat_model) -> None:
        """Test an empty search still answers, tagged NO_CONTENT with no citations."""
        responder = ContextualResponder(retriever, fake_chat_model("I could not find that in the document."))

        result = await responder.respond("s1", "Anything?", [])

        assert result.outcome == ResponseOutcome.NO_CONTENT
        assert result.response == "I could not find that in the document."
        assert result.citations == []
        assert result.sources == []

    @pytest.mark.asyncio
    async def test_search_failure_should_map_to_apology(self, retriever, recording_model) -> None:
        """Test a failing search becomes an upstream error and the legacy apology."""
        # Arrange
        retriever.search.side_effect = SearchError("index unavailable")
        responder = ContextualResponder(retriever, recording_model)

        # Act
        result = await responder.respond("s1", "hello", [])
        legacy = to_legacy_response(result)

        # Assert
        assert result.outcome == ResponseOutcome.UPSTREAM_ERROR
        assert result.error_kind == UpstreamErrorKind.SEARCH
        assert legacy.response == FALLBACK_RESPONSE
        assert legacy.citations == []
        assert legacy.sources == []
        recording_model.ainvoke.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unexpected_retrieval_failure_should_be_unknown(self, retriever, recording_model) -> None:
        """Test non-search exceptions are tagged UNKNOWN."""
        retriever.search.side_effect = KeyError("x")
        responder = ContextualResponder(retriever, recording_model)

        result = await responder.respond("s1", "hello", [])

        assert result.outcome == ResponseOutcome.UPSTREAM_ERROR
        assert result.error_kind == UpstreamErrorKind.UNKNOWN

    @pytest.mark.asyncio
    async def test_model_failure_should_map_to_upstream_error(
        self,
        retriever,
        failing_chat_model,
        make_result,
    ) -> None:
        """Test a failing model call is tagged MODEL."""
        retriever.search.return_value = [make_result()]
        responder = ContextualResponder(retriever, failing_chat_model)

        result = await responder.respond("s1", "hello", [])

        assert result.outcome == ResponseOutcome.UPSTREAM_ERROR
        assert result.error_kind == UpstreamErrorKind.MODEL
        assert result.error_detail == "model unavailable"
        assert to_legacy_response(result).response == FALLBACK_RESPONSE

    @pytest.mark.asyncio
    async def test_empty_completion_should_use_placeholder(self, retriever, recording_model, make_result) -> None:
        """Test a blank completion is replaced with the placeholder text."""
        retriever.search.return_value = [make_result()]
        recording_model.ainvoke.return_value = AIMessage(content="   ")
        responder = ContextualResponder(retriever, recording_model)

        result = await responder.respond("s1", "hello", [])

        assert result.response == "I apologize, but I could not generate a response at this time."
