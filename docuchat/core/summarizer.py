"""
Document summarizer and topic extractor.

One model call each: a conciseness-biased summary and a comma-separated
topic list.

Dependencies: langchain_core, docuchat.core.prompts
System role: Post-upload document enrichment
"""

import logging

from langchain_core.language_models import BaseChatModel

from docuchat.boundary.llm.chat_model import message_text
from docuchat.core.prompts import SUMMARY_PROMPT, TOPICS_PROMPT

logger = logging.getLogger(__name__)

EMPTY_SUMMARY = "Unable to generate summary."


def parse_topics(text: str) -> list[str]:
    """Split a comma-separated topic list, trimming and dropping empties."""
    return [topic.strip() for topic in text.split(",") if topic.strip()]


class DocumentSummarizer:
    """Summary and topic generation over extracted document text."""

    def __init__(
        self,
        summary_model: BaseChatModel,
        topics_model: BaseChatModel,
        topic_input_chars: int = 3000,
    ) -> None:
        """
        Initialize summarizer.

        Args:
            summary_model: Chat model for summaries
            topics_model: Chat model for topic lists
            topic_input_chars: Characters of document text sent for topics
        """
        self._summary_model = summary_model
        self._topics_model = topics_model
        self._topic_input_chars = topic_input_chars

    async def summarize(self, document_text: str, document_name: str) -> str:
        """
        Summarize a document.

        Args:
            document_text: Extracted document text
            document_name: File name shown to the model

        Returns:
            str: Summary, or "Unable to generate summary." when the model
                fails or returns nothing
        """
        messages = SUMMARY_PROMPT.format_messages(document_name=document_name, content=document_text)
        try:
            response = await self._summary_model.ainvoke(messages)
        except Exception as e:
            logger.warning(f"{__name__}:summarize - Summary of {document_name} failed: {e}")
            return EMPTY_SUMMARY

        return message_text(response) or EMPTY_SUMMARY

    async def extract_topics(self, document_text: str) -> list[str]:
        """
        Extract key topics from the start of a document.

        Never raises: any failure yields an empty list.

        Args:
            document_text: Extracted document text

        Returns:
            list[str]: Trimmed, non-empty topics
        """
        messages = TOPICS_PROMPT.format_messages(content=document_text[: self._topic_input_chars])
        try:
            response = await self._topics_model.ainvoke(messages)
            return parse_topics(message_text(response))
        except Exception as e:
            logger.warning(f"{__name__}:extract_topics - Topic extraction failed: {e}")
            return []
