"""Hosted LLM boundary: Gemini chat model construction."""

from docuchat.boundary.llm.chat_model import build_response_model, build_summary_model, build_topics_model, message_text

__all__ = ["build_response_model", "build_summary_model", "build_topics_model", "message_text"]
