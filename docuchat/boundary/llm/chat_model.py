"""
Gemini chat model factory.

Builds the ChatGoogleGenerativeAI instances used for answers, summaries
and topic extraction from LLM settings.

Dependencies: langchain_google_genai, langchain_core
System role: Hosted chat completion adapter
"""

from langchain_core.messages import BaseMessage
from langchain_google_genai import ChatGoogleGenerativeAI

from docuchat.configs.llm import LLMSettings


def build_response_model(config: LLMSettings) -> ChatGoogleGenerativeAI:
    """Model for contextual answers (balanced temperature, longer output)."""
    return ChatGoogleGenerativeAI(
        model=config.model,
        google_api_key=config.google_api_key,
        temperature=config.response_temperature,
        max_output_tokens=config.response_max_tokens,
        top_p=config.response_top_p,
    )


def build_summary_model(config: LLMSettings) -> ChatGoogleGenerativeAI:
    """Model for document summaries (low temperature)."""
    return ChatGoogleGenerativeAI(
        model=config.model,
        google_api_key=config.google_api_key,
        temperature=config.summary_temperature,
        max_output_tokens=config.summary_max_tokens,
    )


def build_topics_model(config: LLMSettings) -> ChatGoogleGenerativeAI:
    """Model for topic extraction (low temperature, short output)."""
    return ChatGoogleGenerativeAI(
        model=config.model,
        google_api_key=config.google_api_key,
        temperature=config.summary_temperature,
        max_output_tokens=config.topics_max_tokens,
    )


def message_text(message: BaseMessage) -> str:
    """
    Extract plain text from a model response.

    Gemini may return content as a list of parts; text parts are joined.

    Args:
        message: Model output message

    Returns:
        str: Stripped text, empty when the model returned nothing
    """
    content = message.content
    if isinstance(content, str):
        return content.strip()

    parts = []
    for part in content:
        if isinstance(part, str):
            parts.append(part)
        elif isinstance(part, dict) and part.get("type") == "text":
            parts.append(part.get("text", ""))
    return "".join(parts).strip()
