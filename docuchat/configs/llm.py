"""
LLM configuration settings.

Settings for the hosted chat-completion model used for answers,
summaries and topic extraction.

Dependencies: pydantic, pydantic_settings
System role: Model configuration
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class LLMSettings(BaseSettings):
    """Google Gemini chat model configuration."""

    model_config = SettingsConfigDict(
        env_prefix="LLM_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    google_api_key: str = Field(default="", description="Google AI API key (required)")
    model: str = Field(default="gemini-2.0-flash", description="Gemini model ID")

    response_temperature: float = Field(default=0.7, description="Temperature for chat answers")
    response_max_tokens: int = Field(default=1000, description="Max output tokens for chat answers")
    response_top_p: float = Field(default=0.9, description="Nucleus sampling for chat answers")

    summary_temperature: float = Field(
        default=0.3,
        description="Temperature for summaries and topic extraction",
    )
    summary_max_tokens: int = Field(default=500, description="Max output tokens for summaries")
    topics_max_tokens: int = Field(default=200, description="Max output tokens for topic lists")
