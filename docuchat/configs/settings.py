"""
Unified application settings.

Aggregates all configuration modules into a single Settings class.
Provides dependency injection factory for FastAPI.

Dependencies: All config modules
System role: Central configuration aggregator for the application
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from docuchat.configs.database import DatabaseSettings
from docuchat.configs.knowledge_base import KnowledgeBaseSettings
from docuchat.configs.llm import LLMSettings
from docuchat.configs.pipeline import PipelineSettings
from docuchat.configs.storage import S3DocumentsSettings
from docuchat.core.exceptions import ConfigurationError


class Settings(BaseSettings):
    """Unified application settings aggregating all config modules."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    log_level: str = Field(
        default="INFO",
        description="Root logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    s3_documents: S3DocumentsSettings = Field(default_factory=S3DocumentsSettings)
    knowledge_base: KnowledgeBaseSettings = Field(default_factory=KnowledgeBaseSettings)
    llm: LLMSettings = Field(default_factory=LLMSettings)
    pipeline: PipelineSettings = Field(default_factory=PipelineSettings)

    def validate_required(self) -> None:
        """
        Check that every vendor credential needed at startup is present.

        Raises:
            ConfigurationError: Listing every missing variable
        """
        required = {
            "S3_DOCUMENTS_BUCKET": self.s3_documents.bucket,
            "KNOWLEDGE_BASE_KNOWLEDGE_BASE_ID": self.knowledge_base.knowledge_base_id,
            "KNOWLEDGE_BASE_DATA_SOURCE_ID": self.knowledge_base.data_source_id,
            "LLM_GOOGLE_API_KEY": self.llm.google_api_key,
        }
        missing = [name for name, value in required.items() if not value]
        if missing:
            raise ConfigurationError(
                "Required configuration is missing. Please check environment variables.",
                missing=missing,
            )


@lru_cache
def get_settings() -> Settings:
    """
    Get application settings singleton.

    Returns Settings instance, cached for dependency injection.
    Environment variables loaded once at startup.

    Returns:
        Settings: Application settings instance

    Usage:
        from docuchat.configs import get_settings
        settings = get_settings()
    """
    return Settings()
