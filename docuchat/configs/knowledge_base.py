"""
Knowledge base configuration settings.

Settings for the Bedrock Knowledge Base that indexes the documents bucket
and serves session-scoped retrieval.

Dependencies: pydantic, pydantic_settings
System role: Search index configuration for RAG retrieval
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class KnowledgeBaseSettings(BaseSettings):
    """Bedrock Knowledge Base configuration."""

    model_config = SettingsConfigDict(
        env_prefix="KNOWLEDGE_BASE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    knowledge_base_id: str = Field(default="", description="Knowledge base ID (required)")
    data_source_id: str = Field(
        default="",
        description="S3 data source ID attached to the knowledge base (required)",
    )
    region: str = Field(default="us-east-1", description="AWS region for Bedrock")
    max_results: int = Field(
        default=100,
        description="Upper bound accepted by the retrieve API for numberOfResults",
    )
