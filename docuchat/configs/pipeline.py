"""
Document pipeline configuration settings.

Polling budgets and prompt-size bounds for the upload and chat pipelines.

Dependencies: pydantic, pydantic_settings
System role: Pipeline tuning configuration
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class PipelineSettings(BaseSettings):
    """Upload/chat pipeline tuning."""

    model_config = SettingsConfigDict(
        env_prefix="PIPELINE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    index_wait_timeout: float = Field(
        default=30.0,
        description="Seconds to wait for uploaded content to become searchable",
    )
    index_poll_interval: float = Field(default=2.0, gt=0, description="Initial probe interval in seconds")
    index_backoff_factor: float = Field(
        default=1.5,
        ge=1.0,
        description="Multiplier applied to the probe interval after each miss (1.0 = fixed)",
    )
    index_max_poll_interval: float = Field(default=8.0, gt=0, description="Probe interval ceiling")
    indexer_completion_timeout: float = Field(
        default=60.0,
        description="Seconds to wait for an ingestion job to finish",
    )

    response_top_k: int = Field(default=5, description="Passages retrieved per chat answer")
    history_window: int = Field(default=10, description="History entries kept in the prompt")
    bulk_limit: int = Field(default=50, description="Passages pulled for summarization")
    topic_input_chars: int = Field(
        default=3000,
        description="Prefix of the document text sent for topic extraction",
    )
