"""
S3 documents bucket configuration.

Settings for raw document storage used as the knowledge base data source.

Dependencies: pydantic_settings
System role: S3 documents bucket configuration
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class S3DocumentsSettings(BaseSettings):
    """Settings for S3 documents bucket operations."""

    model_config = SettingsConfigDict(
        env_prefix="S3_DOCUMENTS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    bucket: str = Field(
        default="",
        description="S3 bucket for raw document storage (required)",
    )
    region: str = Field(
        default="us-east-1",
        description="AWS region for S3 bucket",
    )
    create_bucket_if_missing: bool = Field(
        default=True,
        description="Create the bucket on first upload when it does not exist",
    )
