"""
Test suite for configuration loading and validation.

System role: Verification of startup configuration checks
"""

import pytest
from pydantic import ValidationError

from docuchat.configs.database import DatabaseSettings
from docuchat.configs.knowledge_base import KnowledgeBaseSettings
from docuchat.configs.llm import LLMSettings
from docuchat.configs.pipeline import PipelineSettings
from docuchat.configs.settings import Settings
from docuchat.configs.storage import S3DocumentsSettings
from docuchat.core.exceptions import ConfigurationError


def _settings(bucket: str = "docs", kb_id: str = "KB12345678", ds_id: str = "DS12345678", api_key: str = "key"):
    return Settings(
        s3_documents=S3DocumentsSettings(bucket=bucket),
        knowledge_base=KnowledgeBaseSettings(knowledge_base_id=kb_id, data_source_id=ds_id),
        llm=LLMSettings(google_api_key=api_key),
    )


class TestValidateRequired:
    """Test suite for Settings.validate_required()."""

    def test_complete_settings_should_pass(self) -> None:
        _settings().validate_required()

    def test_missing_values_should_all_be_listed(self) -> None:
        """Test every missing variable is named in one error."""
        with pytest.raises(ConfigurationError) as exc_info:
            _settings(bucket="", api_key="").validate_required()

        assert exc_info.value.details["missing"] == ["S3_DOCUMENTS_BUCKET", "LLM_GOOGLE_API_KEY"]


class TestDatabaseSettings:
    """Test suite for DatabaseSettings."""

    def test_url_should_be_built_from_parts(self) -> None:
        settings = DatabaseSettings(url=None, host="db", port=5433, user="u", password="p", name="chat")

        assert settings.async_database_url == "postgresql+asyncpg://u:p@db:5433/chat"

    def test_explicit_url_should_win(self) -> None:
        settings = DatabaseSettings(url="sqlite+aiosqlite:///./chat.db")

        assert settings.async_database_url == "sqlite+aiosqlite:///./chat.db"

    def test_env_prefix(self, monkeypatch) -> None:
        monkeypatch.setenv("DATABASE_HOST", "envhost")

        assert DatabaseSettings().host == "envhost"


class TestLogLevel:
    """Test suite for the top-level log level."""

    def test_should_default_to_info(self, monkeypatch) -> None:
        monkeypatch.delenv("LOG_LEVEL", raising=False)

        assert _settings().log_level == "INFO"

    def test_should_read_environment(self, monkeypatch) -> None:
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")

        assert _settings().log_level == "DEBUG"


class TestPipelineSettings:
    """Test suite for PipelineSettings bounds."""

    def test_defaults_should_be_valid(self) -> None:
        settings = PipelineSettings()

        assert settings.index_poll_interval == 2.0
        assert settings.index_backoff_factor == 1.5

    @pytest.mark.parametrize("interval", [0, -1.0])
    def test_non_positive_poll_interval_should_be_rejected(self, interval) -> None:
        with pytest.raises(ValidationError):
            PipelineSettings(index_poll_interval=interval)

    def test_shrinking_backoff_should_be_rejected(self) -> None:
        with pytest.raises(ValidationError):
            PipelineSettings(index_backoff_factor=0.5)

    def test_zero_interval_from_environment_should_be_rejected(self, monkeypatch) -> None:
        monkeypatch.setenv("PIPELINE_INDEX_POLL_INTERVAL", "0")

        with pytest.raises(ValidationError):
            PipelineSettings()
