"""
Service container.

Builds every vendor client and core component once at application start
and holds them for the lifetime of the process.

Dependencies: sqlalchemy, boto3, langchain_google_genai, docuchat.configs
System role: Explicit composition root for the service graph
"""

import logging
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from docuchat.boundary.aws.knowledge_base_client import KnowledgeBaseClient
from docuchat.boundary.aws.s3_client import S3DocumentClient
from docuchat.boundary.db.connection import get_async_engine, get_async_session_factory
from docuchat.boundary.llm.chat_model import build_response_model, build_summary_model, build_topics_model
from docuchat.configs.settings import Settings
from docuchat.core.indexing import IndexerPoller
from docuchat.core.responder import ContextualResponder
from docuchat.core.retriever import ContentRetriever
from docuchat.core.summarizer import DocumentSummarizer

logger = logging.getLogger(__name__)


@dataclass
class ServiceContainer:
    """Long-lived collaborators shared by all requests."""

    settings: Settings
    engine: AsyncEngine
    session_factory: async_sessionmaker[AsyncSession]
    storage: S3DocumentClient
    kb_client: KnowledgeBaseClient
    retriever: ContentRetriever
    indexer: IndexerPoller
    summarizer: DocumentSummarizer
    responder: ContextualResponder

    @classmethod
    def build(cls, settings: Settings) -> "ServiceContainer":
        """
        Validate configuration and construct all clients.

        Args:
            settings: Application settings

        Returns:
            ServiceContainer: Ready-to-use container

        Raises:
            ConfigurationError: If required credentials are missing
        """
        settings.validate_required()

        engine = get_async_engine(settings.database)
        storage = S3DocumentClient(
            bucket=settings.s3_documents.bucket,
            region=settings.s3_documents.region,
            create_bucket_if_missing=settings.s3_documents.create_bucket_if_missing,
        )
        kb_client = KnowledgeBaseClient(
            knowledge_base_id=settings.knowledge_base.knowledge_base_id,
            data_source_id=settings.knowledge_base.data_source_id,
            region=settings.knowledge_base.region,
        )
        retriever = ContentRetriever(kb_client, max_results=settings.knowledge_base.max_results)
        pipeline = settings.pipeline

        container = cls(
            settings=settings,
            engine=engine,
            session_factory=get_async_session_factory(engine),
            storage=storage,
            kb_client=kb_client,
            retriever=retriever,
            indexer=IndexerPoller(
                kb_client,
                retriever,
                backoff_factor=pipeline.index_backoff_factor,
                max_poll_interval=pipeline.index_max_poll_interval,
            ),
            summarizer=DocumentSummarizer(
                build_summary_model(settings.llm),
                build_topics_model(settings.llm),
                topic_input_chars=pipeline.topic_input_chars,
            ),
            responder=ContextualResponder(
                retriever,
                build_response_model(settings.llm),
                top_k=pipeline.response_top_k,
                history_window=pipeline.history_window,
            ),
        )
        logger.info(f"{__name__}:build - Service container ready")
        return container

    async def aclose(self) -> None:
        """Release pooled database connections."""
        await self.engine.dispose()
