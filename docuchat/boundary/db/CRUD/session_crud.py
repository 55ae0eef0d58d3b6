"""
Chat session CRUD operations.

Dependencies: sqlalchemy, docuchat.boundary.db.models
System role: Session persistence operations
"""

from typing import Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from docuchat.boundary.db.base import utcnow
from docuchat.boundary.db.CRUD.base_crud import BaseCRUD
from docuchat.boundary.db.models.session_model import ChatSessionModel


class SessionCRUD(BaseCRUD[ChatSessionModel]):
    """
    CRUD operations for ChatSessionModel.

    Lookups go through the external session_id rather than the UUID key.
    """

    def __init__(self) -> None:
        """Initialize SessionCRUD with ChatSessionModel."""
        super().__init__(ChatSessionModel)

    async def get_by_session_id(
        self,
        session: AsyncSession,
        session_id: str,
    ) -> ChatSessionModel | None:
        """
        Retrieve session by its external id, messages loaded in order.

        Args:
            session: Async database session
            session_id: Client-generated session id

        Returns:
            ChatSessionModel if found, None otherwise
        """
        stmt = (
            select(ChatSessionModel)
            .where(ChatSessionModel.session_id == session_id)
            .execution_options(populate_existing=True)
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_sessions(
        self,
        session: AsyncSession,
        user_id: str | None = None,
    ) -> Sequence[ChatSessionModel]:
        """
        List sessions, most recently updated first.

        Args:
            session: Async database session
            user_id: Optional owner filter

        Returns:
            Sequence of ChatSessionModels
        """
        stmt = (
            select(ChatSessionModel)
            .order_by(ChatSessionModel.updated_at.desc())
            .execution_options(populate_existing=True)
        )
        if user_id is not None:
            stmt = stmt.where(ChatSessionModel.user_id == user_id)
        result = await session.execute(stmt)
        return result.scalars().all()

    async def session_exists(self, session: AsyncSession, session_id: str) -> bool:
        """
        Check if a session id is present.

        Args:
            session: Async database session
            session_id: Client-generated session id

        Returns:
            True if the session exists
        """
        stmt = select(ChatSessionModel.id).where(ChatSessionModel.session_id == session_id)
        result = await session.execute(stmt)
        return result.scalar_one_or_none() is not None

    async def update_fields(
        self,
        session: AsyncSession,
        instance: ChatSessionModel,
        **fields,
    ) -> ChatSessionModel:
        """
        Update session columns and bump updated_at.

        Args:
            session: Async database session
            instance: Loaded session row
            **fields: Column values to set

        Returns:
            The updated instance
        """
        for name, value in fields.items():
            setattr(instance, name, value)
        instance.updated_at = utcnow()
        await session.flush()
        return instance


session_crud = SessionCRUD()
