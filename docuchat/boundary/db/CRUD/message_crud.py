"""
Chat message CRUD operations.

Dependencies: sqlalchemy, docuchat.boundary.db.models
System role: Message persistence and id/position bookkeeping
"""

import uuid
from typing import Sequence

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from docuchat.boundary.db.CRUD.base_crud import BaseCRUD
from docuchat.boundary.db.models.message_model import ChatMessageModel

SUMMARY_PREFIX = "Document Summary:"


class MessageCRUD(BaseCRUD[ChatMessageModel]):
    """CRUD operations for ChatMessageModel."""

    def __init__(self) -> None:
        """Initialize MessageCRUD with ChatMessageModel."""
        super().__init__(ChatMessageModel)

    async def next_position(self, session: AsyncSession, session_pk: uuid.UUID) -> int:
        """
        Return the next append index for a session.

        Args:
            session: Async database session
            session_pk: Parent session primary key

        Returns:
            int: max(position) + 1, or 0 for an empty session
        """
        stmt = select(func.max(ChatMessageModel.position)).where(
            ChatMessageModel.session_pk == session_pk
        )
        result = await session.execute(stmt)
        current = result.scalar_one_or_none()
        return 0 if current is None else current + 1

    async def message_id_exists(
        self,
        session: AsyncSession,
        session_pk: uuid.UUID,
        message_id: str,
    ) -> bool:
        """
        Check whether a message id is already used in a session.

        Args:
            session: Async database session
            session_pk: Parent session primary key
            message_id: Candidate message id

        Returns:
            True if the id is taken
        """
        stmt = select(ChatMessageModel.id).where(
            ChatMessageModel.session_pk == session_pk,
            ChatMessageModel.message_id == message_id,
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none() is not None

    async def list_for_session(
        self,
        session: AsyncSession,
        session_pk: uuid.UUID,
    ) -> Sequence[ChatMessageModel]:
        """
        List messages of a session in append order.

        Args:
            session: Async database session
            session_pk: Parent session primary key

        Returns:
            Sequence of ChatMessageModels ordered by position
        """
        stmt = (
            select(ChatMessageModel)
            .where(ChatMessageModel.session_pk == session_pk)
            .order_by(ChatMessageModel.position)
        )
        result = await session.execute(stmt)
        return result.scalars().all()

    async def find_summary(
        self,
        session: AsyncSession,
        session_pk: uuid.UUID,
    ) -> ChatMessageModel | None:
        """
        Find the first assistant message carrying the document summary.

        Args:
            session: Async database session
            session_pk: Parent session primary key

        Returns:
            ChatMessageModel if a summary was stored, None otherwise
        """
        stmt = (
            select(ChatMessageModel)
            .where(
                ChatMessageModel.session_pk == session_pk,
                ChatMessageModel.is_user.is_(False),
                ChatMessageModel.content.contains(SUMMARY_PREFIX),
            )
            .order_by(ChatMessageModel.position)
            .limit(1)
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()


message_crud = MessageCRUD()
