"""
Session service orchestrator.

The session store: creates, restores, lists and deletes chat sessions and
appends messages with server-side id and position assignment.

Dependencies: sqlalchemy, docuchat.boundary.db.CRUD
System role: Session use case orchestration
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import Protocol

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from docuchat.boundary.db.base import utcnow
from docuchat.boundary.db.CRUD import message_crud, session_crud
from docuchat.boundary.db.models import ChatMessageModel, ChatSessionModel
from docuchat.core.exceptions import PersistenceError
from docuchat.models.session import ChatSession, Message, RestoreSessionResponse

logger = logging.getLogger(__name__)

WELCOME_TEMPLATE = (
    'Hello! I\'ve analyzed "{document_name}" and I\'m ready to help you understand its content. '
    "You can ask me questions, request summaries, or explore specific topics within the document."
)


class IncomingMessage(Protocol):
    id: str | None
    content: str
    is_user: bool
    timestamp: datetime | None
    citations: list[str] | None


def _aware(value: datetime) -> datetime:
    # SQLite drops tzinfo on read
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


def _message_to_domain(row: ChatMessageModel) -> Message:
    return Message(
        id=row.message_id,
        content=row.content,
        is_user=row.is_user,
        timestamp=_aware(row.timestamp),
        citations=row.citations,
    )


def _session_to_domain(row: ChatSessionModel) -> ChatSession:
    return ChatSession(
        session_id=row.session_id,
        document_name=row.document_name,
        messages=[_message_to_domain(m) for m in row.messages],
        created_at=_aware(row.created_at),
        updated_at=_aware(row.updated_at),
        user_id=row.user_id,
    )


class SessionService:
    """Session store over the chat_sessions/chat_messages tables."""

    def __init__(self, db: AsyncSession) -> None:
        """
        Initialize session service with async database session.

        Args:
            db: Async SQLAlchemy session
        """
        self.db = db

    async def create_session(
        self,
        session_id: str,
        document_name: str,
        user_id: str | None = None,
    ) -> ChatSession:
        """
        Create a session with an empty message list.

        Args:
            session_id: Client-generated session id
            document_name: Name of the document discussed
            user_id: Optional owner

        Returns:
            ChatSession: Stored session

        Raises:
            PersistenceError: If the write fails, including a duplicate session id
        """
        try:
            row = await session_crud.create(
                self.db,
                session_id=session_id,
                document_name=document_name,
                user_id=user_id,
                messages=[],
            )
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"{__name__}:create_session - Insert failed", extra={"session_id": session_id})
            raise PersistenceError(
                f"Failed to create chat session: {e.__class__.__name__}",
                session_id=session_id,
                operation="create",
            ) from e

        logger.info(f"{__name__}:create_session - Session created", extra={"session_id": session_id})
        return _session_to_domain(row)

    async def add_message(self, session_id: str, message: IncomingMessage) -> Message | None:
        """
        Append a message to a session.

        A missing id is generated as `msg_<hex>`; an id already used in the
        session is renumbered to `<id>-<hex8>` so both messages are kept.

        Args:
            session_id: Target session
            message: Message to append

        Returns:
            Message | None: Stored message with its final id, None if no session matched

        Raises:
            PersistenceError: If the write fails
        """
        try:
            row = await session_crud.get_by_session_id(self.db, session_id)
            if row is None:
                return None

            message_id = await self._assign_message_id(row, message.id)
            stored = ChatMessageModel(
                message_id=message_id,
                position=await message_crud.next_position(self.db, row.id),
                content=message.content,
                is_user=message.is_user,
                timestamp=message.timestamp or utcnow(),
                citations=message.citations,
            )
            row.messages.append(stored)
            await session_crud.update_fields(self.db, row)
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"{__name__}:add_message - Append failed", extra={"session_id": session_id})
            raise PersistenceError(
                f"Failed to save message: {e.__class__.__name__}",
                session_id=session_id,
                operation="append",
            ) from e

        return _message_to_domain(stored)

    async def append_message(self, session_id: str, message: IncomingMessage) -> bool:
        """
        Append a message; False when no session matched.

        Raises:
            PersistenceError: If the write fails
        """
        return await self.add_message(session_id, message) is not None

    async def _assign_message_id(self, row: ChatSessionModel, requested: str | None) -> str:
        if not requested:
            return f"msg_{uuid.uuid4().hex}"

        candidate = requested
        while await message_crud.message_id_exists(self.db, row.id, candidate):
            candidate = f"{requested}-{uuid.uuid4().hex[:8]}"
        if candidate != requested:
            logger.warning(
                f"{__name__}:add_message - Duplicate message id renumbered",
                extra={"session_id": row.session_id, "requested": requested, "assigned": candidate},
            )
        return candidate

    async def get_session(self, session_id: str) -> ChatSession | None:
        """
        Get a session with its messages in append order.

        Returns:
            ChatSession | None: None when the session does not exist

        Raises:
            PersistenceError: If the read fails
        """
        try:
            row = await session_crud.get_by_session_id(self.db, session_id)
        except SQLAlchemyError as e:
            raise PersistenceError("Failed to read chat session", session_id=session_id, operation="read") from e
        return _session_to_domain(row) if row else None

    async def restore_session(self, session_id: str) -> RestoreSessionResponse:
        """
        Restore a session for the client. Never raises.

        Returns:
            RestoreSessionResponse: success=False with an error string when
            the session is missing or the read fails
        """
        try:
            session = await self.get_session(session_id)
        except PersistenceError as e:
            logger.error(f"{__name__}:restore_session - {e}")
            return RestoreSessionResponse(success=False, error="Failed to restore chat session")

        if session is None:
            return RestoreSessionResponse(success=False, error="Chat session not found")
        return RestoreSessionResponse(success=True, session=session)

    async def list_sessions(self, user_id: str | None = None) -> list[ChatSession]:
        """
        List sessions, most recently updated first.

        Args:
            user_id: Optional owner filter

        Raises:
            PersistenceError: If the read fails
        """
        try:
            rows = await session_crud.list_sessions(self.db, user_id=user_id)
        except SQLAlchemyError as e:
            raise PersistenceError("Failed to list chat sessions", operation="list") from e
        return [_session_to_domain(row) for row in rows]

    async def update_session(
        self,
        session_id: str,
        document_name: str | None = None,
        user_id: str | None = None,
    ) -> bool:
        """
        Update session metadata and bump updatedAt.

        Returns:
            bool: False when no session matched

        Raises:
            PersistenceError: If the write fails
        """
        fields = {}
        if document_name is not None:
            fields["document_name"] = document_name
        if user_id is not None:
            fields["user_id"] = user_id

        try:
            row = await session_crud.get_by_session_id(self.db, session_id)
            if row is None:
                return False
            await session_crud.update_fields(self.db, row, **fields)
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise PersistenceError("Failed to update chat session", session_id=session_id, operation="update") from e
        return True

    async def delete_session(self, session_id: str) -> bool:
        """
        Delete a session and all of its messages.

        Returns:
            bool: False when no session matched

        Raises:
            PersistenceError: If the delete fails
        """
        try:
            row = await session_crud.get_by_session_id(self.db, session_id)
            if row is None:
                return False
            await session_crud.delete(self.db, row)
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise PersistenceError("Failed to delete chat session", session_id=session_id, operation="delete") from e

        logger.info(f"{__name__}:delete_session - Session deleted", extra={"session_id": session_id})
        return True

    async def session_exists(self, session_id: str) -> bool:
        """Check whether a session exists; read failures count as absent."""
        try:
            return await session_crud.session_exists(self.db, session_id)
        except SQLAlchemyError as e:
            logger.error(f"{__name__}:session_exists - {e}")
            return False

    async def initialize_session(self, session_id: str, document_name: str) -> ChatSession:
        """
        Return the existing session or create one with a welcome message.

        Idempotent: a second call returns the stored session unchanged.

        Args:
            session_id: Client-generated session id
            document_name: Document the welcome message refers to

        Returns:
            ChatSession: Session including the welcome message

        Raises:
            PersistenceError: If the session cannot be created
        """
        existing = await self.get_session(session_id)
        if existing is not None:
            return existing

        try:
            await self.create_session(session_id, document_name)
        except PersistenceError:
            # Lost a creation race; the winner wrote the welcome message
            existing = await self.get_session(session_id)
            if existing is not None:
                return existing
            raise

        welcome = Message(
            id=f"service-welcome-{int(utcnow().timestamp() * 1000)}",
            content=WELCOME_TEMPLATE.format(document_name=document_name),
            is_user=False,
        )
        await self.add_message(session_id, welcome)

        session = await self.get_session(session_id)
        if session is None:
            raise PersistenceError("Session vanished during initialization", session_id=session_id, operation="initialize")
        return session

    async def get_document_summary(self, session_id: str) -> str | None:
        """
        Return the stored `Document Summary:` message content, if any.

        Raises:
            PersistenceError: If the read fails
        """
        try:
            row = await session_crud.get_by_session_id(self.db, session_id)
            if row is None:
                return None
            summary = await message_crud.find_summary(self.db, row.id)
        except SQLAlchemyError as e:
            raise PersistenceError("Failed to read document summary", session_id=session_id, operation="read") from e
        return summary.content if summary else None
