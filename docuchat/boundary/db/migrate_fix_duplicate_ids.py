"""
Migration script to repair duplicate message ids.

Sessions written before message ids were unique per session can hold the
same id more than once. Every repeat after the first occurrence gets a
fresh `migrated-<hex>` id; message order and content are untouched.
Safe to run multiple times (idempotent).

Usage:
    python -m docuchat.boundary.db.migrate_fix_duplicate_ids
"""

import asyncio
import uuid
from typing import Callable, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from docuchat.boundary.db.connection import get_async_engine, get_async_session_factory
from docuchat.boundary.db.CRUD import message_crud, session_crud
from docuchat.configs import get_settings


def _migrated_id() -> str:
    return f"migrated-{uuid.uuid4().hex}"


def plan_renames(
    message_ids: Sequence[str],
    new_id: Callable[[], str] = _migrated_id,
) -> dict[int, str]:
    """
    Compute replacement ids for repeated entries.

    Args:
        message_ids: Message ids in append order
        new_id: Factory for replacement ids

    Returns:
        dict[int, str]: Index in message_ids -> replacement id
    """
    seen = set(message_ids)
    first_seen: set[str] = set()
    renames: dict[int, str] = {}
    for index, message_id in enumerate(message_ids):
        if message_id not in first_seen:
            first_seen.add(message_id)
            continue
        replacement = new_id()
        while replacement in seen:
            replacement = new_id()
        seen.add(replacement)
        renames[index] = replacement
    return renames


async def fix_duplicate_ids(db: AsyncSession) -> int:
    """
    Repair duplicate ids in every session.

    Args:
        db: Async database session

    Returns:
        int: Number of sessions that were modified
    """
    repaired = 0
    for chat_session in await session_crud.list_sessions(db):
        messages = await message_crud.list_for_session(db, chat_session.id)
        renames = plan_renames([m.message_id for m in messages])
        if not renames:
            continue
        for index, replacement in renames.items():
            messages[index].message_id = replacement
        await db.flush()
        repaired += 1
        print(f"Fixed {len(renames)} duplicate id(s) in session {chat_session.session_id}")
    await db.commit()
    return repaired


async def _main() -> None:
    engine = get_async_engine(get_settings().database)
    factory = get_async_session_factory(engine)
    try:
        async with factory() as db:
            repaired = await fix_duplicate_ids(db)
    except Exception as e:
        print(f"❌ Migration failed: {e}")
        raise
    finally:
        await engine.dispose()

    if repaired:
        print(f"✅ Repaired {repaired} session(s) with duplicate message ids")
    else:
        print("✅ No duplicate message ids found")


if __name__ == "__main__":
    asyncio.run(_main())
