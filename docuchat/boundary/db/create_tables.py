"""
Database table creation script.

Creates all tables defined in ORM models using SQLAlchemy metadata.

Dependencies: sqlalchemy, docuchat.configs
System role: Database schema initialization

Usage:
    python -m docuchat.boundary.db.create_tables
"""

import asyncio

from docuchat.boundary.db.connection import create_tables, get_async_engine
from docuchat.configs import get_settings


async def create_all_tables() -> None:
    """
    Create all database tables from registered ORM models.

    Idempotent: existing tables remain unchanged.

    Raises:
        SQLAlchemyError: If database connection fails or table creation fails
    """
    engine = get_async_engine(get_settings().database)
    try:
        await create_tables(engine)
    finally:
        await engine.dispose()
    print("All tables created successfully.")


if __name__ == "__main__":
    asyncio.run(create_all_tables())
