from __future__ import annotations

import asyncio

from sqlalchemy import create_engine, inspect

from app.database import Database
from app.storage import DatabaseStorage


def test_create_all_creates_storage_table(tmp_path) -> None:
    """Table creation should register the key-value storage table."""

    database_path = tmp_path / "fresh.db"
    database = Database(f"sqlite+aiosqlite:///{database_path}")
    asyncio.run(database.create_all())
    asyncio.run(database.dispose())

    inspector_engine = create_engine(f"sqlite:///{database_path}")
    try:
        inspector = inspect(inspector_engine)
        columns = {column["name"] for column in inspector.get_columns("storage_entries")}
    finally:
        inspector_engine.dispose()

    assert {"key", "value", "updated_at"} <= columns


def test_database_storage_reads_and_overwrites_values(tmp_path) -> None:
    """Values written through the storage survive a fresh engine."""

    database_path = tmp_path / "storage.db"

    async def write() -> str | None:
        database = Database(f"sqlite+aiosqlite:///{database_path}")
        await database.create_all()
        storage = DatabaseStorage(database.session_factory)
        try:
            missing = await storage.get("discover_favorites")
            await storage.set("discover_favorites", "[5]")
            await storage.set("discover_favorites", "[5,9]")
        finally:
            await database.dispose()
        return missing

    async def read() -> str | None:
        database = Database(f"sqlite+aiosqlite:///{database_path}")
        storage = DatabaseStorage(database.session_factory)
        try:
            return await storage.get("discover_favorites")
        finally:
            await database.dispose()

    assert asyncio.run(write()) is None
    assert asyncio.run(read()) == "[5,9]"
