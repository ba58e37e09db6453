"""Tests for the single-connection manager and schema setup."""

from pathlib import Path

import pytest

from wardcord.database.db_connection import ConnectionManager
from wardcord.database.db_schema import SCHEMA_VERSION, SchemaManager


def test_connection_before_open_raises():
    manager = ConnectionManager()
    assert not manager.is_open
    with pytest.raises(RuntimeError):
        manager.connection


@pytest.mark.asyncio
async def test_open_creates_parent_and_applies_wal(tmp_path: Path):
    manager = ConnectionManager()
    db_path = tmp_path / "nested" / "dir" / "test.db"

    await manager.open(db_path)
    try:
        assert db_path.parent.is_dir()
        async with manager.read() as conn:
            async with conn.execute("PRAGMA journal_mode") as cursor:
                (mode,) = await cursor.fetchone()
        assert mode.lower() == "wal"
    finally:
        await manager.close()

    assert not manager.is_open


@pytest.mark.asyncio
async def test_schema_is_idempotent(tmp_path: Path):
    manager = ConnectionManager()
    await manager.open(tmp_path / "test.db")
    try:
        await SchemaManager.initialize_schema(manager.connection)
        await SchemaManager.initialize_schema(manager.connection)

        async with manager.read() as conn:
            async with conn.execute("SELECT version FROM schema_version") as cursor:
                rows = await cursor.fetchall()
        assert rows == [(SCHEMA_VERSION,)]
    finally:
        await manager.close()


@pytest.mark.asyncio
async def test_transaction_rolls_back_on_error(tmp_path: Path):
    manager = ConnectionManager()
    await manager.open(tmp_path / "test.db")
    try:
        await SchemaManager.initialize_schema(manager.connection)

        with pytest.raises(ValueError):
            async with manager.transaction() as conn:
                await conn.execute("INSERT INTO guild_settings (guild_id, settings) VALUES (1, '{}')")
                raise ValueError("boom")

        async with manager.read() as conn:
            async with conn.execute("SELECT COUNT(*) FROM guild_settings") as cursor:
                (count,) = await cursor.fetchone()
        assert count == 0
    finally:
        await manager.close()


@pytest.mark.asyncio
async def test_double_open_is_ignored(tmp_path: Path):
    manager = ConnectionManager()
    await manager.open(tmp_path / "a.db")
    try:
        first = manager.connection
        await manager.open(tmp_path / "b.db")
        assert manager.connection is first
        assert not (tmp_path / "b.db").exists()
    finally:
        await manager.close()
