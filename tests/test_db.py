"""Tests for the SQLite note store."""

import sqlite3
from contextlib import closing

import pytest

from jotter.db import ConnectionState, NoteStore
from jotter.errors import ReadFailed, StorageNotReady, StorageUnavailable, WriteFailed


def run_sql(db_path, script: str) -> None:
    """Run ``script`` through a second, independent connection."""
    with closing(sqlite3.connect(db_path)) as conn:
        conn.executescript(script)
        conn.commit()


@pytest.mark.asyncio
async def test_open_creates_schema(store, db_path) -> None:
    await store.open()

    assert store.state is ConnectionState.READY
    with closing(sqlite3.connect(db_path)) as conn:
        tables = {row[0] for row in conn.execute("SELECT name FROM sqlite_master WHERE type = 'table'")}
        indexes = {row[1]: row[2] for row in conn.execute("PRAGMA index_list(notes)")}
        version = conn.execute("SELECT MAX(version) FROM schema_version").fetchone()[0]

    assert {"notes", "schema_version"} <= tables
    assert indexes == {"idx_notes_content": 0, "idx_notes_timestamp": 0}
    assert version == 1


@pytest.mark.asyncio
async def test_open_is_idempotent(store) -> None:
    first = await store.open()
    second = await store.open()

    assert first is second is store
    assert store.state is ConnectionState.READY


@pytest.mark.asyncio
async def test_create_then_list_round_trip(store, clock) -> None:
    await store.open()
    start = clock.now

    first = await store.create("Buy milk")
    second = await store.create("Call the bank")
    notes = await store.list_all()

    assert second > first
    assert [(n.id, n.content) for n in notes] == [(first, "Buy milk"), (second, "Call the bank")]
    assert [n.timestamp for n in notes] == [start, start + clock.step]


@pytest.mark.asyncio
async def test_list_all_empty(store) -> None:
    await store.open()

    assert await store.list_all() == []


@pytest.mark.asyncio
async def test_list_all_uses_key_order_not_timestamp(store, clock) -> None:
    clock.step = -1000
    await store.open()

    for content in ("a", "b", "c"):
        await store.create(content)
    notes = await store.list_all()

    assert [n.content for n in notes] == ["a", "b", "c"]
    assert notes[0].timestamp > notes[-1].timestamp


@pytest.mark.asyncio
async def test_duplicate_content_is_allowed(store) -> None:
    await store.open()

    await store.create("same")
    await store.create("same")

    assert [n.content for n in await store.list_all()] == ["same", "same"]


@pytest.mark.asyncio
async def test_ids_are_never_reused(store, db_path) -> None:
    await store.open()
    last = await store.create("to be removed out of band")
    run_sql(db_path, f"DELETE FROM notes WHERE id = {last};")

    assert await store.create("next") > last


@pytest.mark.asyncio
async def test_create_rejects_empty_content(store) -> None:
    await store.open()

    with pytest.raises(ValueError):
        await store.create("")


@pytest.mark.asyncio
async def test_operations_before_open_are_rejected(store) -> None:
    with pytest.raises(StorageNotReady):
        await store.create("too early")
    with pytest.raises(StorageNotReady):
        await store.list_all()


@pytest.mark.asyncio
async def test_close_returns_to_uninitialized(store) -> None:
    await store.open()
    await store.create("kept")
    store.close()

    assert store.state is ConnectionState.UNINITIALIZED
    with pytest.raises(StorageNotReady):
        await store.list_all()

    await store.open()
    assert [n.content for n in await store.list_all()] == ["kept"]


@pytest.mark.asyncio
async def test_newer_database_version_is_unavailable(db_path) -> None:
    newer = NoteStore(db_path, version=2)
    await newer.open()
    newer.close()

    older = NoteStore(db_path, version=1)
    with pytest.raises(StorageUnavailable, match="newer"):
        await older.open()
    assert older.state is ConnectionState.FAILED


@pytest.mark.asyncio
async def test_failed_open_is_terminal(tmp_path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory")
    store = NoteStore(blocker / "NotesAppDB.db")

    with pytest.raises(StorageUnavailable):
        await store.open()

    # Even once the obstacle is gone, the store stays failed
    blocker.unlink()
    with pytest.raises(StorageUnavailable):
        await store.open()
    assert store.state is ConnectionState.FAILED
    with pytest.raises(StorageNotReady):
        await store.create("never")


@pytest.mark.asyncio
async def test_write_failure_creates_no_record(store, db_path) -> None:
    await store.open()
    await store.create("before")
    run_sql(db_path, """
        CREATE TRIGGER reject_notes BEFORE INSERT ON notes
        BEGIN
            SELECT RAISE(ABORT, 'storage full');
        END;
    """)

    with pytest.raises(WriteFailed, match="storage full"):
        await store.create("lost")

    assert [n.content for n in await store.list_all()] == ["before"]


@pytest.mark.asyncio
async def test_read_failure_raises_read_failed(store, db_path) -> None:
    await store.open()
    run_sql(db_path, "DROP TABLE notes;")

    with pytest.raises(ReadFailed):
        await store.list_all()


@pytest.mark.asyncio
async def test_invalid_row_raises_read_failed(store, db_path) -> None:
    await store.open()
    await store.create("fine")
    run_sql(db_path, "INSERT INTO notes (content, timestamp) VALUES ('', 1);")

    with pytest.raises(ReadFailed):
        await store.list_all()


@pytest.mark.asyncio
async def test_worker_after_close_raises_not_ready(store) -> None:
    await store.open()
    store.close()

    # The worker side re-checks the connection it is handed
    with pytest.raises(StorageNotReady):
        store._insert("late")
    with pytest.raises(StorageNotReady):
        store._scan()
