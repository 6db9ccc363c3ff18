"""Tests for the JSON document store."""

import json
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from thinkmem.core.errors import (
    MemoryAlreadyExistsError,
    MemoryNotFoundError,
    StorageError,
    ValidationError,
)
from thinkmem.memory.base import ListRole, MemoryType
from thinkmem.memory.list_memory import ListMemory
from thinkmem.memory.raw_memory import RawMemory
from thinkmem.storage.json_store import DB_VERSION, JsonStorage


@pytest.fixture
async def storage(tmp_path: Path):
    """Create a temporary store."""
    store = JsonStorage(tmp_path / "test.db")
    await store.connect()
    yield store
    await store.close()


class TestLifecycle:
    @pytest.mark.asyncio
    async def test_connect_creates_file(self, tmp_path: Path):
        db_path = tmp_path / "sub" / "new.db"
        store = JsonStorage(db_path)
        await store.connect()
        document = json.loads(db_path.read_text(encoding="utf-8"))
        assert document["memories"] == {}
        assert document["secrets"] == {}
        assert document["version"] == DB_VERSION
        await store.close()

    @pytest.mark.asyncio
    async def test_operations_require_connect(self, tmp_path: Path):
        store = JsonStorage(tmp_path / "test.db")
        with pytest.raises(StorageError):
            store.get_memory("x")
        with pytest.raises(StorageError):
            await store.add_memory(RawMemory("x"))

    @pytest.mark.asyncio
    async def test_context_manager(self, tmp_path: Path):
        async with JsonStorage(tmp_path / "test.db") as store:
            await store.add_memory(RawMemory("x"))
        async with JsonStorage(tmp_path / "test.db") as store:
            assert store.has_memory("x")

    @pytest.mark.asyncio
    async def test_reopen_yields_identical_data(self, tmp_path: Path):
        db_path = tmp_path / "test.db"
        async with JsonStorage(db_path) as store:
            raw = RawMemory("notes", "my notes", "line 0\nline 1\nünïcödé")
            raw.add_summary(0, 1, "first lines")
            await store.add_memory(raw)
            items = ListMemory("stack", "a stack", ListRole.STACK)
            items.push_top("one", "1")
            await store.add_memory(items)
        first = db_path.read_bytes()

        async with JsonStorage(db_path) as store:
            notes = store.get_memory("notes")
            assert notes.data == "line 0\nline 1\nünïcödé"
            assert notes.summaries[0].text == "first lines"
            assert store.get_memory("stack").peek_top().data == "1"
        assert db_path.read_bytes() == first


class TestMemories:
    @pytest.mark.asyncio
    async def test_add_and_get(self, storage: JsonStorage):
        await storage.add_memory(RawMemory("a", "desc", "text"))
        memory = storage.get_memory("a")
        assert memory.type is MemoryType.RAW
        assert memory.data == "text"
        assert storage.get_memory("missing") is None

    @pytest.mark.asyncio
    async def test_add_duplicate(self, storage: JsonStorage):
        await storage.add_memory(RawMemory("a"))
        with pytest.raises(MemoryAlreadyExistsError):
            await storage.add_memory(ListMemory("a"))

    @pytest.mark.asyncio
    async def test_get_returns_copy(self, storage: JsonStorage):
        await storage.add_memory(RawMemory("a", data="original"))
        storage.get_memory("a").write("changed")
        assert storage.get_memory("a").data == "original"

    @pytest.mark.asyncio
    async def test_get_empty_list(self, storage: JsonStorage):
        await storage.add_memory(ListMemory("inbox", role=ListRole.DEQUE))
        memory = storage.get_memory("inbox")
        assert isinstance(memory, ListMemory)
        assert len(memory) == 0
        assert [m.name for m in storage.list_memories_by_type("list")] == ["inbox"]

    @pytest.mark.asyncio
    async def test_update(self, storage: JsonStorage):
        await storage.add_memory(RawMemory("a", data="v1"))
        memory = storage.get_memory("a")
        memory.write("v2")
        await storage.update_memory(memory)
        assert storage.get_memory("a").data == "v2"

    @pytest.mark.asyncio
    async def test_update_missing(self, storage: JsonStorage):
        with pytest.raises(MemoryNotFoundError):
            await storage.update_memory(RawMemory("ghost"))

    @pytest.mark.asyncio
    async def test_delete_is_idempotent(self, storage: JsonStorage):
        await storage.add_memory(RawMemory("a"))
        assert await storage.delete_memory("a") is True
        assert await storage.delete_memory("a") is False
        assert not storage.has_memory("a")

    @pytest.mark.asyncio
    async def test_list_by_type(self, storage: JsonStorage):
        await storage.add_memory(RawMemory("r1"))
        await storage.add_memory(RawMemory("r2"))
        await storage.add_memory(ListMemory("l1"))
        assert {m.name for m in storage.list_memories_by_type("raw")} == {"r1", "r2"}
        assert [m.name for m in storage.list_memories_by_type(MemoryType.LIST)] == ["l1"]
        with pytest.raises(ValidationError):
            storage.list_memories_by_type("tree")

    @pytest.mark.asyncio
    async def test_search(self, storage: JsonStorage):
        await storage.add_memory(RawMemory("journal", "Daily NOTES"))
        await storage.add_memory(ListMemory("todo", "open tasks"))
        await storage.add_memory(RawMemory("scratch", "temporary"))
        assert [m.name for m in storage.search_memories("notes")] == ["journal"]
        assert [m.name for m in storage.search_memories("t", "list")] == ["todo"]
        assert len(storage.search_memories()) == 3
        with pytest.raises(ValidationError):
            storage.search_memories("(")

    @pytest.mark.asyncio
    async def test_stats(self, storage: JsonStorage):
        await storage.add_memory(RawMemory("r"))
        await storage.add_memory(ListMemory("l"))
        stats = storage.get_stats()
        assert stats["total_memories"] == 2
        assert stats["raw_memories"] == 1
        assert stats["list_memories"] == 1
        assert stats["graph_memories"] == 0
        assert stats["version"] == DB_VERSION


class TestRecovery:
    @pytest.mark.asyncio
    async def test_corrupt_file_is_moved_aside(self, tmp_path: Path):
        db_path = tmp_path / "test.db"
        db_path.write_text("{ not json", encoding="utf-8")

        async with JsonStorage(db_path) as store:
            assert store.list_memories() == []

        quarantined = list(tmp_path.glob("test.db.corrupt.*"))
        assert len(quarantined) == 1
        assert quarantined[0].read_text(encoding="utf-8") == "{ not json"
        assert json.loads(db_path.read_text(encoding="utf-8"))["memories"] == {}

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "document",
        [
            {"memories": [{"name": "a", "type": "raw"}]},
            {"memories": "oops"},
            {"memories": {}, "secrets": ["junk"]},
        ],
    )
    async def test_wrong_section_shape_is_moved_aside(self, tmp_path: Path, document):
        db_path = tmp_path / "test.db"
        db_path.write_text(json.dumps(document), encoding="utf-8")

        async with JsonStorage(db_path) as store:
            assert store.list_memories() == []
            assert await store.list_secrets() == []

        assert len(list(tmp_path.glob("test.db.corrupt.*"))) == 1
        assert json.loads(db_path.read_text(encoding="utf-8"))["memories"] == {}

    @pytest.mark.asyncio
    async def test_malformed_summary_keeps_document(self, tmp_path: Path):
        db_path = tmp_path / "test.db"
        record = {"name": "doc", "type": "raw", "data": "important\ntext", "summaries": [{"lineBeg": 0}]}
        db_path.write_text(json.dumps({"memories": {"doc": record}}), encoding="utf-8")

        async with JsonStorage(db_path) as store:
            doc = store.get_memory("doc")
            assert doc.data == "important\ntext"
            assert doc.summaries == []

    @pytest.mark.asyncio
    async def test_failed_connect_releases_lock(self, tmp_path: Path, monkeypatch):
        db_path = tmp_path / "test.db"
        store = JsonStorage(db_path, use_lock=True)

        def broken_load():
            raise RuntimeError("disk on fire")

        monkeypatch.setattr(store, "_load", broken_load)
        with pytest.raises(RuntimeError):
            await store.connect()
        assert not (tmp_path / "test.db.lock").exists()

        monkeypatch.undo()
        await store.connect()
        await store.close()

    @pytest.mark.asyncio
    async def test_unknown_and_broken_records_dropped(self, tmp_path: Path):
        db_path = tmp_path / "test.db"
        document = {
            "memories": {
                "good": {"name": "good", "type": "raw", "description": "", "data": "ok"},
                "weird": {"name": "weird", "type": "hologram"},
                "graph": {"name": "graph", "type": "graph"},
                "broken": {"type": "raw"},
            },
            "secrets": {},
            "version": DB_VERSION,
        }
        db_path.write_text(json.dumps(document), encoding="utf-8")

        async with JsonStorage(db_path) as store:
            assert [m.name for m in store.list_memories()] == ["good"]

    @pytest.mark.asyncio
    async def test_record_key_mismatch_uses_name(self, tmp_path: Path):
        db_path = tmp_path / "test.db"
        document = {
            "memories": {"old": {"name": "new", "type": "raw", "data": ""}},
            "secrets": {},
        }
        db_path.write_text(json.dumps(document), encoding="utf-8")

        async with JsonStorage(db_path) as store:
            assert store.has_memory("new")
            assert not store.has_memory("old")


class TestSecrets:
    @pytest.mark.asyncio
    async def test_validate_live_secret(self, storage: JsonStorage):
        expires = datetime.now(timezone.utc) + timedelta(hours=1)
        await storage.add_secret("s1", "A" * 16, expires)
        assert await storage.validate_secret("A" * 16) is True
        assert await storage.validate_secret("B" * 16) is False

    @pytest.mark.asyncio
    async def test_expired_secrets_cleaned_up(self, storage: JsonStorage):
        now = datetime.now(timezone.utc)
        await storage.add_secret("old", "A" * 16, now - timedelta(seconds=1))
        await storage.add_secret("new", "B" * 16, now + timedelta(hours=1))

        assert await storage.validate_secret("A" * 16) is False
        assert [s.secret_id for s in await storage.list_secrets()] == ["new"]
        assert await storage.get_secret("old") is None
        assert storage.get_stats()["secrets"] == 1

    @pytest.mark.asyncio
    async def test_secrets_persist(self, tmp_path: Path):
        db_path = tmp_path / "test.db"
        expires = datetime.now(timezone.utc) + timedelta(hours=1)
        async with JsonStorage(db_path) as store:
            await store.add_secret("s1", "C" * 16, expires)
        async with JsonStorage(db_path) as store:
            secret = await store.get_secret("s1")
            assert secret.secret == "C" * 16
            assert secret.expires_at == expires

    @pytest.mark.asyncio
    async def test_epoch_millisecond_expiry_accepted(self, tmp_path: Path):
        db_path = tmp_path / "test.db"
        future_ms = int((datetime.now(timezone.utc) + timedelta(hours=1)).timestamp() * 1000)
        document = {
            "memories": {},
            "secrets": {"s1": {"secret": "D" * 16, "createdAt": future_ms, "expiresAt": future_ms}},
        }
        db_path.write_text(json.dumps(document), encoding="utf-8")
        async with JsonStorage(db_path) as store:
            assert await store.validate_secret("D" * 16) is True


class TestBackup:
    @pytest.mark.asyncio
    async def test_backup_and_restore(self, tmp_path: Path):
        db_path = tmp_path / "test.db"
        async with JsonStorage(db_path) as store:
            await store.add_memory(RawMemory("keep", data="v1"))
            backup_path = await store.backup(tmp_path / "snapshot.json")
            assert backup_path.exists()

            await store.delete_memory("keep")
            await store.add_memory(RawMemory("later"))

            await store.restore(backup_path)
            assert store.has_memory("keep")
            assert not store.has_memory("later")

        # restoring keeps a safety copy of the replaced file
        assert list(tmp_path.glob("test.db.backup.*"))

    @pytest.mark.asyncio
    async def test_default_backup_name(self, storage: JsonStorage):
        path = await storage.backup()
        assert path.name.startswith("test.db.backup.")

    @pytest.mark.asyncio
    async def test_restore_missing_file(self, storage: JsonStorage, tmp_path: Path):
        with pytest.raises(StorageError):
            await storage.restore(tmp_path / "nope.json")
