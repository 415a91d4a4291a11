"""Tests for session persistence."""

import asyncio
import threading

import pytest

from aidesigner.catalog import Catalog, ComponentRecord, PageContext

from .lib import SessionManager
from .storage import (
    COMPONENTS_KEY,
    SCAN_KEY,
    InMemorySessionStore,
    SQLiteSessionStore,
    StorageError,
)


@pytest.fixture
def catalog() -> Catalog:
    return Catalog(
        [
            ComponentRecord(
                id="10:1",
                name="Button",
                suggested_type="button",
                confidence=0.95,
                variant_groups={"State": ["enabled", "disabled"]},
                page_context=PageContext(page_name="Kit", page_id="0:1"),
            ),
            ComponentRecord(id="10:2", name="Blob"),
        ]
    )


@pytest.fixture
def sqlite_store(tmp_path):
    store = SQLiteSessionStore(tmp_path / "session.db")
    store.initialize()
    yield store
    store.close()


class TestSQLiteSessionStore:
    """Tests for SQLiteSessionStore."""

    @pytest.mark.unit
    def test_requires_initialize(self, tmp_path):
        store = SQLiteSessionStore(tmp_path / "session.db")
        with pytest.raises(RuntimeError):
            store._get_conn()

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_catalog_round_trip(self, sqlite_store, catalog):
        session = SessionManager(sqlite_store, "file-a")
        assert await session.save_catalog(catalog)

        stored = await sqlite_store.read_catalog()
        assert stored.document_fingerprint == "file-a"
        assert stored.version == "1.0"
        restored = stored.to_catalog()
        assert restored.ids() == ["10:1", "10:2"]
        assert restored.get("10:1").variant_groups == {"State": ["disabled", "enabled"]}
        assert restored.get("10:1").page_context.page_name == "Kit"

        saved = await sqlite_store.read_components()
        assert saved.document_fingerprint == "file-a"
        assert [c.id for c in saved.components] == ["10:1", "10:2"]

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_api_key(self, sqlite_store):
        assert await sqlite_store.read_api_key() is None
        await sqlite_store.write_api_key("secret")
        assert await sqlite_store.read_api_key() == "secret"
        await sqlite_store.clear_api_key()
        assert await sqlite_store.read_api_key() is None

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_clear_all(self, sqlite_store, catalog):
        await SessionManager(sqlite_store, "file-a").save_catalog(catalog)
        await sqlite_store.write_api_key("secret")
        await sqlite_store.clear_all()
        assert await sqlite_store.read_catalog() is None
        assert await sqlite_store.read_components() is None
        assert await sqlite_store.read_api_key() is None

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_persists_across_connections(self, tmp_path):
        first = SQLiteSessionStore(tmp_path / "session.db")
        first.initialize()
        await first.write_api_key("secret")
        first.close()

        second = SQLiteSessionStore(tmp_path / "session.db")
        second.initialize()
        assert await second.read_api_key() == "secret"
        second.close()

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_queries_run_off_event_loop_thread(self, sqlite_store, monkeypatch):
        threads = []
        original_get = sqlite_store._get

        def recording_get(key):
            threads.append(threading.get_ident())
            return original_get(key)

        monkeypatch.setattr(sqlite_store, "_get", recording_get)
        await sqlite_store.write_api_key("secret")
        results = await asyncio.gather(
            sqlite_store.read_api_key(), sqlite_store.read_catalog()
        )

        assert results == ["secret", None]
        assert threads and threading.get_ident() not in threads

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_corrupt_scan_raises_storage_error(self, sqlite_store):
        sqlite_store._set(SCAN_KEY, {"components": "nope"})
        with pytest.raises(StorageError):
            await sqlite_store.read_catalog()


class TestSessionManager:
    """Tests for SessionManager."""

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_load_for_same_document(self, catalog):
        store = InMemorySessionStore()
        await SessionManager(store, "file-a").save_catalog(catalog)

        stored = await SessionManager(store, "file-a").load_catalog()
        assert stored is not None
        assert len(stored.components) == 2

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_other_document_is_treated_as_absent(self, catalog):
        store = InMemorySessionStore()
        await SessionManager(store, "fileA").save_catalog(catalog)

        session = SessionManager(store, "fileB")
        assert await session.load_catalog() is None
        assert len(await session.current_catalog()) == 0
        assert SCAN_KEY not in store.values
        assert COMPONENTS_KEY not in store.values

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_empty_scan_is_absent(self):
        store = InMemorySessionStore()
        await SessionManager(store, "file-a").save_catalog(Catalog())
        assert await SessionManager(store, "file-a").load_catalog() is None

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_fallback_save(self, catalog):
        store = InMemorySessionStore(failing_keys={SCAN_KEY})
        session = SessionManager(store, "file-a")

        assert await session.save_catalog(catalog) is True
        assert SCAN_KEY not in store.values
        assert (await session.current_catalog()).ids() == ["10:1", "10:2"]

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_fallback_save_is_not_served_to_other_document(self, catalog):
        store = InMemorySessionStore(failing_keys={SCAN_KEY})
        await SessionManager(store, "fileA").save_catalog(catalog)
        assert store.values[COMPONENTS_KEY]["fileKey"] == "fileA"

        assert len(await SessionManager(store, "fileB").current_catalog()) == 0
        assert COMPONENTS_KEY not in store.values

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_unreadable_components_are_absent(self, sqlite_store):
        sqlite_store._set(COMPONENTS_KEY, [{"id": "10:1", "name": "Button"}])
        assert len(await SessionManager(sqlite_store, "file-a").current_catalog()) == 0

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_save_failure_is_reported(self, catalog):
        store = InMemorySessionStore(failing_keys={SCAN_KEY, COMPONENTS_KEY})
        assert await SessionManager(store, "file-a").save_catalog(catalog) is False

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_read_failure_is_absent(self, catalog):
        class BrokenStore(InMemorySessionStore):
            async def read_catalog(self):
                raise StorageError("disk on fire")

        assert await SessionManager(BrokenStore(), "file-a").load_catalog() is None

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_update_component_type(self, catalog):
        store = InMemorySessionStore()
        session = SessionManager(store, "file-a")
        await session.save_catalog(catalog)

        record = await session.update_component_type("10:2", " Icon-Button ")

        assert record.suggested_type == "icon-button"
        assert record.confidence == 1.0
        assert record.is_verified
        reloaded = await session.current_catalog()
        assert reloaded.get("10:2").suggested_type == "icon-button"
        assert reloaded.get("10:2").is_verified

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_update_unknown_component(self, catalog):
        session = SessionManager(InMemorySessionStore(), "file-a")
        await session.save_catalog(catalog)
        with pytest.raises(KeyError):
            await session.update_component_type("99:9", "button")

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_api_key_is_trimmed(self):
        session = SessionManager(InMemorySessionStore(), None)
        await session.save_api_key("  secret \n")
        assert await session.get_api_key() == "secret"


@pytest.mark.unit
def test_sqlite_path_from_environment(monkeypatch, tmp_path):
    monkeypatch.setenv("SESSION_DB_PATH", str(tmp_path / "env.db"))
    assert SQLiteSessionStore().db_path == tmp_path / "env.db"
