from __future__ import annotations

import json
from pathlib import Path
from typing import Any, List, Optional, Tuple

import psycopg
import pytest

from roster.config import Settings
from roster.infrastructure.persistence import PersistenceAdapter
from roster.infrastructure.storage import (
    JsonFileKeyValueStore,
    KeyValueStore,
    MemoryKeyValueStore,
    PostgresKeyValueStore,
    StorageError,
    available_backends,
    open_key_value_store,
)
from roster.store import RecordStore


def test_memory_store_roundtrip():
    kv = MemoryKeyValueStore()
    assert kv.get("k") is None
    kv.set("k", "v")
    assert kv.get("k") == "v"
    assert isinstance(kv, KeyValueStore)


def test_file_store_persists_across_instances(tmp_path: Path):
    path = tmp_path / "nested" / "data.json"
    JsonFileKeyValueStore(path).set("students", "[]")
    JsonFileKeyValueStore(path).set("other", "x")

    reopened = JsonFileKeyValueStore(path)
    assert reopened.get("students") == "[]"
    assert reopened.get("other") == "x"
    assert json.loads(path.read_text(encoding="utf-8")) == {"students": "[]", "other": "x"}


def test_file_store_missing_file_reads_none(tmp_path: Path):
    assert JsonFileKeyValueStore(tmp_path / "absent.json").get("students") is None


def test_file_store_corrupt_file_reads_empty_and_is_replaced_on_write(tmp_path: Path):
    path = tmp_path / "data.json"
    path.write_text("definitely not json", encoding="utf-8")
    kv = JsonFileKeyValueStore(path)
    assert kv.get("students") is None

    kv.set("students", "[]")
    assert kv.get("students") == "[]"


def test_file_store_leaves_no_temp_files(tmp_path: Path):
    kv = JsonFileKeyValueStore(tmp_path / "data.json")
    kv.set("a", "1")
    kv.set("a", "2")
    assert sorted(p.name for p in tmp_path.iterdir()) == ["data.json"]


def test_file_store_unreadable_path_raises_storage_error(tmp_path: Path):
    kv = JsonFileKeyValueStore(tmp_path)  # a directory, not a file
    with pytest.raises(StorageError):
        kv.get("students")


def test_registry_lists_backends():
    assert available_backends() == ["file", "memory", "postgres"]


def test_open_key_value_store_selects_backend(tmp_path: Path):
    file_store = open_key_value_store(Settings(storage_backend="file", data_file=str(tmp_path / "d.json")))
    assert isinstance(file_store, JsonFileKeyValueStore)
    assert isinstance(open_key_value_store(Settings(storage_backend="memory")), MemoryKeyValueStore)
    pg = open_key_value_store(Settings(storage_backend="postgres", db_table="kv"))
    assert isinstance(pg, PostgresKeyValueStore)
    assert pg.table == "kv"


def test_open_key_value_store_rejects_unknown_backend():
    with pytest.raises(ValueError, match="Unknown storage backend"):
        open_key_value_store(Settings(storage_backend="redis"))


class _FakeCursor:
    def __init__(self, conn: "_FakeConnection") -> None:
        self._conn = conn

    def __enter__(self) -> "_FakeCursor":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        del exc_type, exc, tb

    def execute(self, query: Any, params: Optional[Tuple[Any, ...]] = None) -> None:
        if self._conn.fail:
            raise psycopg.OperationalError("server closed the connection")
        self._conn.executed.append((query, params))

    def fetchone(self) -> Optional[Tuple[str]]:
        return self._conn.row


class _FakeConnection:
    def __init__(self, row: Optional[Tuple[str]] = None, fail: bool = False) -> None:
        self.row = row
        self.fail = fail
        self.executed: List[Tuple[Any, Any]] = []
        self.commits = 0
        self.closed = False

    def cursor(self) -> _FakeCursor:
        return _FakeCursor(self)

    def commit(self) -> None:
        self.commits += 1

    def close(self) -> None:
        self.closed = True


def test_postgres_store_get_returns_value_and_closes():
    conn = _FakeConnection(row=("[]",))
    kv = PostgresKeyValueStore(table="kv", connection_factory=lambda: conn)

    assert kv.get("students") == "[]"
    assert conn.closed
    # schema statement, then the select
    assert len(conn.executed) == 2
    assert conn.executed[1][1] == ("students",)


def test_postgres_store_get_missing_key():
    kv = PostgresKeyValueStore(connection_factory=lambda: _FakeConnection(row=None))
    assert kv.get("students") is None


def test_postgres_store_set_upserts_and_commits():
    connections: List[_FakeConnection] = []

    def factory() -> _FakeConnection:
        connections.append(_FakeConnection())
        return connections[-1]

    kv = PostgresKeyValueStore(connection_factory=factory)
    kv.set("students", "[1]")
    kv.set("students", "[2]")

    first, second = connections
    assert first.commits == 1 and first.closed
    assert first.executed[-1][1] == ("students", "[1]")
    # schema is only ensured once per store
    assert len(second.executed) == 1
    assert second.executed[0][1] == ("students", "[2]")


def test_postgres_store_wraps_driver_errors():
    conn = _FakeConnection(fail=True)
    kv = PostgresKeyValueStore(connection_factory=lambda: conn)
    with pytest.raises(StorageError):
        kv.set("students", "[]")
    assert conn.closed


def test_file_store_invalid_utf8_reads_empty(tmp_path: Path):
    path = tmp_path / "data.json"
    path.write_bytes(b'{"students": "\xff\xfe garbage"}')
    kv = JsonFileKeyValueStore(path)
    assert kv.get("students") is None

    kv.set("students", "[]")
    assert kv.get("students") == "[]"


def test_record_store_over_undecodable_file_starts_empty(tmp_path: Path):
    path = tmp_path / "data.json"
    path.write_bytes(b"\xff" * 32)
    store = RecordStore(PersistenceAdapter(JsonFileKeyValueStore(path)))
    assert store.records == ()
