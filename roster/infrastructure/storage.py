"""
Durable key-value stores backing the roster.

Every backend maps string keys to string values, the same contract a browser's
local storage offers. The persistence adapter keeps the whole record collection
under a single key, so a backend only needs `get` and `set`.

Backends are registered by name (`file`, `memory`, `postgres`) and selected via
`Settings.storage_backend`. Database connections retry transient failures
using tenacity.
"""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Callable, Dict, List, Optional, Protocol, runtime_checkable

import psycopg
from psycopg import Connection, sql
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from roster.config import Settings, get_settings
from roster.utils.logging import get_logger

log = get_logger(__name__)


class StorageError(RuntimeError):
    """Raised when the durable store cannot be read or written."""


@runtime_checkable
class KeyValueStore(Protocol):
    """
    Minimal durable key-value interface.

    Attributes
    ----------
    name : str
        Short backend identifier used in logs and the `info` command.
    """

    name: str

    def get(self, key: str) -> Optional[str]:
        """Return the value stored under `key`, or None when absent."""
        ...

    def set(self, key: str, value: str) -> None:
        """Store `value` under `key`, replacing any previous value."""
        ...


class MemoryKeyValueStore:
    """Process-local store; contents vanish at exit."""

    name: str = "memory"

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value


class JsonFileKeyValueStore:
    """
    All keys kept in one JSON object file.

    Writes go to a temporary file in the same directory which then replaces the
    data file, so readers never observe a half-written file. A file that is not
    a JSON object reads as empty.
    """

    name: str = "file"

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)

    def _read_all(self) -> Dict[str, str]:
        try:
            raw = self.path.read_bytes()
        except FileNotFoundError:
            return {}
        except OSError as exc:
            raise StorageError(f"Cannot read {self.path}: {exc}") from exc
        try:
            data = json.loads(raw)
        except (json.JSONDecodeError, UnicodeDecodeError):
            log.warning("Storage file is not valid UTF-8 JSON; treating as empty", extra={"path": str(self.path)})
            return {}
        if not isinstance(data, dict):
            log.warning("Storage file is not a JSON object; treating as empty", extra={"path": str(self.path)})
            return {}
        return {str(k): v if isinstance(v, str) else json.dumps(v) for k, v in data.items()}

    def get(self, key: str) -> Optional[str]:
        return self._read_all().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._read_all()
        data[key] = value
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=f".{self.path.name}.", dir=self.path.parent)
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(data, f, indent=2, ensure_ascii=False)
                os.replace(tmp_name, self.path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as exc:
            raise StorageError(f"Cannot write {self.path}: {exc}") from exc


def build_dsn(settings: Optional[Settings] = None) -> str:
    """Compose a DSN string from settings."""
    settings = settings or get_settings()
    return (
        f"postgresql://{settings.db_user}:{settings.db_password}"
        f"@{settings.db_host}:{settings.db_port}/{settings.db_name}"
    )


@retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=1, max=10),
    retry=retry_if_exception_type((psycopg.OperationalError, psycopg.InterfaceError)),
    reraise=True,
)
def get_sync_connection(dsn: Optional[str] = None) -> Connection:
    """
    Acquire a dedicated synchronous connection with automatic retry.

    Retries up to 3 times with exponential backoff for transient connection errors.

    Raises
    ------
    psycopg.OperationalError
        If connection fails after all retry attempts.
    """
    return psycopg.connect(dsn or build_dsn())


class PostgresKeyValueStore:
    """
    Key-value rows in a PostgreSQL table `(key TEXT PRIMARY KEY, value TEXT)`.

    A short-lived connection is opened per operation; the roster issues one
    read at startup and one write per mutation, so pooling buys nothing.
    """

    name: str = "postgres"

    def __init__(
        self,
        table: str = "roster_kv",
        connection_factory: Optional[Callable[[], Connection]] = None,
    ) -> None:
        self.table = table
        self._connect = connection_factory or get_sync_connection
        self._schema_ready = False

    def _ensure_schema(self, conn: Connection) -> None:
        if self._schema_ready:
            return
        with conn.cursor() as cur:
            cur.execute(
                sql.SQL(
                    "CREATE TABLE IF NOT EXISTS {} (key TEXT PRIMARY KEY, value TEXT NOT NULL)"
                ).format(sql.Identifier(self.table))
            )
        self._schema_ready = True

    def get(self, key: str) -> Optional[str]:
        try:
            conn = self._connect()
            try:
                self._ensure_schema(conn)
                with conn.cursor() as cur:
                    cur.execute(
                        sql.SQL("SELECT value FROM {} WHERE key = %s").format(
                            sql.Identifier(self.table)
                        ),
                        (key,),
                    )
                    row = cur.fetchone()
                conn.commit()
            finally:
                conn.close()
        except psycopg.Error as exc:
            raise StorageError(f"Cannot read key {key!r}: {exc}") from exc
        return row[0] if row else None

    def set(self, key: str, value: str) -> None:
        try:
            conn = self._connect()
            try:
                self._ensure_schema(conn)
                with conn.cursor() as cur:
                    cur.execute(
                        sql.SQL(
                            "INSERT INTO {} (key, value) VALUES (%s, %s) "
                            "ON CONFLICT (key) DO UPDATE SET value = EXCLUDED.value"
                        ).format(sql.Identifier(self.table)),
                        (key, value),
                    )
                conn.commit()
            finally:
                conn.close()
        except psycopg.Error as exc:
            raise StorageError(f"Cannot write key {key!r}: {exc}") from exc


def _backend_factories() -> Dict[str, Callable[[Settings], KeyValueStore]]:
    """Registry of available storage backends."""
    return {
        "file": lambda s: JsonFileKeyValueStore(s.data_file),
        "memory": lambda s: MemoryKeyValueStore(),
        "postgres": lambda s: PostgresKeyValueStore(
            table=s.db_table, connection_factory=lambda: get_sync_connection(build_dsn(s))
        ),
    }


def available_backends() -> List[str]:
    """List available backend names."""
    return sorted(_backend_factories().keys())


def open_key_value_store(settings: Optional[Settings] = None) -> KeyValueStore:
    """Instantiate the backend named by `settings.storage_backend`."""
    settings = settings or get_settings()
    factories = _backend_factories()
    name = settings.storage_backend
    if name not in factories:
        raise ValueError(f"Unknown storage backend '{name}'. Available: {', '.join(factories)}")
    return factories[name](settings)


__all__ = [
    "JsonFileKeyValueStore",
    "KeyValueStore",
    "MemoryKeyValueStore",
    "PostgresKeyValueStore",
    "StorageError",
    "available_backends",
    "build_dsn",
    "get_sync_connection",
    "open_key_value_store",
]
