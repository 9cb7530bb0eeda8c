"""
Pytest configuration for the student roster.

Provides fixtures for:
- Settings isolated from the developer's environment and `.env`
- In-memory storage, persistence adapter and record store
- Postgres DSN for integration tests
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Generator, List

import pytest

from roster.config import Settings, get_settings
from roster.domain.identifiers import IdentifierGenerator
from roster.domain.models import Submission
from roster.infrastructure.persistence import PersistenceAdapter
from roster.infrastructure.storage import MemoryKeyValueStore
from roster.store import RecordStore


class CountingStore(MemoryKeyValueStore):
    """Memory store that remembers every write."""

    def __init__(self) -> None:
        super().__init__()
        self.writes: List[str] = []

    def set(self, key: str, value: str) -> None:
        self.writes.append(value)
        super().set(key, value)


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Generator[Path, None, None]:
    """
    Run each test from a temp directory with no roster variables set.

    The default data file is relative, so the file backend writes into the
    temp directory and no `.env` file is picked up.
    """
    for name in list(os.environ):
        if name.startswith(("ROSTER_", "LOG_")) or name == "DB_TABLE":
            monkeypatch.delenv(name)
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()
    yield tmp_path / "roster-data.json"
    get_settings.cache_clear()


@pytest.fixture
def kv_store() -> CountingStore:
    return CountingStore()


@pytest.fixture
def persistence(kv_store: CountingStore) -> PersistenceAdapter:
    return PersistenceAdapter(kv_store, namespace="students")


@pytest.fixture
def store(persistence: PersistenceAdapter) -> RecordStore:
    return RecordStore(persistence, IdentifierGenerator("ST-", 3))


@pytest.fixture
def make_submission():
    """Factory for valid submissions with per-field overrides."""

    def _make(
        name: str = "Alif Rahman",
        contact: str = "01711111111",
        section: str = "A",
        salary: str = "1500",
        join_date: str = "2024-01-15",
    ) -> Submission:
        return Submission(
            name=name, contact=contact, section=section, salary=salary, join_date=join_date
        )

    return _make


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """
    Settings for integration tests, overridable via environment variables in CI.
    """
    return Settings(
        storage_backend="postgres",
        db_host=os.getenv("DB_HOST", "localhost"),
        db_port=int(os.getenv("DB_PORT", "5432")),
        db_user=os.getenv("DB_USER", "postgres"),
        db_password=os.getenv("DB_PASSWORD", "postgres"),
        db_name=os.getenv("DB_NAME", "roster"),
        db_table="roster_kv_test",
        log_level="DEBUG",
    )


@pytest.fixture(scope="session")
def test_dsn(test_settings: Settings) -> str:
    return (
        f"postgresql://{test_settings.db_user}:{test_settings.db_password}"
        f"@{test_settings.db_host}:{test_settings.db_port}/{test_settings.db_name}"
    )
