"""
Persistence adapter: the record collection <-> one key in a durable store.

The collection is serialized as a bare JSON array of record objects
(`id`, `name`, `contact`, `section`, `salary`, `joinDate`), the layout existing
data already uses. Loading never fails on bad data: a missing key, non-JSON
text or a non-array payload all yield an empty collection, and individual
malformed entries are skipped.
"""

from __future__ import annotations

import json
from typing import List, Sequence

from pydantic import ValidationError

from roster.domain.models import Record
from roster.infrastructure.storage import KeyValueStore
from roster.utils.logging import get_logger

log = get_logger(__name__)

DEFAULT_NAMESPACE = "students"


class PersistenceAdapter:
    """
    Load and save the full record collection under `namespace`.

    Parameters
    ----------
    store : KeyValueStore
        Durable backend holding the serialized collection.
    namespace : str
        Key under which the collection is stored.
    """

    def __init__(self, store: KeyValueStore, namespace: str = DEFAULT_NAMESPACE) -> None:
        self.store = store
        self.namespace = namespace

    def load(self) -> List[Record]:
        raw = self.store.get(self.namespace)
        if raw is None:
            return []
        try:
            payload = json.loads(raw)
        except (json.JSONDecodeError, TypeError):
            log.warning("Stored records are not valid JSON; starting empty", extra={"key": self.namespace})
            return []
        if not isinstance(payload, list):
            log.warning("Stored records are not a JSON array; starting empty", extra={"key": self.namespace})
            return []

        records: List[Record] = []
        seen: set[str] = set()
        for position, entry in enumerate(payload):
            try:
                record = Record.model_validate(entry)
            except ValidationError:
                log.warning("Skipping malformed stored record", extra={"key": self.namespace, "position": position})
                continue
            if record.id in seen:
                log.warning("Skipping duplicate stored record", extra={"key": self.namespace, "record_id": record.id})
                continue
            seen.add(record.id)
            records.append(record)
        return records

    def save(self, records: Sequence[Record]) -> None:
        payload = [record.to_storage() for record in records]
        self.store.set(self.namespace, json.dumps(payload, ensure_ascii=False))


__all__ = ["DEFAULT_NAMESPACE", "PersistenceAdapter"]
