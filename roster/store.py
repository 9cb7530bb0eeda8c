"""
Record store: the authoritative in-memory collection of student records.

The store is built from the persistence adapter at startup and is the only
component that creates, replaces or removes records. Every accepted mutation
is written through to storage before the in-memory collection is swapped, so
the two never disagree and readers only ever see a complete collection.

Usage:
    from roster.store import RecordStore

    store = RecordStore.open(settings)
    outcome = store.submit(Submission(name="Alif", contact="01711111111", ...))
    if not outcome.accepted:
        print(outcome.error)
"""

from __future__ import annotations

from typing import Dict, Optional, Tuple

from roster.config import Settings, get_settings
from roster.domain.identifiers import IdentifierGenerator
from roster.domain.models import (
    Record,
    Submission,
    SubmitOutcome,
    SubmitStatus,
    parse_number,
)
from roster.domain.validation import validate
from roster.infrastructure.persistence import PersistenceAdapter
from roster.infrastructure.storage import open_key_value_store
from roster.utils.logging import get_logger

log = get_logger(__name__)


class RecordStore:
    """
    Owns the record collection and the edit-mode flag.

    Parameters
    ----------
    persistence : PersistenceAdapter
        Source of the initial collection and target of every write-through.
    identifiers : IdentifierGenerator | None
        Identifier scheme for new records. Defaults to `ST-001` style.
    """

    def __init__(
        self,
        persistence: PersistenceAdapter,
        identifiers: Optional[IdentifierGenerator] = None,
    ) -> None:
        self._persistence = persistence
        self._identifiers = identifiers or IdentifierGenerator()
        self._records: Tuple[Record, ...] = tuple(persistence.load())
        self._editing: Optional[str] = None
        log.info("Record store ready", extra={"records": len(self._records)})

    @classmethod
    def open(cls, settings: Optional[Settings] = None) -> "RecordStore":
        """Build a store wired to the backend and identifier format in `settings`."""
        settings = settings or get_settings()
        persistence = PersistenceAdapter(
            open_key_value_store(settings), namespace=settings.storage_namespace
        )
        return cls(persistence, IdentifierGenerator(settings.id_prefix, settings.id_width))

    @property
    def records(self) -> Tuple[Record, ...]:
        """Snapshot of the collection in insertion order."""
        return self._records

    @property
    def editing(self) -> Optional[str]:
        """Identifier currently being edited, if any."""
        return self._editing

    def __len__(self) -> int:
        return len(self._records)

    def get(self, identifier: str) -> Optional[Record]:
        return next((r for r in self._records if r.id == identifier), None)

    def _commit(self, records: Tuple[Record, ...]) -> None:
        # Persist first: a failed write raises and leaves the collection untouched.
        self._persistence.save(records)
        self._records = records

    def submit(self, fields: Submission) -> SubmitOutcome:
        """
        Create a record, or update the one in edit mode.

        Validation runs before either path; a rejected submission changes
        nothing and keeps edit mode as it was.
        """
        candidate = fields.normalized()
        result = validate(candidate)
        if not result.valid:
            log.debug("Submission rejected", extra={"reason": result.reason, "editing": self._editing})
            return SubmitOutcome(SubmitStatus.REJECTED, error=result.reason)

        values = {
            "name": candidate.name,
            "contact": candidate.contact,
            "section": candidate.section,
            "salary": parse_number(candidate.salary),
            "join_date": candidate.join_date,
        }

        if self._editing is not None:
            target, self._editing = self._editing, None
            return self._update(target, values)
        return self._create(values)

    def _create(self, values: Dict[str, object]) -> SubmitOutcome:
        identifier = self._identifiers.next(r.id for r in self._records)
        record = Record(id=identifier, **values)
        self._commit(self._records + (record,))
        log.info("Record created", extra={"record_id": identifier})
        return SubmitOutcome(SubmitStatus.CREATED, record=record)

    def _update(self, identifier: str, values: Dict[str, object]) -> SubmitOutcome:
        for index, current in enumerate(self._records):
            if current.id == identifier:
                break
        else:
            log.debug("Edit target no longer exists", extra={"record_id": identifier})
            return SubmitOutcome(SubmitStatus.MISSING)

        updated = current.model_copy(update=values)
        records = self._records[:index] + (updated,) + self._records[index + 1 :]
        self._commit(records)
        log.info("Record updated", extra={"record_id": identifier})
        return SubmitOutcome(SubmitStatus.UPDATED, record=updated)

    def remove(self, identifier: str, confirmed: bool = False) -> bool:
        """
        Delete the record with `identifier` once the caller has confirmed.

        Returns True when a record was removed. Unknown identifiers are a no-op.
        """
        if not confirmed:
            return False
        remaining = tuple(r for r in self._records if r.id != identifier)
        if len(remaining) == len(self._records):
            log.debug("Delete target not found", extra={"record_id": identifier})
            return False
        self._commit(remaining)
        log.info("Record deleted", extra={"record_id": identifier})
        return True

    def begin_edit(self, identifier: str) -> Optional[Dict[str, str]]:
        """Enter edit mode for `identifier` and return its values for a form."""
        record = self.get(identifier)
        if record is None:
            log.debug("Edit target not found", extra={"record_id": identifier})
            return None
        self._editing = identifier
        return record.form_values()

    def cancel_edit(self) -> None:
        self._editing = None


__all__ = ["RecordStore"]
