"""Record store interface and its in-memory implementation."""

import dataclasses
from dataclasses import dataclass
from typing import Protocol

from workshop_journal.domain.errors import RecordNotFoundError
from workshop_journal.domain.records import RECORD_TYPES, EntityKind, Record


class RecordStore(Protocol):
    """Persistence interface for the six journal collections."""

    def list_records(self, kind: EntityKind) -> list[Record]:
        """Return all records of a kind."""

    def get_record(self, kind: EntityKind, record_id: int) -> Record | None:
        """Return a record by id, if present."""

    def create_record(self, kind: EntityKind, payload: dict[str, object]) -> Record:
        """Store a new record under the next id and return it."""

    def update_record(
        self, kind: EntityKind, record_id: int, changes: dict[str, object]
    ) -> Record:
        """Merge changes onto an existing record and return it."""

    def filter_records(
        self, kind: EntityKind, field_name: str, value: object
    ) -> list[Record]:
        """Return records whose field equals the value."""


@dataclass
class InMemoryRecordStore(RecordStore):
    """Process-lifetime store with one id counter per entity kind."""

    _records: dict[EntityKind, dict[int, Record]]
    _next_ids: dict[EntityKind, int]

    def __init__(self) -> None:
        self.reset()

    def reset(self) -> None:
        """Drop every record and restart all id counters at 1."""
        self._records = {kind: {} for kind in EntityKind}
        self._next_ids = {kind: 1 for kind in EntityKind}

    def list_records(self, kind: EntityKind) -> list[Record]:
        return list(self._records[kind].values())

    def get_record(self, kind: EntityKind, record_id: int) -> Record | None:
        return self._records[kind].get(record_id)

    def create_record(self, kind: EntityKind, payload: dict[str, object]) -> Record:
        if "id" in payload:
            raise ValueError("id is assigned by the store")
        record_id = self._next_ids[kind]
        record = RECORD_TYPES[kind](id=record_id, **payload)
        self._next_ids[kind] = record_id + 1
        self._records[kind][record_id] = record
        return record

    def update_record(
        self, kind: EntityKind, record_id: int, changes: dict[str, object]
    ) -> Record:
        existing = self._records[kind].get(record_id)
        if existing is None:
            raise RecordNotFoundError(kind, record_id)
        if "id" in changes:
            raise ValueError("id cannot be changed")
        updated = dataclasses.replace(existing, **changes)
        self._records[kind][record_id] = updated
        return updated

    def filter_records(
        self, kind: EntityKind, field_name: str, value: object
    ) -> list[Record]:
        return [
            record
            for record in self._records[kind].values()
            if getattr(record, field_name) == value
        ]
