"""Supabase-backed record store."""

import dataclasses
from dataclasses import dataclass

from supabase import Client

from workshop_journal.domain.errors import RecordNotFoundError
from workshop_journal.domain.records import RECORD_TYPES, EntityKind, Record
from workshop_journal.services.store import RecordStore

_TABLES: dict[EntityKind, str] = {
    EntityKind.CHILD: "children",
    EntityKind.WORKSHOP: "workshops",
    EntityKind.SESSION: "sessions",
    EntityKind.OBSERVATION: "observations",
    EntityKind.RECORDING: "recordings",
    EntityKind.TAGGED_MOMENT: "tagged_moments",
}


def _to_record(kind: EntityKind, row: dict[str, object]) -> Record:
    record_type = RECORD_TYPES[kind]
    names = {f.name for f in dataclasses.fields(record_type)}
    return record_type(**{name: row[name] for name in names if name in row})


@dataclass
class SupabaseRecordStore(RecordStore):
    """Supabase implementation of the record store; ids come from serial columns."""

    client: Client

    def list_records(self, kind: EntityKind) -> list[Record]:
        response = self.client.table(_TABLES[kind]).select("*").execute()
        return [_to_record(kind, row) for row in response.data or []]

    def get_record(self, kind: EntityKind, record_id: int) -> Record | None:
        response = (
            self.client.table(_TABLES[kind])
            .select("*")
            .eq("id", record_id)
            .limit(1)
            .execute()
        )
        if response.data:
            return _to_record(kind, response.data[0])
        return None

    def create_record(self, kind: EntityKind, payload: dict[str, object]) -> Record:
        if "id" in payload:
            raise ValueError("id is assigned by the store")
        response = self.client.table(_TABLES[kind]).insert(payload).execute()
        if not response.data:
            raise RuntimeError(f"Failed to create {kind} record in Supabase")
        return _to_record(kind, response.data[0])

    def update_record(
        self, kind: EntityKind, record_id: int, changes: dict[str, object]
    ) -> Record:
        if "id" in changes:
            raise ValueError("id cannot be changed")
        if not changes:
            existing = self.get_record(kind, record_id)
            if existing is None:
                raise RecordNotFoundError(kind, record_id)
            return existing
        response = (
            self.client.table(_TABLES[kind])
            .update(changes)
            .eq("id", record_id)
            .execute()
        )
        if not response.data:
            raise RecordNotFoundError(kind, record_id)
        return _to_record(kind, response.data[0])

    def filter_records(
        self, kind: EntityKind, field_name: str, value: object
    ) -> list[Record]:
        response = (
            self.client.table(_TABLES[kind]).select("*").eq(field_name, value).execute()
        )
        return [_to_record(kind, row) for row in response.data or []]
