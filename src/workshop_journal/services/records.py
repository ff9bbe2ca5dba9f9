"""Application service for journal records."""

import logging
from dataclasses import dataclass

from workshop_journal.domain.capture import ClientTag
from workshop_journal.domain.errors import RecordNotFoundError
from workshop_journal.domain.records import (
    EntityKind,
    Observation,
    Record,
    Recording,
    TaggedMoment,
)
from workshop_journal.services.store import RecordStore

logger = logging.getLogger(__name__)


@dataclass
class RecordService:
    """List, get, create and update records, plus parent lookups."""

    store: RecordStore

    def list_records(self, kind: EntityKind) -> list[Record]:
        """Return all records of a kind."""
        return self.store.list_records(kind)

    def get_record(self, kind: EntityKind, record_id: int) -> Record | None:
        """Return a record by id, if present."""
        return self.store.get_record(kind, record_id)

    def require_record(self, kind: EntityKind, record_id: int) -> Record:
        """Return a record by id or raise RecordNotFoundError."""
        record = self.store.get_record(kind, record_id)
        if record is None:
            raise RecordNotFoundError(kind, record_id)
        return record

    def create_record(self, kind: EntityKind, payload: dict[str, object]) -> Record:
        """Create a record and return it with its id."""
        record = self.store.create_record(kind, payload)
        logger.info("Created %s record", kind, extra={"record_id": record.id})
        return record

    def update_record(
        self, kind: EntityKind, record_id: int, changes: dict[str, object]
    ) -> Record:
        """Merge changes onto an existing record."""
        return self.store.update_record(kind, record_id, changes)

    def observations_for_child(self, child_id: int) -> list[Observation]:
        return self.store.filter_records(EntityKind.OBSERVATION, "child_id", child_id)

    def recordings_for_session(self, session_id: int) -> list[Recording]:
        return self.store.filter_records(EntityKind.RECORDING, "session_id", session_id)

    def moments_for_recording(self, recording_id: int) -> list[TaggedMoment]:
        return self.store.filter_records(
            EntityKind.TAGGED_MOMENT, "recording_id", recording_id
        )

    def create_moments_from_tags(
        self, recording_id: int, tags: list[ClientTag]
    ) -> list[TaggedMoment]:
        """Persist client-held tags as tagged moments of a recording."""
        return [
            self.store.create_record(
                EntityKind.TAGGED_MOMENT,
                {
                    "recording_id": recording_id,
                    "timestamp": tag.timestamp,
                    "screenshot": tag.screenshot,
                },
            )
            for tag in tags
        ]
