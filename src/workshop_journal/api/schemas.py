"""Request models and JSON serialization for the journal API."""

import dataclasses
from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from workshop_journal.domain.records import (
    MediaType,
    ObservationType,
    Record,
    RecordingStatus,
    WorkshopStatus,
)


class CamelModel(BaseModel):
    """Accepts camelCase keys and ignores unknown ones."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_payload(self) -> dict[str, object]:
        return self.model_dump(mode="json")


class PatchModel(CamelModel):
    """Partial update: unknown keys and nulls on required fields are refused."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="forbid"
    )

    required_fields: ClassVar[frozenset[str]] = frozenset()

    @model_validator(mode="before")
    @classmethod
    def _reject_null_required(cls, data: object) -> object:
        if isinstance(data, dict):
            for name in cls.required_fields:
                for key in (name, to_camel(name)):
                    if key in data and data[key] is None:
                        raise ValueError(f"{key} may not be null")
        return data

    def changes(self) -> dict[str, object]:
        return self.model_dump(mode="json", exclude_unset=True)


class ChildCreate(CamelModel):
    name: str = Field(min_length=1)
    date_of_birth: str = Field(min_length=1)
    notes: str | None = None


class WorkshopCreate(CamelModel):
    title: str = Field(min_length=1)
    description: str = ""
    learning_goals: list[str] | None = None
    materials: list[str] | None = None
    status: WorkshopStatus = WorkshopStatus.ACTIVE
    image_url: str | None = None


class WorkshopPatch(PatchModel):
    required_fields: ClassVar[frozenset[str]] = frozenset(
        {"title", "description", "status"}
    )

    title: str | None = Field(default=None, min_length=1)
    description: str | None = None
    learning_goals: list[str] | None = None
    materials: list[str] | None = None
    status: WorkshopStatus | None = None
    image_url: str | None = None


class SessionCreate(CamelModel):
    workshop_id: int
    date: str = Field(min_length=1)
    notes: str | None = None
    attendees: list[int] | None = None
    images: list[str] | None = None
    audio_url: str | None = None


class ObservationCreate(CamelModel):
    child_id: int
    date: str = Field(min_length=1)
    type: ObservationType
    content: str = Field(min_length=1)
    learning_goals: list[str] | None = None
    images: list[str] | None = None
    tagged_moment_id: int | None = None


class RecordingCreate(CamelModel):
    session_id: int
    start_time: str = Field(min_length=1)
    end_time: str | None = None
    media_type: MediaType
    media_url: str | None = None
    transcription: str | None = None
    status: RecordingStatus = RecordingStatus.RECORDING


class RecordingPatch(PatchModel):
    required_fields: ClassVar[frozenset[str]] = frozenset(
        {"start_time", "media_type", "status"}
    )

    start_time: str | None = None
    end_time: str | None = None
    media_type: MediaType | None = None
    media_url: str | None = None
    transcription: str | None = None
    status: RecordingStatus | None = None


class TaggedMomentCreate(CamelModel):
    recording_id: int
    timestamp: int = Field(ge=0)
    start_offset: int | None = None
    end_offset: int | None = None
    note: str | None = None
    transcription: str | None = None
    child_ids: list[int] | None = None
    screenshot: str | None = None


class TaggedMomentPatch(PatchModel):
    required_fields: ClassVar[frozenset[str]] = frozenset({"timestamp"})

    timestamp: int | None = Field(default=None, ge=0)
    start_offset: int | None = None
    end_offset: int | None = None
    note: str | None = None
    transcription: str | None = None
    child_ids: list[int] | None = None


def serialize_record(record: Record) -> dict[str, object]:
    """Return a record as a camelCase JSON object."""
    return {
        to_camel(name): value for name, value in dataclasses.asdict(record).items()
    }


def serialize_records(records: list[Record]) -> list[dict[str, object]]:
    return [serialize_record(record) for record in records]
