"""Domain records stored by the journal."""

from dataclasses import dataclass
from enum import StrEnum


class EntityKind(StrEnum):
    """Entity collections, valued by their API collection name."""

    CHILD = "children"
    WORKSHOP = "workshops"
    SESSION = "sessions"
    OBSERVATION = "observations"
    RECORDING = "recordings"
    TAGGED_MOMENT = "moments"


class WorkshopStatus(StrEnum):
    ACTIVE = "active"
    COMPLETED = "completed"


class ObservationType(StrEnum):
    SOCIAL_EMOTIONAL = "Sociaal-emotioneel"
    MOTOR = "Motoriek"
    LANGUAGE = "Taal"
    COGNITIVE = "Cognitief"
    CREATIVITY = "Creativiteit"


class MediaType(StrEnum):
    AUDIO = "audio"
    VIDEO = "video"


class RecordingStatus(StrEnum):
    RECORDING = "recording"
    PROCESSING = "processing"
    READY = "ready"
    COMPLETED = "completed"


@dataclass(frozen=True)
class Child:
    """A child followed by the workshop staff."""

    id: int
    name: str
    date_of_birth: str
    notes: str | None = None


@dataclass(frozen=True)
class Workshop:
    """A workshop with its learning goals and materials."""

    id: int
    title: str
    description: str = ""
    learning_goals: list[str] | None = None
    materials: list[str] | None = None
    status: str = WorkshopStatus.ACTIVE
    image_url: str | None = None


@dataclass(frozen=True)
class Session:
    """A single dated occurrence of a workshop."""

    id: int
    workshop_id: int
    date: str
    notes: str | None = None
    attendees: list[int] | None = None
    images: list[str] | None = None
    audio_url: str | None = None


@dataclass(frozen=True)
class Observation:
    """A free-text observation about a child."""

    id: int
    child_id: int
    date: str
    type: str
    content: str
    learning_goals: list[str] | None = None
    images: list[str] | None = None
    tagged_moment_id: int | None = None


@dataclass(frozen=True)
class Recording:
    """A finished audio or video capture tied to a session."""

    id: int
    session_id: int
    start_time: str
    media_type: str
    end_time: str | None = None
    media_url: str | None = None
    transcription: str | None = None
    status: str = RecordingStatus.RECORDING


@dataclass(frozen=True)
class TaggedMoment:
    """A user-marked point in a recording, in elapsed seconds."""

    id: int
    recording_id: int
    timestamp: int
    start_offset: int | None = None
    end_offset: int | None = None
    note: str | None = None
    transcription: str | None = None
    child_ids: list[int] | None = None
    screenshot: str | None = None


Record = Child | Workshop | Session | Observation | Recording | TaggedMoment

RECORD_TYPES: dict[EntityKind, type] = {
    EntityKind.CHILD: Child,
    EntityKind.WORKSHOP: Workshop,
    EntityKind.SESSION: Session,
    EntityKind.OBSERVATION: Observation,
    EntityKind.RECORDING: Recording,
    EntityKind.TAGGED_MOMENT: TaggedMoment,
}
