"""Domain models for client-side recording capture."""

import json
from dataclasses import dataclass
from enum import StrEnum


class CaptureMode(StrEnum):
    AUDIO = "audio"
    VIDEO = "video"


class CaptureState(StrEnum):
    IDLE = "idle"
    PREVIEWING = "previewing"
    RECORDING = "recording"
    UPLOADING = "uploading"
    STOPPED = "stopped"


CONTAINER_TYPES: dict[CaptureMode, str] = {
    CaptureMode.VIDEO: "video/webm",
    CaptureMode.AUDIO: "audio/webm",
}


@dataclass(frozen=True)
class ClientTag:
    """A moment tagged during capture, held by the client until upload."""

    id: str
    timestamp: int
    created_at: int
    screenshot: str | None = None

    def to_payload(self) -> dict[str, object]:
        payload: dict[str, object] = {
            "id": self.id,
            "timestamp": self.timestamp,
            "created_at": self.created_at,
        }
        if self.screenshot is not None:
            payload["screenshot"] = self.screenshot
        return payload


@dataclass(frozen=True)
class CapturedMedia:
    """Finalized media assembled from the recorder's chunks."""

    data: bytes
    mime_type: str
    mode: CaptureMode
    start_time: str
    end_time: str


@dataclass(frozen=True)
class RecordingUpload:
    """Everything sent to the upload endpoint for one capture."""

    session_id: int
    media: CapturedMedia
    filename: str
    status: str
    tags: list[ClientTag]

    def form_fields(self) -> dict[str, str]:
        """Return the textual multipart fields."""
        return {
            "sessionId": str(self.session_id),
            "startTime": self.media.start_time,
            "endTime": self.media.end_time,
            "mediaType": str(self.media.mode),
            "status": str(self.status),
            "tags": json.dumps([tag.to_payload() for tag in self.tags]),
        }
