"""Turn an uploaded capture into a stored recording."""

import json
import logging
from dataclasses import dataclass

from pydantic import TypeAdapter, ValidationError

from workshop_journal.domain.capture import ClientTag
from workshop_journal.domain.errors import ErrorKind, JournalError, UploadFailedError
from workshop_journal.domain.records import EntityKind, Recording, TaggedMoment
from workshop_journal.services.media import MediaSource, MediaStorage
from workshop_journal.services.records import RecordService

logger = logging.getLogger(__name__)

_TAGS_ADAPTER = TypeAdapter(list[ClientTag])


@dataclass(frozen=True)
class UploadMetadata:
    """Textual fields sent alongside the media part."""

    session_id: int
    start_time: str
    end_time: str | None
    media_type: str
    status: str
    tags_json: str | None = None


@dataclass(frozen=True)
class UploadResult:
    recording: Recording
    moments: list[TaggedMoment]


def parse_tags(raw: str | None) -> list[ClientTag]:
    """Parse the JSON-encoded tag list, raising JournalError when malformed."""
    if raw is None or not raw.strip():
        return []
    try:
        return _TAGS_ADAPTER.validate_python(json.loads(raw))
    except (json.JSONDecodeError, ValidationError) as exc:
        raise JournalError(ErrorKind.INVALID_DATA) from exc


@dataclass
class RecordingUploadService:
    """Validates, stores, and registers uploaded recordings."""

    media_storage: MediaStorage
    record_service: RecordService

    async def store_upload(
        self, source: MediaSource, metadata: UploadMetadata
    ) -> UploadResult:
        """Write the media file, then create the recording and its moments."""
        self.media_storage.check_type(source.content_type)
        tags = parse_tags(metadata.tags_json)
        stored = await self.media_storage.save(source)
        try:
            recording = self.record_service.create_record(
                EntityKind.RECORDING,
                {
                    "session_id": metadata.session_id,
                    "start_time": metadata.start_time,
                    "end_time": metadata.end_time,
                    "media_type": metadata.media_type,
                    "status": metadata.status,
                    "media_url": stored.url,
                },
            )
            moments = self.record_service.create_moments_from_tags(
                recording.id, tags
            )
        except Exception as exc:
            logger.exception(
                "Failed to register uploaded recording",
                extra={"file": stored.filename},
            )
            raise UploadFailedError() from exc
        logger.info(
            "Stored uploaded recording",
            extra={"recording_id": recording.id, "bytes": stored.size},
        )
        return UploadResult(recording=recording, moments=moments)
