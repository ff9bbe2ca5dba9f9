"""Multipart upload endpoint for recorded media."""

from typing import TYPE_CHECKING, Annotated

from fastapi import APIRouter, File, Form, Request, UploadFile, status

from workshop_journal.api.schemas import serialize_record
from workshop_journal.domain.errors import ErrorKind, UploadRejectedError
from workshop_journal.domain.records import MediaType, RecordingStatus
from workshop_journal.services.uploads import UploadMetadata

if TYPE_CHECKING:
    from workshop_journal.containers import AppContainer

router = APIRouter(prefix="/api/recordings", tags=["recordings"])


@router.post("/upload", status_code=status.HTTP_201_CREATED)
async def upload_recording(  # noqa: PLR0913
    request: Request,
    session_id: Annotated[int, Form(alias="sessionId")],
    start_time: Annotated[str, Form(alias="startTime")],
    media_type: Annotated[MediaType, Form(alias="mediaType")],
    media: Annotated[UploadFile | None, File()] = None,
    end_time: Annotated[str | None, Form(alias="endTime")] = None,
    recording_status: Annotated[RecordingStatus, Form(alias="status")] = (
        RecordingStatus.COMPLETED
    ),
    tags: Annotated[str | None, Form()] = None,
) -> dict[str, object]:
    """Store an uploaded capture and create its recording."""
    if media is None:
        raise UploadRejectedError(ErrorKind.NO_FILE)
    container: AppContainer = request.app.state.container
    result = await container.upload_service.store_upload(
        media,
        UploadMetadata(
            session_id=session_id,
            start_time=start_time,
            end_time=end_time,
            media_type=media_type.value,
            status=recording_status.value,
            tags_json=tags,
        ),
    )
    return serialize_record(result.recording)
