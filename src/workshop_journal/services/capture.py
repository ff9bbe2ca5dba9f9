"""Recording capture state machine for a session's audio or video."""

import asyncio
import base64
import logging
import time
import uuid
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Protocol

from workshop_journal.domain.capture import (
    CONTAINER_TYPES,
    CapturedMedia,
    CaptureMode,
    CaptureState,
    ClientTag,
    RecordingUpload,
)
from workshop_journal.domain.errors import (
    CaptureError,
    ErrorKind,
    MediaAccessError,
    UploadFailedError,
)
from workshop_journal.domain.records import RecordingStatus
from workshop_journal.services.cache import QueryCache
from workshop_journal.services.views import session_recordings_key

logger = logging.getLogger(__name__)


class MediaTrack(Protocol):
    def stop(self) -> None:
        """Release the underlying device."""


class MediaStream(Protocol):
    def get_tracks(self) -> list[MediaTrack]:
        """Return every track of the stream."""


class MediaDevices(Protocol):
    """Platform access to camera and microphone."""

    async def get_user_media(self, *, video: bool, audio: bool) -> MediaStream:
        """Open a stream; raise MediaAccessError when access fails."""


class MediaRecorder(Protocol):
    def start(self, timeslice_ms: int) -> None:
        """Start emitting encoded chunks every timeslice."""

    def stop(self) -> None:
        """Request a stop; the final chunk and on_stop arrive later."""


class RecorderFactory(Protocol):
    def __call__(
        self,
        stream: MediaStream,
        mime_type: str,
        on_data: Callable[[bytes], None],
        on_stop: Callable[[], None],
    ) -> MediaRecorder:
        """Create a recorder bound to a stream and callbacks."""


class PreviewSurface(Protocol):
    """Live preview of the open stream."""

    def attach(self, stream: MediaStream) -> None:
        """Show the stream."""

    def detach(self) -> None:
        """Stop showing any stream."""

    def grab_frame(self) -> bytes | None:
        """Return the current frame as JPEG at native resolution."""


class RecordingUploader(Protocol):
    async def upload_recording(self, upload: RecordingUpload) -> dict:
        """Upload a finished capture and return the created recording."""


_MEDIA_ERROR_KINDS = {
    "NotAllowedError": ErrorKind.PERMISSION_DENIED,
    "PermissionDeniedError": ErrorKind.PERMISSION_DENIED,
    "SecurityError": ErrorKind.PERMISSION_DENIED,
    "NotFoundError": ErrorKind.DEVICE_NOT_FOUND,
    "DevicesNotFoundError": ErrorKind.DEVICE_NOT_FOUND,
    "OverconstrainedError": ErrorKind.DEVICE_NOT_FOUND,
    "NotReadableError": ErrorKind.DEVICE_BUSY,
    "TrackStartError": ErrorKind.DEVICE_BUSY,
    "AbortError": ErrorKind.DEVICE_BUSY,
}


def classify_media_error(name: str) -> ErrorKind:
    """Map a device error name to an error kind."""
    return _MEDIA_ERROR_KINDS.get(name, ErrorKind.DEVICE_ERROR)


def format_elapsed(seconds: int) -> str:
    """Format elapsed seconds as MM:SS."""
    minutes, secs = divmod(max(seconds, 0), 60)
    return f"{minutes:02d}:{secs:02d}"


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


def _to_jpeg_data_url(frame: bytes) -> str:
    encoded = base64.b64encode(frame).decode("ascii")
    return f"data:image/jpeg;base64,{encoded}"


@dataclass
class RecordingCapture:
    """Captures one session's media, tags moments, and uploads the result.

    The tag list is owned by the instance and read when the recorder's
    finalize callback has fired, so tags added after a stop request but
    before finalization are part of the upload.
    """

    session_id: int
    devices: MediaDevices
    recorder_factory: RecorderFactory
    uploader: RecordingUploader
    preview: PreviewSurface | None = None
    cache: QueryCache | None = None
    mode: CaptureMode = CaptureMode.VIDEO
    timeslice_ms: int = 1000
    clock: Callable[[], float] = time.monotonic
    now: Callable[[], datetime] = _utc_now

    state: CaptureState = field(default=CaptureState.IDLE, init=False)
    elapsed_seconds: int = field(default=0, init=False)
    last_error: ErrorKind | None = field(default=None, init=False)
    _stream: MediaStream | None = field(default=None, init=False, repr=False)
    _recorder: MediaRecorder | None = field(default=None, init=False, repr=False)
    _recorder_done: bool = field(default=False, init=False, repr=False)
    _stop_requested: bool = field(default=False, init=False, repr=False)
    _finalized: asyncio.Future | None = field(default=None, init=False, repr=False)
    _ticker: asyncio.Task | None = field(default=None, init=False, repr=False)
    _chunks: list[bytes] = field(default_factory=list, init=False, repr=False)
    _tags: list[ClientTag] = field(default_factory=list, init=False, repr=False)
    _started_at: float = field(default=0.0, init=False, repr=False)
    _start_time: str = field(default="", init=False, repr=False)
    _last_created_at: int = field(default=0, init=False, repr=False)
    _pending: CapturedMedia | None = field(default=None, init=False, repr=False)

    @property
    def tags(self) -> list[ClientTag]:
        return list(self._tags)

    @property
    def has_stream(self) -> bool:
        return self._stream is not None

    @property
    def pending_media(self) -> CapturedMedia | None:
        return self._pending

    async def acquire_stream(self) -> MediaStream:
        """Open camera and microphone, or only the microphone in audio mode."""
        if self.state in {CaptureState.RECORDING, CaptureState.UPLOADING}:
            raise CaptureError(ErrorKind.CAPTURE_BUSY)
        self.release_stream()
        try:
            stream = await self.devices.get_user_media(
                video=self.mode is CaptureMode.VIDEO, audio=True
            )
        except MediaAccessError as exc:
            self.last_error = exc.kind
            logger.warning(
                "Media access failed",
                extra={"session_id": self.session_id, "kind": str(exc.kind)},
            )
            raise
        self._stream = stream
        if self.preview is not None:
            self.preview.attach(stream)
        if self.state is CaptureState.IDLE:
            self.state = CaptureState.PREVIEWING
        self.last_error = None
        return stream

    def release_stream(self) -> None:
        """Stop every track of the open stream."""
        if self._stream is None:
            return
        for track in self._stream.get_tracks():
            track.stop()
        self._stream = None
        if self.preview is not None:
            self.preview.detach()
        if self.state is CaptureState.PREVIEWING:
            self.state = CaptureState.IDLE

    def set_mode(self, mode: CaptureMode) -> None:
        """Switch between audio and video, releasing the open stream."""
        if self.state in {CaptureState.RECORDING, CaptureState.UPLOADING}:
            raise CaptureError(ErrorKind.CAPTURE_BUSY)
        self.release_stream()
        self.mode = mode

    async def start_recording(self) -> None:
        """Start buffering chunks and reset the tag list."""
        if self.state not in {CaptureState.IDLE, CaptureState.PREVIEWING}:
            raise CaptureError(ErrorKind.CAPTURE_BUSY)
        if self._stream is None:
            await self.acquire_stream()
        self._chunks = []
        self._tags = []
        self._last_created_at = 0
        self._recorder_done = False
        self._stop_requested = False
        self._started_at = self.clock()
        self._start_time = self.now().isoformat()
        try:
            recorder = self.recorder_factory(
                self._stream,
                CONTAINER_TYPES[self.mode],
                self._on_data,
                self._on_recorder_stop,
            )
            recorder.start(self.timeslice_ms)
        except Exception as exc:
            logger.exception(
                "Failed to start recorder", extra={"session_id": self.session_id}
            )
            self.last_error = ErrorKind.CAPTURE_START_FAILED
            raise CaptureError(ErrorKind.CAPTURE_START_FAILED) from exc
        self._recorder = recorder
        self.elapsed_seconds = 0
        self.state = CaptureState.RECORDING
        self._ticker = asyncio.get_running_loop().create_task(self._tick())

    def tag_moment(self) -> ClientTag:
        """Mark the current moment of the recording."""
        if self.state is not CaptureState.RECORDING:
            raise CaptureError(ErrorKind.NOT_RECORDING)
        elapsed = int(self.clock() - self._started_at)
        if self._tags:
            elapsed = max(elapsed, self._tags[-1].timestamp)
        created_at = max(
            int(self.now().timestamp() * 1000), self._last_created_at + 1
        )
        screenshot = None
        if self.mode is CaptureMode.VIDEO:
            screenshot = self._grab_screenshot()
        tag = ClientTag(
            id=uuid.uuid4().hex,
            timestamp=elapsed,
            created_at=created_at,
            screenshot=screenshot,
        )
        self._tags.append(tag)
        self._last_created_at = created_at
        return tag

    async def stop_recording(self) -> dict:
        """Stop the recorder, wait for it to finalize, then upload."""
        if self.state is not CaptureState.RECORDING or self._stop_requested:
            raise CaptureError(ErrorKind.NOT_RECORDING)
        self._stop_requested = True
        self._cancel_ticker()
        if not self._recorder_done and self._recorder is not None:
            self._finalized = asyncio.get_running_loop().create_future()
            self._recorder.stop()
            await self._finalized
        self._finalized = None
        self._recorder = None
        self._pending = CapturedMedia(
            data=b"".join(self._chunks),
            mime_type=CONTAINER_TYPES[self.mode],
            mode=self.mode,
            start_time=self._start_time,
            end_time=self.now().isoformat(),
        )
        self._chunks = []
        self.state = CaptureState.UPLOADING
        return await self._upload()

    async def retry_upload(self) -> dict:
        """Upload a capture whose earlier upload failed."""
        if self.state is not CaptureState.STOPPED or self._pending is None:
            raise CaptureError(ErrorKind.NOTHING_TO_UPLOAD)
        self.state = CaptureState.UPLOADING
        return await self._upload()

    def discard(self) -> None:
        """Drop a capture whose upload failed."""
        if self.state is not CaptureState.STOPPED:
            raise CaptureError(ErrorKind.NOTHING_TO_UPLOAD)
        self._pending = None
        self._tags = []
        self.state = CaptureState.PREVIEWING if self._stream else CaptureState.IDLE

    def close(self) -> None:
        """Tear down the capture and release the devices."""
        self._cancel_ticker()
        if self._recorder is not None and not self._recorder_done:
            try:
                self._recorder.stop()
            except Exception:
                logger.exception(
                    "Failed to stop recorder", extra={"session_id": self.session_id}
                )
        self._recorder = None
        if self._finalized is not None and not self._finalized.done():
            self._finalized.cancel()
        self._pending = None
        self.release_stream()
        self.state = CaptureState.IDLE

    async def _upload(self) -> dict:
        pending = self._pending
        if pending is None:
            raise CaptureError(ErrorKind.NOTHING_TO_UPLOAD)
        upload = RecordingUpload(
            session_id=self.session_id,
            media=pending,
            filename=f"recording-{int(self.now().timestamp() * 1000)}.webm",
            status=RecordingStatus.COMPLETED,
            tags=list(self._tags),
        )
        try:
            recording = await self.uploader.upload_recording(upload)
        except Exception as exc:
            logger.exception(
                "Failed to upload recording", extra={"session_id": self.session_id}
            )
            if self._pending is pending:
                self.state = CaptureState.STOPPED
                self.last_error = ErrorKind.UPLOAD_FAILED
            raise UploadFailedError() from exc
        if self.cache is not None:
            self.cache.invalidate(session_recordings_key(self.session_id))
        # Closed while uploading; the capture may already be in use again.
        if self._pending is not pending:
            return recording
        self._pending = None
        self.last_error = None
        self.state = CaptureState.PREVIEWING if self._stream else CaptureState.IDLE
        return recording

    def _on_data(self, chunk: bytes) -> None:
        if chunk:
            self._chunks.append(chunk)

    def _on_recorder_stop(self) -> None:
        self._recorder_done = True
        if self._finalized is not None and not self._finalized.done():
            self._finalized.set_result(None)

    def _grab_screenshot(self) -> str | None:
        if self.preview is None:
            return None
        try:
            frame = self.preview.grab_frame()
        except Exception:
            logger.exception(
                "Failed to capture frame", extra={"session_id": self.session_id}
            )
            return None
        if not frame:
            return None
        return _to_jpeg_data_url(frame)

    async def _tick(self) -> None:
        while True:
            await asyncio.sleep(1)
            self.elapsed_seconds += 1

    def _cancel_ticker(self) -> None:
        if self._ticker is not None:
            self._ticker.cancel()
            self._ticker = None
