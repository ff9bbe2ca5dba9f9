"""Shared test fixtures."""

import asyncio
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta

import httpx
import pytest

from workshop_journal.config import Settings
from workshop_journal.containers import AppContainer, build_container
from workshop_journal.domain.capture import CaptureMode, RecordingUpload
from workshop_journal.domain.errors import MediaAccessError
from workshop_journal.services.cache import InMemoryQueryCache
from workshop_journal.services.capture import RecordingCapture


@dataclass
class FakeTrack:
    """Media track that remembers being stopped."""

    stopped: bool = False

    def stop(self) -> None:
        self.stopped = True


@dataclass
class FakeStream:
    tracks: list[FakeTrack] = field(default_factory=list)

    def get_tracks(self) -> list[FakeTrack]:
        return list(self.tracks)


@dataclass
class FakeMediaDevices:
    """Media devices that hand out fake streams or fail with a set error."""

    error: MediaAccessError | None = None
    requests: list[dict[str, bool]] = field(default_factory=list)
    streams: list[FakeStream] = field(default_factory=list)

    async def get_user_media(self, *, video: bool, audio: bool) -> FakeStream:
        self.requests.append({"video": video, "audio": audio})
        if self.error is not None:
            raise self.error
        track_count = 2 if video else 1
        stream = FakeStream(tracks=[FakeTrack() for _ in range(track_count)])
        self.streams.append(stream)
        return stream


@dataclass
class FakeRecorder:
    """Recorder whose chunks and finalization are driven by the test."""

    mime_type: str
    on_data: Callable[[bytes], None]
    on_stop: Callable[[], None]
    finish_on_stop: bool = True
    timeslice_ms: int | None = None
    stop_requested: bool = False

    def start(self, timeslice_ms: int) -> None:
        self.timeslice_ms = timeslice_ms

    def emit(self, chunk: bytes) -> None:
        self.on_data(chunk)

    def stop(self) -> None:
        self.stop_requested = True
        if self.finish_on_stop:
            self.finish()

    def finish(self, final_chunk: bytes = b"") -> None:
        if final_chunk:
            self.on_data(final_chunk)
        self.on_stop()


@dataclass
class FakeRecorderFactory:
    finish_on_stop: bool = True
    fail: bool = False
    recorders: list[FakeRecorder] = field(default_factory=list)

    def __call__(
        self,
        stream: FakeStream,
        mime_type: str,
        on_data: Callable[[bytes], None],
        on_stop: Callable[[], None],
    ) -> FakeRecorder:
        if self.fail:
            raise RuntimeError("recorder unavailable")
        recorder = FakeRecorder(
            mime_type=mime_type,
            on_data=on_data,
            on_stop=on_stop,
            finish_on_stop=self.finish_on_stop,
        )
        self.recorders.append(recorder)
        return recorder

    @property
    def last(self) -> FakeRecorder:
        return self.recorders[-1]


@dataclass
class FakePreview:
    frame: bytes | None = b"\xff\xd8jpeg-frame"
    fail: bool = False
    attached: FakeStream | None = None
    detach_count: int = 0

    def attach(self, stream: FakeStream) -> None:
        self.attached = stream

    def detach(self) -> None:
        self.attached = None
        self.detach_count += 1

    def grab_frame(self) -> bytes | None:
        if self.fail:
            raise RuntimeError("no frame")
        return self.frame


@dataclass
class FakeUploader:
    """Uploader that records uploads and can fail a number of times."""

    failures: int = 0
    gate: asyncio.Event | None = None
    uploads: list[RecordingUpload] = field(default_factory=list)

    async def upload_recording(self, upload: RecordingUpload) -> dict:
        if self.gate is not None:
            await self.gate.wait()
        if self.failures > 0:
            self.failures -= 1
            raise httpx.ConnectError("network down")
        self.uploads.append(upload)
        return {"id": len(self.uploads), "sessionId": upload.session_id}


@dataclass
class FakeClock:
    """Monotonic clock advanced by hand."""

    value: float = 1000.0

    def __call__(self) -> float:
        return self.value

    def advance(self, seconds: float) -> None:
        self.value += seconds


@dataclass
class FixedNow:
    """Wall clock that only moves when told to."""

    value: datetime = field(
        default_factory=lambda: datetime(2024, 3, 4, 9, 30, tzinfo=UTC)
    )

    def __call__(self) -> datetime:
        return self.value

    def advance(self, seconds: float) -> None:
        self.value += timedelta(seconds=seconds)


@dataclass
class FakeJournalClient:
    """Journal client serving canned JSON and recording mutations."""

    responses: dict[str, object] = field(default_factory=dict)
    gets: list[str] = field(default_factory=list)
    posts: list[tuple[str, dict[str, object]]] = field(default_factory=list)
    patches: list[tuple[str, dict[str, object]]] = field(default_factory=list)

    async def get_json(self, path: str) -> object:
        self.gets.append(path)
        return self.responses[path]

    async def post_json(self, path: str, payload: dict[str, object]) -> dict:
        self.posts.append((path, payload))
        return {"id": len(self.posts), **payload}

    async def patch_json(self, path: str, payload: dict[str, object]) -> dict:
        self.patches.append((path, payload))
        return {"id": int(path.rsplit("/", 1)[-1]), **payload}

    async def upload_recording(self, upload: RecordingUpload) -> dict:
        return {"id": 1, "sessionId": upload.session_id}


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        environment="test",
        upload_dir=str(tmp_path / "uploads"),
    )


@pytest.fixture
def container(settings: Settings) -> AppContainer:
    return build_container(settings)


@pytest.fixture
def devices() -> FakeMediaDevices:
    return FakeMediaDevices()


@pytest.fixture
def recorder_factory() -> FakeRecorderFactory:
    return FakeRecorderFactory()


@pytest.fixture
def preview() -> FakePreview:
    return FakePreview()


@pytest.fixture
def uploader() -> FakeUploader:
    return FakeUploader()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def query_cache() -> InMemoryQueryCache:
    return InMemoryQueryCache()


@pytest.fixture
def capture(  # noqa: PLR0913
    devices: FakeMediaDevices,
    recorder_factory: FakeRecorderFactory,
    preview: FakePreview,
    uploader: FakeUploader,
    clock: FakeClock,
    query_cache: InMemoryQueryCache,
) -> RecordingCapture:
    return RecordingCapture(
        session_id=7,
        devices=devices,
        recorder_factory=recorder_factory,
        uploader=uploader,
        preview=preview,
        cache=query_cache,
        mode=CaptureMode.VIDEO,
        clock=clock,
        now=FixedNow(),
    )
