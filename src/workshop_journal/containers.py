"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from pathlib import Path

from supabase import create_client

from workshop_journal.adapters.journal_client import HttpxJournalClient
from workshop_journal.adapters.supabase_record_store import SupabaseRecordStore
from workshop_journal.config import Settings, parse_media_types
from workshop_journal.domain.capture import CaptureMode
from workshop_journal.services.cache import InMemoryQueryCache
from workshop_journal.services.capture import (
    MediaDevices,
    PreviewSurface,
    RecorderFactory,
    RecordingCapture,
)
from workshop_journal.services.media import MediaStorage
from workshop_journal.services.records import RecordService
from workshop_journal.services.store import InMemoryRecordStore, RecordStore
from workshop_journal.services.uploads import RecordingUploadService
from workshop_journal.services.views import JournalViews


@dataclass
class AppContainer:
    """Holds server-side dependencies."""

    settings: Settings
    record_store: RecordStore
    record_service: RecordService
    media_storage: MediaStorage
    upload_service: RecordingUploadService
    close_resources: Callable[[], Awaitable[None]]


@dataclass
class ClientContainer:
    """Holds the dependencies of a journal client."""

    settings: Settings
    journal_client: HttpxJournalClient
    query_cache: InMemoryQueryCache
    views: JournalViews
    close_resources: Callable[[], Awaitable[None]]

    def new_capture(
        self,
        session_id: int,
        devices: MediaDevices,
        recorder_factory: RecorderFactory,
        preview: PreviewSurface | None = None,
        mode: CaptureMode = CaptureMode.VIDEO,
    ) -> RecordingCapture:
        """Create a capture for a session that uploads through this client."""
        return RecordingCapture(
            session_id=session_id,
            devices=devices,
            recorder_factory=recorder_factory,
            uploader=self.journal_client,
            preview=preview,
            cache=self.query_cache,
            mode=mode,
            timeslice_ms=self.settings.capture_timeslice_ms,
        )


def build_record_store(settings: Settings) -> RecordStore:
    """Create the configured record store."""
    if settings.storage_backend == "supabase":
        if not settings.supabase_url or not settings.supabase_service_key:
            raise ValueError("Supabase storage needs SUPABASE_URL and key")
        return SupabaseRecordStore(
            create_client(settings.supabase_url, settings.supabase_service_key)
        )
    if settings.storage_backend != "memory":
        raise ValueError(f"Unknown storage backend: {settings.storage_backend}")
    return InMemoryRecordStore()


def build_media_storage(settings: Settings) -> MediaStorage:
    return MediaStorage(
        upload_dir=Path(settings.upload_dir),
        url_path=settings.uploads_url_path,
        allowed_types=parse_media_types(settings.allowed_media_types),
        max_bytes=settings.max_upload_bytes,
    )


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default server container."""
    resolved_settings = settings or Settings()
    record_store = build_record_store(resolved_settings)
    record_service = RecordService(record_store)
    media_storage = build_media_storage(resolved_settings)
    upload_service = RecordingUploadService(
        media_storage=media_storage, record_service=record_service
    )

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=resolved_settings,
        record_store=record_store,
        record_service=record_service,
        media_storage=media_storage,
        upload_service=upload_service,
        close_resources=close_resources,
    )


def build_client_container(settings: Settings | None = None) -> ClientContainer:
    """Create the dependencies used by a journal client."""
    resolved_settings = settings or Settings()
    journal_client = HttpxJournalClient.create(resolved_settings.api_base_url)
    query_cache = InMemoryQueryCache()
    views = JournalViews(
        client=journal_client,
        cache=query_cache,
        ttl_seconds=resolved_settings.query_cache_ttl_seconds,
    )

    async def close_resources() -> None:
        await journal_client.close()

    return ClientContainer(
        settings=resolved_settings,
        journal_client=journal_client,
        query_cache=query_cache,
        views=views,
        close_resources=close_resources,
    )
