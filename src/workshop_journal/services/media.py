"""Local storage for uploaded recording media."""

import logging
import time
from dataclasses import dataclass
from pathlib import Path, PurePath
from typing import Protocol

import aiofiles

from workshop_journal.domain.errors import ErrorKind, UploadRejectedError

logger = logging.getLogger(__name__)

_READ_SIZE = 1024 * 1024
_DEFAULT_FILENAME = "recording.webm"
_MAX_NAME_BYTES = 100


class MediaSource(Protocol):
    """An uploaded file that can be read in pieces."""

    filename: str | None
    content_type: str | None

    async def read(self, size: int = -1) -> bytes:
        """Read up to size bytes."""


@dataclass(frozen=True)
class StoredMedia:
    """A media file written to the upload directory."""

    filename: str
    path: Path
    url: str
    size: int


@dataclass
class MediaStorage:
    """Write uploads under collision-free, timestamp-prefixed names."""

    upload_dir: Path
    url_path: str
    allowed_types: frozenset[str]
    max_bytes: int

    def ensure_dir(self) -> None:
        self.upload_dir.mkdir(parents=True, exist_ok=True)

    def check_type(self, content_type: str | None) -> None:
        """Reject media whose MIME type is not accepted."""
        mime = (content_type or "").split(";", maxsplit=1)[0].strip().lower()
        if mime not in self.allowed_types:
            raise UploadRejectedError(ErrorKind.INVALID_FILE_TYPE)

    async def save(self, source: MediaSource) -> StoredMedia:
        """Write the source to disk, enforcing the size limit."""
        self.check_type(source.content_type)
        self.ensure_dir()
        name = _safe_name(source.filename)
        stamp = int(time.time() * 1000)
        while True:
            path = self.upload_dir / f"{stamp}-{name}"
            try:
                async with aiofiles.open(path, "xb") as handle:
                    size = await self._copy(source, handle)
                break
            except FileExistsError:
                stamp += 1
        if size > self.max_bytes:
            path.unlink(missing_ok=True)
            logger.warning("Rejected oversized upload", extra={"file": path.name})
            raise UploadRejectedError(ErrorKind.FILE_TOO_LARGE)
        return StoredMedia(
            filename=path.name,
            path=path,
            url=f"{self.url_path.rstrip('/')}/{path.name}",
            size=size,
        )

    async def _copy(self, source: MediaSource, handle) -> int:  # type: ignore[no-untyped-def]
        size = 0
        while chunk := await source.read(_READ_SIZE):
            size += len(chunk)
            if size > self.max_bytes:
                break
            await handle.write(chunk)
        return size


def _safe_name(filename: str | None) -> str:
    """Strip any directory part from a client-supplied filename and bound its length."""
    name = PurePath((filename or "").replace("\\", "/")).name
    if not name:
        return _DEFAULT_FILENAME
    if len(name.encode()) <= _MAX_NAME_BYTES:
        return name
    suffix = PurePath(name).suffix
    if len(suffix.encode()) > _MAX_NAME_BYTES // 2:
        suffix = ""
    stem = name[: len(name) - len(suffix)]
    while len((stem + suffix).encode()) > _MAX_NAME_BYTES:
        stem = stem[:-1]
    return stem + suffix
