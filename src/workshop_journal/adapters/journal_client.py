"""HTTP client for the journal API."""

from dataclasses import dataclass
from typing import Protocol

import httpx

from workshop_journal.domain.capture import RecordingUpload


class JournalClient(Protocol):
    """Interface for journal API calls made by views and capture."""

    async def get_json(self, path: str) -> object:
        """GET a path and return the decoded JSON body."""

    async def post_json(self, path: str, payload: dict[str, object]) -> dict:
        """POST a JSON body and return the created record."""

    async def patch_json(self, path: str, payload: dict[str, object]) -> dict:
        """PATCH a JSON body and return the updated record."""

    async def upload_recording(self, upload: RecordingUpload) -> dict:
        """Send a finished capture to the upload endpoint."""


@dataclass
class HttpxJournalClient(JournalClient):
    """Journal API client implemented with httpx."""

    base_url: str
    http_client: httpx.AsyncClient

    @classmethod
    def create(cls, base_url: str) -> "HttpxJournalClient":
        """Create a client with a managed httpx session."""
        return cls(base_url=base_url, http_client=httpx.AsyncClient())

    def _url(self, path: str) -> str:
        return f"{self.base_url.rstrip('/')}{path}"

    async def get_json(self, path: str) -> object:
        response = await self.http_client.get(self._url(path), timeout=10)
        response.raise_for_status()
        return response.json()

    async def post_json(self, path: str, payload: dict[str, object]) -> dict:
        response = await self.http_client.post(
            self._url(path), json=payload, timeout=10
        )
        response.raise_for_status()
        return response.json()

    async def patch_json(self, path: str, payload: dict[str, object]) -> dict:
        response = await self.http_client.patch(
            self._url(path), json=payload, timeout=10
        )
        response.raise_for_status()
        return response.json()

    async def upload_recording(self, upload: RecordingUpload) -> dict:
        """Send media and metadata as one multipart request."""
        files = {
            "media": (upload.filename, upload.media.data, upload.media.mime_type)
        }
        response = await self.http_client.post(
            self._url("/api/recordings/upload"),
            data=upload.form_fields(),
            files=files,
            timeout=120,
        )
        response.raise_for_status()
        return response.json()

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
