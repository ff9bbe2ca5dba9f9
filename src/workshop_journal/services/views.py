"""Presentation views built from the journal API."""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from workshop_journal.domain.records import MediaType, WorkshopStatus

if TYPE_CHECKING:
    from workshop_journal.adapters.journal_client import JournalClient
    from workshop_journal.services.cache import QueryCache

WEEK_DAYS = ("Maandag", "Dinsdag", "Woensdag", "Donderdag", "Vrijdag")

WORKSHOP_STATUS_LABELS = {
    WorkshopStatus.ACTIVE: "Actief",
    WorkshopStatus.COMPLETED: "Afgerond",
}

MEDIA_TYPE_LABELS = {
    MediaType.VIDEO: "Video opname",
    MediaType.AUDIO: "Audio opname",
}

CHILDREN_KEY = "/api/children"
WORKSHOPS_KEY = "/api/workshops"
SESSIONS_KEY = "/api/sessions"


def child_key(child_id: int) -> str:
    return f"/api/children/{child_id}"


def child_observations_key(child_id: int) -> str:
    return f"/api/children/{child_id}/observations"


def session_key(session_id: int) -> str:
    return f"/api/sessions/{session_id}"


def session_recordings_key(session_id: int) -> str:
    return f"/api/sessions/{session_id}/recordings"


def workshop_key(workshop_id: int) -> str:
    return f"/api/workshops/{workshop_id}"


def parse_comma_list(raw: str | list[str] | None) -> list[str]:
    """Split a comma-separated form value into trimmed, non-empty items."""
    if raw is None:
        return []
    if isinstance(raw, list):
        return [item.strip() for item in raw if item.strip()]
    return [item.strip() for item in raw.split(",") if item.strip()]


def workshop_status_label(status: str) -> str:
    return WORKSHOP_STATUS_LABELS.get(status, status)


def media_type_label(media_type: str) -> str:
    return MEDIA_TYPE_LABELS.get(media_type, media_type)


def _matches(value: object, search: str) -> bool:
    return search.strip().lower() in str(value or "").lower()


@dataclass(frozen=True)
class DashboardView:
    active_workshops: list[dict]
    child_count: int
    session_count: int


@dataclass(frozen=True)
class ChildProfileView:
    child: dict
    observations: list[dict]


@dataclass(frozen=True)
class SessionView:
    session: dict
    recordings: list[dict]


@dataclass(frozen=True)
class PlanningView:
    days: dict[str, list[dict]] = field(default_factory=dict)


@dataclass
class JournalViews:
    """Queries and mutations behind the journal's pages."""

    client: "JournalClient"
    cache: "QueryCache"
    ttl_seconds: int = 300

    async def query(self, key: str) -> object:
        """Return the cached result for an API path, fetching on a miss."""
        cached = self.cache.get(key)
        if cached is not None:
            return cached
        value = await self.client.get_json(key)
        self.cache.set(key, value, self.ttl_seconds)
        return value

    async def dashboard(self) -> DashboardView:
        workshops = await self.query(WORKSHOPS_KEY)
        children = await self.query(CHILDREN_KEY)
        sessions = await self.query(SESSIONS_KEY)
        return DashboardView(
            active_workshops=_active(workshops),
            child_count=len(children),
            session_count=len(sessions),
        )

    async def workshop_list(self, search: str = "") -> list[dict]:
        workshops = await self.query(WORKSHOPS_KEY)
        return [w for w in workshops if _matches(w.get("title"), search)]

    async def children_overview(self, search: str = "") -> list[dict]:
        children = await self.query(CHILDREN_KEY)
        return [c for c in children if _matches(c.get("name"), search)]

    async def child_profile(self, child_id: int) -> ChildProfileView:
        child = await self.query(child_key(child_id))
        observations = await self.query(child_observations_key(child_id))
        return ChildProfileView(child=child, observations=observations)

    async def session_list(self) -> list[dict]:
        return await self.query(SESSIONS_KEY)

    async def session_view(self, session_id: int) -> SessionView:
        session = await self.query(session_key(session_id))
        recordings = await self.query(session_recordings_key(session_id))
        return SessionView(session=session, recordings=recordings)

    async def workshop_planning(self) -> PlanningView:
        """Active workshops listed under every weekday."""
        active = _active(await self.query(WORKSHOPS_KEY))
        return PlanningView(days={day: list(active) for day in WEEK_DAYS})

    async def create_child(self, form: dict[str, object]) -> dict:
        child = await self.client.post_json(CHILDREN_KEY, form)
        self.cache.invalidate(CHILDREN_KEY)
        return child

    async def create_workshop(self, form: dict[str, object]) -> dict:
        payload = {
            **form,
            "learningGoals": parse_comma_list(form.get("learningGoals")),
            "materials": parse_comma_list(form.get("materials")),
        }
        payload.setdefault("status", WorkshopStatus.ACTIVE.value)
        workshop = await self.client.post_json(WORKSHOPS_KEY, payload)
        self.cache.invalidate(WORKSHOPS_KEY)
        return workshop

    async def update_workshop_status(self, workshop_id: int, status: str) -> dict:
        workshop = await self.client.patch_json(
            workshop_key(workshop_id), {"status": status}
        )
        self.cache.invalidate(WORKSHOPS_KEY)
        self.cache.invalidate(workshop_key(workshop_id))
        return workshop

    async def create_session(self, form: dict[str, object]) -> dict:
        session = await self.client.post_json(SESSIONS_KEY, form)
        self.cache.invalidate(SESSIONS_KEY)
        return session

    async def create_observation(
        self, child_id: int, form: dict[str, object]
    ) -> dict:
        payload = {
            **form,
            "childId": child_id,
            "learningGoals": parse_comma_list(form.get("learningGoals")),
        }
        observation = await self.client.post_json("/api/observations", payload)
        self.cache.invalidate(child_observations_key(child_id))
        return observation


def _active(workshops: list[dict]) -> list[dict]:
    return [w for w in workshops if w.get("status") == WorkshopStatus.ACTIVE]
