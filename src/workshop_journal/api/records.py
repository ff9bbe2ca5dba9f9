"""CRUD endpoints for the journal collections."""

from typing import TYPE_CHECKING, Annotated, Any

from fastapi import APIRouter, Body, Request, status

from workshop_journal.api.schemas import (
    CamelModel,
    ChildCreate,
    ObservationCreate,
    PatchModel,
    RecordingCreate,
    RecordingPatch,
    SessionCreate,
    TaggedMomentCreate,
    TaggedMomentPatch,
    WorkshopCreate,
    WorkshopPatch,
    serialize_record,
    serialize_records,
)
from workshop_journal.domain.records import EntityKind

if TYPE_CHECKING:
    from workshop_journal.containers import AppContainer
    from workshop_journal.services.records import RecordService


def _records(request: Request) -> "RecordService":
    container: AppContainer = request.app.state.container
    return container.record_service


def collection_router(
    kind: EntityKind,
    create_model: type[CamelModel],
    patch_model: type[PatchModel] | None = None,
) -> APIRouter:
    """Build list, get, create and optional patch endpoints for a collection."""
    router = APIRouter(prefix=f"/api/{kind.value}", tags=[kind.value])

    @router.get("")
    async def list_records(request: Request) -> list[dict[str, object]]:
        return serialize_records(_records(request).list_records(kind))

    @router.get("/{record_id}")
    async def get_record(record_id: int, request: Request) -> dict[str, object]:
        return serialize_record(_records(request).require_record(kind, record_id))

    @router.post("", status_code=status.HTTP_201_CREATED)
    async def create_record(
        body: create_model, request: Request  # type: ignore[valid-type]
    ) -> dict[str, object]:
        record = _records(request).create_record(kind, body.to_payload())
        return serialize_record(record)

    if patch_model is not None:

        @router.patch("/{record_id}")
        async def update_record(
            record_id: int,
            request: Request,
            body: Annotated[Any, Body()] = None,
        ) -> dict[str, object]:
            records = _records(request)
            records.require_record(kind, record_id)
            changes = patch_model.model_validate(body).changes()
            record = records.update_record(kind, record_id, changes)
            return serialize_record(record)

    return router


related_router = APIRouter(prefix="/api", tags=["related"])


@related_router.get("/children/{child_id}/observations")
async def child_observations(child_id: int, request: Request) -> list[dict[str, object]]:
    """Return the observations recorded for a child."""
    return serialize_records(_records(request).observations_for_child(child_id))


@related_router.get("/sessions/{session_id}/recordings")
async def session_recordings(
    session_id: int, request: Request
) -> list[dict[str, object]]:
    """Return the recordings made during a session."""
    return serialize_records(_records(request).recordings_for_session(session_id))


@related_router.get("/recordings/{recording_id}/moments")
async def recording_moments(
    recording_id: int, request: Request
) -> list[dict[str, object]]:
    """Return the tagged moments of a recording."""
    return serialize_records(_records(request).moments_for_recording(recording_id))


def collection_routers() -> list[APIRouter]:
    return [
        collection_router(EntityKind.CHILD, ChildCreate),
        collection_router(EntityKind.WORKSHOP, WorkshopCreate, WorkshopPatch),
        collection_router(EntityKind.SESSION, SessionCreate),
        collection_router(EntityKind.OBSERVATION, ObservationCreate),
        collection_router(EntityKind.RECORDING, RecordingCreate, RecordingPatch),
        collection_router(
            EntityKind.TAGGED_MOMENT, TaggedMomentCreate, TaggedMomentPatch
        ),
    ]
