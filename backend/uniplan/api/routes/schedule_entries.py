from fastapi import APIRouter, Depends, status

from uniplan.api.deps import get_actor, get_editable_timetable, get_store
from uniplan.core.exceptions import ResourceNotFoundError
from uniplan.models.schedule_entry import ScheduleEntry
from uniplan.models.timetable import Timetable
from uniplan.schemas.schedule_entry import (
    ScheduleEntryCreate,
    ScheduleEntryMove,
    ScheduleEntryOut,
    ScheduleEntryUpdate,
)
from uniplan.services.schedule_store import ScheduleAssignmentStore

router = APIRouter()


def _entry_in_timetable(store: ScheduleAssignmentStore, timetable: Timetable, entry_id: str) -> ScheduleEntry:
    entry = store.get_entry(entry_id)
    if entry.timetable_id != timetable.id:
        raise ResourceNotFoundError("ScheduleEntry", entry_id)
    return entry


@router.post("/", response_model=ScheduleEntryOut, status_code=status.HTTP_201_CREATED)
def create_entry(
    payload: ScheduleEntryCreate,
    timetable: Timetable = Depends(get_editable_timetable),
    actor: str | None = Depends(get_actor),
    store: ScheduleAssignmentStore = Depends(get_store),
) -> ScheduleEntryOut:
    return store.create_entry(timetable.id, payload, actor=actor)


@router.patch("/{entry_id}", response_model=ScheduleEntryOut)
def update_entry(
    entry_id: str,
    payload: ScheduleEntryUpdate,
    timetable: Timetable = Depends(get_editable_timetable),
    actor: str | None = Depends(get_actor),
    store: ScheduleAssignmentStore = Depends(get_store),
) -> ScheduleEntryOut:
    _entry_in_timetable(store, timetable, entry_id)
    return store.update_entry(entry_id, payload, actor=actor)


@router.post("/{entry_id}/move", response_model=ScheduleEntryOut)
def move_entry(
    entry_id: str,
    payload: ScheduleEntryMove,
    timetable: Timetable = Depends(get_editable_timetable),
    actor: str | None = Depends(get_actor),
    store: ScheduleAssignmentStore = Depends(get_store),
) -> ScheduleEntryOut:
    _entry_in_timetable(store, timetable, entry_id)
    return store.move_entry(entry_id, payload, actor=actor)


@router.delete("/{entry_id}")
def delete_entry(
    entry_id: str,
    timetable: Timetable = Depends(get_editable_timetable),
    actor: str | None = Depends(get_actor),
    store: ScheduleAssignmentStore = Depends(get_store),
) -> dict:
    _entry_in_timetable(store, timetable, entry_id)
    store.delete_entry(entry_id, actor=actor)
    return {"success": True}
