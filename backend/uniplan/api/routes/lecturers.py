from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from uniplan.api.deps import get_actor, get_db, get_store
from uniplan.schemas.lecturer import AvailabilityOverlayOut, AvailabilityUpdate
from uniplan.schemas.schedule_entry import ScheduleEntryOut
from uniplan.services.availability import build_availability_overlay, get_lecturer, update_availability
from uniplan.services.schedule_store import ScheduleAssignmentStore

router = APIRouter()


@router.get("/{lecturer_id}/entries", response_model=list[ScheduleEntryOut])
def list_lecturer_entries(
    lecturer_id: str,
    db: Session = Depends(get_db),
    store: ScheduleAssignmentStore = Depends(get_store),
) -> list[ScheduleEntryOut]:
    get_lecturer(db, lecturer_id)
    return store.entries_for_lecturer(lecturer_id)


@router.get("/{lecturer_id}/availability-overlay", response_model=AvailabilityOverlayOut)
def get_availability_overlay(lecturer_id: str, db: Session = Depends(get_db)) -> AvailabilityOverlayOut:
    return build_availability_overlay(db, lecturer_id)


@router.put("/{lecturer_id}/availability", response_model=AvailabilityOverlayOut)
def put_availability(
    lecturer_id: str,
    payload: AvailabilityUpdate,
    actor: str | None = Depends(get_actor),
    db: Session = Depends(get_db),
) -> AvailabilityOverlayOut:
    update_availability(db, lecturer_id, payload.slots, actor=actor)
    return build_availability_overlay(db, lecturer_id)
