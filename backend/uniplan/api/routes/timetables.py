from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from uniplan.api.deps import get_actor, get_db, get_store, get_timetable
from uniplan.models.semester import SemesterDate
from uniplan.models.timetable import Timetable
from uniplan.schemas.calendar import CalendarGridOut
from uniplan.schemas.curriculum import SubjectProgressOut
from uniplan.schemas.schedule_entry import ScheduleEntryOut
from uniplan.schemas.timetable import (
    TimetableCopyOut,
    TimetableCopyRequest,
    TimetableCreate,
    TimetableOut,
    TimetableStatusUpdate,
    TimetableUpdate,
)
from uniplan.services.calendar import build_grid, is_block_mode
from uniplan.services.curriculum_resolver import timetable_progress
from uniplan.services.lifecycle import change_status
from uniplan.services.schedule_store import ScheduleAssignmentStore

router = APIRouter()


@router.get("/", response_model=list[TimetableOut])
def list_timetables(
    group_id: str | None = Query(default=None, max_length=36),
    store: ScheduleAssignmentStore = Depends(get_store),
) -> list[TimetableOut]:
    return store.list_timetables(group_id=group_id)


@router.post("/", response_model=TimetableOut, status_code=status.HTTP_201_CREATED)
def create_timetable(
    payload: TimetableCreate,
    actor: str | None = Depends(get_actor),
    store: ScheduleAssignmentStore = Depends(get_store),
) -> TimetableOut:
    return store.create_timetable(payload, actor=actor)


@router.get("/{timetable_id}", response_model=TimetableOut)
def get_timetable_detail(timetable: Timetable = Depends(get_timetable)) -> TimetableOut:
    return timetable


@router.patch("/{timetable_id}", response_model=TimetableOut)
def update_timetable(
    timetable_id: str,
    payload: TimetableUpdate,
    actor: str | None = Depends(get_actor),
    store: ScheduleAssignmentStore = Depends(get_store),
) -> TimetableOut:
    return store.update_timetable(timetable_id, payload, actor=actor)


@router.put("/{timetable_id}/status", response_model=TimetableOut)
def update_timetable_status(
    payload: TimetableStatusUpdate,
    timetable: Timetable = Depends(get_timetable),
    actor: str | None = Depends(get_actor),
    db: Session = Depends(get_db),
) -> TimetableOut:
    return change_status(db, timetable, payload.status, actor=actor)


@router.post("/{timetable_id}/copy", response_model=TimetableCopyOut, status_code=status.HTTP_201_CREATED)
def copy_timetable(
    timetable_id: str,
    payload: TimetableCopyRequest,
    actor: str | None = Depends(get_actor),
    store: ScheduleAssignmentStore = Depends(get_store),
) -> TimetableCopyOut:
    copied, count = store.copy_timetable(timetable_id, payload.name, actor=actor)
    return TimetableCopyOut(timetable=TimetableOut.model_validate(copied), copied_entries=count)


@router.delete("/{timetable_id}")
def delete_timetable(
    timetable_id: str,
    actor: str | None = Depends(get_actor),
    store: ScheduleAssignmentStore = Depends(get_store),
) -> dict:
    removed = store.delete_timetable(timetable_id, actor=actor)
    return {"success": True, "deleted_entries": removed}


@router.get("/{timetable_id}/entries", response_model=list[ScheduleEntryOut])
def list_timetable_entries(
    timetable: Timetable = Depends(get_timetable),
    store: ScheduleAssignmentStore = Depends(get_store),
) -> list[ScheduleEntryOut]:
    return store.entries_for_timetable(timetable.id)


@router.get("/{timetable_id}/curriculum-subjects", response_model=list[SubjectProgressOut])
def list_curriculum_subjects(
    timetable: Timetable = Depends(get_timetable),
    db: Session = Depends(get_db),
) -> list[SubjectProgressOut]:
    return timetable_progress(db, timetable)


@router.get("/{timetable_id}/grid", response_model=CalendarGridOut)
def get_timetable_grid(
    timetable: Timetable = Depends(get_timetable),
    db: Session = Depends(get_db),
) -> CalendarGridOut:
    semester_dates: list = []
    if is_block_mode(timetable.study_mode):
        rows = db.execute(select(SemesterDate).where(SemesterDate.semester_id == timetable.semester_id)).scalars()
        semester_dates = [(row.date, row.format) for row in rows]
    return build_grid(timetable.study_mode, semester_dates, timetable_id=timetable.id)
