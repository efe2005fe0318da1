from fastapi import APIRouter, Depends, Query
from sqlalchemy import select
from sqlalchemy.orm import Session

from uniplan.api.deps import get_db
from uniplan.core.exceptions import ResourceNotFoundError
from uniplan.models.schedule_entry import DayOfWeek
from uniplan.models.semester import Semester, SemesterDate
from uniplan.schemas.calendar import TeachingSessionOut
from uniplan.schemas.room import RoomOccupancyOut
from uniplan.services.calendar import group_into_sessions, serialize_session
from uniplan.services.room_occupancy import build_room_occupancy

router = APIRouter()


@router.get("/{semester_id}/sessions", response_model=list[TeachingSessionOut])
def list_semester_sessions(semester_id: str, db: Session = Depends(get_db)) -> list[TeachingSessionOut]:
    if db.get(Semester, semester_id) is None:
        raise ResourceNotFoundError("Semester", semester_id)
    rows = db.execute(select(SemesterDate).where(SemesterDate.semester_id == semester_id)).scalars()
    sessions = group_into_sessions((row.date, row.format) for row in rows)
    return [serialize_session(session) for session in sessions]


@router.get("/{semester_id}/room-occupancy", response_model=RoomOccupancyOut)
def get_room_occupancy(
    semester_id: str,
    day: DayOfWeek = Query(...),
    db: Session = Depends(get_db),
) -> RoomOccupancyOut:
    return build_room_occupancy(db, semester_id, day)
