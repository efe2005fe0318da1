from collections.abc import Generator

from fastapi import Depends, Header
from sqlalchemy.orm import Session

from uniplan.db.session import SessionLocal
from uniplan.models.timetable import Timetable
from uniplan.services.lifecycle import ensure_timetable_editable
from uniplan.services.schedule_store import ScheduleAssignmentStore


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_store(db: Session = Depends(get_db)) -> ScheduleAssignmentStore:
    return ScheduleAssignmentStore(db)


def get_actor(x_actor: str | None = Header(default=None, max_length=200)) -> str | None:
    """Name of the staff member issuing the command, recorded in the audit log."""
    if x_actor is None:
        return None
    return x_actor.strip() or None


def get_timetable(timetable_id: str, store: ScheduleAssignmentStore = Depends(get_store)) -> Timetable:
    return store.get_timetable(timetable_id)


def get_editable_timetable(timetable: Timetable = Depends(get_timetable)) -> Timetable:
    """Reject entry mutations on published timetables before they reach the store."""
    ensure_timetable_editable(timetable)
    return timetable
