"""
Lecturer availability overlay.

Highlights which grid cells suit a lecturer while an entry is being dragged:
cells inside the lecturer's declared availability, and cells already taken by
the lecturer in any non-archived plan. This is a hint for the UI; placement is
decided by the conflict detector alone.
"""

from __future__ import annotations

from collections import defaultdict

from sqlalchemy.orm import Session

from uniplan.core.exceptions import ResourceNotFoundError
from uniplan.models.lecturer import Lecturer
from uniplan.models.schedule_entry import DayOfWeek
from uniplan.schemas.common import parse_time_to_minutes
from uniplan.schemas.lecturer import AvailabilityCellOut, AvailabilityOverlayOut, AvailabilitySlot
from uniplan.services.audit import log_activity
from uniplan.services.calendar import DAYS, TIME_SLOTS
from uniplan.services.schedule_store import ScheduleAssignmentStore


def get_lecturer(db: Session, lecturer_id: str) -> Lecturer:
    lecturer = db.get(Lecturer, lecturer_id)
    if lecturer is None:
        raise ResourceNotFoundError("Lecturer", lecturer_id)
    return lecturer


def declared_slots(lecturer: Lecturer) -> list[AvailabilitySlot]:
    return [AvailabilitySlot.model_validate(item) for item in lecturer.availability or []]


def within_availability(day: DayOfWeek, start_time: str, end_time: str, slots: list[AvailabilitySlot]) -> bool:
    # No declared availability means the lecturer did not restrict themselves.
    if not slots:
        return True
    start = parse_time_to_minutes(start_time)
    end = parse_time_to_minutes(end_time)
    for slot in slots:
        if slot.day != day:
            continue
        if parse_time_to_minutes(slot.start_time) <= start and end <= parse_time_to_minutes(slot.end_time):
            return True
    return False


def build_availability_overlay(db: Session, lecturer_id: str) -> AvailabilityOverlayOut:
    lecturer = get_lecturer(db, lecturer_id)
    slots = declared_slots(lecturer)

    busy: dict[tuple[DayOfWeek, str], list[str]] = defaultdict(list)
    for entry in ScheduleAssignmentStore(db).entries_for_lecturer(lecturer_id):
        busy[(DayOfWeek(entry.day), entry.start_time)].append(entry.id)

    cells = [
        AvailabilityCellOut(
            day=day,
            start_time=slot.start_time,
            end_time=slot.end_time,
            within_availability=within_availability(day, slot.start_time, slot.end_time, slots),
            busy_entry_ids=busy.get((day, slot.start_time), []),
        )
        for day in DAYS
        for slot in TIME_SLOTS
    ]
    return AvailabilityOverlayOut(lecturer_id=lecturer_id, declared_slots=slots, cells=cells)


def update_availability(
    db: Session,
    lecturer_id: str,
    slots: list[AvailabilitySlot],
    *,
    actor: str | None = None,
) -> Lecturer:
    lecturer = get_lecturer(db, lecturer_id)
    lecturer.availability = [slot.model_dump(mode="json") for slot in slots]
    log_activity(
        db,
        actor=actor,
        action="lecturer.availability_updated",
        entity_type="lecturer",
        entity_id=lecturer_id,
        details={"slots": len(slots)},
    )
    db.commit()
    db.refresh(lecturer)
    return lecturer
