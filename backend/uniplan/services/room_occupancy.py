"""
Room occupancy report.

Lays out one weekday of a semester as a rooms by time slots grid, listing the
entries of every non-archived plan that use each room. A cell holding entries
whose dates overlap is flagged as double booked; this happens when a plan is
copied without re-validation.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from itertools import combinations

from sqlalchemy import select
from sqlalchemy.orm import Session

from uniplan.core.exceptions import ResourceNotFoundError
from uniplan.models.room import Room
from uniplan.models.schedule_entry import DayOfWeek, ScheduleEntry
from uniplan.models.semester import Semester
from uniplan.schemas.calendar import TimeSlotOut
from uniplan.schemas.room import OccupyingEntryOut, RoomOccupancyCellOut, RoomOccupancyOut, RoomOut
from uniplan.services.calendar import TIME_SLOTS
from uniplan.services.conflict_service import effective_dates
from uniplan.services.schedule_store import ScheduleAssignmentStore

logger = logging.getLogger(__name__)


def occupancy_dates(entry: ScheduleEntry) -> frozenset[str] | None:
    return effective_dates(entry.specific_dates, entry.date)


def is_double_booked(entries: list[ScheduleEntry]) -> bool:
    for first, second in combinations(entries, 2):
        first_dates = occupancy_dates(first)
        second_dates = occupancy_dates(second)
        if first_dates is None or second_dates is None or first_dates & second_dates:
            return True
    return False


def _occupying_entry(entry: ScheduleEntry) -> OccupyingEntryOut:
    dates = occupancy_dates(entry)
    return OccupyingEntryOut(
        id=entry.id,
        timetable_id=entry.timetable_id,
        subject_name=entry.subject_name,
        lecturer_name=entry.lecturer_name,
        group_names=list(entry.group_names or []),
        dates=sorted(dates) if dates is not None else None,
    )


def build_room_occupancy(db: Session, semester_id: str, day: DayOfWeek) -> RoomOccupancyOut:
    if db.get(Semester, semester_id) is None:
        raise ResourceNotFoundError("Semester", semester_id)

    rooms = list(db.execute(select(Room).order_by(Room.name)).scalars())
    taken: dict[tuple[str, str], list[ScheduleEntry]] = defaultdict(list)
    for entry in ScheduleAssignmentStore(db).entries_for_semester_day(semester_id, day):
        taken[(entry.room_id, entry.start_time)].append(entry)

    cells = []
    for room in rooms:
        for slot in TIME_SLOTS:
            entries = taken.get((room.id, slot.start_time), [])
            cells.append(
                RoomOccupancyCellOut(
                    room_id=room.id,
                    start_time=slot.start_time,
                    end_time=slot.end_time,
                    entries=[_occupying_entry(entry) for entry in entries],
                    double_booked=is_double_booked(entries),
                )
            )

    flagged = sum(1 for cell in cells if cell.double_booked)
    if flagged:
        logger.warning("Semester %s has %d double-booked room slots on %s", semester_id, flagged, day.value)
    return RoomOccupancyOut(
        semester_id=semester_id,
        day=day,
        rooms=[RoomOut.model_validate(room) for room in rooms],
        time_slots=[
            TimeSlotOut(index=slot.index, start_time=slot.start_time, end_time=slot.end_time, label=slot.label)
            for slot in TIME_SLOTS
        ],
        cells=cells,
    )
