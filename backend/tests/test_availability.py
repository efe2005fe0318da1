import pytest

from uniplan.core.exceptions import ResourceNotFoundError
from uniplan.models.schedule_entry import DayOfWeek
from uniplan.models.timetable import TimetableStatus
from uniplan.schemas.lecturer import AvailabilitySlot
from uniplan.services.availability import build_availability_overlay, update_availability, within_availability


def _cell(overlay, day: DayOfWeek, start_time: str):
    return next(cell for cell in overlay.cells if cell.day == day and cell.start_time == start_time)


def test_lecturer_without_declared_availability_is_available_everywhere(catalog):
    overlay = build_availability_overlay(catalog, "lec-1")

    assert overlay.declared_slots == []
    assert len(overlay.cells) == 49
    assert all(cell.within_availability for cell in overlay.cells)
    assert all(cell.busy_entry_ids == [] for cell in overlay.cells)


def test_declared_availability_limits_cells(db, catalog):
    slots = [AvailabilitySlot(day="Monday", start_time="08:00", end_time="11:15")]
    lecturer = update_availability(db, "lec-2", slots, actor="sekretariat")
    assert lecturer.availability == [{"day": "Monday", "start_time": "08:00", "end_time": "11:15"}]

    overlay = build_availability_overlay(db, "lec-2")
    assert _cell(overlay, DayOfWeek.monday, "08:00").within_availability
    assert _cell(overlay, DayOfWeek.monday, "09:45").within_availability
    assert not _cell(overlay, DayOfWeek.monday, "11:30").within_availability
    assert not _cell(overlay, DayOfWeek.tuesday, "08:00").within_availability


def test_busy_cells_come_from_active_plans(db, store, make_timetable, entry_payload):
    active = make_timetable(name="Plan A")
    old = make_timetable(name="Plan 2024", academic_year="2024/2025")
    entry = store.create_entry(active.id, entry_payload())
    store.create_entry(old.id, entry_payload(day="Friday"))
    old.status = TimetableStatus.archived
    db.commit()

    overlay = build_availability_overlay(db, "lec-1")
    assert _cell(overlay, DayOfWeek.monday, "08:00").busy_entry_ids == [entry.id]
    assert _cell(overlay, DayOfWeek.friday, "08:00").busy_entry_ids == []


def test_within_availability_needs_the_whole_block():
    slots = [AvailabilitySlot(day="Wednesday", start_time="08:00", end_time="09:00")]
    assert not within_availability(DayOfWeek.wednesday, "08:00", "09:30", slots)
    assert within_availability(DayOfWeek.wednesday, "08:00", "09:30", [])


def test_availability_slot_rejects_reversed_times():
    with pytest.raises(ValueError):
        AvailabilitySlot(day="Monday", start_time="12:00", end_time="10:00")


def test_unknown_lecturer(catalog):
    with pytest.raises(ResourceNotFoundError):
        build_availability_overlay(catalog, "lec-404")
