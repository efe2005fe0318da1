from datetime import date

import pytest

from uniplan.models.schedule_entry import DayOfWeek, SessionFormat
from uniplan.models.timetable import StudyMode
from uniplan.services.calendar import (
    TIME_SLOTS,
    build_grid,
    compute_end_time,
    day_for_date,
    days_for_study_mode,
    duration_minutes,
    export_end_time,
    group_into_sessions,
    is_block_mode,
    is_slot_start,
    session_for_date,
)


def test_time_grid_has_seven_ninety_minute_slots():
    assert [slot.start_time for slot in TIME_SLOTS] == [
        "08:00",
        "09:45",
        "11:30",
        "13:15",
        "15:00",
        "16:45",
        "18:30",
    ]
    assert TIME_SLOTS[-1].end_time == "20:00"
    assert all(duration_minutes(slot.start_time, slot.end_time) == 90 for slot in TIME_SLOTS)
    assert TIME_SLOTS[0].label == "08:00 - 09:30"


def test_slot_start_recognition():
    assert is_slot_start("09:45")
    assert not is_slot_start("09:00")
    assert not is_slot_start("20:00")


@pytest.mark.parametrize(
    ("start", "expected"),
    [("08:00", "09:30"), ("18:30", "20:00"), ("23:00", "00:30")],
)
def test_compute_end_time_adds_placement_duration(start, expected):
    assert compute_end_time(start) == expected


def test_compute_end_time_with_explicit_duration():
    assert compute_end_time("13:15", 45) == "14:00"


def test_export_end_time_shortens_online_blocks_only():
    assert export_end_time("08:00", SessionFormat.online) == "09:10"
    assert export_end_time("08:00", "stacjonarny") == "09:30"
    assert export_end_time("08:00", None) == "09:30"


def test_days_for_study_mode():
    weekdays = [DayOfWeek.monday, DayOfWeek.tuesday, DayOfWeek.wednesday, DayOfWeek.thursday, DayOfWeek.friday]
    assert days_for_study_mode(StudyMode.full_time) == weekdays
    assert days_for_study_mode("anglojęzyczne") == weekdays
    assert days_for_study_mode(None) == weekdays
    assert days_for_study_mode(StudyMode.part_time) == [DayOfWeek.saturday, DayOfWeek.sunday]
    assert days_for_study_mode("podyplomowe") == [DayOfWeek.saturday, DayOfWeek.sunday]


def test_block_mode_flags():
    assert is_block_mode(StudyMode.part_time)
    assert is_block_mode(StudyMode.postgraduate)
    assert not is_block_mode(StudyMode.full_time)
    assert not is_block_mode(None)


def test_day_for_date():
    assert day_for_date(date(2025, 10, 6)) == DayOfWeek.monday
    assert day_for_date(date(2025, 10, 11)) == DayOfWeek.saturday
    assert day_for_date(date(2025, 10, 12)) == DayOfWeek.sunday


def test_group_into_sessions_sorts_dedupes_and_chunks():
    sessions = group_into_sessions(
        [
            (date(2025, 10, 26), "online"),
            (date(2025, 10, 11), "stacjonarny"),
            (date(2025, 11, 8), "stacjonarny"),
            (date(2025, 10, 12), "stacjonarny"),
            (date(2025, 10, 25), "online"),
            (date(2025, 10, 11), "online"),
        ]
    )

    assert [session.index for session in sessions] == [1, 2, 3]
    assert sessions[0].dates == [date(2025, 10, 11), date(2025, 10, 12)]
    assert sessions[1].dates == [date(2025, 10, 25), date(2025, 10, 26)]
    assert sessions[2].dates == [date(2025, 11, 8)]

    # first format seen for a duplicate date wins
    assert sessions[0].formats == [SessionFormat.on_site, SessionFormat.on_site]
    assert not sessions[0].is_online
    assert sessions[1].is_online

    assert sessions[0].label == "Zjazd 1: 2025-10-11 - 2025-10-12"
    assert sessions[2].label == "Zjazd 3: 2025-11-08"


def test_group_into_sessions_with_custom_chunk_size():
    dates = [(date(2025, 10, 11), "stacjonarny"), (date(2025, 10, 12), "stacjonarny"), (date(2025, 10, 18), "online")]
    sessions = group_into_sessions(dates, chunk_size=3)
    assert len(sessions) == 1
    assert sessions[0].start_date == date(2025, 10, 11)
    assert sessions[0].end_date == date(2025, 10, 18)


def test_group_into_sessions_rejects_empty_chunks():
    with pytest.raises(ValueError):
        group_into_sessions([(date(2025, 10, 11), "online")], chunk_size=0)


def test_group_into_sessions_without_dates():
    assert group_into_sessions([]) == []


def test_session_for_date():
    sessions = group_into_sessions([(date(2025, 10, 11), "online"), (date(2025, 10, 12), "online")])
    assert session_for_date(sessions, date(2025, 10, 12)).index == 1
    assert session_for_date(sessions, date(2025, 10, 13)) is None


def test_build_grid_for_weekly_program_has_no_sessions():
    grid = build_grid(StudyMode.full_time, [(date(2025, 10, 11), "online")], timetable_id="tt-1")
    assert grid.timetable_id == "tt-1"
    assert not grid.block_mode
    assert len(grid.days) == 5
    assert len(grid.time_slots) == 7
    assert grid.sessions == []


def test_build_grid_for_block_program_lists_sessions():
    grid = build_grid(
        "niestacjonarne",
        [(date(2025, 10, 11), "stacjonarny"), (date(2025, 10, 12), "online")],
    )
    assert grid.block_mode
    assert grid.days == [DayOfWeek.saturday, DayOfWeek.sunday]
    assert len(grid.sessions) == 1
    assert grid.sessions[0].dates == [date(2025, 10, 11), date(2025, 10, 12)]
    assert not grid.sessions[0].is_online
