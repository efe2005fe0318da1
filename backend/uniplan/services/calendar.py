"""
Calendar model: the discrete grid class sessions are placed on.

Weekly programs place entries on a (day, time slot) cell. Block programs
(niestacjonarne, podyplomowe) additionally navigate semester dates grouped
into sessions ("zjazdy") of a few consecutive teaching days.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Iterable

from uniplan.core.config import get_settings
from uniplan.models.schedule_entry import DayOfWeek, SessionFormat
from uniplan.models.timetable import StudyMode
from uniplan.schemas.calendar import CalendarGridOut, TeachingSessionOut, TimeSlotOut
from uniplan.schemas.common import format_minutes, parse_time_to_minutes

DAYS: list[DayOfWeek] = list(DayOfWeek)

WEEKDAYS: list[DayOfWeek] = DAYS[:5]
WEEKEND: list[DayOfWeek] = DAYS[5:]

BLOCK_STUDY_MODES = {StudyMode.part_time, StudyMode.postgraduate}

SLOT_COUNT = 7
SLOT_MINUTES = 90
SLOT_GAP_MINUTES = 15
FIRST_SLOT_START = "08:00"


@dataclass(frozen=True)
class TimeSlot:
    index: int
    start_time: str
    end_time: str

    @property
    def label(self) -> str:
        return f"{self.start_time} - {self.end_time}"


def _build_time_slots() -> list[TimeSlot]:
    slots: list[TimeSlot] = []
    start = parse_time_to_minutes(FIRST_SLOT_START)
    for index in range(SLOT_COUNT):
        slots.append(TimeSlot(index + 1, format_minutes(start), format_minutes(start + SLOT_MINUTES)))
        start += SLOT_MINUTES + SLOT_GAP_MINUTES
    return slots


# 08:00-09:30, 09:45-11:15, ..., 18:30-20:00
TIME_SLOTS: list[TimeSlot] = _build_time_slots()
SLOT_STARTS = {slot.start_time for slot in TIME_SLOTS}


@dataclass
class TeachingSession:
    """One zjazd: a chunk of consecutive semester dates."""

    index: int
    dates: list[date] = field(default_factory=list)
    formats: list[SessionFormat] = field(default_factory=list)

    @property
    def start_date(self) -> date:
        return self.dates[0]

    @property
    def end_date(self) -> date:
        return self.dates[-1]

    @property
    def is_online(self) -> bool:
        return bool(self.formats) and all(item == SessionFormat.online for item in self.formats)

    @property
    def label(self) -> str:
        if self.start_date == self.end_date:
            return f"Zjazd {self.index}: {self.start_date.isoformat()}"
        return f"Zjazd {self.index}: {self.start_date.isoformat()} - {self.end_date.isoformat()}"


def days_for_study_mode(study_mode: StudyMode | str | None) -> list[DayOfWeek]:
    if study_mode is None:
        return list(WEEKDAYS)
    mode = StudyMode(study_mode)
    if mode in BLOCK_STUDY_MODES:
        return list(WEEKEND)
    return list(WEEKDAYS)


def is_block_mode(study_mode: StudyMode | str | None) -> bool:
    return study_mode is not None and StudyMode(study_mode) in BLOCK_STUDY_MODES


def is_slot_start(start_time: str) -> bool:
    return start_time in SLOT_STARTS


def slot_for_start(start_time: str) -> TimeSlot | None:
    for slot in TIME_SLOTS:
        if slot.start_time == start_time:
            return slot
    return None


def compute_end_time(start_time: str, duration_minutes: int | None = None) -> str:
    """Add ``duration_minutes`` to an HH:MM start time, wrapping past midnight."""
    if duration_minutes is None:
        duration_minutes = get_settings().placement_duration_minutes
    return format_minutes(parse_time_to_minutes(start_time) + duration_minutes)


def export_end_time(start_time: str, session_format: SessionFormat | str | None) -> str:
    # Online blocks are shorter in printed schedules only.
    settings = get_settings()
    if session_format is not None and SessionFormat(session_format) == SessionFormat.online:
        return compute_end_time(start_time, settings.online_duration_minutes)
    return compute_end_time(start_time, settings.placement_duration_minutes)


def duration_minutes(start_time: str, end_time: str) -> int:
    start = parse_time_to_minutes(start_time)
    end = parse_time_to_minutes(end_time)
    if end < start:
        end += 24 * 60
    return end - start


def day_for_date(value: date) -> DayOfWeek:
    return DAYS[value.weekday()]


def group_into_sessions(
    semester_dates: Iterable[tuple[date, SessionFormat | str]],
    chunk_size: int | None = None,
) -> list[TeachingSession]:
    """Sort (date, format) pairs and chunk them into numbered sessions.

    Duplicate dates collapse into one; the final session may be shorter than
    ``chunk_size`` when the date count does not divide evenly.
    """
    if chunk_size is None:
        chunk_size = get_settings().session_chunk_size
    if chunk_size < 1:
        raise ValueError("chunk_size must be at least 1")

    by_date: dict[date, SessionFormat] = {}
    for value, session_format in semester_dates:
        by_date.setdefault(value, SessionFormat(session_format))
    ordered = sorted(by_date.items())

    sessions: list[TeachingSession] = []
    for offset in range(0, len(ordered), chunk_size):
        chunk = ordered[offset:offset + chunk_size]
        sessions.append(
            TeachingSession(
                index=len(sessions) + 1,
                dates=[item[0] for item in chunk],
                formats=[item[1] for item in chunk],
            )
        )
    return sessions


def session_for_date(sessions: list[TeachingSession], value: date) -> TeachingSession | None:
    for session in sessions:
        if value in session.dates:
            return session
    return None


def serialize_session(session: TeachingSession) -> TeachingSessionOut:
    return TeachingSessionOut(
        index=session.index,
        label=session.label,
        start_date=session.start_date,
        end_date=session.end_date,
        dates=session.dates,
        formats=session.formats,
        is_online=session.is_online,
    )


def build_grid(
    study_mode: StudyMode | str,
    semester_dates: Iterable[tuple[date, SessionFormat | str]] = (),
    *,
    timetable_id: str | None = None,
    chunk_size: int | None = None,
) -> CalendarGridOut:
    block_mode = is_block_mode(study_mode)
    sessions = group_into_sessions(semester_dates, chunk_size) if block_mode else []
    return CalendarGridOut(
        timetable_id=timetable_id,
        study_mode=StudyMode(study_mode),
        block_mode=block_mode,
        days=days_for_study_mode(study_mode),
        time_slots=[
            TimeSlotOut(index=slot.index, start_time=slot.start_time, end_time=slot.end_time, label=slot.label)
            for slot in TIME_SLOTS
        ],
        sessions=[serialize_session(session) for session in sessions],
    )
