from __future__ import annotations

import datetime

from pydantic import BaseModel

from uniplan.models.schedule_entry import DayOfWeek, SessionFormat
from uniplan.models.timetable import StudyMode


class TimeSlotOut(BaseModel):
    index: int
    start_time: str
    end_time: str
    label: str


class TeachingSessionOut(BaseModel):
    index: int
    label: str
    start_date: datetime.date
    end_date: datetime.date
    dates: list[datetime.date]
    formats: list[SessionFormat]
    is_online: bool


class CalendarGridOut(BaseModel):
    timetable_id: str | None = None
    study_mode: StudyMode
    block_mode: bool
    days: list[DayOfWeek]
    time_slots: list[TimeSlotOut]
    sessions: list[TeachingSessionOut]
