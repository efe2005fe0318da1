from __future__ import annotations

from pydantic import BaseModel

from uniplan.models.schedule_entry import DayOfWeek
from uniplan.schemas.calendar import TimeSlotOut


class RoomOut(BaseModel):
    id: str
    name: str
    capacity: int | None = None

    model_config = {"from_attributes": True}


class OccupyingEntryOut(BaseModel):
    id: str
    timetable_id: str
    subject_name: str
    lecturer_name: str
    group_names: list[str]
    dates: list[str] | None = None


class RoomOccupancyCellOut(BaseModel):
    room_id: str
    start_time: str
    end_time: str
    entries: list[OccupyingEntryOut]
    double_booked: bool


class RoomOccupancyOut(BaseModel):
    semester_id: str
    day: DayOfWeek
    rooms: list[RoomOut]
    time_slots: list[TimeSlotOut]
    cells: list[RoomOccupancyCellOut]
