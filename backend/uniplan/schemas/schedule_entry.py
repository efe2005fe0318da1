from __future__ import annotations

import datetime

from pydantic import BaseModel, Field, field_validator

from uniplan.models.schedule_entry import DayOfWeek, SessionFormat, SessionType
from uniplan.schemas.common import validate_time_value


def _normalize_dates(value: list[datetime.date] | None) -> list[datetime.date] | None:
    if value is None:
        return None
    return sorted(set(value))


class ScheduleEntryCreate(BaseModel):
    """Placement intent for one class session.

    Either ``day`` (weekly programs) or ``date`` (block programs) must be
    supplied; that and the remaining placement rules are enforced by the
    schedule store so that merged updates go through the same checks.
    """

    day: DayOfWeek | None = None
    date: datetime.date | None = None
    start_time: str | None = None
    subject_id: str = Field(min_length=1, max_length=36)
    lecturer_id: str = Field(min_length=1, max_length=36)
    type: SessionType
    room_id: str = Field(min_length=1, max_length=36)
    group_ids: list[str] = Field(default_factory=list, max_length=50)
    specialization_ids: list[str] = Field(default_factory=list, max_length=50)
    curriculum_subject_id: str | None = Field(default=None, max_length=120)
    specific_dates: list[datetime.date] = Field(default_factory=list, max_length=60)
    format: SessionFormat | None = None

    @field_validator("start_time")
    @classmethod
    def validate_start_time(cls, value: str | None) -> str | None:
        if value is None:
            return value
        return validate_time_value(value)

    @field_validator("specific_dates")
    @classmethod
    def normalize_specific_dates(cls, value: list[datetime.date]) -> list[datetime.date]:
        return _normalize_dates(value) or []


class ScheduleEntryUpdate(BaseModel):
    day: DayOfWeek | None = None
    date: datetime.date | None = None
    start_time: str | None = None
    subject_id: str | None = Field(default=None, min_length=1, max_length=36)
    lecturer_id: str | None = Field(default=None, min_length=1, max_length=36)
    type: SessionType | None = None
    room_id: str | None = Field(default=None, min_length=1, max_length=36)
    group_ids: list[str] | None = Field(default=None, max_length=50)
    specialization_ids: list[str] | None = Field(default=None, max_length=50)
    curriculum_subject_id: str | None = Field(default=None, max_length=120)
    specific_dates: list[datetime.date] | None = Field(default=None, max_length=60)
    format: SessionFormat | None = None

    @field_validator("start_time")
    @classmethod
    def validate_start_time(cls, value: str | None) -> str | None:
        if value is None:
            return value
        return validate_time_value(value)

    @field_validator("specific_dates")
    @classmethod
    def normalize_specific_dates(cls, value: list[datetime.date] | None) -> list[datetime.date] | None:
        return _normalize_dates(value)


class ScheduleEntryMove(BaseModel):
    day: DayOfWeek | None = None
    date: datetime.date | None = None
    start_time: str

    @field_validator("start_time")
    @classmethod
    def validate_start_time(cls, value: str) -> str:
        return validate_time_value(value)


class ScheduleEntryOut(BaseModel):
    id: str
    timetable_id: str
    day: DayOfWeek
    date: datetime.date | None = None
    start_time: str
    end_time: str
    subject_id: str
    subject_name: str
    lecturer_id: str
    lecturer_name: str
    type: SessionType
    room_id: str
    room_name: str
    group_ids: list[str]
    group_names: list[str]
    specialization_ids: list[str]
    curriculum_subject_id: str | None = None
    specific_dates: list[str]
    format: SessionFormat | None = None
    created_at: datetime.datetime | None = None
    updated_at: datetime.datetime | None = None

    model_config = {"from_attributes": True}
