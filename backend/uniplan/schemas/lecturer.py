from __future__ import annotations

from pydantic import BaseModel, Field, field_validator, model_validator

from uniplan.models.schedule_entry import DayOfWeek
from uniplan.schemas.common import parse_time_to_minutes, validate_time_value


class AvailabilitySlot(BaseModel):
    day: DayOfWeek
    start_time: str
    end_time: str

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_time_format(cls, value: str) -> str:
        return validate_time_value(value)

    @model_validator(mode="after")
    def validate_order(self) -> "AvailabilitySlot":
        if parse_time_to_minutes(self.end_time) <= parse_time_to_minutes(self.start_time):
            raise ValueError("end_time must be after start_time")
        return self


class AvailabilityUpdate(BaseModel):
    slots: list[AvailabilitySlot] = Field(default_factory=list, max_length=100)


class AvailabilityCellOut(BaseModel):
    day: DayOfWeek
    start_time: str
    end_time: str
    within_availability: bool
    busy_entry_ids: list[str]


class AvailabilityOverlayOut(BaseModel):
    lecturer_id: str
    declared_slots: list[AvailabilitySlot]
    cells: list[AvailabilityCellOut]


class WorkloadRowOut(BaseModel):
    lecturer_id: str
    lecturer_name: str
    subject_id: str
    subject_name: str
    study_mode: str | None = None
    planned_hours: dict[str, float]
    scheduled_hours: dict[str, float]
    total_planned: float
    total_scheduled: float


class LecturerSubtotalOut(BaseModel):
    lecturer_id: str
    lecturer_name: str
    total_planned: float
    total_scheduled: float


class WorkloadReportOut(BaseModel):
    rows: list[WorkloadRowOut]
    subtotals: list[LecturerSubtotalOut]
