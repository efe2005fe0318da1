from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field, field_validator, model_validator

from uniplan.models.timetable import Recurrence, StudyMode, TimetableStatus


def _clean_ids(value: list[str]) -> list[str]:
    cleaned: list[str] = []
    for item in value:
        item = item.strip()
        if item and item not in cleaned:
            cleaned.append(item)
    return cleaned


# Columns a partial update may omit but never set to null.
REQUIRED_TIMETABLE_FIELDS = ("name", "curriculum_id", "semester_id", "group_ids", "study_mode")


class TimetableBase(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    curriculum_id: str = Field(min_length=1, max_length=36)
    semester_id: str = Field(min_length=1, max_length=36)
    group_ids: list[str] = Field(default_factory=list, max_length=100)
    study_mode: StudyMode = StudyMode.full_time
    recurrence: Recurrence | None = None
    academic_year: str | None = Field(default=None, max_length=20)

    @field_validator("group_ids")
    @classmethod
    def normalize_group_ids(cls, value: list[str]) -> list[str]:
        return _clean_ids(value)


class TimetableCreate(TimetableBase):
    pass


class TimetableUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=200)
    curriculum_id: str | None = Field(default=None, min_length=1, max_length=36)
    semester_id: str | None = Field(default=None, min_length=1, max_length=36)
    group_ids: list[str] | None = Field(default=None, max_length=100)
    study_mode: StudyMode | None = None
    recurrence: Recurrence | None = None
    academic_year: str | None = Field(default=None, max_length=20)

    @field_validator("group_ids")
    @classmethod
    def normalize_group_ids(cls, value: list[str] | None) -> list[str] | None:
        if value is None:
            return value
        return _clean_ids(value)

    @model_validator(mode="after")
    def reject_explicit_nulls(self) -> "TimetableUpdate":
        nulls = [
            name for name in REQUIRED_TIMETABLE_FIELDS if name in self.model_fields_set and getattr(self, name) is None
        ]
        if nulls:
            raise ValueError(f"Fields cannot be cleared: {', '.join(nulls)}")
        return self


class TimetableStatusUpdate(BaseModel):
    status: TimetableStatus


class TimetableCopyRequest(BaseModel):
    name: str = Field(min_length=1, max_length=200)


class TimetableOut(TimetableBase):
    id: str
    status: TimetableStatus
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}


class TimetableCopyOut(BaseModel):
    timetable: TimetableOut
    copied_entries: int
