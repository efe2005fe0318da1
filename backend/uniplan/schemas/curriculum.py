from __future__ import annotations

from pydantic import BaseModel

from uniplan.models.schedule_entry import SessionType


class CurriculumSubjectOut(BaseModel):
    id: str
    subject_id: str
    subject_name: str
    lecturer_id: str | None = None
    lecturer_name: str
    type: SessionType
    hours: float


class SubjectProgressOut(CurriculumSubjectOut):
    scheduled_blocks: int
    scheduled_hours: float
    remaining_hours: float
    fully_scheduled: bool
