import uuid
from datetime import datetime
from enum import Enum

from sqlalchemy import JSON, DateTime, Enum as SAEnum, String
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from uniplan.db.base import Base


class TimetableStatus(str, Enum):
    draft = "draft"
    published = "published"
    archived = "archived"


class StudyMode(str, Enum):
    full_time = "stacjonarne"
    part_time = "niestacjonarne"
    postgraduate = "podyplomowe"
    english = "anglojęzyczne"


class Recurrence(str, Enum):
    weekly = "weekly"
    bi_weekly = "bi-weekly"
    monthly = "monthly"


class Timetable(Base):
    __tablename__ = "timetables"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    status: Mapped[TimetableStatus] = mapped_column(
        SAEnum(TimetableStatus, name="timetable_status", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=TimetableStatus.draft,
        index=True,
    )
    curriculum_id: Mapped[str] = mapped_column(String(36), nullable=False)
    semester_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    group_ids: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    study_mode: Mapped[StudyMode] = mapped_column(
        SAEnum(StudyMode, name="study_mode", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=StudyMode.full_time,
    )
    recurrence: Mapped[Recurrence | None] = mapped_column(
        SAEnum(Recurrence, name="timetable_recurrence", values_callable=lambda e: [m.value for m in e]),
        nullable=True,
    )
    academic_year: Mapped[str | None] = mapped_column(String(20), nullable=True, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), onupdate=func.now())
