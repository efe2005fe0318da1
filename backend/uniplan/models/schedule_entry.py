import uuid
import datetime
from enum import Enum

from sqlalchemy import JSON, Date, DateTime, Enum as SAEnum, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from uniplan.db.base import Base


class DayOfWeek(str, Enum):
    monday = "Monday"
    tuesday = "Tuesday"
    wednesday = "Wednesday"
    thursday = "Thursday"
    friday = "Friday"
    saturday = "Saturday"
    sunday = "Sunday"


class SessionType(str, Enum):
    lecture = "Wykład"
    exercises = "Ćwiczenia"
    laboratory = "Laboratorium"
    seminar = "Seminarium"


class SessionFormat(str, Enum):
    on_site = "stacjonarny"
    online = "online"


class ScheduleEntry(Base):
    __tablename__ = "schedule_entries"
    __table_args__ = (
        Index("ix_schedule_entries_day_start", "day", "start_time"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    timetable_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    day: Mapped[DayOfWeek] = mapped_column(
        SAEnum(DayOfWeek, name="day_of_week", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
    )
    date: Mapped[datetime.date | None] = mapped_column(Date, nullable=True)
    start_time: Mapped[str] = mapped_column(String(5), nullable=False)
    end_time: Mapped[str] = mapped_column(String(5), nullable=False)
    subject_id: Mapped[str] = mapped_column(String(36), nullable=False)
    subject_name: Mapped[str] = mapped_column(String(200), nullable=False)
    lecturer_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    lecturer_name: Mapped[str] = mapped_column(String(200), nullable=False)
    type: Mapped[SessionType] = mapped_column(
        SAEnum(SessionType, name="session_type", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
    )
    room_id: Mapped[str] = mapped_column(String(36), nullable=False)
    room_name: Mapped[str] = mapped_column(String(100), nullable=False)
    group_ids: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    group_names: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    specialization_ids: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    curriculum_subject_id: Mapped[str | None] = mapped_column(String(120), nullable=True)
    # ISO dates; empty means the entry recurs every week
    specific_dates: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    format: Mapped[SessionFormat | None] = mapped_column(
        SAEnum(SessionFormat, name="session_format", values_callable=lambda e: [m.value for m in e]),
        nullable=True,
    )
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    created_at: Mapped[datetime.datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime.datetime | None] = mapped_column(DateTime(timezone=True), onupdate=func.now())

    __mapper_args__ = {"version_id_col": version}
