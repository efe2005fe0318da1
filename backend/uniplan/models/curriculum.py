import uuid
from datetime import datetime

from sqlalchemy import JSON, DateTime, String
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from uniplan.db.base import Base


class Curriculum(Base):
    """Program plan kept as one document: an ordered list of semesters.

    Each item of ``semesters`` looks like::

        {"semester_id": "...", "semester_number": 1,
         "subjects": [{"subject_id": "...", "lecturer_id": "...",
                       "type": "Wykład", "hours": 30, "ects": 5}]}
    """

    __tablename__ = "curriculums"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    program_name: Mapped[str] = mapped_column(String(200), nullable=False)
    academic_year: Mapped[str | None] = mapped_column(String(20), nullable=True, index=True)
    semesters: Mapped[list[dict]] = mapped_column(JSON, nullable=False, default=list)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
