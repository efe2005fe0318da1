from __future__ import annotations

import logging
from collections import defaultdict
from typing import Iterable

from sqlalchemy import select
from sqlalchemy.orm import Session

from uniplan.core.exceptions import ResourceNotFoundError
from uniplan.models.curriculum import Curriculum
from uniplan.models.lecturer import Lecturer
from uniplan.models.schedule_entry import ScheduleEntry, SessionType
from uniplan.models.subject import Subject
from uniplan.models.timetable import Timetable
from uniplan.schemas.curriculum import CurriculumSubjectOut, SubjectProgressOut
from uniplan.services.calendar import duration_minutes

logger = logging.getLogger(__name__)

MISSING_LECTURER_NAME = "No lecturer assigned"


def curriculum_subject_id(subject_id: str, session_type: SessionType | str, position: int) -> str:
    return f"{subject_id}-{SessionType(session_type).value}-{position}"


def find_curriculum_semester(curriculum: Curriculum, semester_id: str) -> dict | None:
    target = (semester_id or "").strip()
    for semester in curriculum.semesters or []:
        if str(semester.get("semester_id") or "").strip() == target:
            return semester
    return None


def resolve_curriculum_subjects(db: Session, curriculum_id: str, semester_id: str) -> list[CurriculumSubjectOut]:
    """Flatten the curriculum's target semester into schedulable rows.

    Subject and lecturer names are joined in two batched lookups. Tuples whose
    subject cannot be resolved are dropped with a warning.
    """
    curriculum = db.get(Curriculum, curriculum_id)
    if curriculum is None:
        raise ResourceNotFoundError("Curriculum", curriculum_id)

    semester = find_curriculum_semester(curriculum, semester_id)
    if semester is None:
        raise ResourceNotFoundError(
            "CurriculumSemester",
            semester_id,
            message=f"Semester {semester_id} not found in curriculum {curriculum_id}",
        )

    items: list[dict] = list(semester.get("subjects") or [])
    if not items:
        return []

    subject_ids = {item.get("subject_id") for item in items if item.get("subject_id")}
    lecturer_ids = {item.get("lecturer_id") for item in items if item.get("lecturer_id")}

    subjects = {}
    if subject_ids:
        subjects = {row.id: row for row in db.execute(select(Subject).where(Subject.id.in_(subject_ids))).scalars()}
    lecturers = {}
    if lecturer_ids:
        lecturers = {
            row.id: row for row in db.execute(select(Lecturer).where(Lecturer.id.in_(lecturer_ids))).scalars()
        }

    rows: list[CurriculumSubjectOut] = []
    for position, item in enumerate(items):
        subject = subjects.get(item.get("subject_id"))
        if subject is None:
            logger.warning(
                "Dropping curriculum %s tuple %d: unknown subject %r",
                curriculum_id,
                position,
                item.get("subject_id"),
            )
            continue
        try:
            session_type = SessionType(item.get("type"))
        except ValueError:
            logger.warning(
                "Dropping curriculum %s tuple %d: unknown session type %r",
                curriculum_id,
                position,
                item.get("type"),
            )
            continue

        lecturer_id = item.get("lecturer_id") or None
        lecturer = lecturers.get(lecturer_id) if lecturer_id else None
        rows.append(
            CurriculumSubjectOut(
                id=curriculum_subject_id(subject.id, session_type, position),
                subject_id=subject.id,
                subject_name=subject.name,
                lecturer_id=lecturer_id,
                lecturer_name=lecturer.display_name if lecturer is not None else MISSING_LECTURER_NAME,
                type=session_type,
                hours=float(item.get("hours") or 0),
            )
        )
    return rows


def resolve_for_timetable(db: Session, timetable: Timetable) -> list[CurriculumSubjectOut]:
    return resolve_curriculum_subjects(db, timetable.curriculum_id, timetable.semester_id)


def scheduling_progress(
    subjects: Iterable[CurriculumSubjectOut],
    entries: Iterable[ScheduleEntry],
) -> list[SubjectProgressOut]:
    """Compare required hours with hours already placed, per curriculum subject.

    Purely informational: over-scheduling is reported, never rejected.
    """
    placed_minutes: dict[str, int] = defaultdict(int)
    placed_blocks: dict[str, int] = defaultdict(int)
    for entry in entries:
        if not entry.curriculum_subject_id:
            continue
        placed_minutes[entry.curriculum_subject_id] += duration_minutes(entry.start_time, entry.end_time)
        placed_blocks[entry.curriculum_subject_id] += 1

    progress: list[SubjectProgressOut] = []
    for subject in subjects:
        scheduled_hours = placed_minutes.get(subject.id, 0) / 60
        progress.append(
            SubjectProgressOut(
                **subject.model_dump(),
                scheduled_blocks=placed_blocks.get(subject.id, 0),
                scheduled_hours=scheduled_hours,
                remaining_hours=max(subject.hours - scheduled_hours, 0.0),
                fully_scheduled=scheduled_hours >= subject.hours,
            )
        )
    return progress


def timetable_progress(db: Session, timetable: Timetable) -> list[SubjectProgressOut]:
    subjects = resolve_for_timetable(db, timetable)
    entries = db.execute(select(ScheduleEntry).where(ScheduleEntry.timetable_id == timetable.id)).scalars().all()
    return scheduling_progress(subjects, entries)
