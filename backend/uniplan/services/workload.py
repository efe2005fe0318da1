from __future__ import annotations

from collections import defaultdict

from sqlalchemy import select
from sqlalchemy.orm import Session

from uniplan.core.config import get_settings
from uniplan.models.curriculum import Curriculum
from uniplan.models.lecturer import Lecturer
from uniplan.models.schedule_entry import ScheduleEntry
from uniplan.models.subject import Subject
from uniplan.models.timetable import Timetable, TimetableStatus
from uniplan.schemas.lecturer import LecturerSubtotalOut, WorkloadReportOut, WorkloadRowOut

UNKNOWN_NAME = "N/A"


def _name_map(db: Session, model, ids: set[str], attribute: str) -> dict[str, str]:
    if not ids:
        return {}
    rows = db.execute(select(model).where(model.id.in_(ids))).scalars()
    return {row.id: getattr(row, attribute) for row in rows}


def build_workload_report(
    db: Session,
    *,
    academic_year: str | None = None,
    semester_id: str | None = None,
    lecturer_id: str | None = None,
) -> WorkloadReportOut:
    """Planned curriculum hours against hours placed in timetables, per lecturer and subject.

    Planned hours come from curricula of the selected academic year and
    semester; scheduled hours count one block per placed entry in every
    non-archived timetable matching the same filters. Entries for
    (lecturer, subject) pairs absent from the curricula are ignored.
    """
    hours_per_block = get_settings().hours_per_block

    curricula_query = select(Curriculum)
    if academic_year:
        curricula_query = curricula_query.where(Curriculum.academic_year == academic_year)

    planned: dict[tuple[str, str], dict[str, float]] = defaultdict(lambda: defaultdict(float))
    for curriculum in db.execute(curricula_query).scalars():
        for semester in curriculum.semesters or []:
            if semester_id and str(semester.get("semester_id") or "").strip() != semester_id:
                continue
            for item in semester.get("subjects") or []:
                item_lecturer = item.get("lecturer_id")
                if not item_lecturer or not item.get("subject_id"):
                    continue
                if lecturer_id and item_lecturer != lecturer_id:
                    continue
                planned[(item_lecturer, item["subject_id"])][str(item.get("type") or "")] += float(item.get("hours") or 0)

    timetables_query = select(Timetable).where(Timetable.status != TimetableStatus.archived)
    if semester_id:
        timetables_query = timetables_query.where(Timetable.semester_id == semester_id)
    if academic_year:
        timetables_query = timetables_query.where(Timetable.academic_year == academic_year)
    timetables = {item.id: item for item in db.execute(timetables_query).scalars()}

    scheduled: dict[tuple[str, str], dict[str, float]] = defaultdict(lambda: defaultdict(float))
    study_modes: dict[tuple[str, str], str] = {}
    if timetables:
        entries_query = select(ScheduleEntry).where(ScheduleEntry.timetable_id.in_(list(timetables)))
        if lecturer_id:
            entries_query = entries_query.where(ScheduleEntry.lecturer_id == lecturer_id)
        for entry in db.execute(entries_query).scalars():
            key = (entry.lecturer_id, entry.subject_id)
            if key not in planned:
                continue
            scheduled[key][entry.type.value] += hours_per_block
            study_modes[key] = timetables[entry.timetable_id].study_mode.value

    lecturer_names = _name_map(db, Lecturer, {key[0] for key in planned}, "display_name")
    subject_names = _name_map(db, Subject, {key[1] for key in planned}, "name")

    rows: list[WorkloadRowOut] = []
    for (row_lecturer, row_subject), planned_hours in planned.items():
        scheduled_hours = dict(scheduled.get((row_lecturer, row_subject), {}))
        rows.append(
            WorkloadRowOut(
                lecturer_id=row_lecturer,
                lecturer_name=lecturer_names.get(row_lecturer, UNKNOWN_NAME),
                subject_id=row_subject,
                subject_name=subject_names.get(row_subject, UNKNOWN_NAME),
                study_mode=study_modes.get((row_lecturer, row_subject)),
                planned_hours=dict(planned_hours),
                scheduled_hours=scheduled_hours,
                total_planned=sum(planned_hours.values()),
                total_scheduled=sum(scheduled_hours.values()),
            )
        )
    rows.sort(key=lambda row: (row.lecturer_name, row.subject_name))

    subtotals: dict[str, LecturerSubtotalOut] = {}
    for row in rows:
        subtotal = subtotals.setdefault(
            row.lecturer_id,
            LecturerSubtotalOut(
                lecturer_id=row.lecturer_id,
                lecturer_name=row.lecturer_name,
                total_planned=0,
                total_scheduled=0,
            ),
        )
        subtotal.total_planned += row.total_planned
        subtotal.total_scheduled += row.total_scheduled

    return WorkloadReportOut(rows=rows, subtotals=list(subtotals.values()))
