from __future__ import annotations

import logging
import uuid
from datetime import date, timedelta

from sqlalchemy import delete, select
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from uniplan.core.exceptions import (
    ConcurrentModificationError,
    EntryValidationError,
    ResourceNotFoundError,
)
from uniplan.models.curriculum import Curriculum
from uniplan.models.group import Group
from uniplan.models.lecturer import Lecturer
from uniplan.models.room import Room
from uniplan.models.schedule_entry import DayOfWeek, ScheduleEntry
from uniplan.models.subject import Subject
from uniplan.models.timetable import Timetable, TimetableStatus
from uniplan.schemas.schedule_entry import ScheduleEntryCreate, ScheduleEntryMove, ScheduleEntryUpdate
from uniplan.schemas.timetable import TimetableCreate, TimetableUpdate
from uniplan.services.audit import log_activity
from uniplan.services.calendar import DAYS, TIME_SLOTS, compute_end_time, day_for_date, is_slot_start
from uniplan.services.conflict_service import ConflictDetector, PlacementProposal, effective_dates
from uniplan.services.curriculum_resolver import find_curriculum_semester

logger = logging.getLogger(__name__)

PLACEMENT_FIELDS = (
    "day",
    "date",
    "start_time",
    "subject_id",
    "lecturer_id",
    "type",
    "room_id",
    "group_ids",
    "specialization_ids",
    "curriculum_subject_id",
    "specific_dates",
    "format",
)

# Columns never carried over when a timetable is cloned.
CLONE_EXCLUDED_COLUMNS = {"id", "timetable_id", "created_at", "updated_at", "version"}


def _clean_ids(values: list[str] | None) -> list[str]:
    cleaned: list[str] = []
    for value in values or []:
        value = value.strip()
        if value and value not in cleaned:
            cleaned.append(value)
    return cleaned


def normalize_placement(record: dict) -> dict:
    """Validate a full placement record and fill in the derived fields.

    Runs before any database read. Derives ``day`` from ``date`` for block
    entries, ``end_time`` from ``start_time`` and serializes specific dates
    as ISO strings.
    """
    missing = [name for name in ("start_time", "subject_id", "lecturer_id", "room_id", "type") if not record.get(name)]
    if not record.get("day") and not record.get("date"):
        missing.insert(0, "day")
    if missing:
        raise EntryValidationError(
            f"Missing required placement fields: {', '.join(missing)}",
            details={"missing": missing},
        )

    start_time = record["start_time"]
    if not is_slot_start(start_time):
        raise EntryValidationError(
            f"Start time {start_time} does not match a time slot",
            details={"start_time": start_time, "allowed": [slot.start_time for slot in TIME_SLOTS]},
        )

    group_ids = _clean_ids(record.get("group_ids"))
    if not group_ids:
        raise EntryValidationError("At least one group is required", details={"missing": ["group_ids"]})

    day = DayOfWeek(record["day"]) if record.get("day") else None
    entry_date = record.get("date")
    if entry_date is not None:
        date_day = day_for_date(entry_date)
        if day is not None and day != date_day:
            raise EntryValidationError(
                f"Date {entry_date.isoformat()} falls on {date_day.value}, not {day.value}",
                details={"date": entry_date.isoformat(), "day": day.value},
            )
        day = date_day

    raw_dates = list(record.get("specific_dates") or [])
    off_day = sorted(value.isoformat() for value in raw_dates if day_for_date(value) != day)
    if off_day:
        raise EntryValidationError(f"Specific dates must fall on {day.value}", details={"dates": off_day})
    specific_dates = sorted({value.isoformat() for value in raw_dates})

    normalized = dict(record)
    normalized.update(
        day=day,
        start_time=start_time,
        end_time=compute_end_time(start_time),
        group_ids=group_ids,
        specialization_ids=_clean_ids(record.get("specialization_ids")),
        specific_dates=specific_dates,
    )
    return normalized


def sort_entries(entries: list[ScheduleEntry]) -> list[ScheduleEntry]:
    return sorted(
        entries,
        key=lambda entry: (DAYS.index(DayOfWeek(entry.day)), entry.date or date.min, entry.start_time, entry.id),
    )


def entry_snapshot(entry: ScheduleEntry) -> dict:
    """Current placement fields of a stored entry, in the shape of a create request."""
    return {
        "day": DayOfWeek(entry.day),
        "date": entry.date,
        "start_time": entry.start_time,
        "subject_id": entry.subject_id,
        "lecturer_id": entry.lecturer_id,
        "type": entry.type,
        "room_id": entry.room_id,
        "group_ids": list(entry.group_ids or []),
        "specialization_ids": list(entry.specialization_ids or []),
        "curriculum_subject_id": entry.curriculum_subject_id,
        "specific_dates": [date.fromisoformat(value) for value in entry.specific_dates or []],
        "format": entry.format,
    }


class ScheduleAssignmentStore:
    """Authoritative CRUD for schedule entries and timetables.

    Every entry write goes through the :class:`ConflictDetector`. The store does
    not check the timetable status; the command layer gates published plans.
    """

    def __init__(self, db: Session, detector: ConflictDetector | None = None):
        self.db = db
        self.detector = detector or ConflictDetector(db)

    # --- lookups ---------------------------------------------------------

    def get_timetable(self, timetable_id: str) -> Timetable:
        timetable = self.db.get(Timetable, timetable_id)
        if timetable is None:
            raise ResourceNotFoundError("Timetable", timetable_id)
        return timetable

    def get_entry(self, entry_id: str) -> ScheduleEntry:
        entry = self.db.get(ScheduleEntry, entry_id)
        if entry is None:
            raise ResourceNotFoundError("ScheduleEntry", entry_id)
        return entry

    def list_timetables(self, group_id: str | None = None) -> list[Timetable]:
        query = select(Timetable).order_by(Timetable.academic_year.desc(), Timetable.name)
        timetables = list(self.db.execute(query).scalars())
        if group_id:
            # group_ids is a JSON list, filtered here to stay portable across dialects
            timetables = [item for item in timetables if group_id in (item.group_ids or [])]
        return timetables

    def entries_for_timetable(self, timetable_id: str) -> list[ScheduleEntry]:
        query = select(ScheduleEntry).where(ScheduleEntry.timetable_id == timetable_id)
        return sort_entries(list(self.db.execute(query).scalars()))

    def entries_for_lecturer(self, lecturer_id: str) -> list[ScheduleEntry]:
        """Entries of a lecturer across all plans except archived ones."""
        query = (
            select(ScheduleEntry)
            .join(Timetable, Timetable.id == ScheduleEntry.timetable_id)
            .where(
                ScheduleEntry.lecturer_id == lecturer_id,
                Timetable.status != TimetableStatus.archived,
            )
        )
        return sort_entries(list(self.db.execute(query).scalars()))

    def entries_for_semester_day(self, semester_id: str, day: DayOfWeek) -> list[ScheduleEntry]:
        """Entries placed on a weekday by any non-archived plan of a semester."""
        query = (
            select(ScheduleEntry)
            .join(Timetable, Timetable.id == ScheduleEntry.timetable_id)
            .where(
                Timetable.semester_id == semester_id,
                Timetable.status != TimetableStatus.archived,
                ScheduleEntry.day == day,
            )
        )
        return sort_entries(list(self.db.execute(query).scalars()))

    def _resolve_display_names(self, record: dict) -> dict:
        subject = self.db.get(Subject, record["subject_id"])
        if subject is None:
            raise ResourceNotFoundError("Subject", record["subject_id"])
        lecturer = self.db.get(Lecturer, record["lecturer_id"])
        if lecturer is None:
            raise ResourceNotFoundError("Lecturer", record["lecturer_id"])
        room = self.db.get(Room, record["room_id"])
        if room is None:
            raise ResourceNotFoundError("Room", record["room_id"])

        group_ids = record["group_ids"]
        groups = {row.id: row for row in self.db.execute(select(Group).where(Group.id.in_(group_ids))).scalars()}
        for group_id in group_ids:
            if group_id not in groups:
                raise ResourceNotFoundError("Group", group_id)

        return {
            "subject_name": subject.name,
            "lecturer_name": lecturer.display_name,
            "room_name": room.name,
            "group_names": [groups[group_id].name for group_id in group_ids],
        }

    @staticmethod
    def _proposal(record: dict) -> PlacementProposal:
        return PlacementProposal(
            day=record["day"],
            start_time=record["start_time"],
            lecturer_id=record["lecturer_id"],
            room_id=record["room_id"],
            group_ids=frozenset(record["group_ids"]),
            dates=effective_dates(record["specific_dates"], record.get("date")),
        )

    # --- entries ---------------------------------------------------------

    def create_entry(
        self,
        timetable_id: str,
        payload: ScheduleEntryCreate,
        *,
        actor: str | None = None,
    ) -> ScheduleEntry:
        record = normalize_placement(payload.model_dump())
        self.get_timetable(timetable_id)
        names = self._resolve_display_names(record)
        self.detector.check(self._proposal(record))

        entry = ScheduleEntry(id=str(uuid.uuid4()), timetable_id=timetable_id, **record, **names)
        self.db.add(entry)
        log_activity(
            self.db,
            actor=actor,
            action="schedule_entry.created",
            entity_type="schedule_entry",
            entity_id=entry.id,
            details={"timetable_id": timetable_id, "day": record["day"].value, "start_time": record["start_time"]},
        )
        self.db.commit()
        self.db.refresh(entry)
        logger.info("Placed entry %s in timetable %s", entry.id, timetable_id)
        return entry

    def update_entry(
        self,
        entry_id: str,
        changes: ScheduleEntryUpdate | ScheduleEntryMove,
        *,
        actor: str | None = None,
    ) -> ScheduleEntry:
        entry = self.get_entry(entry_id)
        delta = changes.model_dump(exclude_unset=True)
        merged = entry_snapshot(entry)
        merged.update({key: value for key, value in delta.items() if key in PLACEMENT_FIELDS})
        if delta.get("day") is not None and "specific_dates" not in delta and merged.get("date") is None:
            # Dated weekly entries keep their weeks and follow the new weekday.
            offset = DAYS.index(DayOfWeek(delta["day"])) - DAYS.index(DayOfWeek(entry.day))
            merged["specific_dates"] = [value + timedelta(days=offset) for value in merged["specific_dates"]]
        if "date" in delta and "day" not in delta:
            merged["day"] = None
        if "day" in delta and "date" not in delta and merged.get("date") is not None:
            if day_for_date(merged["date"]) != merged["day"]:
                raise EntryValidationError(
                    "Entries scheduled on a date must be moved to a date",
                    details={"date": merged["date"].isoformat()},
                )

        record = normalize_placement(merged)
        names = self._resolve_display_names(record)
        self.detector.check(self._proposal(record), excluding_id=entry.id)

        previous = {"day": DayOfWeek(entry.day).value, "start_time": entry.start_time}
        for key, value in {**record, **names}.items():
            setattr(entry, key, value)
        log_activity(
            self.db,
            actor=actor,
            action="schedule_entry.updated",
            entity_type="schedule_entry",
            entity_id=entry.id,
            details={
                "changed": sorted(delta),
                "from": previous,
                "to": {"day": record["day"].value, "start_time": record["start_time"]},
            },
        )
        try:
            self.db.commit()
        except StaleDataError as exc:
            self.db.rollback()
            raise ConcurrentModificationError(entry_id) from exc
        self.db.refresh(entry)
        return entry

    def move_entry(self, entry_id: str, move: ScheduleEntryMove, *, actor: str | None = None) -> ScheduleEntry:
        if move.day is None and move.date is None:
            raise EntryValidationError("A day or a date is required to move an entry", details={"missing": ["day"]})
        return self.update_entry(entry_id, move, actor=actor)

    def delete_entry(self, entry_id: str, *, actor: str | None = None) -> None:
        entry = self.get_entry(entry_id)
        log_activity(
            self.db,
            actor=actor,
            action="schedule_entry.deleted",
            entity_type="schedule_entry",
            entity_id=entry.id,
            details={"timetable_id": entry.timetable_id},
        )
        self.db.delete(entry)
        self.db.commit()

    # --- timetables ------------------------------------------------------

    def _ensure_curriculum_semester(self, curriculum_id: str, semester_id: str) -> None:
        curriculum = self.db.get(Curriculum, curriculum_id)
        if curriculum is None:
            raise ResourceNotFoundError("Curriculum", curriculum_id)
        if find_curriculum_semester(curriculum, semester_id) is None:
            raise ResourceNotFoundError(
                "CurriculumSemester",
                semester_id,
                message=f"Semester {semester_id} not found in curriculum {curriculum_id}",
            )

    def create_timetable(self, payload: TimetableCreate, *, actor: str | None = None) -> Timetable:
        self._ensure_curriculum_semester(payload.curriculum_id, payload.semester_id)
        timetable = Timetable(**payload.model_dump(), status=TimetableStatus.draft)
        self.db.add(timetable)
        self.db.flush()
        log_activity(
            self.db,
            actor=actor,
            action="timetable.created",
            entity_type="timetable",
            entity_id=timetable.id,
            details={"name": timetable.name},
        )
        self.db.commit()
        self.db.refresh(timetable)
        return timetable

    def update_timetable(self, timetable_id: str, payload: TimetableUpdate, *, actor: str | None = None) -> Timetable:
        timetable = self.get_timetable(timetable_id)
        data = payload.model_dump(exclude_unset=True)
        if "curriculum_id" in data or "semester_id" in data:
            self._ensure_curriculum_semester(
                data.get("curriculum_id") or timetable.curriculum_id,
                data.get("semester_id") or timetable.semester_id,
            )
        for key, value in data.items():
            setattr(timetable, key, value)
        if data:
            log_activity(
                self.db,
                actor=actor,
                action="timetable.updated",
                entity_type="timetable",
                entity_id=timetable.id,
                details={"changed": sorted(data)},
            )
        self.db.commit()
        self.db.refresh(timetable)
        return timetable

    def copy_timetable(self, source_id: str, new_name: str, *, actor: str | None = None) -> tuple[Timetable, int]:
        """Clone a timetable and all its entries in one transaction.

        Entries are copied without conflict re-validation; the copy mirrors a
        plan that was already valid. The copy always starts as a draft.
        """
        source = self.get_timetable(source_id)
        entries = self.entries_for_timetable(source_id)

        try:
            clone = Timetable(
                id=str(uuid.uuid4()),
                name=new_name,
                status=TimetableStatus.draft,
                curriculum_id=source.curriculum_id,
                semester_id=source.semester_id,
                group_ids=list(source.group_ids or []),
                study_mode=source.study_mode,
                recurrence=source.recurrence,
                academic_year=source.academic_year,
            )
            self.db.add(clone)

            columns = [name for name in ScheduleEntry.__table__.columns.keys() if name not in CLONE_EXCLUDED_COLUMNS]
            for entry in entries:
                values = {}
                for name in columns:
                    value = getattr(entry, name)
                    values[name] = list(value) if isinstance(value, list) else value
                self.db.add(ScheduleEntry(id=str(uuid.uuid4()), timetable_id=clone.id, **values))

            log_activity(
                self.db,
                actor=actor,
                action="timetable.copied",
                entity_type="timetable",
                entity_id=clone.id,
                details={"source_id": source_id, "entries": len(entries)},
            )
            self.db.commit()
        except Exception:
            self.db.rollback()
            logger.exception("Copying timetable %s failed; nothing was written", source_id)
            raise

        self.db.refresh(clone)
        logger.info("Copied timetable %s into %s with %d entries", source_id, clone.id, len(entries))
        return clone, len(entries)

    def delete_timetable(self, timetable_id: str, *, actor: str | None = None) -> int:
        """Remove a timetable together with every entry that references it."""
        timetable = self.get_timetable(timetable_id)
        try:
            result = self.db.execute(
                delete(ScheduleEntry)
                .where(ScheduleEntry.timetable_id == timetable_id)
                .execution_options(synchronize_session="evaluate")
            )
            deleted = result.rowcount
            self.db.delete(timetable)
            log_activity(
                self.db,
                actor=actor,
                action="timetable.deleted",
                entity_type="timetable",
                entity_id=timetable_id,
                details={"entries": deleted},
            )
            self.db.commit()
        except Exception:
            self.db.rollback()
            logger.exception("Deleting timetable %s failed; nothing was removed", timetable_id)
            raise
        logger.info("Deleted timetable %s with %d entries", timetable_id, deleted)
        return deleted
