from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable

from sqlalchemy import select
from sqlalchemy.orm import Session

from uniplan.core.exceptions import RecurringCollisionError, SpecificDateCollisionError
from uniplan.models.schedule_entry import DayOfWeek, ScheduleEntry
from uniplan.models.timetable import Timetable, TimetableStatus

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlacementProposal:
    """The fields of a schedule entry that take part in conflict detection.

    ``dates`` holds ISO date strings; ``None`` marks a weekly entry that
    recurs on every matching weekday of the semester.
    """

    day: DayOfWeek
    start_time: str
    lecturer_id: str
    room_id: str
    group_ids: frozenset[str] = field(default_factory=frozenset)
    dates: frozenset[str] | None = None

    @property
    def is_weekly(self) -> bool:
        return self.dates is None

    @classmethod
    def from_entry(cls, entry: ScheduleEntry) -> "PlacementProposal":
        return cls(
            day=DayOfWeek(entry.day),
            start_time=entry.start_time,
            lecturer_id=entry.lecturer_id,
            room_id=entry.room_id,
            group_ids=frozenset(entry.group_ids or []),
            dates=effective_dates(entry.specific_dates, entry.date),
        )


@dataclass(frozen=True)
class ResourceClash:
    resource_type: str
    resource_id: str
    resource_name: str


def effective_dates(specific_dates: Iterable | None, single_date=None) -> frozenset[str] | None:
    """Dates an entry actually occupies, or ``None`` when it recurs weekly."""
    values = [item if isinstance(item, str) else item.isoformat() for item in (specific_dates or [])]
    if values:
        return frozenset(values)
    if single_date is not None:
        return frozenset([single_date if isinstance(single_date, str) else single_date.isoformat()])
    return None


def find_resource_clash(proposal: PlacementProposal, candidate: ScheduleEntry) -> ResourceClash | None:
    if candidate.lecturer_id == proposal.lecturer_id:
        return ResourceClash("lecturer", candidate.lecturer_id, candidate.lecturer_name or candidate.lecturer_id)
    if candidate.room_id == proposal.room_id:
        return ResourceClash("room", candidate.room_id, candidate.room_name or candidate.room_id)

    candidate_groups = list(candidate.group_ids or [])
    candidate_names = list(candidate.group_names or [])
    for index, group_id in enumerate(candidate_groups):
        if group_id in proposal.group_ids:
            name = candidate_names[index] if index < len(candidate_names) else group_id
            return ResourceClash("group", group_id, name)
    return None


def describe_resource(clash: ResourceClash) -> str:
    if clash.resource_type == "lecturer":
        return f"Lecturer {clash.resource_name} is already busy"
    if clash.resource_type == "room":
        return f"Room {clash.resource_name} is already occupied"
    return f"Group {clash.resource_name} already has classes"


class ConflictDetector:
    """Decides whether a placement is legal against every non-archived timetable.

    Conflicts are scanned system-wide because the same lecturer, room or group
    can appear in several concurrently active plans. The detector only reads;
    callers persist after :meth:`check` returns.
    """

    def __init__(self, db: Session):
        self.db = db

    def find_candidates(
        self,
        day: DayOfWeek,
        start_time: str,
        excluding_id: str | None = None,
    ) -> list[ScheduleEntry]:
        query = select(ScheduleEntry).where(
            ScheduleEntry.day == DayOfWeek(day),
            ScheduleEntry.start_time == start_time,
        )
        if excluding_id:
            query = query.where(ScheduleEntry.id != excluding_id)
        query = query.order_by(ScheduleEntry.created_at, ScheduleEntry.id)
        return list(self.db.execute(query).scalars())

    def resolve_active_timetable_ids(self, candidates: Iterable[ScheduleEntry]) -> set[str]:
        timetable_ids = {entry.timetable_id for entry in candidates}
        if not timetable_ids:
            return set()
        rows = self.db.execute(
            select(Timetable.id).where(
                Timetable.id.in_(timetable_ids),
                Timetable.status != TimetableStatus.archived,
            )
        ).scalars()
        return set(rows)

    def check(self, proposal: PlacementProposal, excluding_id: str | None = None) -> None:
        """Raise on the first conflicting entry; return ``None`` when the slot is free."""
        candidates = self.find_candidates(proposal.day, proposal.start_time, excluding_id)
        if not candidates:
            return
        active_ids = self.resolve_active_timetable_ids(candidates)

        for candidate in candidates:
            if candidate.timetable_id not in active_ids:
                continue
            clash = find_resource_clash(proposal, candidate)
            if clash is None:
                continue

            candidate_dates = effective_dates(candidate.specific_dates, candidate.date)
            if proposal.is_weekly or candidate_dates is None:
                logger.info(
                    "Recurring %s collision on %s %s with entry %s",
                    clash.resource_type,
                    proposal.day.value,
                    proposal.start_time,
                    candidate.id,
                )
                raise RecurringCollisionError(
                    f"{describe_resource(clash)} on {proposal.day.value} at {proposal.start_time}: "
                    "collision with a recurring class",
                    resource_type=clash.resource_type,
                    resource_id=clash.resource_id,
                    resource_name=clash.resource_name,
                    conflicting_entry_id=candidate.id,
                )

            shared = sorted(proposal.dates & candidate_dates)
            if shared:
                logger.info(
                    "Date-scoped %s collision on %s at %s with entry %s",
                    clash.resource_type,
                    ", ".join(shared),
                    proposal.start_time,
                    candidate.id,
                )
                raise SpecificDateCollisionError(
                    f"{describe_resource(clash)} on {', '.join(shared)} at {proposal.start_time}: "
                    "collision on a specific date",
                    resource_type=clash.resource_type,
                    resource_id=clash.resource_id,
                    resource_name=clash.resource_name,
                    conflicting_entry_id=candidate.id,
                    dates=shared,
                )
