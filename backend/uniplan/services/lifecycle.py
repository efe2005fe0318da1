from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from uniplan.core.exceptions import InvalidStatusTransitionError, TimetableLockedError
from uniplan.models.timetable import Timetable, TimetableStatus
from uniplan.services.audit import log_activity

logger = logging.getLogger(__name__)

ALLOWED_TRANSITIONS: dict[TimetableStatus, set[TimetableStatus]] = {
    TimetableStatus.draft: {TimetableStatus.published, TimetableStatus.archived},
    TimetableStatus.published: {TimetableStatus.draft, TimetableStatus.archived},
    TimetableStatus.archived: {TimetableStatus.draft},
}


def can_transition(current: TimetableStatus, requested: TimetableStatus) -> bool:
    return current == requested or requested in ALLOWED_TRANSITIONS[current]


def is_editable(timetable: Timetable) -> bool:
    return TimetableStatus(timetable.status) != TimetableStatus.published


def ensure_timetable_editable(timetable: Timetable) -> None:
    if not is_editable(timetable):
        raise TimetableLockedError(timetable.id, TimetableStatus(timetable.status).value)


def change_status(
    db: Session,
    timetable: Timetable,
    requested: TimetableStatus,
    *,
    actor: str | None = None,
) -> Timetable:
    current = TimetableStatus(timetable.status)
    requested = TimetableStatus(requested)
    if current == requested:
        return timetable
    if not can_transition(current, requested):
        raise InvalidStatusTransitionError(current.value, requested.value)

    timetable.status = requested
    log_activity(
        db,
        actor=actor,
        action="timetable.status_changed",
        entity_type="timetable",
        entity_id=timetable.id,
        details={"from": current.value, "to": requested.value},
    )
    db.commit()
    db.refresh(timetable)
    logger.info("Timetable %s moved from %s to %s", timetable.id, current.value, requested.value)
    return timetable
