import pytest
from sqlalchemy import select

from uniplan.core.exceptions import InvalidStatusTransitionError, TimetableLockedError
from uniplan.models.activity_log import ActivityLog
from uniplan.models.timetable import TimetableStatus
from uniplan.services.lifecycle import can_transition, change_status, ensure_timetable_editable, is_editable


@pytest.mark.parametrize(
    ("current", "requested", "allowed"),
    [
        (TimetableStatus.draft, TimetableStatus.published, True),
        (TimetableStatus.draft, TimetableStatus.archived, True),
        (TimetableStatus.published, TimetableStatus.draft, True),
        (TimetableStatus.published, TimetableStatus.archived, True),
        (TimetableStatus.archived, TimetableStatus.draft, True),
        (TimetableStatus.archived, TimetableStatus.published, False),
        (TimetableStatus.draft, TimetableStatus.draft, True),
    ],
)
def test_transitions(current, requested, allowed):
    assert can_transition(current, requested) is allowed


def test_publish_and_unpublish(db, make_timetable):
    timetable = make_timetable()

    published = change_status(db, timetable, TimetableStatus.published, actor="dziekanat")
    assert published.status == TimetableStatus.published
    assert not is_editable(published)

    back = change_status(db, published, "draft")
    assert back.status == TimetableStatus.draft

    actions = db.execute(select(ActivityLog).where(ActivityLog.entity_id == timetable.id)).scalars().all()
    actors = {item.details["to"]: item.actor for item in actions}
    assert actors == {"published": "dziekanat", "draft": None}


def test_archived_timetable_cannot_be_published_directly(db, make_timetable):
    timetable = make_timetable(status=TimetableStatus.archived)
    with pytest.raises(InvalidStatusTransitionError) as exc_info:
        change_status(db, timetable, TimetableStatus.published)
    assert exc_info.value.status_code == 400
    assert exc_info.value.details == {"current": "archived", "requested": "published"}


def test_same_status_is_a_no_op(db, make_timetable):
    timetable = make_timetable()
    change_status(db, timetable, TimetableStatus.draft)
    assert db.execute(select(ActivityLog)).scalars().all() == []


def test_only_published_timetables_are_locked(make_timetable):
    ensure_timetable_editable(make_timetable(name="Draft"))
    ensure_timetable_editable(make_timetable(name="Old", status=TimetableStatus.archived))

    published = make_timetable(name="Live", status=TimetableStatus.published)
    with pytest.raises(TimetableLockedError) as exc_info:
        ensure_timetable_editable(published)
    assert exc_info.value.status_code == 409
    assert exc_info.value.details["timetable_id"] == published.id
