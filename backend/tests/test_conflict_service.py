import pytest

from uniplan.core.exceptions import (
    RecurringCollisionError,
    ScheduleConflictError,
    SpecificDateCollisionError,
)
from uniplan.models.schedule_entry import DayOfWeek
from uniplan.models.timetable import StudyMode, TimetableStatus
from uniplan.services.conflict_service import ConflictDetector, PlacementProposal, effective_dates


def test_room_conflict_between_weekly_entries(store, make_timetable, entry_payload):
    timetable = make_timetable()
    first = store.create_entry(timetable.id, entry_payload(room_id="room-101", group_ids=["grp-a"]))

    with pytest.raises(RecurringCollisionError) as exc_info:
        store.create_entry(
            timetable.id,
            entry_payload(lecturer_id="lec-2", subject_id="sub-db", room_id="room-101", group_ids=["grp-b"]),
        )

    error = exc_info.value
    assert error.status_code == 409
    assert error.resource_type == "room"
    assert error.conflicting_entry_id == first.id
    assert error.message == "Room 101 is already occupied on Monday at 08:00: collision with a recurring class"
    assert error.details["collision"] == "recurring"


@pytest.mark.parametrize(
    ("overrides", "resource_type"),
    [
        ({"room_id": "room-102", "group_ids": ["grp-b"]}, "lecturer"),
        ({"lecturer_id": "lec-2", "group_ids": ["grp-b"]}, "room"),
        ({"lecturer_id": "lec-2", "room_id": "room-102", "group_ids": ["grp-b", "grp-a"]}, "group"),
    ],
)
def test_weekly_entries_sharing_any_resource_conflict(store, make_timetable, entry_payload, overrides, resource_type):
    timetable = make_timetable()
    store.create_entry(timetable.id, entry_payload())

    with pytest.raises(RecurringCollisionError) as exc_info:
        store.create_entry(timetable.id, entry_payload(subject_id="sub-net", type="Seminarium", **overrides))

    assert exc_info.value.resource_type == resource_type


def test_group_conflict_names_the_group(store, make_timetable, entry_payload):
    timetable = make_timetable()
    store.create_entry(timetable.id, entry_payload())

    with pytest.raises(ScheduleConflictError) as exc_info:
        store.create_entry(timetable.id, entry_payload(lecturer_id="lec-2", room_id="room-102"))

    assert exc_info.value.resource_name == "IIN-1A"
    assert exc_info.value.message.startswith("Group IIN-1A already has classes")


def test_lecturer_is_reported_before_room(store, make_timetable, entry_payload):
    timetable = make_timetable()
    store.create_entry(timetable.id, entry_payload())

    with pytest.raises(RecurringCollisionError) as exc_info:
        store.create_entry(timetable.id, entry_payload(group_ids=["grp-b"]))

    assert exc_info.value.resource_type == "lecturer"
    assert "Lecturer dr Anna Nowak is already busy" in exc_info.value.message


def test_same_cell_with_disjoint_resources_is_accepted(store, make_timetable, entry_payload):
    timetable = make_timetable()
    store.create_entry(timetable.id, entry_payload())
    second = store.create_entry(
        timetable.id,
        entry_payload(subject_id="sub-db", lecturer_id="lec-2", room_id="room-102", group_ids=["grp-b"]),
    )
    assert second.day == DayOfWeek.monday


def test_other_time_slot_is_free(store, make_timetable, entry_payload):
    timetable = make_timetable()
    store.create_entry(timetable.id, entry_payload())
    store.create_entry(timetable.id, entry_payload(start_time="09:45"))
    store.create_entry(timetable.id, entry_payload(day="Tuesday"))


def test_disjoint_specific_dates_are_accepted(store, make_timetable, entry_payload):
    timetable = make_timetable()
    store.create_entry(timetable.id, entry_payload(start_time="09:45", specific_dates=["2025-10-06"]))
    second = store.create_entry(timetable.id, entry_payload(start_time="09:45", specific_dates=["2025-10-13"]))
    assert second.specific_dates == ["2025-10-13"]


def test_shared_specific_date_conflicts(store, make_timetable, entry_payload):
    timetable = make_timetable()
    first = store.create_entry(timetable.id, entry_payload(specific_dates=["2025-10-06", "2025-10-13"]))

    with pytest.raises(SpecificDateCollisionError) as exc_info:
        store.create_entry(
            timetable.id,
            entry_payload(room_id="room-102", specific_dates=["2025-10-13", "2025-10-20"]),
        )

    error = exc_info.value
    assert error.conflicting_entry_id == first.id
    assert error.details["dates"] == ["2025-10-13"]
    assert error.details["collision"] == "specific_date"
    assert "on 2025-10-13 at 08:00" in error.message


def test_weekly_entry_blocks_specific_date_entry(store, make_timetable, entry_payload):
    timetable = make_timetable()
    store.create_entry(timetable.id, entry_payload())

    with pytest.raises(RecurringCollisionError):
        store.create_entry(timetable.id, entry_payload(room_id="room-102", specific_dates=["2025-10-06"]))


def test_specific_date_entry_blocks_weekly_entry(store, make_timetable, entry_payload):
    timetable = make_timetable()
    store.create_entry(timetable.id, entry_payload(specific_dates=["2025-10-06"]))

    with pytest.raises(RecurringCollisionError):
        store.create_entry(timetable.id, entry_payload(room_id="room-102"))


def test_dated_block_entries_conflict_only_on_the_same_date(store, make_timetable, entry_payload):
    timetable = make_timetable(study_mode=StudyMode.part_time, semester_id="sem-2")
    store.create_entry(timetable.id, entry_payload(day=None, date="2025-10-11"))
    store.create_entry(timetable.id, entry_payload(day=None, date="2025-10-18"))

    with pytest.raises(SpecificDateCollisionError):
        store.create_entry(timetable.id, entry_payload(day=None, date="2025-10-11", room_id="room-102"))


def test_entries_in_archived_timetables_never_block(db, store, make_timetable, entry_payload):
    archived = make_timetable(name="Plan 2024", academic_year="2024/2025")
    store.create_entry(archived.id, entry_payload())
    archived.status = TimetableStatus.archived
    db.commit()

    current = make_timetable(name="Plan 2025")
    entry = store.create_entry(current.id, entry_payload())
    assert entry.timetable_id == current.id


def test_published_timetables_block_other_plans(store, make_timetable, entry_payload):
    published = make_timetable(name="Plan A", status=TimetableStatus.published)
    store.create_entry(published.id, entry_payload())
    draft = make_timetable(name="Plan B")

    with pytest.raises(RecurringCollisionError):
        store.create_entry(draft.id, entry_payload(room_id="room-102", group_ids=["grp-b"]))


def test_unchanged_entry_never_conflicts_with_itself(db, store, make_timetable, entry_payload):
    timetable = make_timetable()
    entry = store.create_entry(timetable.id, entry_payload(specific_dates=["2025-10-06"]))

    detector = ConflictDetector(db)
    assert detector.check(PlacementProposal.from_entry(entry), excluding_id=entry.id) is None
    with pytest.raises(SpecificDateCollisionError):
        detector.check(PlacementProposal.from_entry(entry))


def test_candidates_are_limited_to_the_cell(db, store, make_timetable, entry_payload):
    timetable = make_timetable()
    first = store.create_entry(timetable.id, entry_payload())
    store.create_entry(timetable.id, entry_payload(start_time="09:45"))

    detector = ConflictDetector(db)
    candidates = detector.find_candidates(DayOfWeek.monday, "08:00")
    assert [item.id for item in candidates] == [first.id]
    assert detector.find_candidates(DayOfWeek.monday, "08:00", excluding_id=first.id) == []
    assert detector.resolve_active_timetable_ids(candidates) == {timetable.id}
    assert detector.resolve_active_timetable_ids([]) == set()


def test_effective_dates():
    assert effective_dates([]) is None
    assert effective_dates(None, None) is None
    assert effective_dates(["2025-10-06"]) == frozenset({"2025-10-06"})
    assert effective_dates([], "2025-10-11") == frozenset({"2025-10-11"})
    # specific dates take precedence over the single date
    assert effective_dates(["2025-10-18"], "2025-10-11") == frozenset({"2025-10-18"})


def test_weekly_proposal_flag():
    weekly = PlacementProposal(DayOfWeek.monday, "08:00", "lec-1", "room-101", frozenset({"grp-a"}))
    dated = PlacementProposal(
        DayOfWeek.monday, "08:00", "lec-1", "room-101", frozenset({"grp-a"}), frozenset({"2025-10-06"})
    )
    assert weekly.is_weekly
    assert not dated.is_weekly
