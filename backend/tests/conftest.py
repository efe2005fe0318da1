import os

# The app module builds its default engine on import; keep it off the real database.
os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")

import uuid
from datetime import date

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from uniplan import models  # noqa: F401
from uniplan.api.deps import get_db
from uniplan.db.base import Base
from uniplan.main import app
from uniplan.models.curriculum import Curriculum
from uniplan.models.group import Group
from uniplan.models.lecturer import Lecturer
from uniplan.models.room import Room
from uniplan.models.schedule_entry import SessionFormat
from uniplan.models.semester import Semester, SemesterDate
from uniplan.models.subject import Subject
from uniplan.models.timetable import StudyMode, Timetable, TimetableStatus
from uniplan.schemas.schedule_entry import ScheduleEntryCreate
from uniplan.services.schedule_store import ScheduleAssignmentStore


@pytest.fixture()
def engine():
    engine = create_engine(
        "sqlite+pysqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture()
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture()
def catalog(db):
    """Reference data shared by most tests: two lecturers with subjects, rooms, groups and a curriculum."""
    db.add_all(
        [
            Lecturer(id="lec-1", display_name="dr Anna Nowak", email="anna.nowak@uczelnia.pl"),
            Lecturer(id="lec-2", display_name="dr Jan Kowalski", email="jan.kowalski@uczelnia.pl"),
            Lecturer(id="lec-3", display_name="mgr Ewa Lis"),
            Room(id="room-101", name="101", capacity=30),
            Room(id="room-102", name="102", capacity=60),
            Group(id="grp-a", name="IIN-1A"),
            Group(id="grp-b", name="IIN-1B"),
            Subject(id="sub-alg", name="Algorytmy", lecturer_id="lec-1"),
            Subject(id="sub-db", name="Bazy danych", lecturer_id="lec-2"),
            Subject(id="sub-net", name="Sieci komputerowe"),
            Semester(id="sem-1", name="Semestr zimowy", academic_year="2025/2026"),
            Semester(id="sem-2", name="Semestr zimowy (zaoczne)", academic_year="2025/2026"),
            SemesterDate(semester_id="sem-2", date=date(2025, 10, 25), format=SessionFormat.online),
            SemesterDate(semester_id="sem-2", date=date(2025, 10, 11), format=SessionFormat.on_site),
            SemesterDate(semester_id="sem-2", date=date(2025, 11, 8), format=SessionFormat.on_site),
            SemesterDate(semester_id="sem-2", date=date(2025, 10, 12), format=SessionFormat.on_site),
            SemesterDate(semester_id="sem-2", date=date(2025, 10, 26), format=SessionFormat.online),
            Curriculum(
                id="cur-1",
                program_name="Informatyka",
                academic_year="2025/2026",
                semesters=[
                    {
                        "semester_id": "sem-1",
                        "semester_number": 1,
                        "subjects": [
                            {"subject_id": "sub-alg", "lecturer_id": "lec-1", "type": "Wykład", "hours": 30, "ects": 5},
                            {"subject_id": "sub-alg", "lecturer_id": "lec-2", "type": "Laboratorium", "hours": 15},
                            {"subject_id": "sub-db", "lecturer_id": "lec-2", "type": "Wykład", "hours": 3},
                            {"subject_id": "sub-ghost", "lecturer_id": "lec-1", "type": "Wykład", "hours": 10},
                            {"subject_id": "sub-net", "type": "Ćwiczenia", "hours": 15},
                        ],
                    },
                    {"semester_id": "sem-2", "semester_number": 2, "subjects": []},
                ],
            ),
        ]
    )
    db.commit()
    return db


@pytest.fixture()
def make_timetable(db, catalog):
    def _make(
        name: str = "Plan A",
        status: TimetableStatus = TimetableStatus.draft,
        study_mode: StudyMode = StudyMode.full_time,
        semester_id: str = "sem-1",
        academic_year: str = "2025/2026",
        group_ids: list[str] | None = None,
    ) -> Timetable:
        timetable = Timetable(
            id=str(uuid.uuid4()),
            name=name,
            status=status,
            curriculum_id="cur-1",
            semester_id=semester_id,
            group_ids=group_ids if group_ids is not None else ["grp-a", "grp-b"],
            study_mode=study_mode,
            academic_year=academic_year,
        )
        db.add(timetable)
        db.commit()
        db.refresh(timetable)
        return timetable

    return _make


@pytest.fixture()
def entry_payload():
    def _payload(**overrides) -> ScheduleEntryCreate:
        data = {
            "day": "Monday",
            "start_time": "08:00",
            "subject_id": "sub-alg",
            "lecturer_id": "lec-1",
            "type": "Wykład",
            "room_id": "room-101",
            "group_ids": ["grp-a"],
        }
        data.update(overrides)
        return ScheduleEntryCreate(**data)

    return _payload


@pytest.fixture()
def store(db, catalog):
    return ScheduleAssignmentStore(db)
