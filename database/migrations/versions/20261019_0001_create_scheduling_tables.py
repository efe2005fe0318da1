"""create scheduling tables

Revision ID: 20261019_0001
Revises: None
Create Date: 2026-10-19 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

revision = "20261019_0001"
down_revision = None
branch_labels = None
depends_on = None


timetable_status_enum = sa.Enum("draft", "published", "archived", name="timetable_status")
study_mode_enum = sa.Enum("stacjonarne", "niestacjonarne", "podyplomowe", "anglojęzyczne", name="study_mode")
recurrence_enum = sa.Enum("weekly", "bi-weekly", "monthly", name="timetable_recurrence")
day_of_week_enum = sa.Enum(
    "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday", name="day_of_week"
)
session_type_enum = sa.Enum("Wykład", "Ćwiczenia", "Laboratorium", "Seminarium", name="session_type")
session_format_enum = sa.Enum("stacjonarny", "online", name="session_format")
semester_date_format_enum = sa.Enum("stacjonarny", "online", name="semester_date_format")


def upgrade() -> None:
    op.create_table(
        "timetables",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("status", timetable_status_enum, nullable=False),
        sa.Column("curriculum_id", sa.String(length=36), nullable=False),
        sa.Column("semester_id", sa.String(length=36), nullable=False),
        sa.Column("group_ids", sa.JSON(), nullable=False),
        sa.Column("study_mode", study_mode_enum, nullable=False),
        sa.Column("recurrence", recurrence_enum, nullable=True),
        sa.Column("academic_year", sa.String(length=20), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_timetables_status", "timetables", ["status"])
    op.create_index("ix_timetables_semester_id", "timetables", ["semester_id"])
    op.create_index("ix_timetables_academic_year", "timetables", ["academic_year"])

    op.create_table(
        "schedule_entries",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("timetable_id", sa.String(length=36), nullable=False),
        sa.Column("day", day_of_week_enum, nullable=False),
        sa.Column("date", sa.Date(), nullable=True),
        sa.Column("start_time", sa.String(length=5), nullable=False),
        sa.Column("end_time", sa.String(length=5), nullable=False),
        sa.Column("subject_id", sa.String(length=36), nullable=False),
        sa.Column("subject_name", sa.String(length=200), nullable=False),
        sa.Column("lecturer_id", sa.String(length=36), nullable=False),
        sa.Column("lecturer_name", sa.String(length=200), nullable=False),
        sa.Column("type", session_type_enum, nullable=False),
        sa.Column("room_id", sa.String(length=36), nullable=False),
        sa.Column("room_name", sa.String(length=100), nullable=False),
        sa.Column("group_ids", sa.JSON(), nullable=False),
        sa.Column("group_names", sa.JSON(), nullable=False),
        sa.Column("specialization_ids", sa.JSON(), nullable=False),
        sa.Column("curriculum_subject_id", sa.String(length=120), nullable=True),
        sa.Column("specific_dates", sa.JSON(), nullable=False),
        sa.Column("format", session_format_enum, nullable=True),
        sa.Column("version", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_schedule_entries_timetable_id", "schedule_entries", ["timetable_id"])
    op.create_index("ix_schedule_entries_lecturer_id", "schedule_entries", ["lecturer_id"])
    op.create_index("ix_schedule_entries_day_start", "schedule_entries", ["day", "start_time"])

    op.create_table(
        "curriculums",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("program_name", sa.String(length=200), nullable=False),
        sa.Column("academic_year", sa.String(length=20), nullable=True),
        sa.Column("semesters", sa.JSON(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_curriculums_academic_year", "curriculums", ["academic_year"])

    op.create_table(
        "semesters",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("academic_year", sa.String(length=20), nullable=True),
        sa.Column("start_date", sa.Date(), nullable=True),
        sa.Column("end_date", sa.Date(), nullable=True),
    )

    op.create_table(
        "semester_dates",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("semester_id", sa.String(length=36), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("format", semester_date_format_enum, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_semester_dates_semester_id", "semester_dates", ["semester_id"])

    op.create_table(
        "subjects",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("lecturer_id", sa.String(length=36), nullable=True),
    )

    op.create_table(
        "lecturers",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("display_name", sa.String(length=200), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=True, unique=True),
        sa.Column("availability", sa.JSON(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )

    op.create_table(
        "rooms",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("capacity", sa.Integer(), nullable=True),
    )
    op.create_index("ix_rooms_name", "rooms", ["name"], unique=True)

    op.create_table(
        "groups",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
    )

    op.create_table(
        "specializations",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("group_id", sa.String(length=36), nullable=True),
        sa.Column("name", sa.String(length=200), nullable=False),
    )

    op.create_table(
        "activity_logs",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("actor", sa.String(length=200), nullable=True),
        sa.Column("action", sa.String(length=100), nullable=False),
        sa.Column("entity_type", sa.String(length=100), nullable=True),
        sa.Column("entity_id", sa.String(length=100), nullable=True),
        sa.Column("details", sa.JSON(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_activity_logs_action", "activity_logs", ["action"])


def downgrade() -> None:
    op.drop_index("ix_activity_logs_action", table_name="activity_logs")
    op.drop_table("activity_logs")
    op.drop_table("specializations")
    op.drop_table("groups")
    op.drop_index("ix_rooms_name", table_name="rooms")
    op.drop_table("rooms")
    op.drop_table("lecturers")
    op.drop_table("subjects")
    op.drop_index("ix_semester_dates_semester_id", table_name="semester_dates")
    op.drop_table("semester_dates")
    op.drop_table("semesters")
    op.drop_index("ix_curriculums_academic_year", table_name="curriculums")
    op.drop_table("curriculums")
    op.drop_index("ix_schedule_entries_day_start", table_name="schedule_entries")
    op.drop_index("ix_schedule_entries_lecturer_id", table_name="schedule_entries")
    op.drop_index("ix_schedule_entries_timetable_id", table_name="schedule_entries")
    op.drop_table("schedule_entries")
    op.drop_index("ix_timetables_academic_year", table_name="timetables")
    op.drop_index("ix_timetables_semester_id", table_name="timetables")
    op.drop_index("ix_timetables_status", table_name="timetables")
    op.drop_table("timetables")

    bind = op.get_bind()
    for enum in (
        semester_date_format_enum,
        session_format_enum,
        session_type_enum,
        day_of_week_enum,
        recurrence_enum,
        study_mode_enum,
        timetable_status_enum,
    ):
        enum.drop(bind, checkfirst=True)
