from uniplan.models.activity_log import ActivityLog  # noqa: F401
from uniplan.models.curriculum import Curriculum  # noqa: F401
from uniplan.models.group import Group, Specialization  # noqa: F401
from uniplan.models.lecturer import Lecturer  # noqa: F401
from uniplan.models.room import Room  # noqa: F401
from uniplan.models.schedule_entry import DayOfWeek, ScheduleEntry, SessionFormat, SessionType  # noqa: F401
from uniplan.models.semester import Semester, SemesterDate  # noqa: F401
from uniplan.models.subject import Subject  # noqa: F401
from uniplan.models.timetable import Recurrence, StudyMode, Timetable, TimetableStatus  # noqa: F401
