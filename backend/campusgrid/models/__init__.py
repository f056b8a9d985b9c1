from campusgrid.models.attendance import AttendanceRecord  # noqa: F401
from campusgrid.models.lecture import Lecture, LectureType  # noqa: F401
from campusgrid.models.subject import Subject  # noqa: F401
