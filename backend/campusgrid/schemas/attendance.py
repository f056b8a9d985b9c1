from __future__ import annotations

from datetime import date as calendar_date, datetime
from enum import Enum

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class AttendanceStatus(str, Enum):
    excellent = "Excellent"
    good = "Good"
    warning = "Warning"
    critical = "Critical"


class AttendanceRow(BaseModel):
    """One attendance mark, optionally joined through its lecture to a subject."""

    model_config = ConfigDict(from_attributes=True)

    id: str | None = None
    lecture_id: str
    student_id: str
    is_present: bool
    date: datetime | None = None
    faculty_id: str | None = None
    subject_id: str | None = None
    subject_name: str | None = None
    subject_code: str | None = None


class AttendanceSummary(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    total_classes: int = Field(default=0, alias="totalClasses")
    present_classes: int = Field(default=0, alias="presentClasses")
    absent_classes: int = Field(default=0, alias="absentClasses")
    attendance_percentage: float = Field(default=0, alias="attendancePercentage")


class SubjectAttendanceSummary(AttendanceSummary):
    subject_id: str = Field(alias="subjectId")
    subject_name: str | None = Field(default=None, alias="subjectName")
    subject_code: str | None = Field(default=None, alias="subjectCode")


class StudentAttendanceAverage(AttendanceSummary):
    student_id: str = Field(alias="studentId")


class StudentAttendanceReport(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    student_id: str = Field(alias="studentId")
    subjects: list[SubjectAttendanceSummary] = Field(default_factory=list)
    overall: AttendanceSummary = Field(alias="overallAttendance")


class MonitorRow(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    student_id: str = Field(alias="studentId")
    attendance_percentage: int = Field(alias="attendancePercentage")
    status: AttendanceStatus
    sessions_attended: int = Field(alias="sessionsAttended")
    total_sessions: int = Field(alias="totalSessions")


class CohortSummary(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    students: list[MonitorRow] = Field(default_factory=list)
    average_sessions: float = Field(default=0, alias="averageSessions")
    average_attendance: int = Field(default=0, alias="averageAttendance")
    status_counts: dict[AttendanceStatus, int] = Field(default_factory=dict, alias="statusCounts")


class AttendanceSubmissionItem(BaseModel):
    lecture_id: str = Field(
        min_length=1,
        max_length=36,
        validation_alias=AliasChoices("lecture_id", "lectureId", "lecture"),
    )
    student_id: str = Field(
        min_length=1,
        max_length=36,
        validation_alias=AliasChoices("student_id", "studentId", "student"),
    )
    is_present: bool = Field(default=True, validation_alias=AliasChoices("is_present", "isPresent"))
    date: datetime | None = Field(default=None, validation_alias=AliasChoices("date", "Date"))
    faculty_id: str | None = Field(
        default=None,
        max_length=36,
        validation_alias=AliasChoices("faculty_id", "facultyId"),
    )
    remark: str | None = Field(default=None, max_length=2000, validation_alias=AliasChoices("remark", "Remark"))


class AttendanceSubmission(BaseModel):
    attendance_records: list[AttendanceSubmissionItem] = Field(
        validation_alias=AliasChoices("attendanceRecords", "attendance_records"),
        max_length=1000,
    )

    @field_validator("attendance_records")
    @classmethod
    def validate_not_empty(cls, value: list[AttendanceSubmissionItem]) -> list[AttendanceSubmissionItem]:
        if not value:
            raise ValueError("attendanceRecords must contain at least one record")
        return value


class SubmissionFailure(BaseModel):
    student_id: str = Field(serialization_alias="studentId")
    lecture_id: str = Field(serialization_alias="lectureId")
    error: str


class SubmissionResult(BaseModel):
    success: bool
    message: str
    successful: int
    failed: int = 0
    updated: int = 0
    details: list[SubmissionFailure] = Field(default_factory=list)


class AttendanceTakenOut(BaseModel):
    lecture_id: str = Field(serialization_alias="lectureId")
    date: calendar_date
    taken: bool
