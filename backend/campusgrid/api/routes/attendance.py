from datetime import date, tzinfo

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from campusgrid.api.deps import get_attendance_tz, get_db
from campusgrid.schemas.attendance import (
    AttendanceSubmission,
    AttendanceTakenOut,
    CohortSummary,
    StudentAttendanceAverage,
    StudentAttendanceReport,
    SubmissionResult,
)
from campusgrid.services.attendance import build_student_report, summarize_attendance, summarize_cohort
from campusgrid.services.attendance_store import (
    fetch_rows_by_student,
    fetch_student_rows,
    is_attendance_taken,
    submit_attendance,
)

router = APIRouter()


@router.post("/attendance", response_model=SubmissionResult)
def create_attendance(
    payload: AttendanceSubmission,
    response: Response,
    tz: tzinfo = Depends(get_attendance_tz),
    db: Session = Depends(get_db),
) -> SubmissionResult:
    result = submit_attendance(db, payload, tz)
    if result.failed:
        response.status_code = status.HTTP_207_MULTI_STATUS
    return result


@router.get("/attendance/taken", response_model=AttendanceTakenOut)
def attendance_taken(
    lecture_id: str = Query(min_length=1, max_length=36),
    day: date = Query(alias="date"),
    tz: tzinfo = Depends(get_attendance_tz),
    db: Session = Depends(get_db),
) -> AttendanceTakenOut:
    return AttendanceTakenOut(lecture_id=lecture_id, date=day, taken=is_attendance_taken(db, lecture_id, day, tz))


@router.get("/attendance/monitor", response_model=CohortSummary)
def attendance_monitor(
    student_id: list[str] | None = Query(default=None),
    db: Session = Depends(get_db),
) -> CohortSummary:
    return summarize_cohort(fetch_rows_by_student(db, student_id))


@router.get("/students/{student_id}/attendance-average", response_model=StudentAttendanceAverage)
def student_attendance_average(student_id: str, db: Session = Depends(get_db)) -> StudentAttendanceAverage:
    summary = summarize_attendance(fetch_student_rows(db, student_id))
    return StudentAttendanceAverage(student_id=student_id, **summary.model_dump())


@router.get("/students/{student_id}/attendance-by-subject", response_model=StudentAttendanceReport)
def student_attendance_by_subject(student_id: str, db: Session = Depends(get_db)) -> StudentAttendanceReport:
    return build_student_report(student_id, fetch_student_rows(db, student_id))
