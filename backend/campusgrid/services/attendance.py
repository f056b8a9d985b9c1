from __future__ import annotations

import math
from collections.abc import Iterable, Mapping, Sequence
from datetime import date, datetime, time, timezone, tzinfo

from campusgrid.schemas.attendance import (
    AttendanceRow,
    AttendanceStatus,
    AttendanceSummary,
    CohortSummary,
    MonitorRow,
    StudentAttendanceReport,
    SubjectAttendanceSummary,
)

EXCELLENT_THRESHOLD = 85
GOOD_THRESHOLD = 75
WARNING_THRESHOLD = 65

DAY_END = time(23, 59, 59, 999000)


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def round_percentage(present: int, total: int) -> float:
    """Overall percentage: ``present / total * 100`` rounded to 2 decimals."""
    if total <= 0:
        return 0
    return _round_half_up(present / total * 100 * 100) / 100


def round_subject_percentage(present: int, total: int) -> float:
    """Per-subject percentage: the fraction scaled by 10000, rounded, then divided by 100."""
    if total <= 0:
        return 0
    return _round_half_up(present / total * 10000) / 100


def attendance_status(percentage: float) -> AttendanceStatus:
    if percentage >= EXCELLENT_THRESHOLD:
        return AttendanceStatus.excellent
    if percentage >= GOOD_THRESHOLD:
        return AttendanceStatus.good
    if percentage >= WARNING_THRESHOLD:
        return AttendanceStatus.warning
    return AttendanceStatus.critical


def day_bounds(day: date, tz: tzinfo = timezone.utc) -> tuple[datetime, datetime]:
    """Closed interval covering ``day`` from 00:00:00.000 to 23:59:59.999."""
    start = datetime.combine(day, time.min, tzinfo=tz)
    return start, datetime.combine(day, DAY_END, tzinfo=tz)


def _aware(value: datetime, tz: tzinfo) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=tz)
    return value


def attendance_taken(
    records: Iterable[AttendanceRow],
    lecture_id: str,
    day: date,
    tz: tzinfo = timezone.utc,
) -> bool:
    start, end = day_bounds(day, tz)
    for record in records:
        if record.lecture_id != lecture_id or record.date is None:
            continue
        if start <= _aware(record.date, tz) <= end:
            return True
    return False


def _count(records: Sequence[AttendanceRow]) -> tuple[int, int]:
    return len(records), sum(1 for record in records if record.is_present)


def summarize_attendance(records: Sequence[AttendanceRow]) -> AttendanceSummary:
    total, present = _count(records)
    return AttendanceSummary(
        total_classes=total,
        present_classes=present,
        absent_classes=total - present,
        attendance_percentage=round_percentage(present, total),
    )


def summarize_by_subject(records: Iterable[AttendanceRow]) -> list[SubjectAttendanceSummary]:
    """Per-subject breakdown in order of first appearance.

    Rows without a resolvable subject are left out here; they still count in
    :func:`summarize_attendance`.
    """
    groups: dict[str, list[AttendanceRow]] = {}
    for record in records:
        if not record.subject_id:
            continue
        groups.setdefault(record.subject_id, []).append(record)

    subjects: list[SubjectAttendanceSummary] = []
    for subject_id, rows in groups.items():
        total, present = _count(rows)
        first = rows[0]
        subjects.append(
            SubjectAttendanceSummary(
                subject_id=subject_id,
                subject_name=first.subject_name,
                subject_code=first.subject_code,
                total_classes=total,
                present_classes=present,
                absent_classes=total - present,
                attendance_percentage=round_subject_percentage(present, total),
            )
        )
    return subjects


def build_student_report(student_id: str, records: Sequence[AttendanceRow]) -> StudentAttendanceReport:
    return StudentAttendanceReport(
        student_id=student_id,
        subjects=summarize_by_subject(records),
        overall=summarize_attendance(records),
    )


def summarize_cohort(records_by_student: Mapping[str, Sequence[AttendanceRow]]) -> CohortSummary:
    """Monitor view: whole-percent rows per student plus counts per status band."""
    rows: list[MonitorRow] = []
    for student_id, records in records_by_student.items():
        if not student_id or not student_id.strip():
            continue
        total, present = _count(records)
        percentage = _round_half_up(present / total * 100) if total else 0
        rows.append(
            MonitorRow(
                student_id=student_id,
                attendance_percentage=percentage,
                status=attendance_status(percentage),
                sessions_attended=present,
                total_sessions=total,
            )
        )

    counts = {status: 0 for status in AttendanceStatus}
    for row in rows:
        counts[row.status] += 1
    average_sessions = sum(row.total_sessions for row in rows) / max(len(rows), 1)
    average_attendance = _round_half_up(sum(row.attendance_percentage for row in rows) / max(len(rows), 1))
    return CohortSummary(
        students=rows,
        average_sessions=average_sessions,
        average_attendance=average_attendance,
        status_counts=counts,
    )


def calendar_day(value: datetime, tz: tzinfo = timezone.utc) -> date:
    return _aware(value, tz).astimezone(tz).date()
