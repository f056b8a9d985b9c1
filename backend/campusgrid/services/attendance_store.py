from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import date, datetime, timezone, tzinfo
from zoneinfo import ZoneInfo

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from campusgrid.core.config import Settings
from campusgrid.core.exceptions import ResourceNotFoundError
from campusgrid.models.attendance import AttendanceRecord
from campusgrid.models.lecture import Lecture
from campusgrid.models.subject import Subject
from campusgrid.schemas.attendance import (
    AttendanceRow,
    AttendanceSubmission,
    AttendanceSubmissionItem,
    SubmissionFailure,
    SubmissionResult,
)
from campusgrid.services.attendance import calendar_day, day_bounds

logger = logging.getLogger(__name__)


def attendance_timezone(settings: Settings) -> tzinfo:
    if settings.attendance_timezone.upper() == "UTC":
        return timezone.utc
    return ZoneInfo(settings.attendance_timezone)


def is_attendance_taken(db: Session, lecture_id: str, day: date, tz: tzinfo) -> bool:
    start, end = day_bounds(day, tz)
    found = db.execute(
        select(AttendanceRecord.id)
        .where(
            AttendanceRecord.lecture_id == lecture_id,
            AttendanceRecord.date >= start,
            AttendanceRecord.date <= end,
        )
        .limit(1)
    ).scalar_one_or_none()
    return found is not None


def taken_lecture_ids(db: Session, lecture_ids: list[str], day: date, tz: tzinfo) -> set[str]:
    if not lecture_ids:
        return set()
    start, end = day_bounds(day, tz)
    rows = db.execute(
        select(AttendanceRecord.lecture_id)
        .where(
            AttendanceRecord.lecture_id.in_(lecture_ids),
            AttendanceRecord.date >= start,
            AttendanceRecord.date <= end,
        )
        .distinct()
    ).scalars()
    return set(rows)


def _rows_query():
    return (
        select(
            AttendanceRecord.id,
            AttendanceRecord.lecture_id,
            AttendanceRecord.student_id,
            AttendanceRecord.is_present,
            AttendanceRecord.date,
            AttendanceRecord.faculty_id,
            Subject.id.label("subject_id"),
            Subject.name.label("subject_name"),
            Subject.code.label("subject_code"),
        )
        .select_from(AttendanceRecord)
        .outerjoin(Lecture, Lecture.id == AttendanceRecord.lecture_id)
        .outerjoin(Subject, Subject.id == Lecture.subject_id)
        .order_by(AttendanceRecord.date.asc(), AttendanceRecord.id.asc())
    )


def fetch_student_rows(db: Session, student_id: str) -> list[AttendanceRow]:
    result = db.execute(_rows_query().where(AttendanceRecord.student_id == student_id))
    return [AttendanceRow.model_validate(dict(row._mapping)) for row in result]


def fetch_rows_by_student(db: Session, student_ids: Iterable[str] | None = None) -> dict[str, list[AttendanceRow]]:
    query = _rows_query()
    ordered_ids = list(student_ids) if student_ids is not None else None
    if ordered_ids is not None:
        query = query.where(AttendanceRecord.student_id.in_(ordered_ids))
    grouped: dict[str, list[AttendanceRow]] = {student_id: [] for student_id in ordered_ids or []}
    for row in db.execute(query):
        record = AttendanceRow.model_validate(dict(row._mapping))
        grouped.setdefault(record.student_id, []).append(record)
    return grouped


def _store_item(db: Session, item: AttendanceSubmissionItem, tz: tzinfo) -> bool:
    """Insert or update one mark; returns True when an existing mark was updated."""
    if db.get(Lecture, item.lecture_id) is None:
        raise ResourceNotFoundError("Lecture", item.lecture_id)

    taken_at = item.date or datetime.now(tz)
    if taken_at.tzinfo is None:
        taken_at = taken_at.replace(tzinfo=tz)
    taken_at = taken_at.astimezone(tz)
    day = calendar_day(taken_at, tz)

    existing = db.execute(
        select(AttendanceRecord).where(
            AttendanceRecord.lecture_id == item.lecture_id,
            AttendanceRecord.student_id == item.student_id,
            AttendanceRecord.attendance_day == day,
        )
    ).scalar_one_or_none()
    if existing is not None:
        existing.is_present = item.is_present
        existing.date = taken_at
        existing.faculty_id = item.faculty_id or existing.faculty_id
        existing.remark = item.remark
        return True

    db.add(
        AttendanceRecord(
            lecture_id=item.lecture_id,
            student_id=item.student_id,
            is_present=item.is_present,
            date=taken_at,
            attendance_day=day,
            faculty_id=item.faculty_id,
            remark=item.remark,
        )
    )
    return False


def submit_attendance(db: Session, submission: AttendanceSubmission, tz: tzinfo) -> SubmissionResult:
    """Persist a batch of marks one by one, upserting on (lecture, student, day)."""
    saved = 0
    updated = 0
    failures: list[SubmissionFailure] = []
    for item in submission.attendance_records:
        try:
            was_update = _store_item(db, item, tz)
            db.commit()
            saved += 1
            updated += int(was_update)
        except ResourceNotFoundError as exc:
            logger.warning("Rejected attendance for student %s: %s", item.student_id, exc.message)
            failures.append(
                SubmissionFailure(student_id=item.student_id, lecture_id=item.lecture_id, error=exc.message)
            )
        except SQLAlchemyError as exc:
            db.rollback()
            logger.exception("Error inserting attendance for student %s", item.student_id)
            failures.append(
                SubmissionFailure(student_id=item.student_id, lecture_id=item.lecture_id, error=str(exc.__cause__ or exc))
            )

    logger.info(
        "Attendance batch stored: %d saved (%d updated), %d failed",
        saved,
        updated,
        len(failures),
    )
    if failures:
        return SubmissionResult(
            success=False,
            message="Some records failed to save",
            successful=saved,
            failed=len(failures),
            updated=updated,
            details=failures,
        )
    return SubmissionResult(
        success=True,
        message=f"Attendance saved for {saved} students",
        successful=saved,
        updated=updated,
    )
