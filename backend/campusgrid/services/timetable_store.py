from __future__ import annotations

from datetime import date, tzinfo

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from campusgrid.models.lecture import Lecture
from campusgrid.schemas.timetable import DAY_VALUES, DayLectureOut, LectureSlot
from campusgrid.services.attendance_store import taken_lecture_ids
from campusgrid.services.time_normalizer import format_time_range


def lecture_slot(lecture: Lecture) -> LectureSlot:
    subject = lecture.subject
    return LectureSlot.from_record(
        {
            "id": lecture.id,
            "day": lecture.day,
            "type": lecture.type,
            "subject_id": lecture.subject_id,
            "subjects": {"id": subject.id, "code": subject.code, "name": subject.name} if subject is not None else None,
            "faculty_id": lecture.faculty_id,
            "department_id": lecture.department_id,
            "division": lecture.division,
            "batch": lecture.batch,
            "semester": lecture.semester,
            "from": lecture.from_time,
            "to": lecture.to_time,
            "location": lecture.location,
        }
    )


def list_lectures(db: Session, *, faculty_id: str | None = None, day: str | None = None) -> list[LectureSlot]:
    query = select(Lecture).order_by(Lecture.created_at.asc(), Lecture.id.asc())
    if faculty_id is not None:
        query = query.where(Lecture.faculty_id == faculty_id)
    if day is not None:
        query = query.where(func.lower(Lecture.day) == day.strip().lower())
    return [lecture_slot(lecture) for lecture in db.execute(query).scalars().unique()]


def weekday_name(day: date) -> str:
    return DAY_VALUES[day.weekday()]


def lectures_with_attendance_status(
    db: Session,
    day: date,
    faculty_id: str | None,
    tz: tzinfo,
) -> list[DayLectureOut]:
    lectures = list_lectures(db, faculty_id=faculty_id, day=weekday_name(day))
    taken = taken_lecture_ids(db, [lecture.id for lecture in lectures], day, tz)
    return [
        DayLectureOut(
            **lecture.model_dump(),
            display_time=format_time_range(lecture.from_time, lecture.to_time),
            attendance_taken=lecture.id in taken,
        )
        for lecture in lectures
    ]
