import uuid
from datetime import date as calendar_date, datetime

from sqlalchemy import Boolean, Date, DateTime, ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from campusgrid.db.base import Base
from campusgrid.models.lecture import Lecture


class AttendanceRecord(Base):
    __tablename__ = "attendance"
    __table_args__ = (
        UniqueConstraint("lecture_id", "student_id", "attendance_day", name="uq_attendance_lecture_student_day"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    lecture_id: Mapped[str] = mapped_column(ForeignKey("lectures.id"), index=True, nullable=False)
    student_id: Mapped[str] = mapped_column(String(36), index=True, nullable=False)
    is_present: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    date: Mapped[datetime] = mapped_column(DateTime(timezone=True), index=True, nullable=False)
    # Calendar day of ``date`` in the attendance timezone; backs the uniqueness constraint.
    attendance_day: Mapped[calendar_date] = mapped_column(Date, nullable=False)
    faculty_id: Mapped[str | None] = mapped_column(String(36), nullable=True)
    remark: Mapped[str | None] = mapped_column(Text, nullable=True)
    taken_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), onupdate=func.now())

    lecture: Mapped[Lecture] = relationship(lazy="joined")
