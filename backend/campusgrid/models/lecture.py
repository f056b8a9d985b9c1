import uuid
from datetime import datetime
from enum import Enum

from sqlalchemy import DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from campusgrid.db.base import Base
from campusgrid.models.subject import Subject


class LectureType(str, Enum):
    lecture = "Lecture"
    lab = "Lab"


class Lecture(Base):
    """One weekly timetable entry. Times are stored as written, e.g. ``"04:30:00+00"``."""

    __tablename__ = "lectures"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    day: Mapped[str] = mapped_column(String(20), index=True, nullable=False)
    type: Mapped[str] = mapped_column(String(20), nullable=False, default=LectureType.lecture.value)
    subject_id: Mapped[str | None] = mapped_column(ForeignKey("subjects.id"), nullable=True)
    faculty_id: Mapped[str | None] = mapped_column(String(36), index=True, nullable=True)
    department_id: Mapped[str | None] = mapped_column(String(36), nullable=True)
    division: Mapped[str | None] = mapped_column(String(20), nullable=True)
    batch: Mapped[str | None] = mapped_column(String(20), nullable=True)
    semester: Mapped[int | None] = mapped_column(Integer, nullable=True)
    from_time: Mapped[str] = mapped_column("from", String(32), nullable=False)
    to_time: Mapped[str] = mapped_column("to", String(32), nullable=False)
    location: Mapped[str | None] = mapped_column(String(100), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    subject: Mapped[Subject | None] = relationship(lazy="joined")
