from datetime import date, tzinfo

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from campusgrid.api.deps import get_attendance_tz, get_db, get_slot_grid
from campusgrid.core.config import Settings, get_settings
from campusgrid.schemas.timetable import DayLectureOut, SlotGridConfig, WeekLayoutOut
from campusgrid.services.slot_resolver import SlotResolver
from campusgrid.services.timetable_store import lectures_with_attendance_status, list_lectures

router = APIRouter()


@router.get("/grid", response_model=SlotGridConfig)
def get_grid(grid: SlotGridConfig = Depends(get_slot_grid)) -> SlotGridConfig:
    return grid


@router.get("/week", response_model=WeekLayoutOut)
def get_week(
    faculty_id: str | None = Query(default=None, max_length=36),
    grid: SlotGridConfig = Depends(get_slot_grid),
    settings: Settings = Depends(get_settings),
    db: Session = Depends(get_db),
) -> WeekLayoutOut:
    lectures = list_lectures(db, faculty_id=faculty_id)
    resolver = SlotResolver(grid, lectures, max_per_cell=settings.max_lectures_per_cell)
    return resolver.week_layout()


@router.get("/day", response_model=list[DayLectureOut])
def get_day(
    day: date = Query(alias="date"),
    faculty_id: str | None = Query(default=None, max_length=36),
    tz: tzinfo = Depends(get_attendance_tz),
    db: Session = Depends(get_db),
) -> list[DayLectureOut]:
    return lectures_with_attendance_status(db, day, faculty_id, tz)
