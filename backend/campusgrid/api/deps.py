from collections.abc import Generator
from datetime import tzinfo
from functools import lru_cache

from fastapi import Depends
from sqlalchemy.orm import Session

from campusgrid.core.config import Settings, get_settings
from campusgrid.db.session import SessionLocal
from campusgrid.schemas.timetable import SlotGridConfig
from campusgrid.services.attendance_store import attendance_timezone
from campusgrid.services.slot_grid import load_slot_grid


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@lru_cache
def get_slot_grid() -> SlotGridConfig:
    return load_slot_grid(get_settings())


def get_attendance_tz(settings: Settings = Depends(get_settings)) -> tzinfo:
    return attendance_timezone(settings)
