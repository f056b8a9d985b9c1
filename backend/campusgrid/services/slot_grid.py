from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import ValidationError

from campusgrid.core.config import Settings
from campusgrid.core.exceptions import ConfigurationError
from campusgrid.schemas.timetable import (
    CanonicalSlot,
    HourThreshold,
    SlotGridConfig,
    StartTimeOverride,
)

logger = logging.getLogger(__name__)

DEFAULT_SLOTS = (
    CanonicalSlot(id="1", label="09:10 AM-10:09 AM"),
    CanonicalSlot(id="2", label="10:10 AM-11:09 AM"),
    CanonicalSlot(id="3", label="11:10 AM-12:09 PM", is_break=True, break_label="Lunch Break"),
    CanonicalSlot(id="4", label="12:10 PM-13:09 PM"),
    CanonicalSlot(id="5", label="13:10 PM-14:09 PM"),
    CanonicalSlot(id="6", label="14:10 PM-14:19 PM", is_break=True, break_label="Break"),
    CanonicalSlot(id="7", label="14:20 PM-15:19 PM"),
    CanonicalSlot(id="8", label="15:20 PM-16:20 PM"),
)

# Stored start times observed in production data, keyed by the time as written.
# TODO: replace with canonical slot ids on the lecture rows once the timetable
# editor stores them; the raw offsets do not line up with the displayed windows.
DEFAULT_START_TIME_OVERRIDES = (
    StartTimeOverride(hour=4, minute=30, slot_id="1"),
    StartTimeOverride(hour=6, minute=30, slot_id="4"),
    StartTimeOverride(hour=3, minute=40, slot_id="1"),
    StartTimeOverride(hour=7, minute=40, slot_id="5"),
)

# Nearest later slot by hour. A threshold landing on a break moves to the next teaching slot.
DEFAULT_HOUR_FALLBACK = (
    HourThreshold(from_hour=0, slot_id="1"),
    HourThreshold(from_hour=5, slot_id="3"),
    HourThreshold(from_hour=6, slot_id="4"),
    HourThreshold(from_hour=7, slot_id="5"),
    HourThreshold(from_hour=8, slot_id="7"),
    HourThreshold(from_hour=10, slot_id="8"),
)


def default_slot_grid() -> SlotGridConfig:
    return SlotGridConfig(
        slots=[slot.model_copy() for slot in DEFAULT_SLOTS],
        start_time_overrides=[item.model_copy() for item in DEFAULT_START_TIME_OVERRIDES],
        hour_fallback=[item.model_copy() for item in DEFAULT_HOUR_FALLBACK],
    )


def read_slot_grid(path: Path) -> SlotGridConfig:
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise ConfigurationError(f"Unable to read slot grid file {path}", details={"error": str(exc)}) from exc
    try:
        return SlotGridConfig.model_validate(raw)
    except ValidationError as exc:
        raise ConfigurationError(
            f"Slot grid file {path} is invalid",
            details={"errors": exc.errors(include_url=False, include_context=False)},
        ) from exc


def load_slot_grid(settings: Settings) -> SlotGridConfig:
    if settings.slot_grid_path is None:
        return default_slot_grid()
    grid = read_slot_grid(settings.slot_grid_path)
    logger.info(
        "Loaded slot grid with %d rows from %s",
        len(grid.slots),
        settings.slot_grid_path,
    )
    return grid
