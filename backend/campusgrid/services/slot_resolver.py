"""Placement of timetable entries into the weekly slot grid.

The resolver and the lab-span detector share :class:`SlotMapping`, so a lab is
placed at its start slot and its continuation is recognised from the same
lookup. Both operate on an already-fetched lecture list and keep no state
between calls beyond what the constructor precomputes.
"""
from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from campusgrid.schemas.timetable import (
    CanonicalSlot,
    GridCellOut,
    GridRowOut,
    LectureOut,
    LectureSlot,
    SlotGridConfig,
    WeekLayoutOut,
)
from campusgrid.services.time_normalizer import ClockTime, format_time_range, parse_clock_time

logger = logging.getLogger(__name__)

DEFAULT_MAX_PER_CELL = 2


class SlotMapping:
    """Many-to-one lookup from a written clock time to a teaching slot id."""

    def __init__(self, grid: SlotGridConfig) -> None:
        self._slots = grid.slots
        self._index = {slot.id: position for position, slot in enumerate(grid.slots)}
        self._exact = {(item.hour, item.minute): item.slot_id for item in grid.start_time_overrides}
        self._thresholds = [(item.from_hour, item.slot_id) for item in grid.hour_fallback]

    def slot_for(self, clock: ClockTime) -> str:
        slot_id = self._exact.get((clock.hour, clock.minute))
        if slot_id is not None:
            return slot_id
        slot_id = self._thresholds[0][1]
        for from_hour, candidate in self._thresholds:
            if clock.hour < from_hour:
                break
            slot_id = candidate
        return self._teaching_slot_from(slot_id)

    def slot_for_time(self, value: str | None) -> str | None:
        clock = parse_clock_time(value)
        if clock is None:
            return None
        return self.slot_for(clock)

    def _teaching_slot_from(self, slot_id: str) -> str:
        position = self._index[slot_id]
        for slot in self._slots[position:]:
            if not slot.is_break:
                return slot.id
        for slot in reversed(self._slots[:position]):
            if not slot.is_break:
                return slot.id
        return slot_id


def _same_day(left: str, right: str) -> bool:
    return left.strip().lower() == right.strip().lower()


class SlotResolver:
    def __init__(
        self,
        grid: SlotGridConfig,
        lectures: Iterable[LectureSlot],
        *,
        max_per_cell: int = DEFAULT_MAX_PER_CELL,
    ) -> None:
        self.grid = grid
        self.mapping = SlotMapping(grid)
        self.max_per_cell = max_per_cell
        self._positions = {slot.id: position for position, slot in enumerate(grid.slots)}
        self._placed: list[tuple[LectureSlot, str]] = []
        for lecture in lectures:
            slot_id = self.mapping.slot_for_time(lecture.from_time)
            if slot_id is None:
                logger.warning(
                    "Lecture %s has unparseable start time %r and is not placed in the grid",
                    lecture.id,
                    lecture.from_time,
                )
                continue
            logger.debug("Lecture %s (%s %s) placed in slot %s", lecture.id, lecture.day, lecture.from_time, slot_id)
            self._placed.append((lecture, slot_id))

    def previous_slot(self, slot_id: str) -> CanonicalSlot | None:
        position = self._positions[slot_id]
        if position == 0:
            return None
        return self.grid.slots[position - 1]

    def lectures_for(self, day: str, slot_id: str) -> list[LectureSlot]:
        """Lectures meeting in ``(day, slot_id)``, in input order, capped at ``max_per_cell``."""
        matches = [
            lecture
            for lecture, placed_slot in self._placed
            if placed_slot == slot_id and _same_day(lecture.day, day)
        ]
        if len(matches) > self.max_per_cell:
            logger.warning(
                "%d lectures resolve to %s slot %s; keeping the first %d",
                len(matches),
                day,
                slot_id,
                self.max_per_cell,
            )
        return matches[: self.max_per_cell]

    def is_lab_continuation(self, day: str, slot_id: str) -> bool:
        """True when a lab that started in the preceding slot also occupies ``slot_id``."""
        previous = self.previous_slot(slot_id)
        if previous is None or previous.is_break:
            return False
        for lecture in self.lectures_for(day, previous.id):
            if lecture.is_lab and self.mapping.slot_for_time(lecture.to_time) == slot_id:
                return True
        return False

    def week_layout(self) -> WeekLayoutOut:
        rows: list[GridRowOut] = []
        for position, slot in enumerate(self.grid.slots):
            if slot.is_break:
                rows.append(GridRowOut(slot=slot, break_label=slot.break_label))
                continue
            following = self.grid.slots[position + 1] if position + 1 < len(self.grid.slots) else None
            cells: list[GridCellOut] = []
            for day in self.grid.weekdays:
                if self.is_lab_continuation(day, slot.id):
                    continue
                lectures = self.lectures_for(day, slot.id)
                spans = following is not None and self.is_lab_continuation(day, following.id)
                cells.append(
                    GridCellOut(
                        day=day,
                        slot_id=slot.id,
                        row_span=2 if spans else 1,
                        lectures=_with_positions(lectures),
                    )
                )
            rows.append(GridRowOut(slot=slot, cells=cells))
        return WeekLayoutOut(weekdays=list(self.grid.weekdays), rows=rows)


def _with_positions(lectures: Sequence[LectureSlot]) -> list[LectureOut]:
    if len(lectures) == 1:
        positions = ["single"]
    else:
        positions = ["left", "right"] + ["right"] * max(0, len(lectures) - 2)
    return [
        LectureOut(
            **lecture.model_dump(),
            display_time=format_time_range(lecture.from_time, lecture.to_time),
            position=position,
        )
        for lecture, position in zip(lectures, positions)
    ]
