from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator, model_validator

DAY_VALUES = (
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
)


def normalize_day(value: str) -> str:
    day = value.strip().capitalize()
    if day not in DAY_VALUES:
        raise ValueError(f"Invalid day value: {value}")
    return day


class CanonicalSlot(BaseModel):
    id: str = Field(min_length=1, max_length=20)
    label: str = Field(min_length=1, max_length=50)
    is_break: bool = False
    break_label: str | None = Field(default=None, max_length=50)

    @model_validator(mode="after")
    def validate_break_label(self) -> "CanonicalSlot":
        if self.is_break and not self.break_label:
            raise ValueError(f"Break slot {self.id} requires a break_label")
        return self


class StartTimeOverride(BaseModel):
    hour: int = Field(ge=0, le=23)
    minute: int = Field(ge=0, le=59)
    slot_id: str


class HourThreshold(BaseModel):
    from_hour: int = Field(ge=0, le=23)
    slot_id: str


class SlotGridConfig(BaseModel):
    """Ordered day grid plus the table that places raw start times into it."""

    slots: list[CanonicalSlot] = Field(min_length=1, max_length=48)
    weekdays: list[str] = Field(default_factory=lambda: list(DAY_VALUES[:6]), min_length=1, max_length=7)
    start_time_overrides: list[StartTimeOverride] = Field(default_factory=list)
    hour_fallback: list[HourThreshold] = Field(min_length=1)

    @field_validator("weekdays")
    @classmethod
    def validate_weekdays(cls, value: list[str]) -> list[str]:
        days = [normalize_day(day) for day in value]
        if len(set(days)) != len(days):
            raise ValueError("weekdays must not repeat")
        return days

    @field_validator("hour_fallback")
    @classmethod
    def sort_thresholds(cls, value: list[HourThreshold]) -> list[HourThreshold]:
        ordered = sorted(value, key=lambda item: item.from_hour)
        hours = [item.from_hour for item in ordered]
        if len(set(hours)) != len(hours):
            raise ValueError("hour_fallback thresholds must use distinct hours")
        return ordered

    @model_validator(mode="after")
    def validate_references(self) -> "SlotGridConfig":
        slot_ids = [slot.id for slot in self.slots]
        if len(set(slot_ids)) != len(slot_ids):
            raise ValueError("Slot ids must be unique")
        if all(slot.is_break for slot in self.slots):
            raise ValueError("Slot grid needs at least one teaching slot")
        known = set(slot_ids)
        referenced = [item.slot_id for item in self.start_time_overrides] + [
            item.slot_id for item in self.hour_fallback
        ]
        unknown = sorted({slot_id for slot_id in referenced if slot_id not in known})
        if unknown:
            raise ValueError(f"Unknown slot id(s) in mapping: {', '.join(unknown)}")
        return self


class LectureSlot(BaseModel):
    """Normalized timetable entry consumed by the slot resolver."""

    id: str
    day: str
    type: str = "Lecture"
    subject_id: str | None = None
    subject_code: str | None = None
    subject_name: str | None = None
    faculty_id: str | None = None
    department_id: str | None = None
    division: str | None = None
    batch: str | None = None
    semester: int | None = None
    from_time: str
    to_time: str
    location: str | None = None

    @property
    def is_lab(self) -> bool:
        return self.type.strip().lower() == "lab"

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> "LectureSlot":
        """Build a lecture from a raw row, accepting the legacy field spellings.

        Stored lectures and externally supplied timetable rows both pass through
        here. A row without an id is rejected with ``ValueError``.
        """

        def first(*keys: str) -> Any:
            for key in keys:
                value = record.get(key)
                if value is not None and value != "":
                    return value
            return None

        subject = record.get("subjects") or record.get("subject_info")
        if isinstance(subject, list):
            subject = subject[0] if subject else None
        if not isinstance(subject, dict):
            subject = {}
        raw_subject = record.get("subject")
        identifier = first("id", "_id")
        if identifier is None:
            raise ValueError("Lecture record has no id")

        return cls(
            id=str(identifier),
            day=str(first("day") or ""),
            type=str(first("type") or "Lecture"),
            subject_id=first("subject_id") or subject.get("id") or (raw_subject if isinstance(raw_subject, str) else None),
            subject_code=first("subject_code", "code") or subject.get("code"),
            subject_name=first("subject_name", "name") or subject.get("name"),
            faculty_id=first("faculty_id", "facultyId", "faculty"),
            department_id=first("department_id", "departmentId", "department"),
            division=first("division"),
            batch=first("batch"),
            semester=first("semester", "sem"),
            from_time=str(first("from_time", "from", "fromTime") or ""),
            to_time=str(first("to_time", "to", "toTime") or ""),
            location=first("location", "room", "Room"),
        )


class LectureOut(LectureSlot):
    display_time: str = Field(serialization_alias="displayTime")
    position: Literal["single", "left", "right"] = "single"


class DayLectureOut(LectureSlot):
    display_time: str = Field(serialization_alias="displayTime")
    attendance_taken: bool = Field(serialization_alias="attendanceTaken")


class GridCellOut(BaseModel):
    day: str
    slot_id: str = Field(serialization_alias="slotId")
    row_span: int = Field(default=1, serialization_alias="rowSpan")
    lectures: list[LectureOut] = Field(default_factory=list)


class GridRowOut(BaseModel):
    slot: CanonicalSlot
    break_label: str | None = Field(default=None, serialization_alias="breakLabel")
    cells: list[GridCellOut] = Field(default_factory=list)


class WeekLayoutOut(BaseModel):
    weekdays: list[str]
    rows: list[GridRowOut]
