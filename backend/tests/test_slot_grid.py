import json

import pytest
from pydantic import ValidationError

from campusgrid.core.config import Settings
from campusgrid.core.exceptions import ConfigurationError
from campusgrid.schemas.timetable import SlotGridConfig
from campusgrid.services.slot_grid import default_slot_grid, load_slot_grid, read_slot_grid


def test_default_grid_has_eight_rows_with_breaks_at_three_and_six():
    grid = default_slot_grid()

    assert len(grid.slots) == 8
    break_positions = [position for position, slot in enumerate(grid.slots, start=1) if slot.is_break]
    assert break_positions == [3, 6]
    assert grid.slots[2].break_label == "Lunch Break"
    assert grid.slots[5].break_label == "Break"
    assert grid.weekdays == ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]


def test_default_grid_is_a_fresh_copy_each_call():
    first = default_slot_grid()
    first.slots[0].label = "changed"
    assert default_slot_grid().slots[0].label == "09:10 AM-10:09 AM"


def test_load_without_path_uses_default():
    grid = load_slot_grid(Settings(slot_grid_path=None))
    assert [slot.id for slot in grid.slots] == ["1", "2", "3", "4", "5", "6", "7", "8"]


def test_load_custom_grid_from_file(tmp_path):
    path = tmp_path / "grid.json"
    path.write_text(
        json.dumps(
            {
                "slots": [
                    {"id": "p1", "label": "08:00-08:50"},
                    {"id": "p2", "label": "08:50-09:40"},
                    {"id": "b", "label": "09:40-10:00", "is_break": True, "break_label": "Recess"},
                    {"id": "p3", "label": "10:00-10:50"},
                ],
                "weekdays": ["monday", "Tuesday"],
                "hour_fallback": [{"from_hour": 0, "slot_id": "p1"}, {"from_hour": 9, "slot_id": "p3"}],
            }
        ),
        encoding="utf-8",
    )

    grid = load_slot_grid(Settings(slot_grid_path=path))

    assert [slot.id for slot in grid.slots] == ["p1", "p2", "b", "p3"]
    assert grid.weekdays == ["Monday", "Tuesday"]


def test_invalid_grid_file_raises_configuration_error(tmp_path):
    path = tmp_path / "grid.json"
    path.write_text(json.dumps({"slots": [], "hour_fallback": []}), encoding="utf-8")

    with pytest.raises(ConfigurationError) as excinfo:
        read_slot_grid(path)
    assert excinfo.value.status_code == 500
    assert excinfo.value.details["errors"]


def test_missing_grid_file_raises_configuration_error(tmp_path):
    with pytest.raises(ConfigurationError):
        read_slot_grid(tmp_path / "absent.json")


def test_mapping_must_reference_known_slots():
    with pytest.raises(ValidationError, match="Unknown slot id"):
        SlotGridConfig(
            slots=[{"id": "1", "label": "09:00-10:00"}],
            hour_fallback=[{"from_hour": 0, "slot_id": "9"}],
        )


def test_break_rows_need_a_label():
    with pytest.raises(ValidationError, match="break_label"):
        SlotGridConfig(
            slots=[{"id": "1", "label": "09:00-10:00"}, {"id": "2", "label": "10:00-10:10", "is_break": True}],
            hour_fallback=[{"from_hour": 0, "slot_id": "1"}],
        )
