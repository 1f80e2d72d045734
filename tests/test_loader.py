"""Tests for loading schedule documents from JSON files."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from schedule_engine.data.catalog import DAY_NAMES
from schedule_engine.data.loader import load_schedule_file, save_schedule_file, schedule_from_document
from schedule_engine.data.models import WeeklySchedule
from schedule_engine.errors import ScheduleValidationError


@pytest.fixture
def document() -> dict:
    return {
        "Monday": [
            {"timeSlot": "09:00-10:00", "type": "class", "subject": "Mathematics", "room": "A101"},
        ],
        "Friday": [
            {"timeSlot": "12:00-13:00", "type": "lunch"},
        ],
    }


def write_json(path: Path, data) -> Path:
    with open(path, "w") as f:
        json.dump(data, f)
    return path


class TestLoadScheduleFile:
    """Tests for load_schedule_file."""

    def test_load_bare_document(self, tmp_path, document):
        schedule = load_schedule_file(write_json(tmp_path / "week.json", document))

        assert schedule.entry_at("Monday", "09:00-10:00").room == "A101"
        assert schedule.is_complete

    def test_load_envelope(self, tmp_path, document):
        envelope = {"classroomId": "cls-1", "weekStartDate": "2026-10-12", "weeklyData": document}
        schedule = load_schedule_file(write_json(tmp_path / "week.json", envelope))
        assert schedule.entry_count == 2

    def test_snake_case_keys(self, tmp_path):
        path = write_json(tmp_path / "week.json", {
            "Monday": [{"time_slot": "09:00-10:00", "type": "class", "subject": "Maths"}],
        })
        assert load_schedule_file(path).entry_at("Monday", "09:00-10:00") is not None

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_schedule_file(tmp_path / "missing.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "week.json"
        path.write_text("{oops")
        with pytest.raises(json.JSONDecodeError):
            load_schedule_file(path)

    def test_strict_rejects_duplicates(self, tmp_path):
        path = write_json(tmp_path / "week.json", {
            "Monday": [
                {"timeSlot": "09:00-10:00", "type": "class", "subject": "Maths"},
                {"timeSlot": "09:00-10:00", "type": "class", "subject": "Physics"},
            ],
        })
        with pytest.raises(ScheduleValidationError) as exc_info:
            load_schedule_file(path)
        assert "Monday 09:00-10:00" in exc_info.value.messages[0]

    def test_lenient_keeps_duplicates(self, tmp_path):
        path = write_json(tmp_path / "week.json", {
            "Monday": [
                {"timeSlot": "09:00-10:00", "type": "class", "subject": "Maths"},
                {"timeSlot": "09:00-10:00", "type": "class", "subject": "Physics"},
            ],
        })
        assert load_schedule_file(path, strict=False).entry_count == 2


class TestScheduleFromDocument:
    """Tests for schedule_from_document."""

    @pytest.mark.parametrize("data", [[], "Monday", None])
    def test_not_an_object(self, data):
        with pytest.raises(ScheduleValidationError):
            schedule_from_document(data)

    def test_day_not_a_list(self):
        with pytest.raises(ScheduleValidationError):
            schedule_from_document({"Monday": "free"})

    def test_entry_missing_slot(self):
        with pytest.raises(ScheduleValidationError):
            schedule_from_document({"Monday": [{"type": "break"}]})

    def test_null_day_is_empty(self):
        assert schedule_from_document({"Monday": None}).entries("Monday") == []


class TestSaveScheduleFile:
    """Tests for save_schedule_file."""

    def test_round_trip(self, tmp_path, document):
        schedule = WeeklySchedule.from_dict(document)
        path = tmp_path / "out" / "week.json"

        save_schedule_file(schedule, path)

        with open(path) as f:
            assert list(json.load(f)) == list(DAY_NAMES)
        assert load_schedule_file(path).to_dict() == schedule.to_dict()
