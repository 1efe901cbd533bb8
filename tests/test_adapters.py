import json

import pytest

from recommendation_engine.adapters.csv_adapter import parse_analogues as parse_analogues_csv
from recommendation_engine.adapters.csv_adapter import parse_energy_logs
from recommendation_engine.adapters.json_adapter import parse_analogues as parse_analogues_json
from recommendation_engine.adapters.json_adapter import parse_tasks
from recommendation_engine.errors import InvalidInputError


def test_json_parse_tasks_success(tmp_path):
    path = tmp_path / "tasks.json"
    payload = [
        {"id": "t1", "title": "Write report", "priority": 2, "estimated_duration": 90, "due_date": "2025-01-02T17:00:00"},
        {"id": "t2", "title": "Send invoice", "completed": True, "completed_at": "2025-01-01T10:00:00"},
    ]
    path.write_text(json.dumps(payload), encoding="utf-8")
    tasks = parse_tasks(str(path))
    assert len(tasks) == 2
    assert tasks[0].estimated_duration_minutes == 90.0
    assert tasks[0].due_date.day == 2
    assert tasks[1].priority == 3
    assert tasks[1].completed is True


def test_json_parse_tasks_missing_title(tmp_path):
    path = tmp_path / "tasks.json"
    path.write_text(json.dumps([{"id": "t1"}]), encoding="utf-8")
    with pytest.raises(ValueError):
        parse_tasks(str(path))


def test_json_parse_tasks_malformed_due_date(tmp_path):
    path = tmp_path / "tasks.json"
    path.write_text(json.dumps([{"id": "t1", "title": "x", "due_date": "next tuesday"}]), encoding="utf-8")
    with pytest.raises(InvalidInputError):
        parse_tasks(str(path))


def test_json_parse_tasks_out_of_range_priority(tmp_path):
    path = tmp_path / "tasks.json"
    path.write_text(json.dumps([{"id": "t1", "title": "x", "priority": 9}]), encoding="utf-8")
    with pytest.raises(InvalidInputError):
        parse_tasks(str(path))


def test_json_payload_must_be_list(tmp_path):
    path = tmp_path / "tasks.json"
    path.write_text(json.dumps({"id": "t1"}), encoding="utf-8")
    with pytest.raises(InvalidInputError):
        parse_tasks(str(path))


def test_json_parse_analogues(tmp_path):
    path = tmp_path / "history.json"
    path.write_text(json.dumps([{"title": "Write blog post", "actual_duration_minutes": 75}]), encoding="utf-8")
    analogues = parse_analogues_json(str(path))
    assert analogues[0].actual_duration_minutes == 75.0


def test_csv_parse_energy_logs_sorted(tmp_path):
    path = tmp_path / "energy.csv"
    path.write_text(
        "level,timestamp\n"
        "2,2025-01-01T17:00:00\n"
        "4,2025-01-01T09:00:00\n",
        encoding="utf-8",
    )
    entries = parse_energy_logs(str(path))
    assert [entry.level for entry in entries] == [4, 2]


def test_csv_parse_energy_logs_invalid_level(tmp_path):
    path = tmp_path / "energy.csv"
    path.write_text("level,timestamp\n7,2025-01-01T09:00:00\n", encoding="utf-8")
    with pytest.raises(InvalidInputError):
        parse_energy_logs(str(path))


def test_csv_parse_energy_logs_bad_timestamp(tmp_path):
    path = tmp_path / "energy.csv"
    path.write_text("level,timestamp\n3,bad\n", encoding="utf-8")
    with pytest.raises(ValueError):
        parse_energy_logs(str(path))


def test_csv_parse_analogues(tmp_path):
    path = tmp_path / "history.csv"
    path.write_text("title,actual_duration_minutes\nWrite design doc,120\nWrite notes,30\n", encoding="utf-8")
    analogues = parse_analogues_csv(str(path))
    assert [a.title for a in analogues] == ["Write design doc", "Write notes"]
    assert analogues[1].actual_duration_minutes == 30.0
