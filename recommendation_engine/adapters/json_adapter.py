"""JSON adapter for task snapshots and historical analogues."""

from __future__ import annotations

import json

from recommendation_engine.errors import InvalidInputError
from recommendation_engine.schema import HistoricalAnalogue, Task, validate_task
from recommendation_engine.temporal import parse_datetime

_REQUIRED_TASK_FIELDS = ("id", "title")


def _optional_int(item: dict, key: str, index: int):
    value = item.get(key)
    if value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise InvalidInputError(f"Item {index}: invalid {key}") from exc


def _parse_task(item: dict, index: int) -> Task:
    if not isinstance(item, dict):
        raise InvalidInputError(f"Item {index}: expected an object")
    missing = [key for key in _REQUIRED_TASK_FIELDS if not item.get(key)]
    if missing:
        raise InvalidInputError(f"Item {index}: missing required fields {missing}")

    duration = item.get("estimated_duration_minutes", item.get("estimated_duration"))
    if duration is not None:
        try:
            duration = float(duration)
        except (TypeError, ValueError) as exc:
            raise InvalidInputError(f"Item {index}: invalid estimated duration") from exc

    due_date = item.get("due_date")
    if due_date:
        due_date = parse_datetime(due_date, f"Item {index}: due_date")
    completed_at = item.get("completed_at")
    if completed_at:
        completed_at = parse_datetime(completed_at, f"Item {index}: completed_at")

    priority = _optional_int(item, "priority", index)
    task = Task(
        id=str(item["id"]).strip(),
        title=str(item["title"]).strip(),
        priority=3 if priority is None else priority,
        description=item.get("description") or None,
        energy_requirement=_optional_int(item, "energy_requirement", index),
        estimated_duration_minutes=duration,
        due_date=due_date or None,
        completed=bool(item.get("completed", False)),
        completed_at=completed_at or None,
    )
    validate_task(task)
    return task


def _load_list(file_path: str) -> list:
    with open(file_path, encoding="utf-8") as handle:
        try:
            payload = json.load(handle)
        except json.JSONDecodeError as exc:
            raise InvalidInputError(f"{file_path}: malformed JSON") from exc

    if not isinstance(payload, list):
        raise InvalidInputError("JSON payload must be a list of objects")
    return payload


def parse_tasks(file_path: str) -> list[Task]:
    """Parse a JSON list of task objects."""

    return [_parse_task(item, i) for i, item in enumerate(_load_list(file_path), start=1)]


def parse_analogues(file_path: str) -> list[HistoricalAnalogue]:
    """Parse a JSON list of ``{title, actual_duration_minutes}`` objects."""

    analogues = []
    for index, item in enumerate(_load_list(file_path), start=1):
        if not isinstance(item, dict) or not item.get("title"):
            raise InvalidInputError(f"Item {index}: missing title")
        try:
            minutes = float(item["actual_duration_minutes"])
        except (KeyError, TypeError, ValueError) as exc:
            raise InvalidInputError(f"Item {index}: invalid actual_duration_minutes") from exc
        analogues.append(HistoricalAnalogue(title=str(item["title"]).strip(), actual_duration_minutes=minutes))
    return analogues
