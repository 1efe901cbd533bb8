"""CSV adapter for energy logs and historical analogues."""

from __future__ import annotations

import csv

from recommendation_engine.errors import InvalidInputError
from recommendation_engine.schema import EnergyLogEntry, HistoricalAnalogue
from recommendation_engine.temporal import parse_datetime


def _read_rows(file_path: str) -> list[tuple[int, dict]]:
    with open(file_path, newline="", encoding="utf-8") as handle:
        reader = csv.DictReader(handle)
        if not reader.fieldnames:
            return []
        return list(enumerate(reader, start=2))


def _parse_energy_row(row: dict, row_number: int) -> EnergyLogEntry:
    missing = [field for field in ("level", "timestamp") if not row.get(field)]
    if missing:
        raise InvalidInputError(f"Row {row_number}: missing required fields {missing}")

    timestamp = parse_datetime(row["timestamp"], f"Row {row_number}: timestamp")
    try:
        level = int(row["level"])
    except ValueError as exc:
        raise InvalidInputError(f"Row {row_number}: invalid level") from exc
    if not 1 <= level <= 5:
        raise InvalidInputError(f"Row {row_number}: energy level must be in 1..5")

    return EnergyLogEntry(level=level, timestamp=timestamp)


def parse_energy_logs(file_path: str) -> list[EnergyLogEntry]:
    """Parse a ``level,timestamp`` CSV into entries ordered by timestamp."""

    entries = [_parse_energy_row(row, number) for number, row in _read_rows(file_path)]
    return sorted(entries, key=lambda entry: entry.timestamp)


def parse_analogues(file_path: str) -> list[HistoricalAnalogue]:
    """Parse a ``title,actual_duration_minutes`` CSV."""

    analogues = []
    for row_number, row in _read_rows(file_path):
        title = (row.get("title") or "").strip()
        if not title:
            raise InvalidInputError(f"Row {row_number}: missing title")
        try:
            minutes = float(row.get("actual_duration_minutes") or "")
        except ValueError as exc:
            raise InvalidInputError(f"Row {row_number}: invalid actual_duration_minutes") from exc
        analogues.append(HistoricalAnalogue(title=title, actual_duration_minutes=minutes))
    return analogues
