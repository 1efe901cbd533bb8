"""Storage backends for per-day challenge completion state.

Records are plain dicts ``{"is_completed": bool, "completed_at": str}`` keyed
by ``"<challenge id>@<YYYY-MM-DD>"``, plus the engine's ``"_last_reset"``
marker. The host application picks a backend; the challenge engine only talks to the ``CompletionStore`` protocol.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional, Protocol

from recommendation_engine.errors import InvalidInputError


class CompletionStore(Protocol):
    """Key-value interface for completion records."""

    def get(self, key: str) -> Optional[dict]:
        ...

    def set(self, key: str, value: dict) -> None:
        ...

    def clear(self) -> None:
        ...


class InMemoryCompletionStore:
    def __init__(self) -> None:
        self._records: dict[str, dict] = {}

    def get(self, key: str) -> Optional[dict]:
        record = self._records.get(key)
        return dict(record) if record is not None else None

    def set(self, key: str, value: dict) -> None:
        self._records[key] = dict(value)

    def clear(self) -> None:
        self._records.clear()

    def __len__(self) -> int:
        return len(self._records)


class JsonFileCompletionStore:
    """Completion records persisted as a single JSON object on disk."""

    def __init__(self, file_path: str | Path) -> None:
        self.path = Path(file_path)

    def _load(self) -> dict:
        if not self.path.exists():
            return {}
        with open(self.path, encoding="utf-8") as handle:
            try:
                payload = json.load(handle)
            except json.JSONDecodeError as exc:
                raise InvalidInputError(f"{self.path}: malformed completion state") from exc
        if not isinstance(payload, dict):
            raise InvalidInputError(f"{self.path}: completion state must be a JSON object")
        return payload

    def _save(self, payload: dict) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(payload, indent=2, sort_keys=True), encoding="utf-8")

    def get(self, key: str) -> Optional[dict]:
        return self._load().get(key)

    def set(self, key: str, value: dict) -> None:
        payload = self._load()
        payload[key] = value
        self._save(payload)

    def clear(self) -> None:
        self._save({})
