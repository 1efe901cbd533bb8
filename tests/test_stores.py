import pytest

from recommendation_engine.errors import InvalidInputError
from recommendation_engine.stores import InMemoryCompletionStore, JsonFileCompletionStore

RECORD = {"is_completed": True, "completed_at": "2024-01-04T12:00:00"}


def test_in_memory_store_returns_copies():
    store = InMemoryCompletionStore()
    store.set("complete_3_tasks@2024-01-04", RECORD)
    record = store.get("complete_3_tasks@2024-01-04")
    record["is_completed"] = False
    assert store.get("complete_3_tasks@2024-01-04")["is_completed"] is True
    store.clear()
    assert store.get("complete_3_tasks@2024-01-04") is None
    assert len(store) == 0


def test_json_store_round_trip(tmp_path):
    store = JsonFileCompletionStore(tmp_path / "state" / "progress.json")
    assert store.get("missing") is None
    store.set("a@2024-01-04", RECORD)
    assert JsonFileCompletionStore(tmp_path / "state" / "progress.json").get("a@2024-01-04") == RECORD
    store.clear()
    assert store.get("a@2024-01-04") is None


def test_json_store_rejects_corrupt_file(tmp_path):
    path = tmp_path / "progress.json"
    path.write_text("[1, 2", encoding="utf-8")
    with pytest.raises(InvalidInputError):
        JsonFileCompletionStore(path).get("a")
