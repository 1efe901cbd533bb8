from datetime import datetime, timedelta, timezone

import numpy as np
import pytest

from recommendation_engine.errors import InvalidInputError
from recommendation_engine.schema import SlotPreferences, Task
from recommendation_engine.slots import (
    REASON_HIGH_PRIORITY,
    REASON_LOW_LOAD,
    REASON_OPTIMAL,
    REASONS_MORNING,
    slot_confidence,
    slot_reasons,
    suggest_slots,
)

NOW = datetime(2025, 3, 10, 8, 0)


def sample_task(**overrides):
    fields = {"id": "t1", "title": "Write report", "priority": 2, "estimated_duration_minutes": 90}
    fields.update(overrides)
    return Task(**fields)


def test_report_due_tomorrow_gets_morning_slot():
    task = sample_task(due_date=NOW + timedelta(hours=18))
    slots = suggest_slots(task, SlotPreferences(prefer_morning=True), horizon_days=3, now=NOW)

    top = slots[0]
    assert top.period == "morning"
    assert top.start.date() in (NOW.date(), NOW.date() + timedelta(days=1))
    assert top.score >= 90
    assert top.end - top.start == timedelta(minutes=90)
    assert any("deadline" in reason.lower() or "urgent" in reason.lower() for reason in top.reasons)


def test_ranking_descending_with_earliest_start_on_ties():
    task = sample_task(priority=5, estimated_duration_minutes=30)
    slots = suggest_slots(task, horizon_days=1, now=NOW)

    assert [slot.period for slot in slots] == ["afternoon", "morning", "evening"]
    assert [slot.score for slot in slots] == [70.0, 60.0, 60.0]
    for first, second in zip(slots, slots[1:]):
        assert first.score > second.score or (first.score == second.score and first.start < second.start)


def test_result_capped_at_six():
    slots = suggest_slots(sample_task(), horizon_days=7, now=NOW)
    assert len(slots) == 6


def test_scores_bounded_with_jitter():
    task = sample_task(priority=1, energy_requirement=5, due_date=NOW + timedelta(days=1))
    prefs = SlotPreferences(prefer_morning=True, prefer_afternoon=True, prefer_evening=True)
    for seed in range(20):
        for slot in suggest_slots(task, prefs, horizon_days=7, now=NOW, rng=np.random.default_rng(seed)):
            assert 0.0 <= slot.score <= 100.0


def test_seeded_jitter_is_reproducible():
    task = sample_task(priority=5)
    first = suggest_slots(task, horizon_days=5, now=NOW, rng=np.random.default_rng(7))
    second = suggest_slots(task, horizon_days=5, now=NOW, rng=np.random.default_rng(7))
    assert first == second
    assert suggest_slots(task, horizon_days=5, now=NOW) == suggest_slots(task, horizon_days=5, now=NOW)


def test_blocked_slots_are_excluded():
    slots = suggest_slots(
        sample_task(),
        horizon_days=3,
        now=NOW,
        is_blocked=lambda candidate: candidate.period == "morning",
    )
    assert slots
    assert all(slot.period != "morning" for slot in slots)


def test_energy_levels_by_period():
    slots = suggest_slots(sample_task(priority=5), horizon_days=1, now=NOW)
    assert {slot.period: slot.energy_level for slot in slots} == {"morning": 4, "afternoon": 3, "evening": 2}


@pytest.mark.parametrize("horizon", [0, -3])
def test_non_positive_horizon_rejected(horizon):
    with pytest.raises(InvalidInputError):
        suggest_slots(sample_task(), horizon_days=horizon, now=NOW)


def test_invalid_priority_rejected():
    with pytest.raises(InvalidInputError):
        suggest_slots(sample_task(priority=0), now=NOW)


def test_reason_rules_capped_before_closing_reason():
    task = sample_task(priority=2, energy_requirement=5)
    reasons = slot_reasons(task, "morning", 100.0, NOW, due=NOW + timedelta(hours=5))
    assert reasons == [REASON_OPTIMAL, "Deadline today - urgent", REASONS_MORNING[0], REASON_LOW_LOAD]
    assert REASON_HIGH_PRIORITY not in reasons


def test_high_priority_reason_wording():
    reasons = slot_reasons(sample_task(priority=1), "evening", 70.0, NOW)
    assert reasons == ["High priority task - should be scheduled soon", REASON_LOW_LOAD]


def test_deadline_reason_counts_days():
    task = sample_task(priority=3)
    reasons = slot_reasons(task, "evening", 100.0, NOW, due=NOW + timedelta(hours=30))
    assert reasons == [REASON_OPTIMAL, "Deadline in 1 day - urgent", REASON_LOW_LOAD]


def test_slot_confidence_bands():
    assert slot_confidence(92) == "high"
    assert slot_confidence(65) == "medium"
    assert slot_confidence(40) == "low"


def test_zulu_due_date_with_default_clock():
    due = (datetime.now(timezone.utc) + timedelta(days=1)).strftime("%Y-%m-%dT%H:%M:%SZ")
    slots = suggest_slots(sample_task(due_date=due), horizon_days=2)
    assert slots
    assert all(slot.start.utcoffset() == timedelta(0) for slot in slots)
