"""Candidate time slot generation and ranking."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timedelta

import numpy as np

from recommendation_engine.bounds import clamp
from recommendation_engine.duration import DEFAULT_DURATION_MINUTES
from recommendation_engine.errors import InvalidInputError
from recommendation_engine.schema import SlotPreferences, Task, TimeSlotCandidate, validate_task
from recommendation_engine.temporal import at_hour, day_offset, now_like, parse_datetime, whole_days_between

logger = logging.getLogger(__name__)

MAX_SUGGESTIONS = 6
MAX_JITTER = 10.0
MAX_REASONS = 3

# period -> (start hour, assigned energy level, minimum score kept)
PERIODS = {
    "morning": (9, 4, 60.0),
    "afternoon": (14, 3, 60.0),
    "evening": (19, 2, 50.0),
}

REASON_OPTIMAL = "Optimal time based on your patterns"
REASONS_MORNING = ("High energy levels in the morning", "Fewer interruptions early in the day")
REASON_HIGH_PRIORITY = "High priority task - should be scheduled soon"
REASON_ENERGY_MATCH = "Task matches your peak energy time"
REASON_LOW_LOAD = "Minimal cognitive load at this time"

BlockedHook = Callable[[TimeSlotCandidate], bool]


def _deadline_reason(days_left: int, overdue: bool) -> str:
    if overdue:
        return "Deadline passed - urgent"
    if days_left <= 0:
        return "Deadline today - urgent"
    unit = "day" if days_left == 1 else "days"
    return f"Deadline in {days_left} {unit} - urgent"


def score_slot(
    task: Task,
    period: str,
    start: datetime,
    preferences: SlotPreferences,
    due: datetime | None = None,
    jitter: float = 0.0,
) -> float:
    """Additive score for one window, clamped to 0..100.

    Lower numeric ``task.priority`` means more urgent here, hence the
    ``(6 - priority) * 10`` boost.
    """

    score = 50.0
    score += (6 - task.priority) * 10

    if period == "morning" and preferences.prefer_morning:
        score += 20
    elif period == "afternoon" and preferences.prefer_afternoon:
        score += 15
    elif period == "evening" and preferences.prefer_evening:
        score += 10

    energy = task.energy_requirement if task.energy_requirement is not None else 3
    if period == "morning" and energy >= 4:
        score += 15
    elif period == "afternoon" and energy == 3:
        score += 10

    if due is not None:
        days_until = whole_days_between(due, start)
        if days_until <= 2:
            score += 20
        elif days_until <= 7:
            score += 10

    return clamp(score + jitter)


def slot_reasons(task: Task, period: str, score: float, now: datetime, due: datetime | None = None) -> list[str]:
    """Up to three reasons, most specific first, then the closing reason.

    A deadline within two days outranks the generic morning reasons.
    """

    reasons: list[str] = []
    if score > 85:
        reasons.append(REASON_OPTIMAL)
    if due is not None:
        days_left = whole_days_between(due, now)
        if days_left <= 2:
            reasons.append(_deadline_reason(days_left, due < now))
    if period == "morning":
        reasons.extend(REASONS_MORNING)
    if task.priority <= 2:
        reasons.append(REASON_HIGH_PRIORITY)
    if task.energy_requirement is not None and task.energy_requirement >= 4:
        reasons.append(REASON_ENERGY_MATCH)

    return reasons[:MAX_REASONS] + [REASON_LOW_LOAD]


def slot_confidence(score: float) -> str:
    if score >= 80:
        return "high"
    if score >= 60:
        return "medium"
    return "low"


def suggest_slots(
    task: Task,
    preferences: SlotPreferences | None = None,
    horizon_days: int = 7,
    *,
    now: datetime | None = None,
    rng: np.random.Generator | None = None,
    is_blocked: BlockedHook | None = None,
) -> list[TimeSlotCandidate]:
    """Rank morning/afternoon/evening windows over the next ``horizon_days``.

    ``rng`` adds a 0..10 jitter per window; leave it as ``None`` for fully
    reproducible output. Windows rejected by ``is_blocked`` are never
    suggested. Result is best first, ties broken by earliest start.
    """

    validate_task(task)
    if isinstance(horizon_days, bool) or not isinstance(horizon_days, int) or horizon_days <= 0:
        raise InvalidInputError(f"horizon_days must be a positive integer, got {horizon_days!r}")

    preferences = preferences or SlotPreferences()
    due = parse_datetime(task.due_date, f"task {task.id!r} due_date") if task.due_date is not None else None
    now = now or now_like(due)
    minutes = task.estimated_duration_minutes
    length = timedelta(minutes=minutes if minutes is not None else DEFAULT_DURATION_MINUTES)

    candidates: list[TimeSlotCandidate] = []
    for offset in range(horizon_days):
        day = day_offset(now.date(), offset)
        for period, (hour, energy_level, floor) in PERIODS.items():
            start = at_hour(day, hour, tzinfo=now.tzinfo)
            jitter = float(rng.uniform(0.0, MAX_JITTER)) if rng is not None else 0.0
            score = score_slot(task, period, start, preferences, due=due, jitter=jitter)
            if score < floor:
                logger.debug("task %s: %s %s scored %.1f, below floor %.0f", task.id, day, period, score, floor)
                continue

            candidate = TimeSlotCandidate(
                start=start,
                end=start + length,
                score=score,
                reasons=slot_reasons(task, period, score, now, due=due),
                energy_level=energy_level,
                availability="free",
                period=period,
            )
            if is_blocked is not None and is_blocked(candidate):
                logger.debug("task %s: %s %s is blocked", task.id, day, period)
                continue
            candidates.append(candidate)

    ranked = sorted(candidates, key=lambda slot: (-slot.score, slot.start))
    return ranked[:MAX_SUGGESTIONS]
