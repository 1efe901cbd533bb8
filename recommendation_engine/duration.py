"""Task duration prediction from historical analogues."""

from __future__ import annotations

import logging

from recommendation_engine.bounds import round_half_up
from recommendation_engine.errors import InvalidInputError
from recommendation_engine.schema import DurationPrediction, HistoricalAnalogue, Task, validate_task

logger = logging.getLogger(__name__)

DEFAULT_DURATION_MINUTES = 60
HIGH_CONFIDENCE = 0.85
LOW_CONFIDENCE = 0.60
_HIGH_CONFIDENCE_MATCHES = 4


def _title_key(title: str) -> str | None:
    tokens = (title or "").lower().split()
    return tokens[0] if tokens else None


def matching_analogues(task: Task, analogues: list[HistoricalAnalogue]) -> list[HistoricalAnalogue]:
    """Analogues whose title contains the first word of the task title."""

    key = _title_key(task.title)
    if key is None:
        return []
    return [item for item in analogues if key in (item.title or "").lower()]


def predict_duration(
    task: Task,
    historical_analogues: list[HistoricalAnalogue],
    user_velocity: float = 1.0,
    complexity: float = 0.0,
) -> DurationPrediction:
    """Estimate minutes for ``task``.

    The base is the mean of matching analogues, falling back to the task's own
    estimate or ``DEFAULT_DURATION_MINUTES``. It is scaled up by complexity
    (``1 + complexity / 10``) and divided by the user's velocity.
    """

    validate_task(task)
    if user_velocity is None or user_velocity <= 0:
        raise InvalidInputError(f"user_velocity must be positive, got {user_velocity!r}")
    if complexity is None or complexity < 0:
        raise InvalidInputError(f"complexity must be >= 0, got {complexity!r}")

    similar = matching_analogues(task, historical_analogues or [])
    for item in similar:
        if item.actual_duration_minutes < 0:
            raise InvalidInputError(f"analogue {item.title!r} has a negative duration")

    if similar:
        base = sum(item.actual_duration_minutes for item in similar) / len(similar)
    elif task.estimated_duration_minutes is not None:
        base = float(task.estimated_duration_minutes)
    else:
        base = float(DEFAULT_DURATION_MINUTES)

    estimate = base * (1 + complexity / 10) / user_velocity
    confidence = HIGH_CONFIDENCE if len(similar) >= _HIGH_CONFIDENCE_MATCHES else LOW_CONFIDENCE
    logger.debug("task %s: %d analogues matched, base=%.1f estimate=%.1f", task.id, len(similar), base, estimate)

    return DurationPrediction(
        estimated_minutes=round_half_up(estimate),
        confidence=confidence,
        min_minutes=round_half_up(estimate * 0.8),
        max_minutes=round_half_up(estimate * 1.3),
    )
