"""Numeric helpers shared by the scorers."""

from __future__ import annotations

import math
from collections.abc import Sequence

import numpy as np

from recommendation_engine.errors import InvalidInputError


def clamp(value: float, low: float = 0.0, high: float = 100.0) -> float:
    return max(low, min(high, value))


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves up."""

    return int(math.floor(value + 0.5))


def mean(values: Sequence[float], name: str) -> float:
    """Arithmetic mean of a required, non-empty, non-negative series."""

    if values is None or len(values) == 0:
        raise InvalidInputError(f"{name} must not be empty")
    try:
        array = np.asarray(values, dtype=float)
    except (TypeError, ValueError) as exc:
        raise InvalidInputError(f"{name} must contain only numbers") from exc
    if array.ndim != 1:
        raise InvalidInputError(f"{name} must be a flat list of numbers")
    if not np.all(np.isfinite(array)):
        raise InvalidInputError(f"{name} must contain only finite numbers")
    if np.any(array < 0):
        raise InvalidInputError(f"{name} must not contain negative values")
    return float(np.mean(array))
