"""Burnout risk classification from workload and break history."""

from __future__ import annotations

import logging

from recommendation_engine.bounds import clamp, mean
from recommendation_engine.schema import BurnoutAssessment

logger = logging.getLogger(__name__)

RECOMMEND_REDUCE_HOURS = "Reduce daily hours - consider working fewer hours per day"
RECOMMEND_MORE_BREAKS = "Take more breaks throughout the day"
RECOMMEND_TIME_OFF = "Schedule time off to recharge"

# (level, threshold) checked top-down against both overwork and stress.
RISK_THRESHOLDS = (
    ("critical", 80.0),
    ("high", 60.0),
    ("medium", 40.0),
)


def classify_risk(overwork: float, stress: float) -> str:
    for level, threshold in RISK_THRESHOLDS:
        if overwork > threshold or stress > threshold:
            return level
    return "low"


def assess_burnout(
    work_hours: list[float],
    completion_rates: list[float] | None,
    breaks_taken: list[int],
) -> BurnoutAssessment:
    """Score overwork, stress and balance (all 0..100) and classify the risk.

    ``completion_rates`` is accepted for call-site compatibility with the
    workload dashboards but does not influence the assessment.
    """

    avg_hours = mean(work_hours, "work_hours")
    avg_breaks = mean(breaks_taken, "breaks_taken")

    overwork = clamp(avg_hours / 10 * 100)
    stress = clamp(100 - avg_breaks * 10)
    balance = clamp(100 - overwork)
    risk = classify_risk(overwork, stress)

    recommendations = []
    if avg_hours > 9:
        recommendations.append(RECOMMEND_REDUCE_HOURS)
    if avg_breaks < 3:
        recommendations.append(RECOMMEND_MORE_BREAKS)
    if risk == "critical":
        recommendations.append(RECOMMEND_TIME_OFF)

    logger.debug("burnout: overwork=%.1f stress=%.1f risk=%s", overwork, stress, risk)
    return BurnoutAssessment(
        overwork_score=overwork,
        stress_score=stress,
        work_life_balance=balance,
        risk_level=risk,
        recommendations=recommendations,
    )
