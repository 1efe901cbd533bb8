"""Deadline and keyword driven priority scoring."""

from __future__ import annotations

import logging

from recommendation_engine.schema import PriorityContext, Task, validate_task
from recommendation_engine.temporal import days_between, now_like, parse_datetime

logger = logging.getLogger(__name__)

BASE_PRIORITY = 3
URGENT_KEYWORDS = ("critical", "urgent", "asap")

REASONING_HIGH = "High priority due to upcoming deadline and critical status"
REASONING_MEDIUM = "Medium priority - schedule in next few days"
REASONING_LOW = "Low priority - can be scheduled flexibly"

# Checked in order, first hit wins.
_CATEGORY_KEYWORDS = (
    ("Development", ("code", "bug", "feature", "deploy", "test", "api")),
    ("Design", ("design", "mockup", "ui", "ux", "wireframe", "prototype")),
    ("Marketing", ("campaign", "social", "content", "seo", "email", "launch")),
    ("Sales", ("demo", "proposal", "pitch", "contract", "client", "meeting")),
    ("Operations", ("process", "workflow", "system", "infrastructure", "deploy")),
    ("HR", ("hiring", "interview", "onboarding", "training", "review")),
    ("Finance", ("budget", "invoice", "payment", "expense", "report")),
)


def _deadline_priority(current: int, days_until_due: float) -> int:
    if days_until_due < 1:
        return 5
    if days_until_due < 3:
        return max(current, 4)
    if days_until_due < 7:
        return max(current, 3)
    return current


def has_urgent_keyword(title: str) -> bool:
    lowered = (title or "").lower()
    return any(keyword in lowered for keyword in URGENT_KEYWORDS)


def reasoning_for(priority: int) -> str:
    if priority >= 4:
        return REASONING_HIGH
    if priority == 3:
        return REASONING_MEDIUM
    return REASONING_LOW


def optimal_priority(task: Task, context: PriorityContext | None = None) -> tuple[int, str]:
    """Return ``(priority, reasoning)`` on the 1..5 scale, 5 being most pressing."""

    validate_task(task)
    now = context.now if context else None

    priority = BASE_PRIORITY
    if task.due_date is not None:
        due = parse_datetime(task.due_date, f"task {task.id!r} due_date")
        priority = _deadline_priority(priority, days_between(due, now or now_like(due)))
    if has_urgent_keyword(task.title):
        priority = 5

    logger.debug("task %s: optimal priority %d", task.id, priority)
    return priority, reasoning_for(priority)


def categorize_task(task: Task) -> str:
    """Keyword-based category for a task, ``"General"`` when nothing matches."""

    title = (task.title or "").lower()
    description = (task.description or "").lower()
    for category, keywords in _CATEGORY_KEYWORDS:
        if any(keyword in title or keyword in description for keyword in keywords):
            return category
    return "General"
