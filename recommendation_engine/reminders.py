"""Reminder and notification composition."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import datetime, timedelta

from recommendation_engine.errors import InvalidInputError
from recommendation_engine.schema import Notification, Reminder, Task, WorkHours
from recommendation_engine.temporal import (
    clamp_to_work_hours,
    hours_between,
    now_like,
    parse_datetime,
    validate_work_hours,
)

logger = logging.getLogger(__name__)

DEFAULT_LEAD_TIME_HOURS = 24
DUE_SOON_HOURS = 2
NOTIFICATION_DELAY = timedelta(minutes=30)


def _format_hours(hours: float) -> str:
    return str(int(hours)) if float(hours).is_integer() else f"{hours:g}"


def _due_date(task: Task) -> datetime:
    if task.due_date is None:
        raise InvalidInputError(f"task {task.id!r} has no due date, cannot schedule a reminder")
    return parse_datetime(task.due_date, f"task {task.id!r} due_date")


def build_reminder(
    task: Task,
    work_hours: WorkHours | None = None,
    lead_time_hours: float = DEFAULT_LEAD_TIME_HOURS,
) -> Reminder:
    """Reminder ``lead_time_hours`` before the due date, moved into work hours."""

    work_hours = work_hours or WorkHours()
    validate_work_hours(work_hours)
    if lead_time_hours is None or lead_time_hours < 0:
        raise InvalidInputError(f"lead_time_hours must be >= 0, got {lead_time_hours!r}")

    due = _due_date(task)
    delivery = clamp_to_work_hours(due - timedelta(hours=lead_time_hours), work_hours)

    return Reminder(
        id=f"reminder-{task.id}",
        task_id=task.id,
        message=f'Reminder: "{task.title}" is due in {_format_hours(lead_time_hours)} hours',
        delivery_time=delivery,
        lead_time_hours=float(lead_time_hours),
    )


def reminder_offsets(hours_to_deadline: float) -> list[float]:
    """Lead times (hours before due) that escalate as the deadline approaches."""

    if hours_to_deadline >= 72:
        return [24.0]
    if hours_to_deadline >= 24:
        return [12.0, 24.0]
    if hours_to_deadline >= 6:
        return [float(hours) for hours in range(3, int(hours_to_deadline) + 1, 3)]
    count = min(5, max(1, int(hours_to_deadline)))
    return [float(hours) for hours in range(1, count + 1)]


def build_reminder_series(
    task: Task,
    work_hours: WorkHours | None = None,
    now: datetime | None = None,
) -> list[Reminder]:
    """Escalating reminders for one task, earliest delivery first.

    Reminders that would be delivered before ``now`` or at/after the due
    date are dropped. Lead times clamped onto the same delivery moment
    collapse into one.
    """

    due = _due_date(task)
    now = now or now_like(due)
    remaining = hours_between(due, now)
    if remaining <= 0:
        logger.debug("task %s is overdue, no reminder series", task.id)
        return []

    series: dict[datetime, Reminder] = {}
    for lead in reminder_offsets(remaining):
        reminder = build_reminder(task, work_hours, lead)
        if reminder.delivery_time < now or reminder.delivery_time >= due:
            continue
        series.setdefault(reminder.delivery_time, reminder)

    ordered = [series[moment] for moment in sorted(series)]
    for index, reminder in enumerate(ordered, start=1):
        reminder.id = f"reminder-{task.id}-{index}"
    return ordered


def due_soon_notifications(
    tasks: Sequence[Task],
    now: datetime | None = None,
    in_focus: bool = False,
) -> list[Notification]:
    """Urgent notifications for open tasks due within the next two hours."""

    notifications = []
    for task in tasks:
        if task.completed or task.due_date is None:
            continue
        due = _due_date(task)
        current = now or now_like(due)
        hours_left = hours_between(due, current)
        if not 0 < hours_left <= DUE_SOON_HOURS:
            continue
        notifications.append(
            Notification(
                id=f"notif-{task.id}",
                title="Task Due Soon",
                message=f'"{task.title}" is due in {round(hours_left)} hours',
                priority="urgent",
                delivery_time=current + NOTIFICATION_DELAY,
                channel="in-app" if in_focus else "push",
            )
        )
    return notifications
