from datetime import datetime, timedelta, timezone

import pytest

from recommendation_engine.errors import InvalidInputError
from recommendation_engine.priority import (
    REASONING_HIGH,
    REASONING_MEDIUM,
    categorize_task,
    optimal_priority,
)
from recommendation_engine.schema import PriorityContext, Task

NOW = datetime(2025, 3, 10, 8, 0)


def context():
    return PriorityContext(now=NOW)


def test_due_within_a_day_is_top_priority():
    task = Task(id="t1", title="Prepare slides", due_date=NOW + timedelta(hours=12))
    assert optimal_priority(task, context()) == (5, REASONING_HIGH)


def test_urgent_keyword_without_due_date():
    priority, _ = optimal_priority(Task(id="t1", title="URGENT: fix build"), context())
    assert priority == 5


def test_keyword_overrides_distant_deadline():
    task = Task(id="t1", title="asap: renew domain", due_date=NOW + timedelta(days=30))
    assert optimal_priority(task, context())[0] == 5


def test_deadline_escalation_bands():
    def priority_for(delta):
        return optimal_priority(Task(id="t1", title="Plan", due_date=NOW + delta), context())[0]

    assert priority_for(timedelta(days=2)) == 4
    assert priority_for(timedelta(days=5)) == 3
    assert priority_for(timedelta(days=10)) == 3
    assert priority_for(timedelta(days=-1)) == 5


def test_no_deadline_is_medium():
    assert optimal_priority(Task(id="t1", title="Tidy desk"), context()) == (3, REASONING_MEDIUM)


def test_string_due_date_is_parsed():
    task = Task(id="t1", title="Plan", due_date="2025-03-10T20:00:00")
    assert optimal_priority(task, context())[0] == 5


def test_malformed_due_date_fails():
    with pytest.raises(InvalidInputError):
        optimal_priority(Task(id="t1", title="Plan", due_date="soon"), context())


def test_categorize_task():
    assert categorize_task(Task(id="t1", title="Fix login bug")) == "Development"
    assert categorize_task(Task(id="t2", title="Plan budget")) == "Finance"
    assert categorize_task(Task(id="t3", title="Walk the dog")) == "General"


def test_zulu_due_date_with_default_clock():
    due = (datetime.now(timezone.utc) + timedelta(hours=12)).strftime("%Y-%m-%dT%H:%M:%SZ")
    assert optimal_priority(Task(id="t1", title="Plan", due_date=due)) == (5, REASONING_HIGH)
