"""Core data schema shared by the scoring engine and its callers."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional, Union

from recommendation_engine.errors import InvalidInputError

DateLike = Union[datetime, str]


@dataclass
class Task:
    """Read-only task snapshot supplied by the task store."""

    id: str
    title: str
    priority: int = 3
    description: Optional[str] = None
    energy_requirement: Optional[int] = None
    estimated_duration_minutes: Optional[float] = None
    due_date: Optional[DateLike] = None
    completed: bool = False
    completed_at: Optional[DateLike] = None


@dataclass
class EnergyLogEntry:
    level: int
    timestamp: datetime


@dataclass
class HistoricalAnalogue:
    """A finished task used as a duration reference."""

    title: str
    actual_duration_minutes: float


@dataclass
class DurationPrediction:
    estimated_minutes: int
    confidence: float
    min_minutes: int
    max_minutes: int


@dataclass
class PriorityContext:
    """Evaluation context for the priority optimizer."""

    now: Optional[datetime] = None


@dataclass
class SlotPreferences:
    prefer_morning: bool = False
    prefer_afternoon: bool = False
    prefer_evening: bool = False


@dataclass
class TimeSlotCandidate:
    """Transient scheduling suggestion produced by the slot scorer."""

    start: datetime
    end: datetime
    score: float
    reasons: List[str]
    energy_level: int
    availability: str = "free"
    period: str = "morning"


@dataclass
class BurnoutAssessment:
    overwork_score: float
    stress_score: float
    work_life_balance: float
    risk_level: str
    recommendations: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class ChallengeReward:
    points: int
    bonus: Optional[str] = None


@dataclass(frozen=True)
class DailyChallenge:
    """Catalog entry. Never created at runtime."""

    id: str
    title: str
    description: str
    icon: str
    goal: int
    type: str
    reward: ChallengeReward
    difficulty: str


@dataclass
class ChallengeProgress:
    challenge_id: str
    current_value: int
    goal: int
    percentage: float
    is_completed: bool
    completed_at: Optional[datetime] = None


@dataclass
class WorkHours:
    """Working window as whole hours of the day."""

    start: int = 9
    end: int = 17


@dataclass
class Reminder:
    id: str
    task_id: str
    message: str
    delivery_time: datetime
    lead_time_hours: float
    channel: str = "push"
    context: str = "work-hours-optimized"


@dataclass
class Notification:
    id: str
    title: str
    message: str
    priority: str
    delivery_time: datetime
    channel: str


def _check_level(value, name: str, task_id: str) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or not 1 <= value <= 5:
        raise InvalidInputError(f"task {task_id!r}: {name} must be an integer in 1..5, got {value!r}")


def validate_task(task: Task) -> None:
    """Check the numeric fields of a task snapshot.

    Dates are validated where they are used, by ``temporal.parse_datetime``.
    """

    if task is None:
        raise InvalidInputError("task is required")
    _check_level(task.priority, "priority", task.id)
    if task.energy_requirement is not None:
        _check_level(task.energy_requirement, "energy requirement", task.id)
    if task.estimated_duration_minutes is not None and task.estimated_duration_minutes < 0:
        raise InvalidInputError(f"task {task.id!r}: estimated duration must be >= 0")
