"""Daily challenge rotation and progress tracking.

Rotation is a pure function of the calendar date: every client sees the same
easy, medium and hard challenge on a given day. Progress is recomputed from
caller-supplied activity counts on each call; the only state the engine owns
is the per-day completion table, held in a ``CompletionStore``.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Sequence
from datetime import date, datetime

from recommendation_engine.bounds import clamp
from recommendation_engine.errors import InvalidInputError
from recommendation_engine.schema import ChallengeProgress, ChallengeReward, DailyChallenge, EnergyLogEntry, Task
from recommendation_engine.stores import CompletionStore, InMemoryCompletionStore
from recommendation_engine.temporal import calendar_key, day_of_year, parse_date, parse_datetime

logger = logging.getLogger(__name__)

# Bump whenever CATALOG changes; rotation output depends on its order.
CATALOG_VERSION = "2024.1"

# Reserved store key; cannot collide with "<id>@<date>" completion keys.
LAST_RESET_KEY = "_last_reset"

DIFFICULTIES = ("easy", "medium", "hard")

CATALOG: tuple[DailyChallenge, ...] = (
    DailyChallenge(
        id="complete_3_tasks",
        title="Task Starter",
        description="Complete 3 tasks today",
        icon="✅",
        goal=3,
        type="tasks",
        reward=ChallengeReward(points=50, bonus="2x Energy"),
        difficulty="easy",
    ),
    DailyChallenge(
        id="log_energy_3_times",
        title="Energy Logger",
        description="Log your energy 3 times today",
        icon="⚡",
        goal=3,
        type="energy",
        reward=ChallengeReward(points=40),
        difficulty="easy",
    ),
    DailyChallenge(
        id="maintain_streak",
        title="Streak Keeper",
        description="Keep your login streak alive",
        icon="🔥",
        goal=1,
        type="streak",
        reward=ChallengeReward(points=30, bonus="Streak Shield"),
        difficulty="easy",
    ),
    DailyChallenge(
        id="one_focus_session",
        title="Focus Time",
        description="Complete 1 Pomodoro session",
        icon="🎯",
        goal=1,
        type="focus",
        reward=ChallengeReward(points=35),
        difficulty="easy",
    ),
    DailyChallenge(
        id="complete_5_tasks",
        title="Productive Day",
        description="Complete 5 tasks today",
        icon="⚡",
        goal=5,
        type="tasks",
        reward=ChallengeReward(points=100, bonus="Task Master Badge"),
        difficulty="medium",
    ),
    DailyChallenge(
        id="log_energy_5_times",
        title="Energy Master",
        description="Log your energy 5 times",
        icon="⚡",
        goal=5,
        type="energy",
        reward=ChallengeReward(points=75),
        difficulty="medium",
    ),
    DailyChallenge(
        id="three_focus_sessions",
        title="Deep Work Day",
        description="Complete 3 Pomodoro sessions",
        icon="🧠",
        goal=3,
        type="focus",
        reward=ChallengeReward(points=120, bonus="Focus Champion"),
        difficulty="medium",
    ),
    DailyChallenge(
        id="complete_10_tasks",
        title="Productivity Beast",
        description="Complete 10 tasks in one day",
        icon="🦁",
        goal=10,
        type="tasks",
        reward=ChallengeReward(points=250, bonus="Beast Mode Badge"),
        difficulty="hard",
    ),
    DailyChallenge(
        id="five_focus_sessions",
        title="Ultra Focus",
        description="Complete 5 Pomodoro sessions",
        icon="🔥",
        goal=5,
        type="focus",
        reward=ChallengeReward(points=200, bonus="Focus Deity"),
        difficulty="hard",
    ),
)


def catalog(difficulty: str | None = None) -> list[DailyChallenge]:
    """Catalog entries in rotation order, optionally for a single tier."""

    if difficulty is None:
        return list(CATALOG)
    if difficulty not in DIFFICULTIES:
        raise InvalidInputError(f"unknown difficulty {difficulty!r}")
    return [challenge for challenge in CATALOG if challenge.difficulty == difficulty]


def get_challenge(challenge_id: str) -> DailyChallenge:
    for challenge in CATALOG:
        if challenge.id == challenge_id:
            return challenge
    raise InvalidInputError(f"unknown challenge {challenge_id!r}")


def select_daily_challenges(day) -> list[DailyChallenge]:
    """Return ``[easy, medium, hard]`` for ``day``: day-of-year modulo tier size."""

    ordinal = day_of_year(parse_date(day, "challenge date"))
    selected = []
    for difficulty in DIFFICULTIES:
        tier = catalog(difficulty)
        selected.append(tier[ordinal % len(tier)])
    return selected


def should_reset(last_reset_date, today) -> bool:
    """True iff the two calendar dates differ. A missing last reset always resets."""

    if last_reset_date is None or last_reset_date == "":
        return True
    return calendar_key(parse_date(last_reset_date, "last reset date")) != calendar_key(
        parse_date(today, "today")
    )


def measure(
    challenge: DailyChallenge,
    tasks_today: Sequence[Task],
    energy_logs_today: Sequence[EnergyLogEntry],
    focus_sessions_today: int,
    current_streak: int,
) -> int:
    """Current value of the activity a challenge counts."""

    if challenge.type == "tasks":
        return sum(1 for task in tasks_today if task.completed)
    if challenge.type == "energy":
        return len(energy_logs_today)
    if challenge.type == "focus":
        if focus_sessions_today is None or focus_sessions_today < 0:
            raise InvalidInputError("focus_sessions_today must be >= 0")
        return int(focus_sessions_today)
    if challenge.type == "streak":
        return 1 if current_streak and current_streak > 0 else 0
    raise InvalidInputError(f"challenge {challenge.id!r} has unknown type {challenge.type!r}")


def _state_key(challenge_id: str, day: date) -> str:
    return f"{challenge_id}@{calendar_key(day)}"


class ChallengeEngine:
    """Tracks per-day completion of daily challenges.

    Completion is monotonic within a calendar day: once a challenge reaches
    its goal it stays completed until ``reset``, whatever later counts say.
    All access to the store happens under a single lock so concurrent
    evaluations cannot both stamp a completion.
    """

    def __init__(
        self,
        store: CompletionStore | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.store = store if store is not None else InMemoryCompletionStore()
        self.clock = clock
        self._lock = threading.Lock()

    @property
    def last_reset(self) -> date | None:
        """Day of the last roll-over, read from the store so it survives restarts."""

        marker = self.store.get(LAST_RESET_KEY)
        return parse_date(marker["date"], LAST_RESET_KEY) if marker else None

    def _today(self, today) -> date:
        return parse_date(today, "today") if today is not None else self.clock().date()

    def reset(self) -> None:
        """Clear engine-owned completion state.

        Counters the caller owns (focus sessions, logs) are not touched.
        """

        with self._lock:
            self.store.clear()
        logger.info("challenge completion state reset")

    def roll_over(self, today=None) -> bool:
        """Drop earlier days' state once per calendar day.

        Completions already stamped for ``today`` are kept, so a restarted
        engine rolling over mid-day never un-completes a challenge. Returns
        True when a roll-over happened.
        """

        day = self._today(today)
        with self._lock:
            if not should_reset(self.last_reset, day):
                return False
            kept = {}
            for challenge in CATALOG:
                key = _state_key(challenge.id, day)
                record = self.store.get(key)
                if record is not None:
                    kept[key] = record
            self.store.clear()
            for key, record in kept.items():
                self.store.set(key, record)
            self.store.set(LAST_RESET_KEY, {"date": calendar_key(day)})
        logger.info("challenge state rolled over to %s, kept %d completion(s)", calendar_key(day), len(kept))
        return True

    def compute_progress(
        self,
        challenge: DailyChallenge,
        tasks_today: Sequence[Task],
        energy_logs_today: Sequence[EnergyLogEntry],
        focus_sessions_today: int,
        current_streak: int,
        today=None,
    ) -> ChallengeProgress:
        if challenge.goal <= 0:
            raise InvalidInputError(f"challenge {challenge.id!r} must have a positive goal")

        day = self._today(today)
        current = measure(challenge, tasks_today or [], energy_logs_today or [], focus_sessions_today, current_streak)
        percentage = clamp(current / challenge.goal * 100)
        key = _state_key(challenge.id, day)

        with self._lock:
            record = self.store.get(key)
            if record and record.get("is_completed"):
                is_completed = True
                completed_at = parse_datetime(record["completed_at"], f"{key} completed_at")
            elif percentage >= 100:
                is_completed = True
                completed_at = self.clock()
                self.store.set(key, {"is_completed": True, "completed_at": completed_at.isoformat()})
                logger.info("challenge %s completed on %s", challenge.id, calendar_key(day))
            else:
                is_completed = False
                completed_at = None

        return ChallengeProgress(
            challenge_id=challenge.id,
            current_value=current,
            goal=challenge.goal,
            percentage=100.0 if is_completed else percentage,
            is_completed=is_completed,
            completed_at=completed_at,
        )

    def points_today(self, today=None) -> int:
        """Reward points earned from today's completed challenges."""

        day = self._today(today)
        total = 0
        with self._lock:
            for challenge in select_daily_challenges(day):
                record = self.store.get(_state_key(challenge.id, day))
                if record and record.get("is_completed"):
                    total += challenge.reward.points
        return total
