"""Demo script for recommendation-engine."""

import logging
import sys
from datetime import datetime
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from recommendation_engine.adapters.csv_adapter import parse_energy_logs
from recommendation_engine.adapters.json_adapter import parse_tasks
from recommendation_engine.burnout import assess_burnout
from recommendation_engine.challenges import ChallengeEngine, select_daily_challenges
from recommendation_engine.priority import optimal_priority
from recommendation_engine.reminders import build_reminder_series
from recommendation_engine.schema import SlotPreferences, WorkHours
from recommendation_engine.slots import suggest_slots

EXAMPLES_DIR = Path(__file__).resolve().parent


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    now = datetime.now()
    tasks = parse_tasks(str(EXAMPLES_DIR / "sample_tasks.json"))
    energy_logs = parse_energy_logs(str(EXAMPLES_DIR / "sample_energy.csv"))

    for task in tasks:
        if task.completed:
            continue
        priority, reasoning = optimal_priority(task)
        print(f"{task.title}: priority {priority} ({reasoning})")
        for slot in suggest_slots(task, SlotPreferences(prefer_morning=True), horizon_days=3, now=now)[:2]:
            print(f"  {slot.start:%a %H:%M} score={slot.score:.0f} {'; '.join(slot.reasons)}")
        if task.due_date is not None:
            for reminder in build_reminder_series(task, WorkHours(9, 17), now=now):
                print(f"  remind at {reminder.delivery_time:%a %H:%M}: {reminder.message}")

    print("Burnout:", assess_burnout([9.5, 10, 8.5], [0.8, 0.7, 0.9], [2, 1, 3]))

    engine = ChallengeEngine()
    engine.roll_over(now.date())
    todays_logs = [entry for entry in energy_logs if entry.timestamp.date() == now.date()]
    for challenge in select_daily_challenges(now.date()):
        progress = engine.compute_progress(challenge, tasks, todays_logs, focus_sessions_today=2, current_streak=4)
        print(f"{challenge.icon} {challenge.title}: {progress.current_value}/{progress.goal} ({progress.percentage:.0f}%)")
    print("Points today:", engine.points_today(now.date()))


if __name__ == "__main__":
    main()
