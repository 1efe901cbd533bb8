"""Score one task from a JSON task file and print a recommendation report."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import asdict
from pathlib import Path

import numpy as np

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from recommendation_engine.adapters import csv_adapter, json_adapter
from recommendation_engine.duration import predict_duration
from recommendation_engine.errors import InvalidInputError
from recommendation_engine.priority import categorize_task, optimal_priority
from recommendation_engine.schema import SlotPreferences
from recommendation_engine.slots import slot_confidence, suggest_slots


def _load_analogues(path: Path):
    suffix = path.suffix.lower()
    if suffix == ".csv":
        return csv_adapter.parse_analogues(str(path))
    if suffix == ".json":
        return json_adapter.parse_analogues(str(path))
    raise InvalidInputError("Unsupported analogue format, expected .csv or .json")


def build_report(args: argparse.Namespace) -> dict:
    tasks = json_adapter.parse_tasks(args.tasks)
    matches = [task for task in tasks if task.id == args.task_id]
    if not matches:
        raise InvalidInputError(f"task {args.task_id!r} not found in {args.tasks}")
    task = matches[0]

    analogues = _load_analogues(Path(args.history)) if args.history else []
    preferences = SlotPreferences(
        prefer_morning=args.prefer_morning,
        prefer_afternoon=args.prefer_afternoon,
        prefer_evening=args.prefer_evening,
    )
    rng = np.random.default_rng(args.seed) if args.seed is not None else None

    priority, reasoning = optimal_priority(task)
    slots = suggest_slots(task, preferences, horizon_days=args.horizon, rng=rng)
    return {
        "task_id": task.id,
        "category": categorize_task(task),
        "priority": {"value": priority, "reasoning": reasoning},
        "duration": asdict(predict_duration(task, analogues, args.velocity, args.complexity)),
        "slots": [{**asdict(slot), "confidence": slot_confidence(slot.score)} for slot in slots],
    }


def main() -> None:
    parser = argparse.ArgumentParser(description="Suggest time slots for a task")
    parser.add_argument("--tasks", required=True, help="Path to a JSON list of tasks")
    parser.add_argument("--task-id", required=True, help="Task to score")
    parser.add_argument("--history", help="Optional CSV/JSON of finished tasks with actual durations")
    parser.add_argument("--horizon", type=int, default=7, help="Days to look ahead")
    parser.add_argument("--velocity", type=float, default=1.0, help="User velocity, >1 is faster than baseline")
    parser.add_argument("--complexity", type=float, default=0.0, help="Task complexity, typically 0-10")
    parser.add_argument("--prefer-morning", action="store_true")
    parser.add_argument("--prefer-afternoon", action="store_true")
    parser.add_argument("--prefer-evening", action="store_true")
    parser.add_argument("--seed", type=int, help="Seed for score jitter; omit for deterministic scores")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        report = build_report(args)
    except InvalidInputError as exc:
        parser.exit(2, f"error: {exc}\n")

    print(json.dumps(report, indent=2, default=str))


if __name__ == "__main__":
    main()
