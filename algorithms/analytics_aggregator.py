from __future__ import annotations

import re
from typing import Iterable, Optional

from models import (
    AnalyticsSummary,
    ExerciseLog,
    LiftProgress,
    LiftSnapshot,
    WorkoutSession,
)
from .math_tools import MathTools


class AnalyticsAggregator:
    """Summarize a client's complete session and log history."""

    # lift -> name keywords; a log may count towards several lifts
    LIFT_KEYWORDS: dict[str, tuple[str, ...]] = {
        "squat": ("squat", "leg press"),
        "bench": ("bench", "chest press"),
        "deadlift": ("deadlift",),
    }

    # ordered; the first bucket with a matching keyword wins
    MUSCLE_GROUPS: tuple[tuple[str, tuple[str, ...]], ...] = (
        ("Legs", ("squat", "leg press", "leg", "lunge", "hack")),
        ("Back", ("deadlift", "pull", "row", "back", "lat")),
        ("Chest", ("bench", "press", "push", "chest")),
        ("Shoulders", ("shoulder", "overhead", "ohp")),
        ("Arms", ("curl", "arm")),
        ("Core", ("core", "abs")),
    )
    OTHER = "Other"

    # keywords must start a word: "Farmer's Carry" is not an arm exercise
    _GROUP_PATTERNS = tuple(
        (group, re.compile(r"\b(?:" + "|".join(map(re.escape, keywords)) + ")"))
        for group, keywords in MUSCLE_GROUPS
    )

    @classmethod
    def classify_muscle_group(cls, exercise_name: str) -> str:
        lower = (exercise_name or "").lower()
        for group, pattern in cls._GROUP_PATTERNS:
            if pattern.search(lower):
                return group
        return cls.OTHER

    @staticmethod
    def compliance(sessions: Iterable[WorkoutSession]) -> tuple[int, int, int]:
        """Return ``(rate, total, completed)`` for ``sessions``."""
        total = 0
        completed = 0
        for session in sessions:
            total += 1
            if session.completed:
                completed += 1
        return MathTools.percentage(completed, total), total, completed

    @staticmethod
    def last_workout_date(sessions: Iterable[WorkoutSession]) -> Optional[str]:
        dates = [s.completed_at for s in sessions if s.completed_at]
        # ISO 8601 timestamps order lexicographically
        return max(dates) if dates else None

    @staticmethod
    def _snapshot(log: ExerciseLog) -> LiftSnapshot:
        weight = float(log.weight_used or 0.0)
        reps = int(log.reps_completed or 0)
        return LiftSnapshot(
            weight=weight,
            reps=reps,
            date=log.logged_at,
            estimated_1rm=round(MathTools.epley_1rm(weight, reps), 2),
        )

    @classmethod
    def lift_progress(cls, logs: list[ExerciseLog], keywords: tuple[str, ...]) -> LiftProgress:
        matching = [
            log
            for log in logs
            if any(k in (log.exercise_name or "").lower() for k in keywords)
        ]
        if not matching:
            return LiftProgress()
        matching.sort(key=lambda log: log.logged_at or "")
        first = cls._snapshot(matching[0])
        last = cls._snapshot(matching[-1])
        return LiftProgress(first_log=first, last_log=last, progress=last.weight - first.weight)

    @classmethod
    def strength_progress(cls, logs: list[ExerciseLog]) -> dict[str, LiftProgress]:
        return {
            lift: cls.lift_progress(logs, keywords)
            for lift, keywords in cls.LIFT_KEYWORDS.items()
        }

    @classmethod
    def muscle_group_volume(cls, logs: Iterable[ExerciseLog]) -> dict[str, float]:
        sets: dict[str, list[tuple[int, float]]] = {}
        for log in logs:
            group = cls.classify_muscle_group(log.exercise_name)
            sets.setdefault(group, []).append(
                (int(log.reps_completed or 0), float(log.weight_used or 0.0))
            )
        return {group: MathTools.volume(pairs) for group, pairs in sets.items()}

    @classmethod
    def summarize(
        cls,
        logs: Iterable[ExerciseLog],
        sessions: Iterable[WorkoutSession],
    ) -> AnalyticsSummary:
        """Aggregate the full history; the inputs are left untouched."""
        logs = list(logs)
        sessions = list(sessions)
        rate, total, completed = cls.compliance(sessions)
        return AnalyticsSummary(
            compliance_rate=rate,
            total_sessions=total,
            completed_sessions=completed,
            strength_progress=cls.strength_progress(logs),
            muscle_group_volume=cls.muscle_group_volume(logs),
            last_workout_date=cls.last_workout_date(sessions),
        )
