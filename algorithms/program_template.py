from __future__ import annotations

import math

from models import ClientProfile, ExercisePrescription, ProgramPlan, Week
from .goals import GoalCategory, primary_goal, first_goal_token


class ProgramTemplateEngine:
    """Expand a client profile into a periodized multi-week program.

    The expansion is a fixed template: the split follows the weekly
    training frequency, rep ranges and rest periods follow the client's
    goal, and every program closes on a deload week with reduced sets.
    """

    PUSH_PULL_LEGS = "Push/Pull/Legs"
    UPPER_LOWER = "Upper/Lower"
    FULL_BODY = "Full Body"

    PROGRESSION_STRATEGY = "Progressive overload with auto-regulation based on RPE"
    DELOAD_FOCUS = "Deload"
    # weeks after this switch from the foundation to the progression label
    FOUNDATION_WEEKS = 4

    REPS_BY_GOAL: dict[GoalCategory, str] = {
        GoalCategory.STRENGTH: "3-5",
        GoalCategory.FAT_LOSS: "12-15",
        GoalCategory.GENERAL: "8-12",
    }
    REST_BY_GOAL: dict[GoalCategory, int] = {
        GoalCategory.STRENGTH: 300,
        GoalCategory.FAT_LOSS: 45,
        GoalCategory.GENERAL: 75,
    }

    # (primary compound, secondary movement) per split
    MOVEMENTS: dict[str, tuple[str, str]] = {
        PUSH_PULL_LEGS: ("Barbell Bench Press", "Incline Dumbbell Press"),
        UPPER_LOWER: ("Barbell Bench Press", "Barbell Rows"),
        FULL_BODY: ("Barbell Squats", "Barbell Rows"),
    }

    PRIMARY_SETS = 4
    SECONDARY_SETS = 3
    DELOAD_SETS = 2
    PRIMARY_TEMPO = "2-1-2"
    SECONDARY_TEMPO = "2-0-2"
    PRIMARY_RPE = "7-8"
    SECONDARY_RPE = "6-7"
    SECONDARY_REST_FACTOR = 0.75

    @classmethod
    def split_for_frequency(cls, training_frequency: int) -> tuple[str, int]:
        """Return ``(split_type, duration_weeks)`` for a weekly frequency.

        Frequencies below three share the three day template.
        """
        if training_frequency >= 5:
            return cls.PUSH_PULL_LEGS, 12
        if training_frequency == 4:
            return cls.UPPER_LOWER, 8
        return cls.FULL_BODY, 8

    @classmethod
    def reps_range(cls, goals: str | None) -> str:
        return cls.REPS_BY_GOAL[primary_goal(goals)]

    @classmethod
    def rest_seconds(cls, goals: str | None) -> int:
        return cls.REST_BY_GOAL[primary_goal(goals)]

    @classmethod
    def week_focus(cls, week_number: int, duration_weeks: int) -> str:
        if week_number == duration_weeks:
            return cls.DELOAD_FOCUS
        if week_number <= cls.FOUNDATION_WEEKS:
            return f"Week {week_number} - Foundation"
        return f"Week {week_number} - Progression"

    @classmethod
    def build_week(
        cls,
        week_number: int,
        duration_weeks: int,
        split_type: str,
        reps: str,
        rest: int,
    ) -> Week:
        deload = week_number == duration_weeks
        primary_name, secondary_name = cls.MOVEMENTS[split_type]
        primary = ExercisePrescription(
            name=primary_name,
            sets=cls.DELOAD_SETS if deload else cls.PRIMARY_SETS,
            reps=reps,
            tempo=cls.PRIMARY_TEMPO,
            rest_seconds=rest,
            rpe=cls.PRIMARY_RPE,
        )
        secondary = ExercisePrescription(
            name=secondary_name,
            sets=cls.DELOAD_SETS if deload else cls.SECONDARY_SETS,
            reps=reps,
            tempo=cls.SECONDARY_TEMPO,
            rest_seconds=math.floor(rest * cls.SECONDARY_REST_FACTOR),
            rpe=cls.SECONDARY_RPE,
        )
        return Week(
            week_number=week_number,
            focus=cls.week_focus(week_number, duration_weeks),
            exercises=(primary, secondary),
        )

    @staticmethod
    def program_name(
        client_name: str | None, duration_weeks: int, split_type: str, goals: str | None
    ) -> str:
        name = client_name or "Unknown"
        return f"{name}'s {duration_weeks}-Week {split_type} - {first_goal_token(goals)}"

    @classmethod
    def generate(cls, profile: ClientProfile) -> ProgramPlan:
        """Return the program for ``profile``; same profile, same content."""
        split_type, duration_weeks = cls.split_for_frequency(profile.training_frequency)
        reps = cls.reps_range(profile.goals)
        rest = cls.rest_seconds(profile.goals)
        weeks = tuple(
            cls.build_week(n, duration_weeks, split_type, reps, rest)
            for n in range(1, duration_weeks + 1)
        )
        return ProgramPlan(
            program_name=cls.program_name(
                profile.name, duration_weeks, split_type, profile.goals
            ),
            split_type=split_type,
            duration_weeks=duration_weeks,
            weeks=weeks,
            progression_strategy=cls.PROGRESSION_STRATEGY,
            notes=(
                f"Periodized {split_type} program with {duration_weeks} weeks. "
                f"Week {duration_weeks} is deload week."
            ),
        )
