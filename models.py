"""Plain data records exchanged between the repositories, services and core."""

from __future__ import annotations

from dataclasses import dataclass, field, asdict
from typing import Optional


@dataclass
class ClientProfile:
    """A trainer's client as stored in the ``clients`` table."""

    training_frequency: int
    goals: str
    session_duration: int
    name: str = "Unknown"
    age: Optional[int] = None
    gender: str = "Unknown"
    height: Optional[float] = None
    weight: Optional[float] = None
    experience: str = "beginner"
    equipment: str = "Unknown"
    injuries: Optional[str] = None
    preferred_exercises: Optional[str] = None
    body_fat_percentage: Optional[float] = None
    squat_1rm: Optional[float] = None
    bench_1rm: Optional[float] = None
    deadlift_1rm: Optional[float] = None
    id: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    def to_dict(self) -> dict:
        return asdict(self)

    def summary(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "age": self.age,
            "gender": self.gender,
            "goals": self.goals,
            "experience": self.experience,
            "created_at": self.created_at,
        }


@dataclass(frozen=True)
class ExercisePrescription:
    name: str
    sets: int
    reps: str
    tempo: str
    rest_seconds: int
    rpe: str

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class Week:
    week_number: int
    focus: str
    exercises: tuple[ExercisePrescription, ...]

    @property
    def is_deload(self) -> bool:
        return self.focus == "Deload"

    def to_dict(self) -> dict:
        return {
            "week_number": self.week_number,
            "focus": self.focus,
            "exercises": [e.to_dict() for e in self.exercises],
        }


@dataclass(frozen=True)
class ProgramPlan:
    """A generated program; regeneration yields a new instance."""

    program_name: str
    split_type: str
    duration_weeks: int
    weeks: tuple[Week, ...]
    progression_strategy: str
    notes: str = ""

    @property
    def deload_week(self) -> int:
        return self.duration_weeks

    def program_data(self) -> dict:
        return {
            "weeks": [w.to_dict() for w in self.weeks],
            "deload_week": self.deload_week,
            "progression_strategy": self.progression_strategy,
            "notes": self.notes,
        }

    def to_dict(self) -> dict:
        return {
            "program_name": self.program_name,
            "duration_weeks": self.duration_weeks,
            "split_type": self.split_type,
            "program_data": self.program_data(),
        }


@dataclass
class WorkoutSession:
    program_id: str
    client_id: str
    week_number: int
    exercises: list[dict]
    day_number: int = 1
    session_name: Optional[str] = None
    completed: bool = False
    completed_at: Optional[str] = None
    notes: Optional[str] = None
    id: Optional[str] = None
    created_at: Optional[str] = None

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class ExerciseLog:
    session_id: str
    client_id: str
    exercise_name: str
    weight_used: Optional[float]
    reps_completed: Optional[int]
    rpe: Optional[int] = None
    notes: Optional[str] = None
    logged_at: Optional[str] = None
    id: Optional[str] = None

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class ReadinessReport:
    sleep: int
    stress: int
    soreness: int
    energy: int


@dataclass(frozen=True)
class ReadinessResult:
    readiness_score: int
    intensity_adjustment: str
    recommendation: str

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class Macros:
    protein_grams: int
    carbs_grams: int
    fats_grams: int
    daily_calories: int
    protein_calories: int


@dataclass(frozen=True)
class MealTemplate:
    meal_name: str
    description: str
    foods: tuple[str, ...]
    protein: int
    carbs: int
    fats: int

    def to_dict(self) -> dict:
        return {
            "meal_name": self.meal_name,
            "description": self.description,
            "foods": list(self.foods),
            "macros": {
                "protein": self.protein,
                "carbs": self.carbs,
                "fats": self.fats,
            },
        }


@dataclass(frozen=True)
class NutritionPlan:
    macros: Macros
    meal_templates: tuple[MealTemplate, ...]
    suggestions: tuple[str, ...]
    profile_summary: str = ""

    def to_dict(self) -> dict:
        return {
            "macros": asdict(self.macros),
            "meal_templates": [m.to_dict() for m in self.meal_templates],
            "suggestions": list(self.suggestions),
            "profile_summary": self.profile_summary,
        }


@dataclass(frozen=True)
class LiftSnapshot:
    weight: float
    reps: int
    date: Optional[str]
    estimated_1rm: float


@dataclass(frozen=True)
class LiftProgress:
    first_log: Optional[LiftSnapshot] = None
    last_log: Optional[LiftSnapshot] = None
    progress: float = 0.0

    def to_dict(self) -> dict:
        return {
            "first_log": asdict(self.first_log) if self.first_log else None,
            "last_log": asdict(self.last_log) if self.last_log else None,
            "progress": self.progress,
        }


@dataclass(frozen=True)
class AnalyticsSummary:
    compliance_rate: int
    total_sessions: int
    completed_sessions: int
    strength_progress: dict[str, LiftProgress]
    muscle_group_volume: dict[str, float]
    last_workout_date: Optional[str]

    def to_dict(self) -> dict:
        return {
            "compliance_rate": self.compliance_rate,
            "total_sessions": self.total_sessions,
            "completed_sessions": self.completed_sessions,
            "strength_progress": {
                lift: p.to_dict() for lift, p in self.strength_progress.items()
            },
            "muscle_group_volume": dict(self.muscle_group_volume),
            "last_workout_date": self.last_workout_date,
        }


@dataclass(frozen=True)
class SubstituteRequest:
    exercise_name: str
    muscle_group: str
    equipment: str = ""
    injuries: Optional[str] = None


@dataclass(frozen=True)
class SubstituteSuggestion:
    name: str
    muscle_group: str
    equipment: str
    difficulty: str
    reason: str

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class ProgramRecord:
    """A persisted program row."""

    client_id: str
    program_name: str
    duration_weeks: int
    split_type: str
    program_data: dict = field(default_factory=dict)
    id: Optional[str] = None
    created_at: Optional[str] = None

    def summary(self) -> dict:
        return {
            "id": self.id,
            "program_name": self.program_name,
            "duration_weeks": self.duration_weeks,
            "split_type": self.split_type,
            "created_at": self.created_at,
        }

    def to_dict(self) -> dict:
        return asdict(self)
