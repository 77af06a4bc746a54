"""Request bodies accepted by the REST API."""

from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

Experience = Literal["beginner", "intermediate", "advanced"]


class ClientCreate(BaseModel):
    name: str = Field(..., min_length=1)
    age: int = Field(..., gt=0)
    gender: str
    height: float = Field(..., gt=0, description="Height in cm")
    weight: float = Field(..., gt=0, description="Weight in kg")
    experience: Experience
    goals: str
    training_frequency: int = Field(..., ge=1, le=7, description="Days per week")
    equipment: str
    session_duration: int = Field(..., gt=0, description="Minutes")
    injuries: Optional[str] = None
    preferred_exercises: Optional[str] = None
    body_fat_percentage: Optional[float] = Field(None, gt=0, lt=100)
    squat_1rm: Optional[float] = Field(None, ge=0)
    bench_1rm: Optional[float] = Field(None, ge=0)
    deadlift_1rm: Optional[float] = Field(None, ge=0)


class ClientUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    age: Optional[int] = Field(None, gt=0)
    gender: Optional[str] = None
    height: Optional[float] = Field(None, gt=0)
    weight: Optional[float] = Field(None, gt=0)
    experience: Optional[Experience] = None
    goals: Optional[str] = None
    training_frequency: Optional[int] = Field(None, ge=1, le=7)
    equipment: Optional[str] = None
    session_duration: Optional[int] = Field(None, gt=0)
    injuries: Optional[str] = None
    preferred_exercises: Optional[str] = None
    body_fat_percentage: Optional[float] = Field(None, gt=0, lt=100)
    squat_1rm: Optional[float] = Field(None, ge=0)
    bench_1rm: Optional[float] = Field(None, ge=0)
    deadlift_1rm: Optional[float] = Field(None, ge=0)

    # may be omitted but not cleared
    @field_validator(
        "name", "experience", "goals", "training_frequency", "session_duration"
    )
    @classmethod
    def not_null(cls, value):
        if value is None:
            raise ValueError("field cannot be null")
        return value


class ProgramGenerate(BaseModel):
    client_id: str


class ExerciseEntry(BaseModel):
    exercise_name: str = Field(..., min_length=1)
    weight_used: float = Field(..., ge=0)
    reps_completed: int = Field(..., ge=0)
    rpe: Optional[int] = Field(None, ge=1, le=10)
    notes: Optional[str] = None


class SessionComplete(BaseModel):
    exercises: List[ExerciseEntry] = Field(..., min_length=1)
    notes: Optional[str] = None


class ReadinessInput(BaseModel):
    sleep: int = Field(..., ge=1, le=10)
    stress: int = Field(..., ge=1, le=10)
    soreness: int = Field(..., ge=1, le=10)
    energy: int = Field(..., ge=1, le=10)
