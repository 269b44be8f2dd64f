"""Training session schemas (API shapes)."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator


class SessionSetRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: UUID
    order_index: int
    weight: float | None = None
    reps: int | None = None
    rpe: float | None = None
    is_completed: bool = False
    notes: str | None = None


class SessionSetUpdate(BaseModel):
    weight: float | None = Field(None, ge=0)
    reps: int | None = Field(None, ge=0)
    rpe: float | None = Field(None, ge=0, le=10)
    is_completed: bool | None = None
    notes: str | None = Field(None, max_length=500)

    @field_validator("is_completed")
    @classmethod
    def is_completed_not_null(cls, v: bool | None) -> bool:
        # Omit the field to leave it unchanged; the column is NOT NULL
        if v is None:
            raise ValueError("is_completed must be true or false")
        return v


class SessionExerciseRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: UUID
    exercise_id: UUID
    exercise_name: str
    order_index: int
    notes: str | None = None
    sets: list[SessionSetRead] = []


class TrainingSessionSummary(BaseModel):
    """History row (no exercises)."""

    model_config = ConfigDict(from_attributes=True)
    id: UUID
    template_id: UUID | None = None
    workout_name: str | None = None
    started_at: datetime
    completed_at: datetime | None = None
    duration_seconds: int | None = None
    notes: str | None = None


class TrainingSessionRead(TrainingSessionSummary):
    exercises: list[SessionExerciseRead] = []


class SessionFinish(BaseModel):
    """Client-measured duration wins over started_at/completed_at arithmetic."""

    duration_seconds: int | None = Field(None, ge=0)


class SessionFinishResult(BaseModel):
    session_id: UUID
    completed_at: datetime
    duration_seconds: int | None = None
    pr_count: int = 0
    pr_error: bool = False
