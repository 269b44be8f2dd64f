"""Workout template schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from app.core.constants import MAX_EXERCISES_PER_TEMPLATE, MAX_SETS_PER_EXERCISE


class TemplateExerciseBase(BaseModel):
    exercise_id: UUID
    sets_count: int = Field(3, ge=1, le=MAX_SETS_PER_EXERCISE)
    target_reps: int | None = Field(None, ge=0)
    target_weight: float | None = Field(None, ge=0)
    rest_seconds: int | None = Field(None, ge=0)
    notes: str | None = None


class TemplateExerciseCreate(TemplateExerciseBase):
    pass


class TemplateExerciseRead(TemplateExerciseBase):
    model_config = ConfigDict(from_attributes=True)
    id: UUID
    template_id: UUID
    order_index: int


class WorkoutTemplateBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    color: str | None = Field(None, max_length=20)


class WorkoutTemplateCreate(WorkoutTemplateBase):
    """Exercises are stored in the order given."""

    exercises: list[TemplateExerciseCreate] = Field(default=[], max_length=MAX_EXERCISES_PER_TEMPLATE)


class WorkoutTemplateRead(WorkoutTemplateBase):
    model_config = ConfigDict(from_attributes=True)
    id: UUID
    user_id: UUID
    created_at: datetime
    exercises: list[TemplateExerciseRead] = []
