"""Session snapshot consumed by the PR engine.

Built from ORM rows (``SessionSnapshot.model_validate(training_session)``)
or directly from plain values in tests and scripts.
"""

from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class SetSnapshot(BaseModel):
    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: UUID
    order_index: int = 0
    weight: float | None = Field(None, ge=0)
    reps: int | None = Field(None, ge=0)
    is_completed: bool = False
    notes: str | None = None


class SessionExerciseSnapshot(BaseModel):
    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: UUID
    exercise_id: UUID
    exercise_name: str
    order_index: int = 0
    sets: list[SetSnapshot] = []


class SessionSnapshot(BaseModel):
    """A finished (or finishing) session: its id plus exercises with their sets."""

    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: UUID
    exercises: list[SessionExerciseSnapshot] = []
