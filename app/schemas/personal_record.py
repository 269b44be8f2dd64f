"""Personal record schemas."""

from datetime import date as date_cls
from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class PersonalRecordCreate(BaseModel):
    """Row handed to the record store; id and achieved_at are assigned on insert."""

    model_config = ConfigDict(frozen=True)

    user_id: UUID
    exercise_id: UUID
    weight: float = Field(..., gt=0)
    reps: int = Field(..., gt=0)
    volume: float
    session_id: UUID | None = None


class PersonalRecordRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    exercise_id: UUID
    weight: float
    reps: int
    volume: float | None = None
    session_id: UUID | None = None
    achieved_at: datetime


class ProgressPoint(BaseModel):
    """One day of progress for an exercise: heaviest completed set and total volume."""

    date: date_cls
    weight: float
    volume: float


class ExerciseProgress(BaseModel):
    exercise_id: UUID
    current_record: PersonalRecordRead | None = None
    points: list[ProgressPoint] = []
