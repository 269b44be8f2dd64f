"""ORM models - import all so Base.metadata is complete for migrations."""

from app.models.exercise import Exercise
from app.models.personal_record import PersonalRecord
from app.models.session import SessionExercise, SessionSet, TrainingSession
from app.models.template import TemplateExercise, WorkoutTemplate

__all__ = [
    "Exercise",
    "PersonalRecord",
    "SessionExercise",
    "SessionSet",
    "TrainingSession",
    "TemplateExercise",
    "WorkoutTemplate",
]
