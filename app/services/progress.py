"""Per-exercise progress: heaviest completed set and total volume per training day."""

from __future__ import annotations

import uuid
from collections import OrderedDict
from datetime import date

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.session import SessionExercise, SessionSet, TrainingSession
from app.schemas.personal_record import ProgressPoint


async def exercise_progress(
    db: AsyncSession, user_id: uuid.UUID, exercise_id: uuid.UUID
) -> list[ProgressPoint]:
    """
    One point per calendar day of started_at, oldest first. Only completed sets
    with weight and reps count; days without any are skipped.
    """
    result = await db.execute(
        select(TrainingSession.started_at, SessionSet.weight, SessionSet.reps)
        .join(SessionExercise, SessionExercise.session_id == TrainingSession.id)
        .join(SessionSet, SessionSet.session_exercise_id == SessionExercise.id)
        .where(
            TrainingSession.user_id == user_id,
            SessionExercise.exercise_id == exercise_id,
            SessionSet.is_completed.is_(True),
            SessionSet.weight > 0,
            SessionSet.reps > 0,
        )
        .order_by(TrainingSession.started_at)
    )

    by_day: OrderedDict[date, dict] = OrderedDict()
    for started_at, weight, reps in result.all():
        w = float(weight)
        day = by_day.setdefault(started_at.date(), {"weight": 0.0, "volume": 0.0})
        day["weight"] = max(day["weight"], w)
        day["volume"] += w * int(reps)

    return [
        ProgressPoint(date=d, weight=v["weight"], volume=round(v["volume"], 2))
        for d, v in by_day.items()
    ]
