"""Training session lifecycle: start from a template, log sets, finish.

Finishing a session and recording PRs are separate failure domains: the
completion is committed first, then the PR engine runs in its own
transaction. A PR failure is rolled back and reported without undoing the
completion.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.constants import DEFAULT_HISTORY_LIMIT, MAX_SETS_PER_EXERCISE, UNKNOWN_EXERCISE_NAME
from app.core.exceptions import (
    LimitExceeded,
    RecordStoreError,
    SessionAlreadyFinished,
    SessionNotFound,
    SetNotFound,
    TemplateNotFound,
)
from app.models.session import SessionExercise, SessionSet, TrainingSession
from app.models.template import TemplateExercise, WorkoutTemplate
from app.schemas.session import SessionFinishResult
from app.schemas.snapshot import SessionSnapshot
from app.services.pr_engine import evaluate_session
from app.services.record_store import RecordStore, SqlAlchemyRecordStore

logger = logging.getLogger(__name__)


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def elapsed_seconds(started_at: datetime, ended_at: datetime) -> int:
    delta = _as_utc(ended_at) - _as_utc(started_at)
    return max(0, int(delta.total_seconds()))


async def load_session(
    db: AsyncSession, user_id: uuid.UUID, session_id: uuid.UUID
) -> TrainingSession:
    """Session with exercises and sets loaded in order_index order."""
    result = await db.execute(
        select(TrainingSession)
        .where(TrainingSession.id == session_id, TrainingSession.user_id == user_id)
        .options(selectinload(TrainingSession.exercises).selectinload(SessionExercise.sets))
        .execution_options(populate_existing=True)
    )
    session = result.scalar_one_or_none()
    if session is None:
        raise SessionNotFound(session_id)
    return session


async def list_sessions(
    db: AsyncSession, user_id: uuid.UUID, limit: int = DEFAULT_HISTORY_LIMIT
) -> list[TrainingSession]:
    result = await db.execute(
        select(TrainingSession)
        .where(TrainingSession.user_id == user_id)
        .order_by(TrainingSession.started_at.desc())
        .limit(limit)
    )
    return list(result.scalars().all())


async def start_session(
    db: AsyncSession, user_id: uuid.UUID, template_id: uuid.UUID
) -> TrainingSession:
    """
    Create a session from a template. Exercise names are copied so later catalog
    renames don't rewrite history; each template exercise gets sets_count
    placeholder sets pre-filled with its targets.
    """
    result = await db.execute(
        select(WorkoutTemplate)
        .where(WorkoutTemplate.id == template_id, WorkoutTemplate.user_id == user_id)
        .options(selectinload(WorkoutTemplate.exercises).selectinload(TemplateExercise.exercise))
    )
    template = result.scalar_one_or_none()
    if template is None:
        raise TemplateNotFound(template_id)

    session = TrainingSession(user_id=user_id, template_id=template.id, workout_name=template.name)
    db.add(session)
    await db.flush()

    for entry in sorted(template.exercises, key=lambda e: e.order_index):
        session_exercise = SessionExercise(
            session_id=session.id,
            exercise_id=entry.exercise_id,
            exercise_name=entry.exercise.name if entry.exercise else UNKNOWN_EXERCISE_NAME,
            order_index=entry.order_index,
        )
        db.add(session_exercise)
        await db.flush()
        db.add_all(
            [
                SessionSet(
                    session_exercise_id=session_exercise.id,
                    order_index=i,
                    weight=entry.target_weight,
                    reps=entry.target_reps,
                    is_completed=False,
                )
                for i in range(entry.sets_count)
            ]
        )
    await db.flush()
    logger.info(
        "session_started session_id=%s template_id=%s exercises=%s",
        session.id,
        template.id,
        len(template.exercises),
    )
    return await load_session(db, user_id, session.id)


async def add_set(
    db: AsyncSession,
    user_id: uuid.UUID,
    session_id: uuid.UUID,
    session_exercise_id: uuid.UUID,
) -> SessionSet:
    """Append a set that repeats the last set's weight/reps."""
    result = await db.execute(
        select(SessionExercise)
        .join(TrainingSession, TrainingSession.id == SessionExercise.session_id)
        .where(
            SessionExercise.id == session_exercise_id,
            SessionExercise.session_id == session_id,
            TrainingSession.user_id == user_id,
        )
        .options(selectinload(SessionExercise.sets))
    )
    session_exercise = result.scalar_one_or_none()
    if session_exercise is None:
        raise SessionNotFound(session_id)

    existing = session_exercise.sets
    if len(existing) >= MAX_SETS_PER_EXERCISE:
        raise LimitExceeded(f"Maximum {MAX_SETS_PER_EXERCISE} sets per exercise per session.")
    last = existing[-1] if existing else None
    next_order = len(existing)

    set_ = SessionSet(
        session_exercise_id=session_exercise_id,
        order_index=next_order,
        weight=last.weight if last else None,
        reps=last.reps if last else None,
        is_completed=False,
    )
    db.add(set_)
    await db.flush()
    await db.refresh(set_)
    return set_


async def update_set(
    db: AsyncSession,
    user_id: uuid.UUID,
    session_id: uuid.UUID,
    set_id: uuid.UUID,
    changes: dict,
) -> SessionSet:
    result = await db.execute(
        select(SessionSet)
        .join(SessionExercise, SessionExercise.id == SessionSet.session_exercise_id)
        .join(TrainingSession, TrainingSession.id == SessionExercise.session_id)
        .where(
            SessionSet.id == set_id,
            SessionExercise.session_id == session_id,
            TrainingSession.user_id == user_id,
        )
    )
    set_ = result.scalar_one_or_none()
    if set_ is None:
        raise SetNotFound(set_id)
    for key, value in changes.items():
        setattr(set_, key, value)
    await db.flush()
    await db.refresh(set_)
    return set_


async def finish_session(
    db: AsyncSession,
    user_id: uuid.UUID,
    session_id: uuid.UUID,
    duration_seconds: int | None = None,
    store: RecordStore | None = None,
) -> SessionFinishResult:
    """Mark the session finished, then record any new PRs it produced."""
    session = await load_session(db, user_id, session_id)
    if session.completed_at is not None:
        raise SessionAlreadyFinished(session_id)

    completed_at = datetime.now(timezone.utc)
    if duration_seconds is None:
        duration_seconds = elapsed_seconds(session.started_at, completed_at)
    session.completed_at = completed_at
    session.duration_seconds = duration_seconds
    # Build the snapshot before committing; a later rollback expires the ORM rows
    snapshot = SessionSnapshot.model_validate(session)
    await db.commit()
    logger.info("session_finished session_id=%s duration_seconds=%s", session_id, duration_seconds)

    if store is None:
        store = SqlAlchemyRecordStore(db)
    try:
        pr_count = await evaluate_session(snapshot, user_id, store)
        await db.commit()
    except (RecordStoreError, SQLAlchemyError):
        await db.rollback()
        logger.exception("pr_recording_failed session_id=%s user_id=%s", session_id, user_id)
        return SessionFinishResult(
            session_id=session_id,
            completed_at=completed_at,
            duration_seconds=duration_seconds,
            pr_count=0,
            pr_error=True,
        )

    return SessionFinishResult(
        session_id=session_id,
        completed_at=completed_at,
        duration_seconds=duration_seconds,
        pr_count=pr_count,
    )
