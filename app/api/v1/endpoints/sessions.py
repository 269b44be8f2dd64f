"""Training session endpoints: history, detail, set logging, finish."""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user_id, get_record_store
from app.core.constants import DEFAULT_HISTORY_LIMIT
from app.core.exceptions import LimitExceeded, NotFoundError, SessionAlreadyFinished
from app.db.session import get_db
from app.schemas.session import (
    SessionFinish,
    SessionFinishResult,
    SessionSetRead,
    SessionSetUpdate,
    TrainingSessionRead,
    TrainingSessionSummary,
)
from app.services import sessions as session_service
from app.services.record_store import SqlAlchemyRecordStore

router = APIRouter()


@router.get("", response_model=list[TrainingSessionSummary])
async def list_sessions(
    db: AsyncSession = Depends(get_db),
    user_id: uuid.UUID = Depends(get_current_user_id),
    limit: int = Query(DEFAULT_HISTORY_LIMIT, ge=1, le=200),
):
    """Session history, newest first."""
    return await session_service.list_sessions(db, user_id, limit=limit)


@router.get("/{session_id}", response_model=TrainingSessionRead)
async def get_session(
    session_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user_id: uuid.UUID = Depends(get_current_user_id),
):
    """A session with its exercises and sets in order."""
    try:
        return await session_service.load_session(db, user_id, session_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from None


@router.post(
    "/{session_id}/exercises/{session_exercise_id}/sets",
    response_model=SessionSetRead,
    status_code=201,
)
async def add_set(
    session_id: uuid.UUID,
    session_exercise_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user_id: uuid.UUID = Depends(get_current_user_id),
):
    """Append a set, pre-filled from the previous one."""
    try:
        return await session_service.add_set(db, user_id, session_id, session_exercise_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from None
    except LimitExceeded as e:
        raise HTTPException(status_code=400, detail=str(e)) from None


@router.patch("/{session_id}/sets/{set_id}", response_model=SessionSetRead)
async def update_set(
    session_id: uuid.UUID,
    set_id: uuid.UUID,
    payload: SessionSetUpdate,
    db: AsyncSession = Depends(get_db),
    user_id: uuid.UUID = Depends(get_current_user_id),
):
    """Log weight/reps/RPE or toggle completion on a set."""
    try:
        return await session_service.update_set(
            db, user_id, session_id, set_id, payload.model_dump(exclude_unset=True)
        )
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from None


@router.post("/{session_id}/finish", response_model=SessionFinishResult)
async def finish_session(
    session_id: uuid.UUID,
    payload: SessionFinish | None = None,
    db: AsyncSession = Depends(get_db),
    user_id: uuid.UUID = Depends(get_current_user_id),
    store: SqlAlchemyRecordStore = Depends(get_record_store),
):
    """
    Finish the session and record new personal records.
    pr_count is the number of new records; pr_error is true when recording
    them failed (the session is still marked finished).
    """
    duration = payload.duration_seconds if payload else None
    try:
        return await session_service.finish_session(
            db, user_id, session_id, duration_seconds=duration, store=store
        )
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from None
    except SessionAlreadyFinished as e:
        raise HTTPException(status_code=409, detail=str(e)) from None
