"""Personal records - history, current best, and progress per exercise."""

import uuid

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user_id, get_record_store
from app.core.constants import DEFAULT_RECORDS_LIMIT
from app.db.session import get_db
from app.schemas.personal_record import ExerciseProgress, PersonalRecordRead
from app.services.progress import exercise_progress
from app.services.record_store import SqlAlchemyRecordStore

router = APIRouter()


@router.get("", response_model=list[PersonalRecordRead])
async def list_records(
    exercise_id: uuid.UUID | None = None,
    limit: int = Query(DEFAULT_RECORDS_LIMIT, ge=1, le=500),
    user_id: uuid.UUID = Depends(get_current_user_id),
    store: SqlAlchemyRecordStore = Depends(get_record_store),
):
    """Every record row (newest first), optionally for one exercise."""
    return await store.list_records(user_id, exercise_id=exercise_id, limit=limit)


@router.get("/exercises/{exercise_id}", response_model=PersonalRecordRead)
async def current_record(
    exercise_id: uuid.UUID,
    user_id: uuid.UUID = Depends(get_current_user_id),
    store: SqlAlchemyRecordStore = Depends(get_record_store),
):
    """The current PR: heaviest weight over the whole record history."""
    record = await store.current_record(user_id, exercise_id)
    if record is None:
        raise HTTPException(status_code=404, detail="No personal record for this exercise")
    return record


@router.get("/exercises/{exercise_id}/progress", response_model=ExerciseProgress)
async def progress(
    exercise_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user_id: uuid.UUID = Depends(get_current_user_id),
    store: SqlAlchemyRecordStore = Depends(get_record_store),
):
    """Max weight and volume per training day, plus the current PR."""
    record = await store.current_record(user_id, exercise_id)
    points = await exercise_progress(db, user_id, exercise_id)
    return ExerciseProgress(
        exercise_id=exercise_id,
        current_record=PersonalRecordRead.model_validate(record) if record else None,
        points=points,
    )
