"""Workout templates - define, copy, and start sessions from them."""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.api.deps import get_current_user_id
from app.core.exceptions import ExerciseNotFound, TemplateNotFound
from app.db.session import get_db
from app.models.exercise import Exercise
from app.models.template import TemplateExercise, WorkoutTemplate
from app.schemas.session import TrainingSessionRead
from app.schemas.template import WorkoutTemplateCreate, WorkoutTemplateRead
from app.services.sessions import start_session

router = APIRouter()


async def _load_template(
    db: AsyncSession, user_id: uuid.UUID, template_id: uuid.UUID
) -> WorkoutTemplate:
    result = await db.execute(
        select(WorkoutTemplate)
        .options(selectinload(WorkoutTemplate.exercises))
        .where(WorkoutTemplate.id == template_id, WorkoutTemplate.user_id == user_id)
        .execution_options(populate_existing=True)
    )
    t = result.scalar_one_or_none()
    if not t:
        raise HTTPException(status_code=404, detail="Template not found")
    return t


@router.get("", response_model=list[WorkoutTemplateRead])
async def list_templates(
    db: AsyncSession = Depends(get_db),
    user_id: uuid.UUID = Depends(get_current_user_id),
    skip: int = 0,
    limit: int = 50,
):
    """List the caller's workout templates, newest first."""
    result = await db.execute(
        select(WorkoutTemplate)
        .options(selectinload(WorkoutTemplate.exercises))
        .where(WorkoutTemplate.user_id == user_id)
        .order_by(WorkoutTemplate.created_at.desc())
        .offset(skip)
        .limit(limit)
    )
    return list(result.scalars().all())


@router.post("", response_model=WorkoutTemplateRead, status_code=201)
async def create_template(
    payload: WorkoutTemplateCreate,
    db: AsyncSession = Depends(get_db),
    user_id: uuid.UUID = Depends(get_current_user_id),
):
    """Create a template; exercise order follows the payload."""
    exercise_ids = {e.exercise_id for e in payload.exercises}
    if exercise_ids:
        found = await db.execute(
            select(Exercise.id).where(
                Exercise.id.in_(list(exercise_ids)),
                or_(Exercise.user_id.is_(None), Exercise.user_id == user_id),
            )
        )
        missing = exercise_ids - set(found.scalars().all())
        if missing:
            raise ExerciseNotFound(next(iter(missing)))

    t = WorkoutTemplate(
        user_id=user_id,
        name=payload.name,
        description=payload.description,
        color=payload.color,
    )
    db.add(t)
    await db.flush()
    for i, entry in enumerate(payload.exercises):
        db.add(TemplateExercise(template_id=t.id, order_index=i, **entry.model_dump()))
    await db.flush()
    return await _load_template(db, user_id, t.id)


@router.get("/{template_id}", response_model=WorkoutTemplateRead)
async def get_template(
    template_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user_id: uuid.UUID = Depends(get_current_user_id),
):
    """Get a template with its exercises."""
    return await _load_template(db, user_id, template_id)


@router.delete("/{template_id}", status_code=204)
async def delete_template(
    template_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user_id: uuid.UUID = Depends(get_current_user_id),
):
    """Delete a template. Sessions started from it keep their history."""
    t = await _load_template(db, user_id, template_id)
    await db.delete(t)
    return None


@router.post("/{template_id}/duplicate", response_model=WorkoutTemplateRead, status_code=201)
async def duplicate_template(
    template_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user_id: uuid.UUID = Depends(get_current_user_id),
):
    """Copy a template and all of its exercise targets under a new name."""
    source = await _load_template(db, user_id, template_id)
    copy = WorkoutTemplate(
        user_id=user_id,
        name=f"{source.name} (copy)",
        description=source.description,
        color=source.color,
    )
    db.add(copy)
    await db.flush()
    for entry in source.exercises:
        db.add(
            TemplateExercise(
                template_id=copy.id,
                exercise_id=entry.exercise_id,
                order_index=entry.order_index,
                sets_count=entry.sets_count,
                target_reps=entry.target_reps,
                target_weight=entry.target_weight,
                rest_seconds=entry.rest_seconds,
                notes=entry.notes,
            )
        )
    await db.flush()
    return await _load_template(db, user_id, copy.id)


@router.post("/{template_id}/start", response_model=TrainingSessionRead, status_code=201)
async def start_session_from_template(
    template_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user_id: uuid.UUID = Depends(get_current_user_id),
):
    """Start a training session with placeholder sets from the template targets."""
    try:
        return await start_session(db, user_id, template_id)
    except TemplateNotFound:
        raise HTTPException(status_code=404, detail="Template not found") from None
