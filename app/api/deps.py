"""Shared endpoint dependencies."""

import uuid

from fastapi import Depends, Header, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.session import get_db
from app.services.record_store import SqlAlchemyRecordStore


def get_current_user_id(
    request: Request,
    x_user_id: str | None = Header(default=None),
) -> uuid.UUID:
    """Caller identity from the X-User-ID header (authentication lives upstream)."""
    if not x_user_id:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing X-User-ID header")
    try:
        user_id = uuid.UUID(x_user_id)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid X-User-ID header",
        ) from None
    request.state.user_id = user_id
    return user_id


def get_record_store(db: AsyncSession = Depends(get_db)) -> SqlAlchemyRecordStore:
    return SqlAlchemyRecordStore(db)
