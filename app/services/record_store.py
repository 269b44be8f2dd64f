"""Record store: narrow read/append interface over personal_records.

The PR engine only needs two capabilities, a bulk read of existing rows for
(user, exercise ids) and a bulk append. Anything implementing ``RecordStore``
can be passed to it; ``SqlAlchemyRecordStore`` is the database-backed one.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Collection, Sequence
from typing import NamedTuple, Protocol

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.constants import DEFAULT_RECORDS_LIMIT
from app.core.exceptions import StoreReadFailure, StoreWriteFailure
from app.models.personal_record import PersonalRecord
from app.schemas.personal_record import PersonalRecordCreate

logger = logging.getLogger(__name__)


class RecordBaseline(NamedTuple):
    exercise_id: uuid.UUID
    weight: float


class RecordStore(Protocol):
    async def fetch_records(
        self, user_id: uuid.UUID, exercise_ids: Collection[uuid.UUID]
    ) -> Sequence[RecordBaseline]:
        """All existing rows for user_id whose exercise_id is in exercise_ids, unordered."""
        ...

    async def insert_records(self, rows: Sequence[PersonalRecordCreate]) -> None:
        """Persist every row or none of them."""
        ...


class SqlAlchemyRecordStore:
    """RecordStore backed by the personal_records table.

    Inserts are flushed inside the caller's transaction; committing (or rolling
    back) is left to the caller so the batch lands atomically.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def fetch_records(
        self, user_id: uuid.UUID, exercise_ids: Collection[uuid.UUID]
    ) -> list[RecordBaseline]:
        if not exercise_ids:
            return []
        stmt = select(PersonalRecord.exercise_id, PersonalRecord.weight).where(
            PersonalRecord.user_id == user_id,
            PersonalRecord.exercise_id.in_(list(exercise_ids)),
        )
        try:
            result = await self.db.execute(stmt)
        except SQLAlchemyError as exc:
            raise StoreReadFailure(f"could not read personal records for user {user_id}") from exc
        return [RecordBaseline(row.exercise_id, float(row.weight)) for row in result.all()]

    async def insert_records(self, rows: Sequence[PersonalRecordCreate]) -> None:
        if not rows:
            return
        self.db.add_all([PersonalRecord(**row.model_dump()) for row in rows])
        try:
            await self.db.flush()
        except SQLAlchemyError as exc:
            raise StoreWriteFailure(f"could not insert {len(rows)} personal record(s)") from exc
        logger.debug("personal_records_inserted count=%s", len(rows))

    async def current_record(
        self, user_id: uuid.UUID, exercise_id: uuid.UUID
    ) -> PersonalRecord | None:
        """Heaviest row for (user, exercise); the earliest wins a tie."""
        result = await self.db.execute(
            select(PersonalRecord)
            .where(PersonalRecord.user_id == user_id, PersonalRecord.exercise_id == exercise_id)
            .order_by(PersonalRecord.weight.desc(), PersonalRecord.achieved_at.asc())
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def list_records(
        self,
        user_id: uuid.UUID,
        exercise_id: uuid.UUID | None = None,
        limit: int = DEFAULT_RECORDS_LIMIT,
    ) -> list[PersonalRecord]:
        stmt = select(PersonalRecord).where(PersonalRecord.user_id == user_id)
        if exercise_id is not None:
            stmt = stmt.where(PersonalRecord.exercise_id == exercise_id)
        stmt = stmt.order_by(PersonalRecord.achieved_at.desc()).limit(limit)
        result = await self.db.execute(stmt)
        return list(result.scalars().all())
