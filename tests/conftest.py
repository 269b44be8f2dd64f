"""
Point the app at in-memory SQLite before anything imports app.db.session,
then provide a fresh schema per test.
"""
import os

os.environ.setdefault("DATABASE_URL_OVERRIDE", "sqlite+aiosqlite://")

import uuid

import httpx
import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.db.base import Base
from app.db.session import get_db
from app.main import app
from app.models import Exercise, TemplateExercise, WorkoutTemplate

from tests.factories import FakeRecordStore


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_maker(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest.fixture
async def db(session_maker):
    async with session_maker() as session:
        yield session


@pytest.fixture
async def client(session_maker):
    async def override_get_db():
        async with session_maker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def user_id():
    return uuid.uuid4()


@pytest.fixture
def fake_store():
    return FakeRecordStore()


@pytest.fixture
async def bench_template(db, user_id):
    """Bench (3 x 5 @ 100) then Squat (2 x 5, no target weight)."""
    bench = Exercise(name="Bench Press", muscle_group="chest")
    squat = Exercise(name="Back Squat", muscle_group="legs")
    db.add_all([bench, squat])
    await db.flush()
    template = WorkoutTemplate(user_id=user_id, name="Push & Legs")
    db.add(template)
    await db.flush()
    db.add_all(
        [
            TemplateExercise(
                template_id=template.id,
                exercise_id=bench.id,
                order_index=0,
                sets_count=3,
                target_reps=5,
                target_weight=100,
            ),
            TemplateExercise(
                template_id=template.id,
                exercise_id=squat.id,
                order_index=1,
                sets_count=2,
                target_reps=5,
            ),
        ]
    )
    await db.commit()
    return {"template": template, "bench": bench, "squat": squat}
