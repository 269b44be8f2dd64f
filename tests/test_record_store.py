import uuid

import pytest
from sqlalchemy import select
from sqlalchemy.exc import OperationalError

from app.core.exceptions import StoreReadFailure, StoreWriteFailure
from app.models import Exercise, PersonalRecord
from app.services.pr_engine import evaluate_session
from app.services.record_store import SqlAlchemyRecordStore

from tests.factories import make_exercise, make_record, make_snapshot


@pytest.fixture
async def exercises(db):
    bench = Exercise(name="Bench Press")
    row = Exercise(name="Barbell Row")
    db.add_all([bench, row])
    await db.commit()
    return bench, row


async def test_insert_then_fetch_filters_by_user_and_exercise(db, user_id, exercises):
    bench, row = exercises
    store = SqlAlchemyRecordStore(db)
    await store.insert_records(
        [
            make_record(user_id, bench.id, 100),
            make_record(user_id, bench.id, 90),
            make_record(user_id, row.id, 70),
            make_record(uuid.uuid4(), bench.id, 150),
        ]
    )
    await db.commit()

    rows = await store.fetch_records(user_id, {bench.id})
    assert sorted(r.weight for r in rows) == [90.0, 100.0]
    assert all(r.exercise_id == bench.id for r in rows)


async def test_fetch_with_no_ids_returns_nothing(db, user_id):
    assert await SqlAlchemyRecordStore(db).fetch_records(user_id, set()) == []


async def test_inserted_rows_get_id_and_timestamp(db, user_id, exercises):
    bench, _ = exercises
    await SqlAlchemyRecordStore(db).insert_records([make_record(user_id, bench.id, 100, reps=3)])
    await db.commit()

    record = (await db.execute(select(PersonalRecord))).scalar_one()
    assert record.id is not None
    assert record.achieved_at is not None
    assert record.session_id is None
    assert float(record.volume) == 300.0


async def test_current_record_is_heaviest_row(db, user_id, exercises):
    bench, _ = exercises
    store = SqlAlchemyRecordStore(db)
    await store.insert_records(
        [
            make_record(user_id, bench.id, 95),
            make_record(user_id, bench.id, 110),
            make_record(user_id, bench.id, 100),
        ]
    )
    await db.commit()

    record = await store.current_record(user_id, bench.id)
    assert float(record.weight) == 110.0
    assert await store.current_record(uuid.uuid4(), bench.id) is None


async def test_list_records_can_filter_by_exercise(db, user_id, exercises):
    bench, row = exercises
    store = SqlAlchemyRecordStore(db)
    await store.insert_records(
        [make_record(user_id, bench.id, 100), make_record(user_id, row.id, 60)]
    )
    await db.commit()

    assert len(await store.list_records(user_id)) == 2
    only_row = await store.list_records(user_id, exercise_id=row.id)
    assert [r.exercise_id for r in only_row] == [row.id]


async def test_engine_against_database_store(db, user_id, exercises):
    bench, row = exercises
    store = SqlAlchemyRecordStore(db)
    await store.insert_records([make_record(user_id, bench.id, 120), make_record(user_id, bench.id, 80)])
    await db.commit()

    snapshot = make_snapshot(
        make_exercise(bench.id, [(100, 5), (125, 1)]),
        make_exercise(row.id, [(60, 8), (65, 8)], name="Barbell Row", order_index=1),
    )
    assert await evaluate_session(snapshot, user_id, store) == 3
    await db.commit()

    weights = sorted(
        float(r.weight) for r in await store.list_records(user_id) if r.session_id == snapshot.id
    )
    assert weights == [60.0, 65.0, 125.0]


async def test_read_error_becomes_store_read_failure(db, user_id, monkeypatch):
    async def broken_execute(*args, **kwargs):
        raise OperationalError("SELECT", {}, Exception("connection lost"))

    monkeypatch.setattr(db, "execute", broken_execute)
    with pytest.raises(StoreReadFailure):
        await SqlAlchemyRecordStore(db).fetch_records(user_id, {uuid.uuid4()})


async def test_write_error_becomes_store_write_failure(db, user_id, monkeypatch):
    async def broken_flush(*args, **kwargs):
        raise OperationalError("INSERT", {}, Exception("disk full"))

    monkeypatch.setattr(db, "flush", broken_flush)
    with pytest.raises(StoreWriteFailure):
        await SqlAlchemyRecordStore(db).insert_records([make_record(user_id, uuid.uuid4(), 100)])
