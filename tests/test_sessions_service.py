import uuid

import pytest

from app.core.exceptions import SessionAlreadyFinished, SetNotFound, TemplateNotFound
from app.services import sessions as session_service
from app.services.progress import exercise_progress
from app.services.record_store import SqlAlchemyRecordStore

from tests.factories import FakeRecordStore


async def _complete(db, user_id, session, exercise_index, values):
    """Log (weight, reps) onto the first len(values) sets of an exercise and complete them."""
    exercise = session.exercises[exercise_index]
    for set_, (weight, reps) in zip(exercise.sets, values):
        await session_service.update_set(
            db, user_id, session.id, set_.id, {"weight": weight, "reps": reps, "is_completed": True}
        )
    await db.commit()


async def test_start_session_copies_template(db, user_id, bench_template):
    session = await session_service.start_session(db, user_id, bench_template["template"].id)

    assert session.workout_name == "Push & Legs"
    assert session.completed_at is None
    assert [e.exercise_name for e in session.exercises] == ["Bench Press", "Back Squat"]
    bench_sets = session.exercises[0].sets
    assert [s.order_index for s in bench_sets] == [0, 1, 2]
    assert all(float(s.weight) == 100.0 and s.reps == 5 and not s.is_completed for s in bench_sets)
    squat_sets = session.exercises[1].sets
    assert len(squat_sets) == 2
    assert all(s.weight is None for s in squat_sets)


async def test_start_session_rejects_other_users_template(db, bench_template):
    with pytest.raises(TemplateNotFound):
        await session_service.start_session(db, uuid.uuid4(), bench_template["template"].id)


async def test_add_set_repeats_last_values(db, user_id, bench_template):
    session = await session_service.start_session(db, user_id, bench_template["template"].id)
    bench = session.exercises[0]
    await session_service.update_set(db, user_id, session.id, bench.sets[-1].id, {"weight": 105})

    new_set = await session_service.add_set(db, user_id, session.id, bench.id)
    assert new_set.order_index == 3
    assert float(new_set.weight) == 105.0
    assert new_set.reps == 5
    assert new_set.is_completed is False


async def test_update_set_in_someone_elses_session_is_not_found(db, user_id, bench_template):
    session = await session_service.start_session(db, user_id, bench_template["template"].id)
    set_id = session.exercises[0].sets[0].id

    with pytest.raises(SetNotFound):
        await session_service.update_set(db, uuid.uuid4(), session.id, set_id, {"reps": 3})


async def test_finish_records_new_prs(db, user_id, bench_template):
    session = await session_service.start_session(db, user_id, bench_template["template"].id)
    await _complete(db, user_id, session, 0, [(80, 5), (90, 5), (100, 5)])

    result = await session_service.finish_session(db, user_id, session.id, duration_seconds=3600)

    assert result.pr_count == 3
    assert result.pr_error is False
    assert result.duration_seconds == 3600
    records = await SqlAlchemyRecordStore(db).list_records(user_id)
    assert sorted(float(r.weight) for r in records) == [80.0, 90.0, 100.0]
    assert {r.session_id for r in records} == {session.id}


async def test_finish_computes_duration_when_not_given(db, user_id, bench_template):
    session = await session_service.start_session(db, user_id, bench_template["template"].id)

    result = await session_service.finish_session(db, user_id, session.id, store=FakeRecordStore())
    assert result.duration_seconds is not None
    assert result.duration_seconds >= 0
    assert result.pr_count == 0


async def test_finish_twice_is_rejected(db, user_id, bench_template):
    session = await session_service.start_session(db, user_id, bench_template["template"].id)
    await session_service.finish_session(db, user_id, session.id, store=FakeRecordStore())

    with pytest.raises(SessionAlreadyFinished):
        await session_service.finish_session(db, user_id, session.id, store=FakeRecordStore())


async def test_pr_failure_does_not_undo_completion(db, user_id, bench_template):
    session = await session_service.start_session(db, user_id, bench_template["template"].id)
    await _complete(db, user_id, session, 0, [(100, 5)])
    store = FakeRecordStore(fail_write=True)

    result = await session_service.finish_session(db, user_id, session.id, store=store)

    assert result.pr_error is True
    assert result.pr_count == 0
    reloaded = await session_service.load_session(db, user_id, session.id)
    assert reloaded.completed_at is not None


async def test_second_session_at_same_weight_is_not_a_pr(db, user_id, bench_template):
    store = FakeRecordStore()
    first = await session_service.start_session(db, user_id, bench_template["template"].id)
    await _complete(db, user_id, first, 0, [(100, 5)])
    assert (await session_service.finish_session(db, user_id, first.id, store=store)).pr_count == 1

    second = await session_service.start_session(db, user_id, bench_template["template"].id)
    await _complete(db, user_id, second, 0, [(100, 5), (102.5, 3)])
    result = await session_service.finish_session(db, user_id, second.id, store=store)
    assert result.pr_count == 1
    assert store.write_calls[-1][0].weight == 102.5


async def test_history_is_newest_first(db, user_id, bench_template):
    first = await session_service.start_session(db, user_id, bench_template["template"].id)
    second = await session_service.start_session(db, user_id, bench_template["template"].id)
    first.started_at = first.started_at.replace(year=2020)
    await db.commit()

    history = await session_service.list_sessions(db, user_id)
    assert [s.id for s in history] == [second.id, first.id]


async def test_progress_groups_completed_sets_by_day(db, user_id, bench_template):
    session = await session_service.start_session(db, user_id, bench_template["template"].id)
    await _complete(db, user_id, session, 0, [(80, 5), (90, 5)])

    points = await exercise_progress(db, user_id, bench_template["bench"].id)

    assert len(points) == 1
    assert points[0].weight == 90.0
    assert points[0].volume == 850.0
    assert await exercise_progress(db, user_id, bench_template["squat"].id) == []

