"""PR engine: find new best-weight lifts in a finished session and record them.

One bulk read of the user's existing records for the exercises touched, an
in-memory comparison, then one bulk insert. A set only counts when it is
completed and has both a positive weight and positive reps. A new record must
strictly beat the best weight known so far (ties don't count), and a session
can produce several records for the same exercise when weight climbs set over
set (e.g. 80 -> 90 -> 100 yields three rows).

Store failures are not caught here; they propagate to the caller.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Iterable

from app.schemas.personal_record import PersonalRecordCreate
from app.schemas.snapshot import SessionSnapshot, SetSnapshot
from app.services.record_store import RecordBaseline, RecordStore

logger = logging.getLogger(__name__)


def is_eligible(set_: SetSnapshot) -> bool:
    """Completed, with weight and reps both entered and non-zero."""
    return bool(set_.is_completed and set_.weight and set_.reps)


def eligible_exercise_ids(snapshot: SessionSnapshot) -> set[uuid.UUID]:
    return {
        exercise.exercise_id
        for exercise in snapshot.exercises
        if any(is_eligible(s) for s in exercise.sets)
    }


def best_weights(rows: Iterable[RecordBaseline]) -> dict[uuid.UUID, float]:
    """Max weight per exercise over every row (rows may arrive in any order)."""
    best: dict[uuid.UUID, float] = {}
    for row in rows:
        if row.weight > best.get(row.exercise_id, 0):
            best[row.exercise_id] = row.weight
    return best


def find_new_records(
    snapshot: SessionSnapshot,
    user_id: uuid.UUID,
    baselines: dict[uuid.UUID, float],
) -> list[PersonalRecordCreate]:
    """Candidate rows, in snapshot order, for every set that beats the running best."""
    candidates: list[PersonalRecordCreate] = []
    for exercise in snapshot.exercises:
        # Each block starts from the stored baseline, even for a repeated exercise_id
        best = baselines.get(exercise.exercise_id, 0)
        for set_ in exercise.sets:
            if not is_eligible(set_) or set_.weight <= best:
                continue
            best = set_.weight
            candidates.append(
                PersonalRecordCreate(
                    user_id=user_id,
                    exercise_id=exercise.exercise_id,
                    weight=set_.weight,
                    reps=set_.reps,
                    volume=set_.weight * set_.reps,
                    session_id=snapshot.id,
                )
            )
    return candidates


async def evaluate_session(
    snapshot: SessionSnapshot,
    user_id: uuid.UUID,
    store: RecordStore,
) -> int:
    """Record every new PR in the session. Returns the number of rows inserted."""
    exercise_ids = eligible_exercise_ids(snapshot)
    if not exercise_ids:
        logger.debug("pr_evaluation_skipped session_id=%s reason=no_eligible_sets", snapshot.id)
        return 0

    rows = await store.fetch_records(user_id, exercise_ids)
    baselines = best_weights(rows)
    logger.debug(
        "pr_baselines_loaded session_id=%s exercises=%s rows=%s",
        snapshot.id,
        len(exercise_ids),
        len(rows),
    )

    candidates = find_new_records(snapshot, user_id, baselines)
    if candidates:
        await store.insert_records(candidates)
    logger.info(
        "pr_evaluation_complete session_id=%s user_id=%s new_records=%s",
        snapshot.id,
        user_id,
        len(candidates),
    )
    return len(candidates)
