"""Personal record tests: unconditional upsert, per-type field requirements, list order, delete, best lifts."""

import tempfile
from datetime import date
from pathlib import Path

import pytest
from pydantic import ValidationError

from liftstats.exceptions import RecordNotFoundError
from liftstats.models import KnownExercise, LogEntry, PersonalRecordInput
from liftstats.records import PersonalRecordTracker, build_record, derive_best_lifts
from liftstats.storage import RecordStore


@pytest.fixture
def tracker():
    with tempfile.TemporaryDirectory() as tmp:
        store = RecordStore(str(Path(tmp) / "records.db"))
        yield PersonalRecordTracker(store)
        store.close()


def test_upsert_overwrites_even_when_worse(tracker: PersonalRecordTracker) -> None:
    """An 80kg 1RM followed by a 75kg 1RM leaves only the 75kg record."""
    first = tracker.upsert("u1", "bench", "one_rep_max", {"weight_kg": 80, "reps": 1}, date(2024, 1, 1))
    second = tracker.upsert("u1", "bench", "one_rep_max", {"weight_kg": 75, "reps": 1}, date(2024, 2, 1))
    records = tracker.list("u1", "bench")
    assert len(records) == 1
    assert records[0].weight_kg == 75
    assert records[0].achieved_date == date(2024, 2, 1)
    # key keeps its identity across overwrites
    assert second.record_id == first.record_id == records[0].record_id


def test_keys_are_independent(tracker: PersonalRecordTracker) -> None:
    tracker.upsert("u1", "bench", "one_rep_max", {"weight_kg": 100, "reps": 1}, date(2024, 1, 1))
    tracker.upsert("u1", "bench", "five_rep_max", {"weight_kg": 85, "reps": 5}, date(2024, 1, 3))
    tracker.upsert("u2", "bench", "one_rep_max", {"weight_kg": 60, "reps": 1}, date(2024, 1, 2))
    tracker.upsert("u1", "squat", "one_rep_max", {"weight_kg": 140, "reps": 1}, date(2024, 1, 2))
    records = tracker.list("u1", "bench")
    # most recently achieved first
    assert [r.record_type for r in records] == ["five_rep_max", "one_rep_max"]
    assert len(tracker.list("u2", "bench")) == 1
    assert tracker.list("u3", "bench") == []


def test_max_volume_total_computed_at_submission(tracker: PersonalRecordTracker) -> None:
    rec = tracker.upsert("u1", "squat", "max_volume", {"weight_kg": 100, "reps": 5, "sets": 5}, date(2024, 1, 1))
    assert rec.total_volume == 2500
    stored = tracker.list("u1", "squat")[0]
    assert stored.total_volume == 2500
    assert stored.sets == 5


def test_required_fields_per_record_type() -> None:
    with pytest.raises(ValidationError):
        PersonalRecordInput(user_id="u", exercise_id="e", record_type="one_rep_max", reps=1, achieved_date=date(2024, 1, 1))
    with pytest.raises(ValidationError):
        PersonalRecordInput(user_id="u", exercise_id="e", record_type="max_volume", weight_kg=50, reps=5, achieved_date=date(2024, 1, 1))
    with pytest.raises(ValidationError):
        PersonalRecordInput(user_id="u", exercise_id="e", record_type="endurance_duration", achieved_date=date(2024, 1, 1))
    with pytest.raises(ValidationError):
        PersonalRecordInput(user_id="u", exercise_id="e", record_type="max_reps", weight_kg=10, achieved_date=date(2024, 1, 1))
    with pytest.raises(ValidationError):
        PersonalRecordInput(user_id="u", exercise_id="e", record_type="not_a_type", reps=1, achieved_date=date(2024, 1, 1))
    # bodyweight max reps needs no weight
    ok = PersonalRecordInput(user_id="u", exercise_id="e", record_type="max_reps", reps=25, achieved_date=date(2024, 1, 1))
    assert build_record(ok).total_volume is None
    plank = PersonalRecordInput(
        user_id="u", exercise_id="plank", record_type="endurance_duration",
        duration_seconds=180, notes="  ", achieved_date=date(2024, 1, 1),
    )
    assert plank.notes is None


def test_delete(tracker: PersonalRecordTracker) -> None:
    rec = tracker.upsert("u1", "plank", "endurance_duration", {"duration_seconds": 120}, date(2024, 1, 1))
    assert tracker.get(rec.record_id).duration_seconds == 120
    assert tracker.delete(rec.record_id) is True
    assert tracker.list("u1", "plank") == []
    assert tracker.delete(rec.record_id) is False
    with pytest.raises(RecordNotFoundError):
        tracker.get(rec.record_id)


def test_derive_best_lifts() -> None:
    def e(day: int, sets: int, reps: int, weight: float) -> LogEntry:
        return LogEntry(
            session_date=date(2024, 1, day),
            exercise_id="bench",
            exercise=KnownExercise(name="Bench"),
            sets=sets,
            reps=reps,
            weight_kg=weight,
        )

    lifts = derive_best_lifts([e(1, 3, 10, 60), e(5, 1, 1, 90), e(3, 5, 5, 80), e(7, 1, 1, 90)])
    assert len(lifts) == 1
    bench = lifts[0]
    assert bench.max_weight == 90
    assert bench.max_weight_date == date(2024, 1, 5)
    assert bench.max_volume == 2000
    assert bench.max_reps == 10
    # 80 x 5 estimates higher than the 90 x 1 single
    assert bench.best_e1rm == pytest.approx(80 * (1 + 5 / 30))


def test_upsert_ignores_non_record_fields(tracker: PersonalRecordTracker) -> None:
    rec = tracker.upsert(
        "u1", "squat", "max_volume",
        {"weight_kg": 100, "reps": 5, "sets": 3, "total_volume": 1, "user_id": "someone-else", "achieved_date": "2020-01-01"},
        date(2024, 1, 1),
    )
    assert rec.user_id == "u1"
    assert rec.total_volume == 1500
    assert rec.achieved_date == date(2024, 1, 1)


@pytest.mark.parametrize(
    "record_type,fields",
    [
        ("max_reps", {"reps": 0}),
        ("max_volume", {"weight_kg": 50, "reps": 5, "sets": -1}),
        ("endurance_duration", {"duration_seconds": 0}),
        ("one_rep_max", {"weight_kg": 100, "reps": -3}),
    ],
)
def test_non_positive_counts_rejected(record_type: str, fields: dict) -> None:
    with pytest.raises(ValidationError):
        PersonalRecordInput(user_id="u", exercise_id="e", record_type=record_type, achieved_date=date(2024, 1, 1), **fields)
