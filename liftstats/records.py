"""Personal records: upsert/list/delete against the record store, plus best lifts derived from logs."""

from __future__ import annotations

from datetime import date
from typing import Any, Iterable, Optional

from .aggregate import estimate_one_rep_max
from .exceptions import RecordNotFoundError
from .logging import get_logger
from .models import (
    BestLift,
    LogEntry,
    PersonalRecord,
    PersonalRecordInput,
    RecordType,
)
from .storage import RecordStore, generate_id

logger = get_logger(__name__)

# Per-record values a caller may set; the key fields come from upsert's own arguments
RECORD_FIELDS = ("weight_kg", "reps", "sets", "duration_seconds", "notes")


def build_record(submission: PersonalRecordInput, record_id: Optional[str] = None) -> PersonalRecord:
    """
    Turn a validated submission into a storable record.
    max_volume gets total_volume = weight x reps x sets, fixed at submission time.
    """
    total_volume = None
    if submission.record_type == "max_volume":
        total_volume = submission.weight_kg * submission.reps * submission.sets
    return PersonalRecord(
        record_id=record_id or generate_id("pr"),
        user_id=submission.user_id,
        exercise_id=submission.exercise_id,
        record_type=submission.record_type,
        weight_kg=submission.weight_kg,
        reps=submission.reps,
        sets=submission.sets,
        total_volume=total_volume,
        duration_seconds=submission.duration_seconds,
        achieved_date=submission.achieved_date,
        notes=submission.notes,
    )


class PersonalRecordTracker:
    """
    Owns writes to the personal record store.

    upsert() replaces any existing record for the same (user, exercise, record_type)
    unconditionally: a worse result overwrites a better one.
    """

    def __init__(self, store: RecordStore):
        self.store = store

    def upsert(
        self,
        user_id: str,
        exercise_id: str,
        record_type: RecordType,
        fields: dict[str, Any],
        achieved_date: date,
    ) -> PersonalRecord:
        ignored = sorted(k for k in fields if k not in RECORD_FIELDS)
        if ignored:
            logger.warning("Ignoring non-record fields", fields=ignored)
        submission = PersonalRecordInput(
            user_id=user_id,
            exercise_id=exercise_id,
            record_type=record_type,
            achieved_date=achieved_date,
            **{k: v for k, v in fields.items() if k in RECORD_FIELDS},
        )
        return self.submit(submission)

    def submit(self, submission: PersonalRecordInput) -> PersonalRecord:
        record = build_record(submission)
        record_id = self.store.upsert(record)
        logger.info(
            "Personal record saved",
            record_id=record_id,
            exercise_id=record.exercise_id,
            record_type=record.record_type,
        )
        return record.model_copy(update={"record_id": record_id})

    def list(self, user_id: str, exercise_id: str) -> list[PersonalRecord]:
        return self.store.list_for_exercise(user_id, exercise_id)

    def get(self, record_id: str) -> PersonalRecord:
        record = self.store.get(record_id)
        if record is None:
            raise RecordNotFoundError(record_id)
        return record

    def delete(self, record_id: str) -> bool:
        deleted = self.store.delete(record_id)
        if deleted:
            logger.info("Personal record deleted", record_id=record_id)
        else:
            logger.warning("Personal record not found for delete", record_id=record_id)
        return deleted


def derive_best_lifts(
    entries: Iterable[LogEntry],
    limit: int = 10,
    formula: str = "epley",
) -> list[BestLift]:
    """
    Best weight (with the date it was first reached), volume, reps and estimated 1RM
    per exercise name, read straight from the logs. Ordered by max weight.
    """
    best: dict[str, BestLift] = {}
    for e in sorted((e for e in entries if e.is_valid), key=lambda e: e.session_date):
        lift = best.get(e.exercise_name)
        if lift is None:
            lift = BestLift(exercise_name=e.exercise_name, max_weight_date=e.session_date)
            best[e.exercise_name] = lift
        if e.weight_kg > lift.max_weight:
            lift.max_weight = e.weight_kg
            lift.max_weight_date = e.session_date
        lift.max_volume = max(lift.max_volume, e.volume)
        lift.max_reps = max(lift.max_reps, e.reps)
        lift.best_e1rm = max(lift.best_e1rm, estimate_one_rep_max(e.weight_kg, e.reps, formula))
    out = sorted(best.values(), key=lambda b: b.max_weight, reverse=True)
    return out[:limit]
