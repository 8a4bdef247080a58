"""Normalization: heterogeneous raw log rows -> canonical LogEntry sequence. Pure, no I/O."""

from __future__ import annotations

import re
from datetime import date, datetime
from typing import Any, Iterable, Optional

from .models import (
    DateRange,
    KnownExercise,
    LogEntry,
    Session,
    UnknownExercise,
)

# Keys seen across the dashboard's query shapes, in lookup order
_DATE_KEYS = ("session_date", "date", "workout_date")
_TYPE_KEYS = ("workout_type", "type")
_EXERCISE_JOIN_KEYS = ("exercises", "exercise")
_WORKOUT_JOIN_KEYS = ("workouts", "workout")

_DATE_FORMATS = ("%Y-%m-%d", "%m/%d/%Y", "%d/%m/%Y", "%m-%d-%Y", "%d-%m-%Y")


def normalize_date(value: Any) -> date:
    """Return the calendar date of value (date, datetime or string); time of day is dropped."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"missing or invalid session date: {value!r}")
    s = value.strip()
    # ISO timestamp (2024-01-05T18:30:00Z, 2024-01-05 18:30:00)
    m = re.match(r"^(\d{4}-\d{2}-\d{2})[T ]", s)
    if m:
        s = m.group(1)
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(s, fmt).date()
        except ValueError:
            continue
    raise ValueError(f"unrecognized session date: {value!r}")


def _first(raw: dict, keys: Iterable[str]) -> Any:
    for k in keys:
        if raw.get(k) is not None:
            return raw[k]
    return None


def _is_join(value: Any) -> bool:
    return value is None or isinstance(value, (dict, list))


def _joined(raw: dict, keys: Iterable[str]) -> Optional[dict]:
    """Return the nested join object if the row carries one (lists come from one-to-many joins)."""
    for k in keys:
        if k not in raw or not _is_join(raw[k]):
            continue
        val = raw[k]
        if isinstance(val, list):
            val = val[0] if val else None
        if isinstance(val, dict):
            return val
        return None
    return None


def _to_int(value: Any) -> int:
    if value is None or value == "":
        return 0
    try:
        return int(float(value))
    except (TypeError, ValueError):
        return 0


def _to_float(value: Any) -> float:
    if value is None or value == "":
        return 0.0
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def resolve_exercise(raw: dict) -> KnownExercise | UnknownExercise:
    """
    Resolve exercise identity from a flat or joined row.
    A joined row whose join is present but empty (None) is an unknown exercise,
    even if a stale flat name is also present.
    """
    nested = _joined(raw, _EXERCISE_JOIN_KEYS)
    has_join = any(k in raw and _is_join(raw[k]) for k in _EXERCISE_JOIN_KEYS)
    if nested is not None:
        name = (nested.get("name") or "").strip()
        if name:
            return KnownExercise(name=name, muscle_group=_clean_label(nested.get("muscle_group")))
        return UnknownExercise()
    if has_join:
        return UnknownExercise()
    flat = raw.get("exercise") if isinstance(raw.get("exercise"), str) else None
    name = (raw.get("exercise_name") or raw.get("name") or flat or "").strip()
    if name:
        return KnownExercise(name=name, muscle_group=_clean_label(raw.get("muscle_group")))
    return UnknownExercise()


def _clean_label(value: Any) -> Optional[str]:
    if value is None:
        return None
    s = str(value).strip()
    return s or None


def normalize_row(raw: dict) -> LogEntry:
    """Build a LogEntry from one raw row. Rows with sets/reps <= 0 pass through unchanged."""
    workout = _joined(raw, _WORKOUT_JOIN_KEYS) or {}
    date_value = _first(raw, _DATE_KEYS)
    if date_value is None:
        date_value = _first(workout, _DATE_KEYS + ("created_at",))
    workout_type = _first(raw, _TYPE_KEYS)
    if workout_type is None:
        workout_type = _first(workout, _TYPE_KEYS)

    exercise = resolve_exercise(raw)
    nested = _joined(raw, _EXERCISE_JOIN_KEYS) or {}
    exercise_id = raw.get("exercise_id")
    if exercise_id is None:
        exercise_id = nested.get("id")
    if exercise_id is None:
        exercise_id = exercise.name if isinstance(exercise, KnownExercise) else "unknown"

    return LogEntry(
        session_date=normalize_date(date_value),
        exercise_id=str(exercise_id),
        exercise=exercise,
        workout_type=_clean_label(workout_type),
        sets=_to_int(raw.get("sets")),
        reps=_to_int(raw.get("reps")),
        weight_kg=_to_float(raw.get("weight_kg", raw.get("weight"))),
    )


def normalize_rows(rows: Iterable[dict]) -> list[LogEntry]:
    """Normalize every row, preserving input order."""
    return [normalize_row(r) for r in rows]


def expand_workouts(workouts: Iterable[dict]) -> list[dict]:
    """
    Flatten workout-shaped results ({date, type, workout_logs: [...]}) into per-log rows
    carrying the parent workout as a join, so normalize_row sees one shape.
    """
    rows: list[dict] = []
    for w in workouts:
        parent = {k: v for k, v in w.items() if k != "workout_logs"}
        for log in w.get("workout_logs") or []:
            row = dict(log)
            row.setdefault("workouts", parent)
            rows.append(row)
    return rows


def group_sessions(entries: Iterable[LogEntry]) -> list[Session]:
    """Group entries into sessions keyed by (session_date, workout_type), chronological."""
    by_key: dict[tuple[date, Optional[str]], list[LogEntry]] = {}
    for e in entries:
        by_key.setdefault((e.session_date, e.workout_type), []).append(e)
    ordered = sorted(by_key.items(), key=lambda kv: (kv[0][0], kv[0][1] or ""))
    return [
        Session(session_date=d, workout_type=wt, entries=group)
        for (d, wt), group in ordered
    ]


def filter_range(entries: Iterable[LogEntry], range_: Optional[DateRange]) -> list[LogEntry]:
    """Keep entries whose session date falls within range_ (inclusive, open-ended bounds allowed)."""
    if range_ is None:
        return list(entries)
    return [e for e in entries if range_.contains(e.session_date)]
