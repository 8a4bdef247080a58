"""Volume and set aggregation: per-exercise and per-session totals, e1rm, weekly/overview views."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date, timedelta
from functools import reduce
from typing import Iterable, Optional

from .models import (
    UNKNOWN_EXERCISE,
    ExerciseTotals,
    FavoriteExercise,
    LogEntry,
    SessionAggregate,
    StatsOverview,
    WeeklyProgress,
)


def e1rm_epley(weight: float, reps: int) -> float:
    if reps <= 0:
        return 0.0
    if reps == 1:
        return weight
    return weight * (1 + reps / 30.0)


def e1rm_brzycki(weight: float, reps: int) -> float:
    if reps <= 0 or reps >= 37:
        return 0.0
    if reps == 1:
        return weight
    return weight * (36.0 / (37.0 - reps))


def estimate_one_rep_max(weight: float, reps: int, formula: str = "epley") -> float:
    """Estimated 1RM from a weight x reps set. Unrounded; callers round for display."""
    if formula == "brzycki":
        return e1rm_brzycki(weight, reps)
    return e1rm_epley(weight, reps)


@dataclass(frozen=True)
class ExerciseAccumulator:
    """Running sums for one exercise key. Immutable; fold() returns a new accumulator."""
    exercise_id: str
    exercise_name: str = UNKNOWN_EXERCISE
    muscle_group: Optional[str] = None
    sets: int = 0
    reps: int = 0
    volume: float = 0.0
    weight_sum: float = 0.0
    weight_count: int = 0
    max_weight: float = 0.0
    dates: frozenset[date] = field(default_factory=frozenset)

    @classmethod
    def for_entry(cls, entry: LogEntry) -> "ExerciseAccumulator":
        return cls(
            exercise_id=entry.exercise_id,
            exercise_name=entry.exercise_name,
            muscle_group=entry.muscle_group,
        )


def fold(acc: ExerciseAccumulator, entry: LogEntry) -> ExerciseAccumulator:
    """Add one entry to acc. Invalid rows (sets/reps <= 0, negative weight) contribute nothing."""
    if not entry.is_valid:
        return acc
    positive = entry.weight_kg > 0
    return replace(
        acc,
        sets=acc.sets + entry.sets,
        reps=acc.reps + entry.sets * entry.reps,
        volume=acc.volume + entry.volume,
        weight_sum=acc.weight_sum + (entry.weight_kg if positive else 0.0),
        weight_count=acc.weight_count + (1 if positive else 0),
        max_weight=max(acc.max_weight, entry.weight_kg) if positive else acc.max_weight,
        dates=acc.dates | {entry.session_date},
    )


def days_between(first: Optional[date], last: Optional[date]) -> int:
    if first is None or last is None:
        return 0
    return abs((last - first).days)


def usage_frequency(total_sessions: int, first: Optional[date], last: Optional[date]) -> float:
    """Sessions per 7-day period; the elapsed-days denominator is at least 1."""
    if total_sessions <= 0:
        return 0.0
    return total_sessions / max(1, days_between(first, last)) * 7


def to_totals(acc: ExerciseAccumulator) -> ExerciseTotals:
    first = min(acc.dates) if acc.dates else None
    last = max(acc.dates) if acc.dates else None
    total_sessions = len(acc.dates)
    return ExerciseTotals(
        exercise_id=acc.exercise_id,
        exercise_name=acc.exercise_name,
        muscle_group=acc.muscle_group,
        total_sessions=total_sessions,
        total_sets=acc.sets,
        total_reps=acc.reps,
        total_volume=acc.volume,
        avg_weight=acc.weight_sum / acc.weight_count if acc.weight_count else 0.0,
        max_weight=acc.max_weight if acc.weight_count else 0.0,
        first_performed=first,
        last_performed=last,
        usage_frequency=usage_frequency(total_sessions, first, last),
    )


def accumulate_by(entries: Iterable[LogEntry], key=lambda e: e.exercise_id) -> dict[str, ExerciseAccumulator]:
    """Fold valid entries into one accumulator per key, in first-seen key order."""
    def step(table: dict[str, ExerciseAccumulator], entry: LogEntry) -> dict[str, ExerciseAccumulator]:
        if not entry.is_valid:
            return table
        k = key(entry)
        acc = table.get(k) or ExerciseAccumulator.for_entry(entry)
        return {**table, k: fold(acc, entry)}

    return reduce(step, entries, {})


def aggregate_exercise(entries: Iterable[LogEntry], exercise_id: Optional[str] = None) -> ExerciseTotals:
    """Totals for exercise_id (or for every entry when None). Empty input gives zero totals."""
    selected = [e for e in entries if exercise_id is None or e.exercise_id == exercise_id]
    if not selected:
        return ExerciseTotals(exercise_id=exercise_id or "", exercise_name=UNKNOWN_EXERCISE)
    start = ExerciseAccumulator.for_entry(selected[0])
    if exercise_id is None:
        start = replace(start, exercise_id="", exercise_name="all", muscle_group=None)
    return to_totals(reduce(fold, selected, start))


def aggregate_by_exercise(entries: Iterable[LogEntry]) -> dict[str, ExerciseTotals]:
    """Per exercise_id totals, in first-seen order."""
    return {k: to_totals(acc) for k, acc in accumulate_by(entries).items()}


def aggregate_session(entries: Iterable[LogEntry], label: str = "") -> SessionAggregate:
    """
    Whole-session (or whole-window) aggregate.

    average_weight is the mean over positive-weight rows only; exercise_count is the
    number of distinct exercises. Per-exercise totals are keyed by exercise name,
    which is what the comparator matches on.
    """
    entries = list(entries)
    overall = aggregate_exercise(entries)
    per_name = {k: to_totals(acc) for k, acc in accumulate_by(entries, key=lambda e: e.exercise_name).items()}
    return SessionAggregate(
        label=label,
        total_volume=overall.total_volume,
        total_sets=overall.total_sets,
        total_reps=overall.total_reps,
        average_weight=overall.avg_weight,
        exercise_count=len(per_name),
        exercises=per_name,
    )


def week_start(d: date) -> date:
    """Monday of the week containing d."""
    return d - timedelta(days=d.weekday())


def weekly_progress(entries: Iterable[LogEntry], weeks: int = 12) -> list[WeeklyProgress]:
    """Sessions and volume per week (Monday start); the last `weeks` weeks that have data, ascending."""
    sessions: dict[date, set] = {}
    volume: dict[date, float] = {}
    for e in entries:
        wk = week_start(e.session_date)
        sessions.setdefault(wk, set()).add((e.session_date, e.workout_type))
        if e.is_valid:
            volume[wk] = volume.get(wk, 0.0) + e.volume
        else:
            volume.setdefault(wk, 0.0)
    out = [
        WeeklyProgress(week_start=wk, sessions=len(sessions[wk]), volume=volume[wk])
        for wk in sorted(sessions)
    ]
    return out[-weeks:] if weeks > 0 else out


def favorite_exercises(entries: Iterable[LogEntry], limit: int = 10) -> list[FavoriteExercise]:
    """Most-trained exercises by total sets."""
    totals = accumulate_by(entries, key=lambda e: e.exercise_name)
    favorites = [
        FavoriteExercise(
            exercise_name=name,
            total_sets=acc.sets,
            total_volume=acc.volume,
            average_weight=acc.weight_sum / acc.weight_count if acc.weight_count else 0.0,
        )
        for name, acc in totals.items()
    ]
    favorites.sort(key=lambda f: f.total_sets, reverse=True)
    return favorites[:limit]


def workout_frequency(session_count: int, oldest: Optional[date], today: date) -> float:
    """Workouts per week from the oldest session up to today (at least a 1-day span)."""
    if session_count <= 0 or oldest is None:
        return 0.0
    return session_count / max(1, (today - oldest).days) * 7


def overview(entries: Iterable[LogEntry], today: date) -> StatsOverview:
    """Headline totals for a log batch. A workout is a distinct (date, workout_type) session."""
    entries = list(entries)
    totals = aggregate_exercise(entries)
    sessions = {(e.session_date, e.workout_type) for e in entries}
    oldest = min((d for d, _ in sessions), default=None)
    return StatsOverview(
        total_workouts=len(sessions),
        total_sets=totals.total_sets,
        total_reps=totals.total_reps,
        total_volume=totals.total_volume,
        workout_frequency=workout_frequency(len(sessions), oldest, today),
    )
