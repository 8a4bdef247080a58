"""Session and window comparison: whole-session metric deltas plus per-exercise new/dropped/changed tags."""

from __future__ import annotations

from typing import Iterable

from .aggregate import aggregate_session
from .models import (
    ComparisonResult,
    DateRange,
    ExerciseDelta,
    LogEntry,
    MetricDelta,
    SessionAggregate,
)
from .normalize import filter_range

COMPARED_METRICS = ("total_volume", "total_sets", "total_reps", "average_weight", "exercise_count")


def percent_change(a: float, b: float) -> float:
    """(b - a) / a * 100; 0 when a is 0, so growth from nothing also reads as 0%."""
    if a == 0:
        return 0.0
    return (b - a) / a * 100


def compare_sessions(a: SessionAggregate, b: SessionAggregate) -> ComparisonResult:
    """Compare an earlier aggregate a with a later aggregate b."""
    metrics = []
    for name in COMPARED_METRICS:
        value_a = float(getattr(a, name))
        value_b = float(getattr(b, name))
        metrics.append(MetricDelta(
            metric=name,
            value_a=value_a,
            value_b=value_b,
            percent_change=percent_change(value_a, value_b),
        ))

    names = list(dict.fromkeys([*a.exercises, *b.exercises]))
    deltas: list[ExerciseDelta] = []
    for name in names:
        ex_a = a.exercises.get(name)
        ex_b = b.exercises.get(name)
        if ex_a is None:
            deltas.append(ExerciseDelta(exercise_name=name, status="new", weight_b=ex_b.avg_weight))
        elif ex_b is None:
            deltas.append(ExerciseDelta(exercise_name=name, status="dropped", weight_a=ex_a.avg_weight))
        else:
            deltas.append(ExerciseDelta(
                exercise_name=name,
                status="changed",
                weight_a=ex_a.avg_weight,
                weight_b=ex_b.avg_weight,
                percent_change=percent_change(ex_a.avg_weight, ex_b.avg_weight),
            ))
    deltas.sort(key=lambda d: abs(d.percent_change), reverse=True)

    return ComparisonResult(label_a=a.label, label_b=b.label, metrics=metrics, exercises=deltas)


def compare_windows(entries: Iterable[LogEntry], window_a: DateRange, window_b: DateRange) -> ComparisonResult:
    """Aggregate each date window and compare them (window_a is the earlier one)."""
    entries = list(entries)
    agg_a = aggregate_session(filter_range(entries, window_a), label=_window_label(window_a))
    agg_b = aggregate_session(filter_range(entries, window_b), label=_window_label(window_b))
    return compare_sessions(agg_a, agg_b)


def _window_label(window: DateRange) -> str:
    start = window.start.isoformat() if window.start else ""
    end = window.end.isoformat() if window.end else ""
    return f"{start}..{end}"
