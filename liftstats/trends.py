"""Trend classification of per-exercise weight/volume series."""

from __future__ import annotations

from typing import Iterable, Optional, Sequence

from .config import get_settings
from .models import ExerciseProgress, LogEntry, TrendPolicy, TrendResult

RECENT_WINDOW = 3


def _mean(values: Sequence[float]) -> float:
    return sum(values) / len(values)


def improvement_percent(first_mean: float, second_mean: float) -> float:
    if first_mean == 0:
        return 0.0
    return (second_mean - first_mean) / first_mean * 100


def split_samples(samples: Sequence[float], policy: TrendPolicy) -> tuple[list[float], list[float]]:
    """Return (earlier, later) segments for policy."""
    samples = list(samples)
    if policy == "recent_window":
        return samples[-2 * RECENT_WINDOW:-RECENT_WINDOW], samples[-RECENT_WINDOW:]
    mid = len(samples) // 2
    return samples[:mid], samples[mid:]


def classify_trend(
    samples: Sequence[float],
    policy: Optional[TrendPolicy] = None,
    min_samples: Optional[int] = None,
    threshold: Optional[float] = None,
) -> TrendResult:
    """
    Classify a chronologically ordered series as improving/declining/stable.

    half_split compares the first floor(n/2) samples against the rest (odd n gives
    the extra sample to the later half). recent_window compares the last three
    samples against the three before them and needs at least six samples.
    Too few samples, or an empty segment, yields insufficient_data.
    """
    settings = get_settings()
    policy = policy or settings.TREND_POLICY
    threshold = settings.TREND_THRESHOLD_PERCENT if threshold is None else threshold
    if min_samples is None:
        if policy == "recent_window":
            min_samples = max(2 * RECENT_WINDOW, settings.RECENT_WINDOW_MIN_SAMPLES)
        else:
            min_samples = settings.TREND_MIN_SAMPLES

    n = len(samples)
    first, second = split_samples(samples, policy)
    if n < min_samples or not first or not second:
        return TrendResult(trend="insufficient_data", sample_count=n, policy=policy)

    first_mean = _mean(first)
    second_mean = _mean(second)
    pct = improvement_percent(first_mean, second_mean)
    if pct > threshold:
        trend = "improving"
    elif pct < -threshold:
        trend = "declining"
    else:
        trend = "stable"
    return TrendResult(
        trend=trend,
        improvement_percent=pct,
        first_mean=first_mean,
        second_mean=second_mean,
        sample_count=n,
        policy=policy,
    )


def weight_series(entries: Iterable[LogEntry], exercise_id: Optional[str] = None) -> list[float]:
    """Positive working weights in chronological order (stable for same-day rows)."""
    selected = [
        e for e in entries
        if (exercise_id is None or e.exercise_id == exercise_id) and e.is_valid and e.weight_kg > 0
    ]
    selected.sort(key=lambda e: e.session_date)
    return [e.weight_kg for e in selected]


def exercise_progress(
    entries: Iterable[LogEntry],
    min_points: int = 3,
    limit: int = 10,
    policy: TrendPolicy = "half_split",
) -> list[ExerciseProgress]:
    """
    Per exercise name: chronological weight and volume series with a weight trend.
    Exercises with fewer than min_points rows are skipped; the result is ordered by
    the size of the change, largest first.
    """
    by_name: dict[str, list[LogEntry]] = {}
    for e in entries:
        if e.is_valid:
            by_name.setdefault(e.exercise_name, []).append(e)

    out: list[ExerciseProgress] = []
    for name, rows in by_name.items():
        if len(rows) < min_points:
            continue
        rows = sorted(rows, key=lambda e: e.session_date)
        weights = [e.weight_kg for e in rows]
        result = classify_trend(weights, policy=policy)
        out.append(ExerciseProgress(
            exercise_name=name,
            dates=[e.session_date for e in rows],
            weights=weights,
            volumes=[e.volume for e in rows],
            trend=result.trend,
            improvement_percent=result.improvement_percent,
        ))
    out.sort(key=lambda p: abs(p.improvement_percent), reverse=True)
    return out[:limit]
