"""Snapshot computation over a fetched batch of log rows (stateless)."""

from __future__ import annotations

from datetime import date
from typing import Iterable, Optional

from .aggregate import aggregate_exercise, favorite_exercises, overview, weekly_progress
from .config import get_settings
from .distribution import muscle_group_distribution, workout_type_distribution
from .logging import get_logger
from .models import (
    ComputeStatsInput,
    ComputeStatsOptions,
    DateRange,
    ExerciseStats,
    IssueRecord,
    LogEntry,
    StatsSnapshot,
    TrendPolicy,
)
from .normalize import filter_range, normalize_rows
from .records import derive_best_lifts
from .streaks import compute_streaks
from .trends import classify_trend, exercise_progress, weight_series

logger = get_logger(__name__)


def compute_exercise_stats(
    entries: Iterable[LogEntry],
    exercise_id: str,
    policy: Optional[TrendPolicy] = None,
) -> ExerciseStats:
    """Aggregator totals for one exercise plus the trend of its chronological working weights."""
    entries = [e for e in entries if e.exercise_id == exercise_id]
    totals = aggregate_exercise(entries, exercise_id)
    trend = classify_trend(weight_series(entries), policy=policy)
    return ExerciseStats(
        **totals.model_dump(),
        trend=trend.trend,
        improvement_percent=trend.improvement_percent,
    )


def _all_exercise_stats(entries: list[LogEntry], policy: Optional[TrendPolicy]) -> list[ExerciseStats]:
    by_id: dict[str, list[LogEntry]] = {}
    for e in entries:
        if e.is_valid:
            by_id.setdefault(e.exercise_id, []).append(e)
    out = [compute_exercise_stats(rows, exercise_id, policy) for exercise_id, rows in by_id.items()]
    out.sort(key=lambda s: (-s.total_sessions, s.exercise_name))
    return out


def _resolved_range(payload_range: Optional[DateRange], entries: list[LogEntry]) -> DateRange:
    if payload_range is not None:
        return payload_range
    if not entries:
        return DateRange()
    dates = [e.session_date for e in entries]
    return DateRange(start=min(dates), end=max(dates))


def compute_stats_impl(payload: ComputeStatsInput) -> StatsSnapshot:
    """Normalize rows, restrict to the range, and compute every derived view in one snapshot."""
    settings = get_settings()
    opts = payload.options or ComputeStatsOptions()
    today = payload.today or date.today()

    # Guardrail: reject oversized payloads
    if len(payload.rows) > settings.MAX_ROWS:
        logger.warning("Rejected oversized payload", rows=len(payload.rows), max_rows=settings.MAX_ROWS)
        return StatsSnapshot(
            status="error",
            range=payload.range or DateRange(),
            as_of=today,
            issues=[
                IssueRecord(
                    severity="blocking",
                    type="payload_too_large",
                    location="rows",
                    message=f"Payload exceeds maximum rows ({len(payload.rows)} > {settings.MAX_ROWS}).",
                )
            ],
        )

    entries = filter_range(normalize_rows(payload.rows), payload.range)
    range_ = _resolved_range(payload.range, entries)

    issues: list[IssueRecord] = []
    invalid = sum(1 for e in entries if not e.is_valid)
    if invalid:
        issues.append(IssueRecord(
            severity="warning",
            type="zero_contribution_rows",
            location="rows",
            message=f"{invalid} row(s) with non-positive sets/reps or negative weight were counted as zero.",
        ))

    snapshot = StatsSnapshot(
        status="ok",
        range=range_,
        as_of=today,
        overview=overview(entries, today),
        streaks=compute_streaks((e.session_date for e in entries), today),
        exercises=_all_exercise_stats(entries, opts.trend_policy),
        exercise_progress=exercise_progress(entries, min_points=opts.progress_min_points, limit=opts.top_n),
        weekly=weekly_progress(entries, weeks=opts.weeks),
        favorite_exercises=favorite_exercises(entries, limit=opts.top_n),
        muscle_groups=muscle_group_distribution(entries),
        workout_types=workout_type_distribution(entries),
        best_lifts=derive_best_lifts(entries, limit=opts.top_n, formula=opts.e1rm_formula),
        issues=issues,
    )
    logger.debug(
        "Computed stats snapshot",
        rows=len(payload.rows),
        entries=len(entries),
        exercises=len(snapshot.exercises),
        workouts=snapshot.overview.total_workouts,
    )
    return snapshot
