"""Percentage breakdowns by muscle group (sets) and workout type (sessions)."""

from __future__ import annotations

from typing import Iterable

from .models import UNKNOWN_LABEL, DistributionBucket, LogEntry


def _buckets(counts: dict[str, int]) -> list[DistributionBucket]:
    total = sum(counts.values())
    if total <= 0:
        return []
    out = [
        DistributionBucket(label=label, count=count, percentage=count / total * 100)
        for label, count in counts.items()
    ]
    out.sort(key=lambda b: (-b.count, b.label))
    return out


def muscle_group_distribution(entries: Iterable[LogEntry]) -> list[DistributionBucket]:
    """Share of total logged sets per muscle group; a missing group counts under "Unknown"."""
    counts: dict[str, int] = {}
    for e in entries:
        if not e.is_valid:
            continue
        label = e.muscle_group or UNKNOWN_LABEL
        counts[label] = counts.get(label, 0) + e.sets
    return _buckets(counts)


def workout_type_distribution(entries: Iterable[LogEntry]) -> list[DistributionBucket]:
    """Share of distinct sessions per workout type."""
    sessions = {(e.session_date, e.workout_type) for e in entries}
    counts: dict[str, int] = {}
    for _, workout_type in sessions:
        label = workout_type or UNKNOWN_LABEL
        counts[label] = counts.get(label, 0) + 1
    return _buckets(counts)
