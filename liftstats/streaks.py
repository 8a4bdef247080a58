"""Consecutive-day workout streaks over the distinct session dates of a log batch."""

from __future__ import annotations

from datetime import date, timedelta
from typing import Iterable, Optional

from .models import StreakSummary

_ONE_DAY = timedelta(days=1)


def current_streak(dates: Iterable[date], today: Optional[date] = None) -> int:
    """
    Consecutive days with a session ending today, or ending yesterday if there is
    no session today. 0 when neither day has a session.
    """
    today = today or date.today()
    days = set(dates)
    if today in days:
        cursor = today
    elif today - _ONE_DAY in days:
        cursor = today - _ONE_DAY
    else:
        return 0
    streak = 0
    while cursor in days:
        streak += 1
        cursor -= _ONE_DAY
    return streak


def longest_streak(dates: Iterable[date]) -> int:
    """Longest run of calendar-adjacent days among the distinct dates."""
    ordered = sorted(set(dates), reverse=True)
    if not ordered:
        return 0
    longest = run = 1
    for newer, older in zip(ordered, ordered[1:]):
        if (newer - older).days == 1:
            run += 1
        else:
            run = 1
        longest = max(longest, run)
    return longest


def compute_streaks(dates: Iterable[date], today: Optional[date] = None) -> StreakSummary:
    days = set(dates)
    today = today or date.today()
    return StreakSummary(
        current_streak=current_streak(days, today),
        longest_streak=longest_streak(days),
        as_of=today,
    )
