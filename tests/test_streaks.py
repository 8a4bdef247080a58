"""Streak tests: current streak anchors, longest run, ordering and duplicate insensitivity."""

import random
from datetime import date, timedelta

from liftstats.streaks import compute_streaks, current_streak, longest_streak


def _days(start: date, n: int) -> list[date]:
    return [start + timedelta(days=i) for i in range(n)]


def test_gap_scenario() -> None:
    """10 days, 2-day gap, 3 days; as of the day after the last run the current streak is 0."""
    dates = _days(date(2024, 1, 1), 10) + _days(date(2024, 1, 13), 3)
    summary = compute_streaks(dates, today=date(2024, 1, 17))
    assert summary.longest_streak == 10
    assert summary.current_streak == 0


def test_current_streak_anchored_on_yesterday() -> None:
    """No session today but one yesterday: the streak counts back from yesterday."""
    dates = _days(date(2024, 1, 13), 3)
    assert current_streak(dates, today=date(2024, 1, 16)) == 3


def test_current_streak_anchored_on_today() -> None:
    dates = _days(date(2024, 1, 13), 3) + [date(2024, 1, 10)]
    assert current_streak(dates, today=date(2024, 1, 15)) == 3


def test_no_recent_session_means_zero() -> None:
    assert current_streak([date(2024, 1, 1)], today=date(2024, 1, 3)) == 0


def test_longest_streak_single_and_empty() -> None:
    assert longest_streak([]) == 0
    assert longest_streak([date(2024, 5, 5)]) == 1
    assert longest_streak([date(2024, 5, 5), date(2024, 5, 7)]) == 1
    summary = compute_streaks([], today=date(2024, 1, 1))
    assert summary.current_streak == 0
    assert summary.longest_streak == 0


def test_reordering_and_duplicates_do_not_matter() -> None:
    dates = _days(date(2024, 2, 1), 5) + _days(date(2024, 2, 10), 7)
    noisy = dates + dates[:4]
    random.Random(7).shuffle(noisy)
    today = date(2024, 2, 16)
    assert compute_streaks(noisy, today) == compute_streaks(dates, today)
    assert longest_streak(noisy) == 7
    assert current_streak(noisy, today) == 7


def test_month_boundary_is_consecutive() -> None:
    dates = [date(2024, 2, 28), date(2024, 2, 29), date(2024, 3, 1)]
    assert longest_streak(dates) == 3
