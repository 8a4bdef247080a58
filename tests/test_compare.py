"""Comparator tests: percent change with zero base, metric deltas, new/dropped/changed exercises, windows."""

from datetime import date

import pytest

from liftstats.aggregate import aggregate_session
from liftstats.compare import compare_sessions, compare_windows, percent_change
from liftstats.models import DateRange, KnownExercise, LogEntry, SessionAggregate


def _e(day: int, name: str, sets: int, reps: int, weight: float) -> LogEntry:
    return LogEntry(
        session_date=date(2024, 1, day),
        exercise_id=name.lower(),
        exercise=KnownExercise(name=name),
        sets=sets,
        reps=reps,
        weight_kg=weight,
    )


def test_percent_change() -> None:
    assert percent_change(1000, 1100) == pytest.approx(10.0)
    assert percent_change(0, 500) == 0
    assert percent_change(200, 150) == pytest.approx(-25.0)


def test_session_volume_deltas() -> None:
    a = SessionAggregate(label="a", total_volume=1000)
    b = SessionAggregate(label="b", total_volume=1100)
    result = compare_sessions(a, b)
    vol = result.metric("total_volume")
    assert (vol.value_a, vol.value_b) == (1000, 1100)
    assert vol.percent_change == pytest.approx(10.0)

    from_zero = compare_sessions(SessionAggregate(), SessionAggregate(total_volume=500))
    assert from_zero.metric("total_volume").percent_change == 0
    assert [m.metric for m in result.metrics] == [
        "total_volume", "total_sets", "total_reps", "average_weight", "exercise_count",
    ]


def test_exercise_tags() -> None:
    a = aggregate_session([_e(1, "Bench", 3, 5, 100), _e(1, "Fly", 3, 12, 15)], label="mon")
    b = aggregate_session([_e(8, "Bench", 3, 5, 110), _e(8, "Dips", 3, 10, 0)], label="next mon")
    result = compare_sessions(a, b)
    tags = {d.exercise_name: d for d in result.exercises}
    assert tags["Bench"].status == "changed"
    assert tags["Bench"].percent_change == pytest.approx(10.0)
    assert tags["Fly"].status == "dropped"
    assert tags["Dips"].status == "new"
    assert tags["Dips"].percent_change == 0
    # largest absolute change first
    assert result.exercises[0].exercise_name == "Bench"
    assert result.metric("exercise_count").percent_change == 0


def test_compare_windows() -> None:
    entries = [
        _e(1, "Squat", 5, 5, 100),
        _e(3, "Squat", 5, 5, 100),
        _e(8, "Squat", 5, 5, 110),
        _e(10, "Squat", 5, 5, 110),
        _e(10, "Lunge", 3, 10, 20),
    ]
    result = compare_windows(
        entries,
        DateRange(start=date(2024, 1, 1), end=date(2024, 1, 7)),
        DateRange(start=date(2024, 1, 8), end=date(2024, 1, 14)),
    )
    assert result.label_a == "2024-01-01..2024-01-07"
    vol = result.metric("total_volume")
    assert vol.value_a == 5000
    assert vol.value_b == 5500 + 600
    assert vol.percent_change == pytest.approx(22.0)
    tags = {d.exercise_name: d.status for d in result.exercises}
    assert tags == {"Squat": "changed", "Lunge": "new"}


def test_rows_without_sets_do_not_add_an_exercise() -> None:
    a = aggregate_session([_e(1, "Bench", 3, 5, 100)], label="a")
    b = aggregate_session([_e(8, "Bench", 3, 5, 100), _e(8, "Curl", 0, 10, 15)], label="b")
    assert b.exercise_count == 1
    assert "Curl" not in b.exercises
    result = compare_sessions(a, b)
    assert result.metric("exercise_count").percent_change == 0
    assert [d.exercise_name for d in result.exercises] == ["Bench"]
