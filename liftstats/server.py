"""MCP server: liftstats.compute_stats, comparisons, streaks, and personal record tools."""

from __future__ import annotations

import json

from fastmcp import FastMCP

from .aggregate import aggregate_session
from .compare import compare_sessions, compare_windows
from .config import get_settings
from .engine import compute_exercise_stats, compute_stats_impl
from .logging import setup_logging
from .models import (
    CompareSessionsInput,
    CompareWindowsInput,
    ComputeStatsInput,
    DeleteRecordInput,
    ExerciseStatsInput,
    ListRecordsInput,
    PersonalRecordInput,
    StreaksInput,
)
from .normalize import normalize_rows
from .records import PersonalRecordTracker
from .storage import RecordStore
from .streaks import compute_streaks

setup_logging()

# PR store path from LIFTSTATS_DB_PATH
_store = RecordStore(get_settings().DB_PATH)
_tracker = PersonalRecordTracker(_store)

mcp = FastMCP(name="liftstats")


@mcp.tool(name="liftstats.compute_stats")
def liftstats_compute_stats(payload: dict) -> dict:
    """
    Compute a statistics snapshot from provided log rows (stateless).
    Provide `rows` (flat or joined workout_log rows), optional `range` { start, end } (YYYY-MM-DD),
    optional `today` for streaks, and `options` (trend_policy, e1rm_formula, top_n, weeks).
    Returns overview, streaks, per-exercise stats with trends, distributions and best lifts.
    """
    inp = ComputeStatsInput.model_validate(payload)
    return compute_stats_impl(inp).model_dump(mode="json")


@mcp.tool(name="liftstats.exercise_stats")
def liftstats_exercise_stats(payload: dict) -> dict:
    """
    Stats for a single exercise: `rows` plus `exercise_id`, optional `trend_policy`
    ("half_split" or "recent_window").
    """
    inp = ExerciseStatsInput.model_validate(payload)
    stats = compute_exercise_stats(normalize_rows(inp.rows), inp.exercise_id, policy=inp.trend_policy)
    return stats.model_dump(mode="json")


@mcp.tool(name="liftstats.compare_sessions")
def liftstats_compare_sessions(payload: dict) -> dict:
    """
    Compare two sessions: `rows_a` (earlier) and `rows_b` (later).
    Returns per-metric (value_a, value_b, percent_change) and per-exercise new/dropped/changed tags.
    """
    inp = CompareSessionsInput.model_validate(payload)
    a = aggregate_session(normalize_rows(inp.rows_a), label=inp.label_a)
    b = aggregate_session(normalize_rows(inp.rows_b), label=inp.label_b)
    return compare_sessions(a, b).model_dump(mode="json")


@mcp.tool(name="liftstats.compare_windows")
def liftstats_compare_windows(payload: dict) -> dict:
    """Compare two date windows (`window_a` earlier, `window_b` later) over the same `rows`."""
    inp = CompareWindowsInput.model_validate(payload)
    result = compare_windows(normalize_rows(inp.rows), inp.window_a, inp.window_b)
    return result.model_dump(mode="json")


@mcp.tool(name="liftstats.streaks")
def liftstats_streaks(payload: dict) -> dict:
    """Current and longest consecutive-day streaks from session `dates` (optional `today`)."""
    inp = StreaksInput.model_validate(payload)
    return compute_streaks(inp.dates, inp.today).model_dump(mode="json")


@mcp.tool(name="liftstats.upsert_personal_record")
def liftstats_upsert_personal_record(payload: dict) -> dict:
    """
    Save a personal record, replacing any record with the same (user_id, exercise_id, record_type).
    The new value always wins, even if it is lower than the stored one.
    """
    inp = PersonalRecordInput.model_validate(payload)
    return _tracker.submit(inp).model_dump(mode="json")


@mcp.tool(name="liftstats.list_personal_records")
def liftstats_list_personal_records(payload: dict) -> dict:
    """List records for `user_id` and `exercise_id`, most recently achieved first."""
    inp = ListRecordsInput.model_validate(payload)
    records = _tracker.list(inp.user_id, inp.exercise_id)
    return {"count": len(records), "records": [r.model_dump(mode="json") for r in records]}


@mcp.tool(name="liftstats.delete_personal_record")
def liftstats_delete_personal_record(payload: dict) -> dict:
    """Delete one record by `record_id`. Irreversible."""
    inp = DeleteRecordInput.model_validate(payload)
    return {"record_id": inp.record_id, "deleted": _tracker.delete(inp.record_id)}


@mcp.resource("records://{user_id}/{exercise_id}", mime_type="application/json")
def resource_personal_records(user_id: str, exercise_id: str) -> str:
    """Read-only: personal records for a user's exercise."""
    records = _tracker.list(user_id, exercise_id)
    return json.dumps([r.model_dump(mode="json") for r in records], indent=2)


def run() -> None:
    """Run the MCP server with stdio transport (default)."""
    mcp.run()


if __name__ == "__main__":
    run()
