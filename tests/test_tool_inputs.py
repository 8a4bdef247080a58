"""Tool payload validation: malformed payloads fail at the input model, before any computation."""

import pytest
from pydantic import ValidationError

from liftstats.models import DeleteRecordInput, ExerciseStatsInput, ListRecordsInput


def test_exercise_stats_input() -> None:
    inp = ExerciseStatsInput.model_validate({"rows": [], "exercise_id": "bench", "trend_policy": "recent_window"})
    assert inp.trend_policy == "recent_window"
    assert ExerciseStatsInput.model_validate({"exercise_id": "bench"}).trend_policy is None
    with pytest.raises(ValidationError):
        ExerciseStatsInput.model_validate({"rows": [], "exercise_id": "bench", "trend_policy": "bogus"})
    with pytest.raises(ValidationError):
        ExerciseStatsInput.model_validate({"rows": []})


def test_record_lookup_inputs() -> None:
    assert ListRecordsInput.model_validate({"user_id": "u1", "exercise_id": "bench"}).exercise_id == "bench"
    with pytest.raises(ValidationError):
        ListRecordsInput.model_validate({"user_id": "u1"})
    assert DeleteRecordInput.model_validate({"record_id": "pr_1"}).record_id == "pr_1"
    with pytest.raises(ValidationError):
        DeleteRecordInput.model_validate({})
