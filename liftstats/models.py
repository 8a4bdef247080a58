"""Pydantic models for liftstats: canonical log entries, derived aggregates, tool inputs/outputs."""

from __future__ import annotations

from datetime import date
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, Field, model_validator

UNKNOWN_EXERCISE = "Unknown Exercise"
UNKNOWN_LABEL = "Unknown"


# --- Canonical log schema ---


class KnownExercise(BaseModel):
    kind: Literal["known"] = "known"
    name: str
    muscle_group: Optional[str] = None


class UnknownExercise(BaseModel):
    """Exercise join was absent in the source row (deleted or never resolved)."""
    kind: Literal["unknown"] = "unknown"


ExerciseRef = Annotated[Union[KnownExercise, UnknownExercise], Field(discriminator="kind")]


class LogEntry(BaseModel):
    """One logged set-group for one exercise within one session."""
    session_date: date
    exercise_id: str
    exercise: ExerciseRef = Field(default_factory=UnknownExercise)
    workout_type: Optional[str] = None
    sets: int = 0
    reps: int = 0  # per set
    weight_kg: float = 0.0  # 0 = bodyweight

    @property
    def exercise_name(self) -> str:
        if isinstance(self.exercise, KnownExercise):
            return self.exercise.name
        return UNKNOWN_EXERCISE

    @property
    def muscle_group(self) -> Optional[str]:
        if isinstance(self.exercise, KnownExercise):
            return self.exercise.muscle_group
        return None

    @property
    def is_valid(self) -> bool:
        return self.sets > 0 and self.reps > 0 and self.weight_kg >= 0

    @property
    def is_bodyweight(self) -> bool:
        return self.weight_kg == 0

    @property
    def volume(self) -> float:
        return self.sets * self.reps * self.weight_kg


class Session(BaseModel):
    session_date: date
    workout_type: Optional[str] = None
    entries: list[LogEntry] = Field(default_factory=list)


class DateRange(BaseModel):
    start: Optional[date] = None
    end: Optional[date] = None

    def contains(self, d: date) -> bool:
        if self.start and d < self.start:
            return False
        if self.end and d > self.end:
            return False
        return True


# --- Aggregates ---

Trend = Literal["improving", "declining", "stable", "insufficient_data"]
TrendPolicy = Literal["half_split", "recent_window"]


class ExerciseTotals(BaseModel):
    exercise_id: str
    exercise_name: str
    muscle_group: Optional[str] = None
    total_sessions: int = 0
    total_sets: int = 0
    total_reps: int = 0
    total_volume: float = 0.0
    avg_weight: float = 0.0
    max_weight: float = 0.0
    first_performed: Optional[date] = None
    last_performed: Optional[date] = None
    usage_frequency: float = 0.0  # sessions per 7 days


class ExerciseStats(ExerciseTotals):
    trend: Trend = "insufficient_data"
    improvement_percent: float = 0.0


class SessionAggregate(BaseModel):
    label: str = ""
    total_volume: float = 0.0
    total_sets: int = 0
    total_reps: int = 0
    average_weight: float = 0.0
    exercise_count: int = 0
    exercises: dict[str, ExerciseTotals] = Field(default_factory=dict)  # keyed by exercise name


class TrendResult(BaseModel):
    trend: Trend
    improvement_percent: float = 0.0
    first_mean: Optional[float] = None
    second_mean: Optional[float] = None
    sample_count: int = 0
    policy: TrendPolicy = "half_split"


class StreakSummary(BaseModel):
    current_streak: int = 0
    longest_streak: int = 0
    as_of: date


class DistributionBucket(BaseModel):
    label: str
    count: int
    percentage: float


# --- Comparison ---


class MetricDelta(BaseModel):
    metric: Literal["total_volume", "total_sets", "total_reps", "average_weight", "exercise_count"]
    value_a: float
    value_b: float
    percent_change: float


class ExerciseDelta(BaseModel):
    exercise_name: str
    status: Literal["new", "dropped", "changed"]
    weight_a: Optional[float] = None
    weight_b: Optional[float] = None
    percent_change: float = 0.0


class ComparisonResult(BaseModel):
    label_a: str = ""
    label_b: str = ""
    metrics: list[MetricDelta] = Field(default_factory=list)
    exercises: list[ExerciseDelta] = Field(default_factory=list)

    def metric(self, name: str) -> Optional[MetricDelta]:
        return next((m for m in self.metrics if m.metric == name), None)


# --- Personal records ---

RecordType = Literal[
    "one_rep_max",
    "three_rep_max",
    "five_rep_max",
    "max_volume",
    "max_reps",
    "endurance_duration",
]

REP_MAX_TYPES = ("one_rep_max", "three_rep_max", "five_rep_max")


class PersonalRecordInput(BaseModel):
    """Submission for one (user, exercise, record_type) key; validates the numeric fields each kind needs."""
    user_id: str
    exercise_id: str
    record_type: RecordType
    weight_kg: Optional[float] = None
    reps: Optional[int] = None
    sets: Optional[int] = None
    duration_seconds: Optional[int] = None
    achieved_date: date
    notes: Optional[str] = None

    @model_validator(mode="after")
    def _check_required_fields(self) -> "PersonalRecordInput":
        if self.record_type in REP_MAX_TYPES:
            if self.weight_kg is None:
                raise ValueError(f"weight_kg required for {self.record_type}")
            if self.reps is None:
                raise ValueError(f"reps required for {self.record_type}")
        elif self.record_type == "max_volume":
            if self.weight_kg is None or self.reps is None or self.sets is None:
                raise ValueError("sets, reps and weight_kg required for max_volume")
        elif self.record_type == "max_reps":
            if self.reps is None:
                raise ValueError("reps required for max_reps")
        elif self.record_type == "endurance_duration":
            if self.duration_seconds is None:
                raise ValueError("duration_seconds required for endurance_duration")
        if self.weight_kg is not None and self.weight_kg < 0:
            raise ValueError("weight_kg must be >= 0")
        for name in ("reps", "sets", "duration_seconds"):
            value = getattr(self, name)
            if value is not None and value <= 0:
                raise ValueError(f"{name} must be > 0")
        if self.notes is not None:
            self.notes = self.notes.strip() or None
        return self


class PersonalRecord(BaseModel):
    record_id: str
    user_id: str
    exercise_id: str
    record_type: RecordType
    weight_kg: Optional[float] = None
    reps: Optional[int] = None
    sets: Optional[int] = None
    total_volume: Optional[float] = None
    duration_seconds: Optional[int] = None
    achieved_date: date
    notes: Optional[str] = None


# --- Derived views over a log batch ---


class BestLift(BaseModel):
    """Best values seen in the logs for one exercise (read-only; not a stored PR)."""
    exercise_name: str
    max_weight: float = 0.0
    max_weight_date: Optional[date] = None
    max_volume: float = 0.0
    max_reps: int = 0
    best_e1rm: float = 0.0


class WeeklyProgress(BaseModel):
    week_start: date  # Monday
    sessions: int = 0
    volume: float = 0.0


class ExerciseProgress(BaseModel):
    exercise_name: str
    dates: list[date] = Field(default_factory=list)
    weights: list[float] = Field(default_factory=list)
    volumes: list[float] = Field(default_factory=list)
    trend: Trend = "insufficient_data"
    improvement_percent: float = 0.0


class FavoriteExercise(BaseModel):
    exercise_name: str
    total_sets: int = 0
    total_volume: float = 0.0
    average_weight: float = 0.0


class StatsOverview(BaseModel):
    total_workouts: int = 0
    total_sets: int = 0
    total_reps: int = 0
    total_volume: float = 0.0
    workout_frequency: float = 0.0  # sessions per week


class IssueRecord(BaseModel):
    severity: Literal["warning", "blocking"]
    type: str
    location: str
    message: str


# --- Tool inputs/outputs ---


class ComputeStatsOptions(BaseModel):
    trend_policy: Optional[TrendPolicy] = None  # falls back to settings
    e1rm_formula: Literal["epley", "brzycki"] = "epley"
    progress_min_points: int = 3
    top_n: int = 10
    weeks: int = 12


class ComputeStatsInput(BaseModel):
    rows: list[dict] = Field(default_factory=list)
    range: Optional[DateRange] = None
    today: Optional[date] = None
    options: Optional[ComputeStatsOptions] = None


class StatsSnapshot(BaseModel):
    status: Literal["ok", "error"]
    range: DateRange
    as_of: date
    overview: StatsOverview = Field(default_factory=StatsOverview)
    streaks: Optional[StreakSummary] = None
    exercises: list[ExerciseStats] = Field(default_factory=list)
    exercise_progress: list[ExerciseProgress] = Field(default_factory=list)
    weekly: list[WeeklyProgress] = Field(default_factory=list)
    favorite_exercises: list[FavoriteExercise] = Field(default_factory=list)
    muscle_groups: list[DistributionBucket] = Field(default_factory=list)
    workout_types: list[DistributionBucket] = Field(default_factory=list)
    best_lifts: list[BestLift] = Field(default_factory=list)
    issues: list[IssueRecord] = Field(default_factory=list)


class CompareSessionsInput(BaseModel):
    rows_a: list[dict] = Field(default_factory=list)
    rows_b: list[dict] = Field(default_factory=list)
    label_a: str = "a"
    label_b: str = "b"


class CompareWindowsInput(BaseModel):
    rows: list[dict] = Field(default_factory=list)
    window_a: DateRange
    window_b: DateRange


class StreaksInput(BaseModel):
    dates: list[date] = Field(default_factory=list)
    today: Optional[date] = None


class ExerciseStatsInput(BaseModel):
    rows: list[dict] = Field(default_factory=list)
    exercise_id: str
    trend_policy: Optional[TrendPolicy] = None


class ListRecordsInput(BaseModel):
    user_id: str
    exercise_id: str


class DeleteRecordInput(BaseModel):
    record_id: str
