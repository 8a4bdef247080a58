"""liftstats exceptions."""


class LiftStatsError(Exception):
    """Base exception for liftstats errors."""
    pass


class RecordNotFoundError(LiftStatsError):
    """Raised when a personal record id does not exist."""

    def __init__(self, record_id: str):
        super().__init__(f"personal record not found: {record_id}")
        self.record_id = record_id
