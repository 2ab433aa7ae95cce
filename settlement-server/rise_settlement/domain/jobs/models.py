"""Domain models for scheduled job runs."""

from __future__ import annotations

from dataclasses import asdict, dataclass


class JobStatus:
    COMPLETED = "completed"
    COMPLETED_WITH_ERRORS = "completed_with_errors"
    FAILED = "failed"


@dataclass(slots=True)
class JobSummary:
    processed_count: int
    error_count: int
    execution_time_ms: int
    total_events: int = 0

    @property
    def status(self) -> str:
        return JobStatus.COMPLETED_WITH_ERRORS if self.error_count else JobStatus.COMPLETED

    def as_dict(self) -> dict[str, int]:
        return asdict(self)
