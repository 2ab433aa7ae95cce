"""Repository interface for the job run log."""

from __future__ import annotations

from typing import Any, Protocol, Sequence

from rise_settlement.db.models import JobLog as JobLogModel


class JobLogRepository(Protocol):
    async def add(
        self,
        *,
        job: str,
        status: str,
        payload: dict[str, Any] | None,
        execution_time_ms: int | None,
        processed_count: int,
        error_count: int,
    ) -> JobLogModel:
        ...

    async def list_recent(self, job: str, limit: int) -> Sequence[JobLogModel]:
        ...
