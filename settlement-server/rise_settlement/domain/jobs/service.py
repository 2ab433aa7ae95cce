"""Records one row per scheduled job run."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from rise_settlement.db.models import JobLog as JobLogModel
from rise_settlement.infrastructure.database.repositories.job_log_repository import SqlJobLogRepository

from .models import JobStatus, JobSummary
from .repository import JobLogRepository


@dataclass(slots=True)
class JobLogService:
    repository: JobLogRepository

    @classmethod
    def with_session(cls, session: AsyncSession) -> "JobLogService":
        return cls(SqlJobLogRepository(session))

    async def record_summary(self, job: str, summary: JobSummary) -> JobLogModel:
        return await self.repository.add(
            job=job,
            status=summary.status,
            payload=summary.as_dict(),
            execution_time_ms=summary.execution_time_ms,
            processed_count=summary.processed_count,
            error_count=summary.error_count,
        )

    async def record_failure(
        self, job: str, error: str, execution_time_ms: Optional[int] = None
    ) -> JobLogModel:
        return await self.repository.add(
            job=job,
            status=JobStatus.FAILED,
            payload={"error": error},
            execution_time_ms=execution_time_ms,
            processed_count=0,
            error_count=1,
        )

    async def list_recent(self, job: str, limit: int = 20) -> list[dict[str, Any]]:
        rows = await self.repository.list_recent(job, limit)
        return [
            {
                "id": row.id,
                "job": row.job,
                "status": row.status,
                "payload": row.payload,
                "processed_count": row.processed_count,
                "error_count": row.error_count,
                "execution_time_ms": row.execution_time_ms,
                "created_at": row.created_at,
            }
            for row in rows
        ]
