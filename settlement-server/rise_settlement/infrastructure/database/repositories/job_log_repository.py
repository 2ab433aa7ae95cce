"""SQLAlchemy repository for the job run log."""

from __future__ import annotations

from typing import Any

from sqlalchemy import desc, select
from sqlalchemy.ext.asyncio import AsyncSession

from rise_settlement.db.models import JobLog


class SqlJobLogRepository:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def add(
        self,
        *,
        job: str,
        status: str,
        payload: dict[str, Any] | None,
        execution_time_ms: int | None,
        processed_count: int,
        error_count: int,
    ) -> JobLog:
        model = JobLog(
            job=job,
            status=status,
            payload=payload,
            execution_time_ms=execution_time_ms,
            processed_count=processed_count,
            error_count=error_count,
        )
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return model

    async def list_recent(self, job: str, limit: int) -> list[JobLog]:
        stmt = select(JobLog).where(JobLog.job == job).order_by(desc(JobLog.id)).limit(limit)
        result = await self._session.execute(stmt)
        return list(result.scalars().all())
