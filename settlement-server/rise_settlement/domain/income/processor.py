"""Pays due income drops and schedules the following one."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable

from sqlalchemy.ext.asyncio import AsyncSession

from rise_settlement.core.clock import utcnow
from rise_settlement.core.config import Settings
from rise_settlement.domain.deposits import DepositNotFoundError, DepositService
from rise_settlement.domain.jobs import JobLogService, JobSummary
from rise_settlement.domain.plans import PlanNotFoundError, PlanService
from rise_settlement.domain.wallets import TransactionType, WalletService

from .models import IncomeEvent
from .scheduler import IncomeScheduler

logger = logging.getLogger(__name__)

JOB_NAME = "process_income_events"


@dataclass(slots=True)
class IncomeEventProcessor:
    """Runs one batch of due income events.

    Each event is settled in its own transaction: the pending -> paid
    transition, the wallet credit and the next drop are committed together,
    so a crash can never leave a credited event still marked pending. One
    failing event is rolled back and counted; the rest of the batch goes on.
    """

    session: AsyncSession
    scheduler: IncomeScheduler
    wallets: WalletService
    deposits: DepositService
    plans: PlanService
    jobs: JobLogService
    batch_size: int = 100
    clock: Callable[[], datetime] = field(default=utcnow)

    @classmethod
    def with_session(
        cls,
        session: AsyncSession,
        settings: Settings,
        clock: Callable[[], datetime] = utcnow,
    ) -> "IncomeEventProcessor":
        return cls(
            session=session,
            scheduler=IncomeScheduler.with_session(session, settings.settlement.drop_interval_hours),
            wallets=WalletService.with_session(session),
            deposits=DepositService.with_session(session),
            plans=PlanService.with_session(session),
            jobs=JobLogService.with_session(session),
            batch_size=settings.income_job.batch_size,
            clock=clock,
        )

    async def run(self) -> JobSummary:
        started = time.perf_counter()
        logger.info("Processing income events...")

        try:
            models = await self.scheduler.repository.list_due(self.clock(), self.batch_size)
            due_events = [IncomeScheduler.to_domain(model) for model in models]
            await self.session.commit()
        except Exception as exc:
            await self.session.rollback()
            logger.exception("Failed to fetch due income events")
            await self.jobs.record_failure(JOB_NAME, str(exc), _elapsed_ms(started))
            await self.session.commit()
            raise

        logger.info("Found %s due income events", len(due_events))

        processed_count = 0
        error_count = 0
        for event in due_events:
            try:
                paid = await self.process_event(event)
                await self.session.commit()
            except Exception:
                await self.session.rollback()
                logger.exception("Error processing income event %s", event.id)
                error_count += 1
                continue
            if paid:
                processed_count += 1

        summary = JobSummary(
            processed_count=processed_count,
            error_count=error_count,
            execution_time_ms=_elapsed_ms(started),
            total_events=len(due_events),
        )
        await self.jobs.record_summary(JOB_NAME, summary)
        await self.session.commit()

        logger.info(
            "Income events processing completed: %s processed, %s errors",
            processed_count,
            error_count,
        )
        return summary

    async def process_event(self, event: IncomeEvent) -> bool:
        """Pay one event inside the caller's transaction.

        Returns ``False`` when another run already paid it.
        """
        now = self.clock()
        paid = await self.scheduler.repository.mark_paid(event.id, paid_at=now)
        if paid is None:
            logger.info("Income event %s already paid, skipping", event.id)
            return False

        deposit = await self.deposits.get(event.deposit_id)
        if deposit is None:
            raise DepositNotFoundError(f"deposit {event.deposit_id} not found for income event {event.id}")
        if deposit.plan_id is None:
            raise PlanNotFoundError(f"deposit {deposit.id} has no plan")
        plan = await self.plans.require(deposit.plan_id)

        await self.wallets.credit_once(
            user_id=event.user_id,
            amount_cents=event.amount_cents,
            type=TransactionType.INCOME,
            reference_id=event.id,
            meta={
                "description": f"Drop {event.drop_number} of {plan.drops_count}",
                "deposit_id": event.deposit_id,
                "drop_number": event.drop_number,
            },
        )
        await self.scheduler.schedule_next(event, plan, now)

        logger.info(
            "Processed income event %s for user %s: %s cents",
            event.id,
            event.user_id,
            event.amount_cents,
        )
        return True


def _elapsed_ms(started: float) -> int:
    return int((time.perf_counter() - started) * 1000)
