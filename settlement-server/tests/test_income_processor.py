"""Periodic payout of due income drops."""

import json
from datetime import timedelta

import pytest

from rise_settlement.domain.income import IncomeEventProcessor, IncomeScheduler
from rise_settlement.domain.jobs import JobLogService, JobStatus, JobSummary
from rise_settlement.domain.settlement import SettlementService
from rise_settlement.domain.wallets import TransactionType, WalletService
from rise_settlement.jobs import income_events

from .factories import as_utc, create_deposit


@pytest.fixture
def processor(session, settings, clock):
    return IncomeEventProcessor.with_session(session, settings, clock)


async def _confirm(session, settings, clock, **deposit_kwargs):
    deposit = await create_deposit(session, **deposit_kwargs)
    service = SettlementService.with_session(session, settings.settlement, clock)
    await service.confirm_and_distribute(deposit.mch_order_no)
    return deposit


async def _available(session, user_id):
    return (await WalletService.with_session(session).get_wallet(user_id)).available_cents


class TestRun:
    async def test_nothing_due_before_interval(self, session, settings, clock, processor):
        await _confirm(session, settings, clock, user_id="user-solo", amount_usd_cents=300, plan_id="plan-3")
        clock.advance(hours=21, minutes=59)

        summary = await processor.run()

        assert summary.total_events == 0
        assert summary.processed_count == 0
        assert summary.status == JobStatus.COMPLETED

    async def test_series_stops_after_last_drop(self, session, settings, clock, processor):
        deposit = await _confirm(
            session, settings, clock, user_id="user-solo", amount_usd_cents=300, plan_id="plan-3"
        )

        for _ in range(3):
            clock.advance(hours=22)
            summary = await processor.run()
            assert summary.processed_count == 1
            assert summary.error_count == 0

        clock.advance(hours=22)
        assert (await processor.run()).total_events == 0

        events = await IncomeScheduler.with_session(session).list_for_deposit(deposit.id)
        assert [e.drop_number for e in events] == [1, 2, 3]
        assert all(e.status == "paid" for e in events)
        assert await _available(session, "user-solo") == 300 + 3 * 40

        income = [
            tx
            for tx in await WalletService.with_session(session).list_transactions("user-solo")
            if tx.type == TransactionType.INCOME
        ]
        assert sorted(tx.meta["drop_number"] for tx in income) == [1, 2, 3]
        assert {tx.reference_id for tx in income} == {e.id for e in events}

    async def test_next_drop_is_due_one_interval_after_payout(self, session, settings, clock, processor):
        deposit = await _confirm(session, settings, clock, user_id="user-solo", plan_id="plan-3")
        paid_at = clock.advance(hours=30)

        await processor.run()

        events = await IncomeScheduler.with_session(session).list_for_deposit(deposit.id)
        assert as_utc(events[0].paid_at) == paid_at
        assert as_utc(events[1].due_at) == paid_at + timedelta(hours=22)
        assert events[1].status == "pending"

    async def test_failing_event_does_not_stop_the_batch(self, session, settings, clock, processor):
        await _confirm(session, settings, clock, user_id="user-solo", plan_id="plan-3", amount_usd_cents=300)
        orphan = await create_deposit(session, user_id="user-e", plan_id="plan-3", amount_usd_cents=300)
        await IncomeScheduler.with_session(session).repository.create(
            deposit_id=orphan.id,
            user_id="user-e",
            amount_cents=40,
            drop_number=1,
            due_at=clock() - timedelta(hours=1),
        )
        await session.commit()
        clock.advance(hours=22)

        summary = await processor.run()

        assert summary.total_events == 2
        assert summary.processed_count == 1
        assert summary.error_count == 1
        assert summary.status == JobStatus.COMPLETED_WITH_ERRORS
        assert await _available(session, "user-solo") == 340

        [failed] = await IncomeScheduler.with_session(session).list_for_deposit(orphan.id)
        assert failed.status == "pending"

    async def test_batch_size_limits_a_run(self, session, settings, clock):
        settings.income_job.batch_size = 1
        processor = IncomeEventProcessor.with_session(session, settings, clock)
        await _confirm(session, settings, clock, user_id="user-solo", plan_id="plan-3")
        await _confirm(session, settings, clock, user_id="user-d", plan_id="plan-3")
        clock.advance(hours=22)

        assert (await processor.run()).total_events == 1
        assert (await processor.run()).total_events == 1

    async def test_each_run_is_logged(self, session, settings, clock, processor):
        await _confirm(session, settings, clock, user_id="user-solo", plan_id="plan-3")
        clock.advance(hours=22)

        await processor.run()
        await processor.run()

        runs = await JobLogService.with_session(session).list_recent("process_income_events")
        assert len(runs) == 2
        assert runs[0]["processed_count"] == 0
        assert runs[1]["processed_count"] == 1
        assert runs[1]["status"] == JobStatus.COMPLETED
        assert runs[1]["payload"]["total_events"] == 1


async def test_event_is_paid_only_once(session, settings, clock, processor):
    deposit = await _confirm(session, settings, clock, user_id="user-solo", plan_id="plan-3")
    [event] = await IncomeScheduler.with_session(session).list_for_deposit(deposit.id)
    clock.advance(hours=22)

    assert await processor.process_event(event) is True
    await session.commit()
    assert await processor.process_event(event) is False
    await session.commit()

    assert await _available(session, "user-solo") == 500 + 40
    assert len(await IncomeScheduler.with_session(session).list_for_deposit(deposit.id)) == 2


class TestJobEntrypoint:
    async def test_run_income_job_uses_configured_session(self, monkeypatch, settings, session_factory):
        monkeypatch.setattr(income_events, "get_settings", lambda: settings)
        monkeypatch.setattr(income_events, "get_session_factory", lambda: session_factory)

        summary = await income_events.run_income_job()

        assert summary.total_events == 0
        assert summary.status == JobStatus.COMPLETED

    def test_main_prints_summary(self, monkeypatch, capsys, settings):
        async def fake_run():
            return JobSummary(processed_count=2, error_count=0, execution_time_ms=5, total_events=2)

        monkeypatch.setattr(income_events, "get_settings", lambda: settings)
        monkeypatch.setattr(income_events, "run_income_job", fake_run)

        assert income_events.main() == 0
        printed = json.loads(capsys.readouterr().out)
        assert printed["processed_count"] == 2
        assert printed["status"] == JobStatus.COMPLETED

    def test_main_reports_failure(self, monkeypatch, settings):
        async def broken_run():
            raise RuntimeError("database unavailable")

        monkeypatch.setattr(income_events, "get_settings", lambda: settings)
        monkeypatch.setattr(income_events, "run_income_job", broken_run)

        assert income_events.main() == 1
