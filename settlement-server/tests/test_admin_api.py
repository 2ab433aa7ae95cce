"""Admin, job and status endpoints."""

from rise_settlement.domain.income import IncomeScheduler
from rise_settlement.domain.settlement import SettlementService

from .factories import create_deposit


class _BrokenReferrals:
    async def fan_out(self, deposit):
        raise RuntimeError("lost")


class TestAuth:
    async def test_admin_routes_require_a_token(self, client):
        response = await client.get("/api/admin/crypto-deposits")
        assert response.status_code in (401, 403)

    async def test_customer_token_is_not_admin(self, client, user_headers):
        response = await client.get("/api/admin/crypto-deposits", headers=user_headers)
        assert response.status_code == 403

    async def test_garbage_token(self, client):
        response = await client.get(
            "/api/admin/crypto-deposits", headers={"Authorization": "Bearer not-a-token"}
        )
        assert response.status_code == 401


class TestDepositStatus:
    async def test_lookup(self, client, session):
        deposit = await create_deposit(session, user_id="user-a")

        response = await client.get(f"/api/deposits/{deposit.mch_order_no}")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "pending"
        assert body["amount_usd_cents"] == 500
        assert body["id"] == deposit.id

    async def test_unknown(self, client):
        response = await client.get("/api/deposits/WS-missing")
        assert response.status_code == 404


class TestCryptoDepositRoutes:
    async def test_submit_review_and_approve(self, client, user_headers, admin_headers):
        submitted = await client.post(
            "/api/crypto-deposits",
            json={"tx_hash": "0xfeedfacecafebeef", "amount_crypto": "25", "plan_id": "plan-5"},
            headers=user_headers,
        )
        assert submitted.status_code == 201
        submission = submitted.json()
        assert submission["user_id"] == "user-a"

        listing = await client.get("/api/admin/crypto-deposits", headers=admin_headers)
        assert listing.json()["total"] == 1

        approved = await client.post(
            f"/api/admin/crypto-deposits/{submission['id']}/approve",
            json={"amount_usd_cents": 2500, "admin_note": "verified"},
            headers=admin_headers,
        )
        assert approved.status_code == 200
        body = approved.json()
        assert body["outcome"] == "confirmed"
        assert body["deposit"]["status"] == "approved"
        assert body["deposit"]["admin_id"] == "admin-1"

        again = await client.post(
            f"/api/admin/crypto-deposits/{submission['id']}/approve",
            json={"amount_usd_cents": 2500},
            headers=admin_headers,
        )
        assert again.status_code == 409

        status = await client.get(f"/api/deposits/CR-{submission['id']}")
        assert status.json()["status"] == "confirmed"

    async def test_duplicate_submission(self, client, user_headers):
        payload = {"tx_hash": "0x0123456789abcdef"}
        assert (await client.post("/api/crypto-deposits", json=payload, headers=user_headers)).status_code == 201
        assert (await client.post("/api/crypto-deposits", json=payload, headers=user_headers)).status_code == 409

    async def test_reject(self, client, user_headers, admin_headers):
        submitted = await client.post(
            "/api/crypto-deposits", json={"tx_hash": "0xdeadbeef00000001"}, headers=user_headers
        )
        submission_id = submitted.json()["id"]

        rejected = await client.post(
            f"/api/admin/crypto-deposits/{submission_id}/reject",
            json={"admin_note": "no such transfer"},
            headers=admin_headers,
        )

        assert rejected.status_code == 200
        assert rejected.json()["status"] == "rejected"
        missing = await client.get("/api/admin/crypto-deposits/unknown", headers=admin_headers)
        assert missing.status_code == 404


class TestReconciliation:
    async def test_replay_missing_referrals(self, client, session, settings, clock, admin_headers):
        deposit = await create_deposit(session, user_id="user-a")
        service = SettlementService.with_session(session, settings.settlement, clock)
        service.referrals = _BrokenReferrals()
        await service.confirm_and_distribute(deposit.mch_order_no)

        first = await client.post(f"/api/admin/deposits/{deposit.id}/referrals/replay", headers=admin_headers)
        second = await client.post(f"/api/admin/deposits/{deposit.id}/referrals/replay", headers=admin_headers)

        assert first.json()["replayed"] is True
        assert [r["level"] for r in first.json()["referrals"]] == [1, 2, 3]
        assert second.json()["replayed"] is False
        assert len(second.json()["referrals"]) == 3

    async def test_replay_requires_confirmed_deposit(self, client, session, admin_headers):
        deposit = await create_deposit(session, user_id="user-a")
        response = await client.post(f"/api/admin/deposits/{deposit.id}/referrals/replay", headers=admin_headers)
        assert response.status_code == 409

    async def test_webhook_event_listing(self, client, admin_headers):
        await client.post("/api/webhooks/basepay", data={"mchOrderNo": "WS-1", "sign": "bad"})

        response = await client.get("/api/admin/webhook-events?gateway=basepay", headers=admin_headers)

        assert response.status_code == 200
        [event] = response.json()["events"]
        assert event["mch_order_no"] == "WS-1"
        assert event["signature_ok"] is False


class TestIncomeJobRoute:
    async def test_trigger_and_history(self, client, session, settings, admin_headers):
        deposit = await create_deposit(session, user_id="user-solo", plan_id="plan-3")
        await SettlementService.with_session(session, settings.settlement).confirm_and_distribute(
            deposit.mch_order_no
        )

        response = await client.post("/api/jobs/process-income-events", headers=admin_headers)

        assert response.status_code == 200
        assert response.json() == {
            "status": "completed",
            "processed_count": 0,
            "error_count": 0,
            "execution_time_ms": response.json()["execution_time_ms"],
            "total_events": 0,
        }
        assert len(await IncomeScheduler.with_session(session).list_for_deposit(deposit.id)) == 1

        history = await client.get("/api/admin/jobs", headers=admin_headers)
        assert [run["status"] for run in history.json()] == ["completed"]

    async def test_requires_admin(self, client, user_headers):
        response = await client.post("/api/jobs/process-income-events", headers=user_headers)
        assert response.status_code == 403
