"""Gateway callback endpoint end to end."""

import pytest

from rise_settlement.domain.deposits import DepositService
from rise_settlement.domain.webhooks import WebhookEventService
from rise_settlement.domain.wallets import WalletService

from .factories import basepay_callback, create_deposit, nekpay_callback

BASEPAY_URL = "/api/webhooks/basepay"
NEKPAY_URL = "/api/webhooks/nekpay"


async def _deposit_status(session_factory, deposit_id):
    async with session_factory() as session:
        return (await DepositService.with_session(session).get(deposit_id)).status


async def _available(session_factory, user_id):
    async with session_factory() as session:
        return (await WalletService.with_session(session).get_wallet(user_id)).available_cents


async def _events(session_factory, **filters):
    async with session_factory() as session:
        return await WebhookEventService.with_session(session).list_events(**filters)


class TestBasepayCallback:
    async def test_success_is_acknowledged_with_exact_token(self, client, session, session_factory):
        deposit = await create_deposit(session, user_id="user-a")

        response = await client.post(BASEPAY_URL, data=basepay_callback(deposit.mch_order_no))

        assert response.status_code == 200
        assert response.text == "success"
        assert response.headers["content-type"].startswith("text/plain")
        assert await _deposit_status(session_factory, deposit.id) == "confirmed"
        assert await _available(session_factory, "user-a") == 500
        assert await _available(session_factory, "user-b") == 100

        [event] = await _events(session_factory, mch_order_no=deposit.mch_order_no)
        assert event.gateway == "basepay"
        assert event.signature_ok
        assert event.processed
        assert event.error is None
        assert event.payload["tradeResult"] == "1"

    async def test_json_body(self, client, session, session_factory):
        deposit = await create_deposit(session, user_id="user-solo")

        response = await client.post(BASEPAY_URL, json=basepay_callback(deposit.mch_order_no))

        assert response.text == "success"
        assert await _deposit_status(session_factory, deposit.id) == "confirmed"

    async def test_multipart_body(self, client, session, session_factory):
        deposit = await create_deposit(session, user_id="user-solo")
        params = basepay_callback(deposit.mch_order_no)

        response = await client.post(
            BASEPAY_URL, files={key: (None, value) for key, value in params.items()}
        )

        assert response.text == "success"
        assert await _deposit_status(session_factory, deposit.id) == "confirmed"

    async def test_duplicate_delivery_credits_once(self, client, session, session_factory):
        deposit = await create_deposit(session, user_id="user-a")
        params = basepay_callback(deposit.mch_order_no)

        first = await client.post(BASEPAY_URL, data=params)
        second = await client.post(BASEPAY_URL, data=params)

        assert first.text == second.text == "success"
        assert await _available(session_factory, "user-a") == 500
        assert await _available(session_factory, "user-b") == 100
        events = await _events(session_factory, mch_order_no=deposit.mch_order_no)
        assert len(events) == 2
        assert all(event.processed for event in events)

    async def test_tampered_amount_is_rejected(self, client, session, session_factory):
        deposit = await create_deposit(session, user_id="user-a")
        params = basepay_callback(deposit.mch_order_no, amount="500.00")
        params["amount"] = "50000.00"

        response = await client.post(BASEPAY_URL, data=params)

        assert response.status_code == 400
        assert response.text == "FAIL"
        assert await _deposit_status(session_factory, deposit.id) == "pending"
        assert await _available(session_factory, "user-a") == 0
        [event] = await _events(session_factory, mch_order_no=deposit.mch_order_no)
        assert not event.signature_ok
        assert not event.processed
        assert event.error == "invalid signature"

    async def test_wrong_key(self, client, session):
        deposit = await create_deposit(session, user_id="user-a")
        response = await client.post(BASEPAY_URL, data=basepay_callback(deposit.mch_order_no, key="guess"))
        assert response.status_code == 400
        assert response.text == "FAIL"

    async def test_unknown_order_asks_for_retry(self, client, session_factory):
        response = await client.post(BASEPAY_URL, data=basepay_callback("WS-unknown"))

        assert response.status_code == 404
        assert response.text == "FAIL"
        [event] = await _events(session_factory, mch_order_no="WS-unknown")
        assert event.signature_ok
        assert not event.processed
        assert "not found" in event.error

    async def test_missing_order_number(self, client, session_factory):
        params = basepay_callback("")

        response = await client.post(BASEPAY_URL, data=params)

        assert response.status_code == 400
        assert response.text == "FAIL"

    async def test_unsuccessful_trade_marks_deposit_failed(self, client, settings, session, session_factory):
        settings.gateways.basepay.failure_results = ["2"]
        deposit = await create_deposit(session, user_id="user-a")

        response = await client.post(BASEPAY_URL, data=basepay_callback(deposit.mch_order_no, trade_result="2"))

        assert response.text == "success"
        assert await _deposit_status(session_factory, deposit.id) == "failed"
        assert await _available(session_factory, "user-a") == 0

    async def test_success_after_failure_is_acknowledged_but_not_credited(
        self, client, settings, session, session_factory
    ):
        settings.gateways.basepay.failure_results = ["2"]
        deposit = await create_deposit(session, user_id="user-a")
        await client.post(BASEPAY_URL, data=basepay_callback(deposit.mch_order_no, trade_result="2"))

        response = await client.post(BASEPAY_URL, data=basepay_callback(deposit.mch_order_no))

        assert response.status_code == 200
        assert response.text == "success"
        assert await _deposit_status(session_factory, deposit.id) == "failed"
        assert await _available(session_factory, "user-a") == 0
        events = await _events(session_factory, mch_order_no=deposit.mch_order_no)
        assert any(event.error and "already failed" in event.error for event in events)

    async def test_unrecognized_result_leaves_deposit_pending(self, client, session, session_factory):
        deposit = await create_deposit(session, user_id="user-a")

        response = await client.post(BASEPAY_URL, data=basepay_callback(deposit.mch_order_no, trade_result="0"))

        assert response.text == "success"
        assert await _deposit_status(session_factory, deposit.id) == "pending"

        paid = await client.post(BASEPAY_URL, data=basepay_callback(deposit.mch_order_no))

        assert paid.text == "success"
        assert await _deposit_status(session_factory, deposit.id) == "confirmed"
        assert await _available(session_factory, "user-a") == 500

    async def test_missing_wallet_asks_for_retry(self, client, session, session_factory):
        deposit = await create_deposit(session, user_id="user-e")

        response = await client.post(BASEPAY_URL, data=basepay_callback(deposit.mch_order_no))

        assert response.status_code == 500
        assert response.text == "FAIL"
        assert await _deposit_status(session_factory, deposit.id) == "pending"

    async def test_malformed_json_is_logged_and_rejected(self, client, session_factory):
        response = await client.post(
            BASEPAY_URL, content=b'{"mchOrderNo": ', headers={"content-type": "application/json"}
        )

        assert response.status_code == 400
        assert response.text == "FAIL"
        [event] = await _events(session_factory, gateway="basepay")
        assert event.payload == {"raw_body": '{"mchOrderNo": '}
        assert event.error == "malformed JSON body"

    async def test_nested_json_is_rejected(self, client, session_factory):
        response = await client.post(BASEPAY_URL, json={"mchOrderNo": "WS-1", "extra": {"a": 1}})
        assert response.status_code == 400
        assert response.text == "FAIL"


class TestNekpayCallback:
    async def test_success_token(self, client, session, session_factory):
        deposit = await create_deposit(session, user_id="user-solo", method="nekpay", gateway="nekpay")

        response = await client.post(NEKPAY_URL, data=nekpay_callback(deposit.mch_order_no))

        assert response.status_code == 200
        assert response.text == "SUCCESS"
        assert await _deposit_status(session_factory, deposit.id) == "confirmed"

    async def test_in_progress_notification_then_paid(self, client, session, session_factory):
        deposit = await create_deposit(session, user_id="user-solo", method="nekpay", gateway="nekpay")

        paying = await client.post(NEKPAY_URL, data=nekpay_callback(deposit.mch_order_no, state="1"))

        assert paying.status_code == 200
        assert paying.text == "SUCCESS"
        assert await _deposit_status(session_factory, deposit.id) == "pending"
        assert await _available(session_factory, "user-solo") == 0

        paid = await client.post(NEKPAY_URL, data=nekpay_callback(deposit.mch_order_no, state="2"))

        assert paid.text == "SUCCESS"
        assert await _deposit_status(session_factory, deposit.id) == "confirmed"
        assert await _available(session_factory, "user-solo") == 500
        events = await _events(session_factory, mch_order_no=deposit.mch_order_no)
        assert len(events) == 2
        assert all(event.processed and event.error is None for event in events)

    async def test_failed_state_marks_deposit_failed(self, client, session, session_factory):
        deposit = await create_deposit(session, user_id="user-solo", method="nekpay", gateway="nekpay")

        response = await client.post(NEKPAY_URL, data=nekpay_callback(deposit.mch_order_no, state="3"))

        assert response.text == "SUCCESS"
        assert await _deposit_status(session_factory, deposit.id) == "failed"

    async def test_in_progress_for_unknown_order(self, client):
        response = await client.post(NEKPAY_URL, data=nekpay_callback("WS-missing", state="1"))
        assert response.status_code == 404

    async def test_basepay_signature_does_not_pass_nekpay(self, client, session):
        deposit = await create_deposit(session, user_id="user-solo")
        response = await client.post(NEKPAY_URL, data=basepay_callback(deposit.mch_order_no))
        assert response.status_code == 400


async def test_unknown_gateway(client):
    response = await client.post("/api/webhooks/paypal", data={"a": "1"})
    assert response.status_code == 404
    assert response.text == "FAIL"


class TestSourceAllowList:
    async def test_unlisted_source_only_warns_by_default(self, client, settings, session, session_factory):
        settings.security.callback_allowed_ips = ["10.0.0.0/8"]
        settings.security.trusted_proxies = ["127.0.0.1", "10.0.0.1"]
        deposit = await create_deposit(session, user_id="user-solo")

        response = await client.post(
            BASEPAY_URL,
            data=basepay_callback(deposit.mch_order_no),
            headers={"x-forwarded-for": "203.0.113.7, 10.0.0.1"},
        )

        assert response.text == "success"
        [event] = await _events(session_factory, mch_order_no=deposit.mch_order_no)
        assert event.source_ip == "203.0.113.7"

    @pytest.mark.parametrize("source, expected_status", [("203.0.113.7", 403), ("10.1.2.3", 200)])
    async def test_enforced_allow_list_behind_trusted_proxy(
        self, client, settings, session, source, expected_status
    ):
        settings.security.callback_allowed_ips = ["10.0.0.0/8"]
        settings.security.enforce_callback_ip_allowlist = True
        settings.security.trusted_proxies = ["127.0.0.1"]
        deposit = await create_deposit(session, user_id="user-solo")

        response = await client.post(
            BASEPAY_URL,
            data=basepay_callback(deposit.mch_order_no),
            headers={"x-forwarded-for": source},
        )

        assert response.status_code == expected_status

    @pytest.mark.parametrize("header", ["x-forwarded-for", "x-real-ip"])
    async def test_forwarded_headers_from_untrusted_peer_are_ignored(
        self, client, settings, session, session_factory, header
    ):
        settings.security.callback_allowed_ips = ["10.0.0.0/8"]
        settings.security.enforce_callback_ip_allowlist = True
        deposit = await create_deposit(session, user_id="user-solo")

        response = await client.post(
            BASEPAY_URL,
            data=basepay_callback(deposit.mch_order_no),
            headers={header: "10.9.9.9"},
        )

        assert response.status_code == 403
        assert response.text == "FAIL"
        assert await _deposit_status(session_factory, deposit.id) == "pending"
        [event] = await _events(session_factory, mch_order_no=deposit.mch_order_no)
        assert event.source_ip == "127.0.0.1"

    async def test_prepended_hop_is_not_believed(self, client, settings, session):
        settings.security.callback_allowed_ips = ["10.0.0.0/8"]
        settings.security.enforce_callback_ip_allowlist = True
        settings.security.trusted_proxies = ["127.0.0.1"]
        deposit = await create_deposit(session, user_id="user-solo")

        # the proxy appends the real caller after whatever the caller sent
        response = await client.post(
            BASEPAY_URL,
            data=basepay_callback(deposit.mch_order_no),
            headers={"x-forwarded-for": "10.9.9.9, 203.0.113.7"},
        )

        assert response.status_code == 403
