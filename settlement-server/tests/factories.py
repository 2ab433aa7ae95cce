"""Builders for signed callbacks and seeded rows shared by the test modules."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Optional

from rise_settlement.core.signature import sign
from rise_settlement.domain.deposits import Deposit, DepositService

BASEPAY_KEY = "basepay-collection-key"
NEKPAY_KEY = "nekpay-secret-key"


def basepay_callback(
    mch_order_no: str,
    *,
    trade_result: str = "1",
    amount: str = "500.00",
    key: str = BASEPAY_KEY,
    **extra: Any,
) -> dict[str, str]:
    params = {
        "mchId": "100200300",
        "mchOrderNo": mch_order_no,
        "orderNo": f"BP{mch_order_no}",
        "tradeResult": trade_result,
        "amount": amount,
        **extra,
    }
    params["sign"] = sign(params, key, "locale")
    return params


def nekpay_callback(
    mch_order_no: str,
    *,
    state: str = "2",
    amount: str = "500",
    key: str = NEKPAY_KEY,
) -> dict[str, str]:
    params = {
        "mchNo": "M1700000001",
        "mchOrderNo": mch_order_no,
        "payOrderId": f"P{mch_order_no}",
        "state": state,
        "amount": amount,
    }
    params["sign"] = sign(params, key, "byte")
    return params


async def create_deposit(
    session,
    *,
    user_id: str = "user-a",
    amount_usd_cents: int = 500,
    plan_id: Optional[str] = "plan-5",
    method: str = "basepay",
    gateway: str = "basepay",
    mch_order_no: Optional[str] = None,
) -> Deposit:
    deposit = await DepositService.with_session(session).create_pending(
        user_id=user_id,
        plan_id=plan_id,
        amount_usd_cents=amount_usd_cents,
        method=method,
        gateway=gateway,
        mch_order_no=mch_order_no,
    )
    await session.commit()
    return deposit


def as_utc(value: datetime) -> datetime:
    """SQLite hands back naive datetimes; everything is stored in UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
