"""Pydantic schemas used across the project."""
from datetime import datetime
from decimal import Decimal
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class TokenData(BaseModel):
    subject: str
    role: str


class DepositStatusResponse(BaseModel):
    id: str
    mch_order_no: str
    status: str
    amount_usd_cents: int
    method: str
    gateway: str
    gateway_ref: Optional[str] = None
    plan_id: Optional[str] = None
    confirmed_at: Optional[datetime] = None
    referrals_paid_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class JobSummaryResponse(BaseModel):
    status: str
    processed_count: int
    error_count: int
    execution_time_ms: int
    total_events: int


class JobLogResponse(BaseModel):
    id: int
    job: str
    status: str
    payload: Optional[dict[str, Any]] = None
    execution_time_ms: Optional[int] = None
    processed_count: int
    error_count: int
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class CryptoDepositSubmitRequest(BaseModel):
    tx_hash: str = Field(..., min_length=8, max_length=128)
    currency: str = Field(default="USDT", max_length=10)
    amount_crypto: Optional[Decimal] = Field(default=None, gt=0)
    plan_id: Optional[str] = None
    proof_path: Optional[str] = None


class CryptoDepositResponse(BaseModel):
    id: str
    user_id: str
    plan_id: Optional[str] = None
    currency: str
    amount_crypto: Optional[Decimal] = None
    tx_hash: str
    proof_path: Optional[str] = None
    status: str
    amount_usd_cents: Optional[int] = None
    admin_id: Optional[str] = None
    admin_note: Optional[str] = None
    deposit_id: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class CryptoDepositListResponse(BaseModel):
    total: int
    deposits: list[CryptoDepositResponse]


class CryptoDepositApproveRequest(BaseModel):
    amount_usd_cents: int = Field(..., gt=0)
    admin_note: Optional[str] = None


class CryptoDepositRejectRequest(BaseModel):
    admin_note: Optional[str] = None


class CryptoDepositApproveResponse(BaseModel):
    success: bool = True
    message: str
    deposit_id: Optional[str] = None
    outcome: str
    deposit: CryptoDepositResponse


class ReferralResponse(BaseModel):
    id: str
    referrer_id: str
    referred_id: str
    level: int
    bonus_cents: int
    deposit_id: str
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class ReferralReplayResponse(BaseModel):
    deposit_id: str
    replayed: bool
    referrals: list[ReferralResponse]


class WebhookEventResponse(BaseModel):
    id: str
    gateway: str
    payload: dict[str, Any]
    mch_order_no: Optional[str] = None
    signature_ok: bool
    processed: bool
    source_ip: Optional[str] = None
    error: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class WebhookEventListResponse(BaseModel):
    total: int
    events: list[WebhookEventResponse]
