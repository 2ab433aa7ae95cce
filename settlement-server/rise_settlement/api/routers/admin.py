"""Administrative endpoints for manual deposits and reconciliation."""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from rise_settlement.api.deps import get_app_settings, get_db_session
from rise_settlement.core.config import Settings
from rise_settlement.core.security import get_current_admin
from rise_settlement.domain.crypto_deposits import (
    CryptoDepositNotFoundError,
    CryptoDepositService,
    CryptoDepositStateError,
    CryptoDepositStatus,
)
from rise_settlement.domain.deposits import DepositService
from rise_settlement.domain.income.processor import JOB_NAME as INCOME_JOB_NAME
from rise_settlement.domain.jobs import JobLogService
from rise_settlement.domain.plans import PlanNotFoundError
from rise_settlement.domain.referrals import ReferralService
from rise_settlement.domain.wallets import WalletNotFoundError
from rise_settlement.domain.webhooks import WebhookEventService
from rise_settlement.schemas import (
    CryptoDepositApproveRequest,
    CryptoDepositApproveResponse,
    CryptoDepositListResponse,
    CryptoDepositRejectRequest,
    CryptoDepositResponse,
    JobLogResponse,
    ReferralResponse,
    ReferralReplayResponse,
    TokenData,
    WebhookEventListResponse,
    WebhookEventResponse,
)

router = APIRouter()


@router.get("/crypto-deposits", response_model=CryptoDepositListResponse)
async def list_crypto_deposits(
    status_filter: str = Query(default=CryptoDepositStatus.PENDING, alias="status"),
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=50, ge=1, le=200),
    admin: TokenData = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_app_settings),
):
    service = CryptoDepositService.with_session(db, settings.settlement)
    deposits = await service.list_by_status(status_filter, limit=limit, offset=skip)
    return CryptoDepositListResponse(
        total=len(deposits),
        deposits=[CryptoDepositResponse.model_validate(item, from_attributes=True) for item in deposits],
    )


@router.get("/crypto-deposits/{submission_id}", response_model=CryptoDepositResponse)
async def get_crypto_deposit(
    submission_id: str,
    admin: TokenData = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_app_settings),
):
    service = CryptoDepositService.with_session(db, settings.settlement)
    try:
        return await service.get(submission_id)
    except CryptoDepositNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc


@router.post("/crypto-deposits/{submission_id}/approve", response_model=CryptoDepositApproveResponse)
async def approve_crypto_deposit(
    submission_id: str,
    payload: CryptoDepositApproveRequest,
    admin: TokenData = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_app_settings),
):
    service = CryptoDepositService.with_session(db, settings.settlement)
    try:
        approval = await service.approve(
            submission_id,
            amount_usd_cents=payload.amount_usd_cents,
            admin_id=admin.subject,
            admin_note=payload.admin_note,
        )
    except CryptoDepositNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except CryptoDepositStateError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    except (WalletNotFoundError, PlanNotFoundError) as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc

    return CryptoDepositApproveResponse(
        message="Crypto deposit approved and wallet credited",
        deposit_id=approval.submission.deposit_id,
        outcome=approval.settlement.outcome,
        deposit=CryptoDepositResponse.model_validate(approval.submission, from_attributes=True),
    )


@router.post("/crypto-deposits/{submission_id}/reject", response_model=CryptoDepositResponse)
async def reject_crypto_deposit(
    submission_id: str,
    payload: CryptoDepositRejectRequest,
    admin: TokenData = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_app_settings),
):
    service = CryptoDepositService.with_session(db, settings.settlement)
    try:
        return await service.reject(submission_id, admin_id=admin.subject, admin_note=payload.admin_note)
    except CryptoDepositNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except CryptoDepositStateError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc


@router.post("/deposits/{deposit_id}/referrals/replay", response_model=ReferralReplayResponse)
async def replay_referrals(
    deposit_id: str,
    admin: TokenData = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_app_settings),
):
    deposit = await DepositService.with_session(db).get(deposit_id)
    if deposit is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Deposit not found")
    if not deposit.is_confirmed:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Deposit is not confirmed")

    service = ReferralService.with_session(db, settings.settlement.referral_rates)
    records = await service.replay(deposit)
    await db.commit()
    replayed = records is not None
    if records is None:
        records = await service.list_for_deposit(deposit_id)
    return ReferralReplayResponse(
        deposit_id=deposit_id,
        replayed=replayed,
        referrals=[ReferralResponse.model_validate(item, from_attributes=True) for item in records],
    )


@router.get("/webhook-events", response_model=WebhookEventListResponse)
async def list_webhook_events(
    gateway: Optional[str] = None,
    mch_order_no: Optional[str] = None,
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=50, ge=1, le=200),
    admin: TokenData = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db_session),
):
    events = await WebhookEventService.with_session(db).list_events(
        gateway=gateway, mch_order_no=mch_order_no, limit=limit, offset=skip
    )
    return WebhookEventListResponse(
        total=len(events),
        events=[WebhookEventResponse.model_validate(item, from_attributes=True) for item in events],
    )


@router.get("/jobs", response_model=list[JobLogResponse])
async def list_job_runs(
    limit: int = Query(default=20, ge=1, le=100),
    admin: TokenData = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db_session),
):
    return await JobLogService.with_session(db).list_recent(INCOME_JOB_NAME, limit)
