"""Deposit status lookups for reconciling after an initiation timeout."""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from rise_settlement.api.deps import get_app_settings, get_db_session
from rise_settlement.core.config import Settings
from rise_settlement.core.security import get_current_principal
from rise_settlement.domain.crypto_deposits import CryptoDepositService, DuplicateTransactionError
from rise_settlement.domain.deposits import DepositService
from rise_settlement.schemas import (
    CryptoDepositResponse,
    CryptoDepositSubmitRequest,
    DepositStatusResponse,
    TokenData,
)

router = APIRouter()


@router.get("/deposits/{mch_order_no}", response_model=DepositStatusResponse)
async def get_deposit_status(mch_order_no: str, db: AsyncSession = Depends(get_db_session)):
    deposit = await DepositService.with_session(db).get_by_order_no(mch_order_no)
    if deposit is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Deposit not found")
    return deposit


@router.post(
    "/crypto-deposits",
    response_model=CryptoDepositResponse,
    status_code=status.HTTP_201_CREATED,
)
async def submit_crypto_deposit(
    payload: CryptoDepositSubmitRequest,
    principal: TokenData = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_app_settings),
):
    service = CryptoDepositService.with_session(db, settings.settlement)
    try:
        return await service.submit(
            user_id=principal.subject,
            tx_hash=payload.tx_hash,
            currency=payload.currency,
            amount_crypto=payload.amount_crypto,
            plan_id=payload.plan_id,
            proof_path=payload.proof_path,
        )
    except DuplicateTransactionError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
