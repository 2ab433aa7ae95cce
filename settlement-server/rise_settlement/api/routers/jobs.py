"""Manual trigger for the periodic income job."""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from rise_settlement.api.deps import get_app_settings, get_db_session
from rise_settlement.core.config import Settings
from rise_settlement.core.security import get_current_admin
from rise_settlement.domain.income import IncomeEventProcessor
from rise_settlement.schemas import JobSummaryResponse, TokenData

router = APIRouter()


@router.post("/process-income-events", response_model=JobSummaryResponse)
async def process_income_events(
    admin: TokenData = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_app_settings),
):
    summary = await IncomeEventProcessor.with_session(db, settings).run()
    return JobSummaryResponse(status=summary.status, **summary.as_dict())
