"""SQLAlchemy implementation for referrals"""

from __future__ import annotations

from sqlalchemy import desc, select
from sqlalchemy.ext.asyncio import AsyncSession

from rise_settlement.db.models import Profile, Referral


class SqlReferralRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_referrer_id(self, user_id: str) -> str | None:
        stmt = select(Profile.referrer_id).where(Profile.user_id == user_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def add(
        self,
        *,
        referrer_id: str,
        referred_id: str,
        level: int,
        bonus_cents: int,
        deposit_id: str,
    ) -> Referral:
        referral = Referral(
            referrer_id=referrer_id,
            referred_id=referred_id,
            level=level,
            bonus_cents=bonus_cents,
            deposit_id=deposit_id,
        )
        self.session.add(referral)
        await self.session.flush()
        await self.session.refresh(referral)
        return referral

    async def list_for_deposit(self, deposit_id: str) -> list[Referral]:
        stmt = select(Referral).where(Referral.deposit_id == deposit_id).order_by(Referral.level)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_for_referrer(self, referrer_id: str, limit: int, offset: int) -> list[Referral]:
        stmt = (
            select(Referral)
            .where(Referral.referrer_id == referrer_id)
            .order_by(desc(Referral.created_at))
            .offset(offset)
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
