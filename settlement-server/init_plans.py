"""
Seed the investment plan catalogue.
Existing plans are updated in place, so the script can be re-run safely.
"""
import asyncio

from rise_settlement.domain.plans import Plan, PlanService
from rise_settlement.infrastructure.database.session import get_session, init_db

DEFAULT_PLANS = [
    Plan(id="plan-5", name="$5 Plan", deposit_usd_cents=500, payout_per_drop_cents=50, drops_count=30),
    Plan(id="plan-10", name="$10 Plan", deposit_usd_cents=1000, payout_per_drop_cents=100, drops_count=31),
    Plan(id="plan-25", name="$25 Plan", deposit_usd_cents=2500, payout_per_drop_cents=250, drops_count=32),
    Plan(id="plan-50", name="$50 Plan", deposit_usd_cents=5000, payout_per_drop_cents=550, drops_count=33),
    Plan(
        id="plan-120",
        name="$120 Plan",
        deposit_usd_cents=12000,
        payout_per_drop_cents=1300,
        drops_count=35,
        is_locked=True,
    ),
    Plan(
        id="plan-250",
        name="$250 Plan",
        deposit_usd_cents=25000,
        payout_per_drop_cents=2800,
        drops_count=35,
        is_locked=True,
    ),
]


async def seed_plans():
    """Create or update the default plans"""
    await init_db()

    async for db in get_session():
        service = PlanService.with_session(db)
        for plan in DEFAULT_PLANS:
            saved = await service.save(plan)
            print(f"{saved.id}: {saved.name} ({saved.drops_count} drops of {saved.payout_per_drop_cents} cents)")
        await db.commit()


if __name__ == "__main__":
    asyncio.run(seed_plans())
