"""Shared fixtures: in-memory database, seeded users and plans, HTTP client."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from rise_settlement.api.deps import get_db_session
from rise_settlement.core.config import Settings
from rise_settlement.core.security import create_access_token
from rise_settlement.db import models  # noqa: F401
from rise_settlement.db.models import Profile
from rise_settlement.domain.plans import Plan, PlanService
from rise_settlement.domain.wallets import WalletService
from rise_settlement.infrastructure.database.base import Base
from rise_settlement.main import create_app

from .factories import BASEPAY_KEY, NEKPAY_KEY

logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")

FIXED_NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)

# user-a was referred by user-b, user-b by user-c, user-c by user-d.
# user-e has no wallet and was referred by user-d; user-x and user-y refer each other.
REFERRAL_CHAIN = {
    "user-a": "user-b",
    "user-b": "user-c",
    "user-c": "user-d",
    "user-d": None,
    "user-e": "user-d",
    "user-f": "user-e",
    "user-x": "user-y",
    "user-y": "user-x",
    "user-solo": None,
}
USERS_WITHOUT_WALLET = {"user-e"}


class FrozenClock:
    """Manually advanced clock for scheduling tests."""

    def __init__(self, now: datetime = FIXED_NOW) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        environment="test",
        security={"secret_key": "test-secret-key-0123456789"},
        gateways={
            "basepay": {"collection_key": BASEPAY_KEY},
            "nekpay": {"secret_key": NEKPAY_KEY},
        },
    )


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock()


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(engine):
    factory = async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        plans = PlanService.with_session(session)
        await plans.save(
            Plan(id="plan-5", name="$5 Plan", deposit_usd_cents=500, payout_per_drop_cents=50, drops_count=30)
        )
        await plans.save(
            Plan(id="plan-3", name="Short Plan", deposit_usd_cents=300, payout_per_drop_cents=40, drops_count=3)
        )
        session.add_all(
            [Profile(user_id=user_id, referrer_id=referrer_id) for user_id, referrer_id in REFERRAL_CHAIN.items()]
        )
        wallets = WalletService.with_session(session)
        for user_id in REFERRAL_CHAIN:
            if user_id not in USERS_WITHOUT_WALLET:
                await wallets.ensure_wallet(user_id)
        await session.commit()
    return factory


@pytest_asyncio.fixture
async def session(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(settings, session_factory):
    app = create_app(settings)

    async def override_db_session():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = override_db_session
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as http_client:
        yield http_client


@pytest.fixture
def admin_headers(settings) -> dict[str, str]:
    token = create_access_token("admin-1", "admin", settings)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def user_headers(settings) -> dict[str, str]:
    token = create_access_token("user-a", "user", settings)
    return {"Authorization": f"Bearer {token}"}
