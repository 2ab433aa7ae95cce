"""SQLAlchemy ORM models."""
import uuid

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
    text,
)
from sqlalchemy.sql import func

from rise_settlement.infrastructure.database.base import Base


def generate_uuid() -> str:
    return str(uuid.uuid4())


class Plan(Base):
    __tablename__ = "plans"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    name = Column(String(100), nullable=False)
    deposit_usd_cents = Column(Integer, nullable=False)
    payout_per_drop_cents = Column(Integer, nullable=False)
    drops_count = Column(Integer, nullable=False)
    is_locked = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class Profile(Base):
    """Read-only projection of the identity provider's user profile."""

    __tablename__ = "profiles"

    user_id = Column(String(36), primary_key=True)
    referrer_id = Column(String(36), nullable=True, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class Deposit(Base):
    __tablename__ = "deposits"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    user_id = Column(String(36), nullable=False, index=True)
    plan_id = Column(String(36), ForeignKey("plans.id"), nullable=True)
    amount_usd_cents = Column(Integer, nullable=False)
    local_amount = Column(Numeric(18, 2))
    local_currency = Column(String(10))
    fx_rate = Column(Numeric(18, 6))
    method = Column(String(30), nullable=False)
    gateway = Column(String(30), nullable=False)
    mch_order_no = Column(String(64), nullable=False, unique=True, index=True)
    gateway_ref = Column(String(100))
    status = Column(String(20), nullable=False, default="pending")  # pending, confirmed, failed
    confirmed_at = Column(DateTime(timezone=True))
    referrals_paid_at = Column(DateTime(timezone=True))
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())


class Wallet(Base):
    __tablename__ = "wallets"

    user_id = Column(String(36), primary_key=True)
    available_cents = Column(Integer, nullable=False, default=0)
    pending_cents = Column(Integer, nullable=False, default=0)
    total_earned_cents = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())


class WalletTransaction(Base):
    __tablename__ = "wallet_transactions"
    __table_args__ = (
        # referral rows may repeat per deposit when a chain revisits the same user
        Index(
            "uq_wallet_transactions_reference",
            "user_id",
            "type",
            "reference_id",
            unique=True,
            sqlite_where=text("type != 'referral'"),
            postgresql_where=text("type != 'referral'"),
        ),
    )

    id = Column(String(36), primary_key=True, default=generate_uuid)
    user_id = Column(String(36), nullable=False, index=True)
    type = Column(String(20), nullable=False)  # deposit, income, referral
    amount_cents = Column(Integer, nullable=False)
    balance_after_cents = Column(Integer, nullable=False)
    reference_id = Column(String(36), nullable=False, index=True)
    meta = Column(JSON)
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class IncomeEvent(Base):
    __tablename__ = "income_events"
    __table_args__ = (UniqueConstraint("deposit_id", "drop_number", name="uq_income_events_drop"),)

    id = Column(String(36), primary_key=True, default=generate_uuid)
    deposit_id = Column(String(36), ForeignKey("deposits.id"), nullable=False, index=True)
    user_id = Column(String(36), nullable=False, index=True)
    amount_cents = Column(Integer, nullable=False)
    drop_number = Column(Integer, nullable=False)
    due_at = Column(DateTime(timezone=True), nullable=False, index=True)
    status = Column(String(20), nullable=False, default="pending")  # pending, paid
    paid_at = Column(DateTime(timezone=True))
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class Referral(Base):
    __tablename__ = "referrals"
    __table_args__ = (UniqueConstraint("deposit_id", "level", name="uq_referrals_deposit_level"),)

    id = Column(String(36), primary_key=True, default=generate_uuid)
    referrer_id = Column(String(36), nullable=False, index=True)
    referred_id = Column(String(36), nullable=False, index=True)
    level = Column(Integer, nullable=False)
    bonus_cents = Column(Integer, nullable=False)
    deposit_id = Column(String(36), ForeignKey("deposits.id"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class WebhookEvent(Base):
    __tablename__ = "webhook_events"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    gateway = Column(String(30), nullable=False, index=True)
    payload = Column(JSON, nullable=False)
    mch_order_no = Column(String(64), index=True)
    signature_ok = Column(Boolean, nullable=False, default=False)
    processed = Column(Boolean, nullable=False, default=False)
    source_ip = Column(String(45))
    error = Column(Text)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())


class JobLog(Base):
    __tablename__ = "jobs_log"

    id = Column(Integer, primary_key=True, autoincrement=True)
    job = Column(String(50), nullable=False, index=True)
    status = Column(String(30), nullable=False)  # completed, completed_with_errors, failed
    payload = Column(JSON)
    execution_time_ms = Column(Integer)
    processed_count = Column(Integer, nullable=False, default=0)
    error_count = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class CryptoDeposit(Base):
    __tablename__ = "crypto_deposits"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    user_id = Column(String(36), nullable=False, index=True)
    plan_id = Column(String(36), ForeignKey("plans.id"), nullable=True)
    currency = Column(String(10), nullable=False, default="USDT")
    amount_crypto = Column(Numeric(28, 8))
    tx_hash = Column(String(128), nullable=False, unique=True)
    proof_path = Column(String(255))
    status = Column(String(20), nullable=False, default="pending")  # pending, approved, rejected
    amount_usd_cents = Column(Integer)
    admin_id = Column(String(36))
    admin_note = Column(Text)
    deposit_id = Column(String(36), ForeignKey("deposits.id"), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
