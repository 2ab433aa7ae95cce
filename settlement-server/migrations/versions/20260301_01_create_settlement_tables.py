"""create settlement tables

Revision ID: 5e1c0a7d9b21
Revises: 
Create Date: 2026-03-01 10:00:00.000000
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "5e1c0a7d9b21"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "plans",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("deposit_usd_cents", sa.Integer(), nullable=False),
        sa.Column("payout_per_drop_cents", sa.Integer(), nullable=False),
        sa.Column("drops_count", sa.Integer(), nullable=False),
        sa.Column("is_locked", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    op.create_table(
        "profiles",
        sa.Column("user_id", sa.String(length=36), primary_key=True),
        sa.Column("referrer_id", sa.String(length=36)),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_profiles_referrer_id", "profiles", ["referrer_id"])

    op.create_table(
        "deposits",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("user_id", sa.String(length=36), nullable=False),
        sa.Column("plan_id", sa.String(length=36), sa.ForeignKey("plans.id")),
        sa.Column("amount_usd_cents", sa.Integer(), nullable=False),
        sa.Column("local_amount", sa.Numeric(18, 2)),
        sa.Column("local_currency", sa.String(length=10)),
        sa.Column("fx_rate", sa.Numeric(18, 6)),
        sa.Column("method", sa.String(length=30), nullable=False),
        sa.Column("gateway", sa.String(length=30), nullable=False),
        sa.Column("mch_order_no", sa.String(length=64), nullable=False),
        sa.Column("gateway_ref", sa.String(length=100)),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="pending"),
        sa.Column("confirmed_at", sa.DateTime(timezone=True)),
        sa.Column("referrals_paid_at", sa.DateTime(timezone=True)),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True)),
    )
    op.create_index("ix_deposits_user_id", "deposits", ["user_id"])
    op.create_index("ix_deposits_mch_order_no", "deposits", ["mch_order_no"], unique=True)

    op.create_table(
        "wallets",
        sa.Column("user_id", sa.String(length=36), primary_key=True),
        sa.Column("available_cents", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("pending_cents", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("total_earned_cents", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True)),
    )

    op.create_table(
        "wallet_transactions",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("user_id", sa.String(length=36), nullable=False),
        sa.Column("type", sa.String(length=20), nullable=False),
        sa.Column("amount_cents", sa.Integer(), nullable=False),
        sa.Column("balance_after_cents", sa.Integer(), nullable=False),
        sa.Column("reference_id", sa.String(length=36), nullable=False),
        sa.Column("meta", sa.JSON()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_wallet_transactions_user_id", "wallet_transactions", ["user_id"])
    op.create_index("ix_wallet_transactions_reference_id", "wallet_transactions", ["reference_id"])
    op.create_index(
        "uq_wallet_transactions_reference",
        "wallet_transactions",
        ["user_id", "type", "reference_id"],
        unique=True,
        sqlite_where=sa.text("type != 'referral'"),
        postgresql_where=sa.text("type != 'referral'"),
    )

    op.create_table(
        "income_events",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("deposit_id", sa.String(length=36), sa.ForeignKey("deposits.id"), nullable=False),
        sa.Column("user_id", sa.String(length=36), nullable=False),
        sa.Column("amount_cents", sa.Integer(), nullable=False),
        sa.Column("drop_number", sa.Integer(), nullable=False),
        sa.Column("due_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="pending"),
        sa.Column("paid_at", sa.DateTime(timezone=True)),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint("deposit_id", "drop_number", name="uq_income_events_drop"),
    )
    op.create_index("ix_income_events_deposit_id", "income_events", ["deposit_id"])
    op.create_index("ix_income_events_user_id", "income_events", ["user_id"])
    op.create_index("ix_income_events_due_at", "income_events", ["due_at"])

    op.create_table(
        "referrals",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("referrer_id", sa.String(length=36), nullable=False),
        sa.Column("referred_id", sa.String(length=36), nullable=False),
        sa.Column("level", sa.Integer(), nullable=False),
        sa.Column("bonus_cents", sa.Integer(), nullable=False),
        sa.Column("deposit_id", sa.String(length=36), sa.ForeignKey("deposits.id"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint("deposit_id", "level", name="uq_referrals_deposit_level"),
    )
    op.create_index("ix_referrals_referrer_id", "referrals", ["referrer_id"])
    op.create_index("ix_referrals_referred_id", "referrals", ["referred_id"])
    op.create_index("ix_referrals_deposit_id", "referrals", ["deposit_id"])

    op.create_table(
        "webhook_events",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("gateway", sa.String(length=30), nullable=False),
        sa.Column("payload", sa.JSON(), nullable=False),
        sa.Column("mch_order_no", sa.String(length=64)),
        sa.Column("signature_ok", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("processed", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("source_ip", sa.String(length=45)),
        sa.Column("error", sa.Text()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True)),
    )
    op.create_index("ix_webhook_events_gateway", "webhook_events", ["gateway"])
    op.create_index("ix_webhook_events_mch_order_no", "webhook_events", ["mch_order_no"])

    op.create_table(
        "jobs_log",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("job", sa.String(length=50), nullable=False),
        sa.Column("status", sa.String(length=30), nullable=False),
        sa.Column("payload", sa.JSON()),
        sa.Column("execution_time_ms", sa.Integer()),
        sa.Column("processed_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("error_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_jobs_log_job", "jobs_log", ["job"])

    op.create_table(
        "crypto_deposits",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("user_id", sa.String(length=36), nullable=False),
        sa.Column("plan_id", sa.String(length=36), sa.ForeignKey("plans.id")),
        sa.Column("currency", sa.String(length=10), nullable=False, server_default="USDT"),
        sa.Column("amount_crypto", sa.Numeric(28, 8)),
        sa.Column("tx_hash", sa.String(length=128), nullable=False),
        sa.Column("proof_path", sa.String(length=255)),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="pending"),
        sa.Column("amount_usd_cents", sa.Integer()),
        sa.Column("admin_id", sa.String(length=36)),
        sa.Column("admin_note", sa.Text()),
        sa.Column("deposit_id", sa.String(length=36), sa.ForeignKey("deposits.id")),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True)),
        sa.UniqueConstraint("tx_hash", name="uq_crypto_deposits_tx_hash"),
    )
    op.create_index("ix_crypto_deposits_user_id", "crypto_deposits", ["user_id"])


def downgrade() -> None:
    op.drop_index("ix_crypto_deposits_user_id", table_name="crypto_deposits")
    op.drop_table("crypto_deposits")
    op.drop_index("ix_jobs_log_job", table_name="jobs_log")
    op.drop_table("jobs_log")
    op.drop_index("ix_webhook_events_mch_order_no", table_name="webhook_events")
    op.drop_index("ix_webhook_events_gateway", table_name="webhook_events")
    op.drop_table("webhook_events")
    op.drop_index("ix_referrals_deposit_id", table_name="referrals")
    op.drop_index("ix_referrals_referred_id", table_name="referrals")
    op.drop_index("ix_referrals_referrer_id", table_name="referrals")
    op.drop_table("referrals")
    op.drop_index("ix_income_events_due_at", table_name="income_events")
    op.drop_index("ix_income_events_user_id", table_name="income_events")
    op.drop_index("ix_income_events_deposit_id", table_name="income_events")
    op.drop_table("income_events")
    op.drop_index("uq_wallet_transactions_reference", table_name="wallet_transactions")
    op.drop_index("ix_wallet_transactions_reference_id", table_name="wallet_transactions")
    op.drop_index("ix_wallet_transactions_user_id", table_name="wallet_transactions")
    op.drop_table("wallet_transactions")
    op.drop_table("wallets")
    op.drop_index("ix_deposits_mch_order_no", table_name="deposits")
    op.drop_index("ix_deposits_user_id", table_name="deposits")
    op.drop_table("deposits")
    op.drop_index("ix_profiles_referrer_id", table_name="profiles")
    op.drop_table("profiles")
    op.drop_table("plans")
