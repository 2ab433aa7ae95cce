"""SQLAlchemy-backed repository implementations."""

from .crypto_deposit_repository import SqlCryptoDepositRepository
from .deposit_repository import SqlDepositRepository
from .income_event_repository import SqlIncomeEventRepository
from .job_log_repository import SqlJobLogRepository
from .plan_repository import SqlPlanRepository
from .referral_repository import SqlReferralRepository
from .wallet_repository import SqlWalletRepository
from .webhook_event_repository import SqlWebhookEventRepository

__all__ = [
    "SqlCryptoDepositRepository",
    "SqlDepositRepository",
    "SqlIncomeEventRepository",
    "SqlJobLogRepository",
    "SqlPlanRepository",
    "SqlReferralRepository",
    "SqlWalletRepository",
    "SqlWebhookEventRepository",
]
