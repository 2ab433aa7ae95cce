"""Manual crypto deposit exports"""

from .exceptions import (
    CryptoDepositError,
    CryptoDepositNotFoundError,
    CryptoDepositStateError,
    DuplicateTransactionError,
)
from .models import CryptoDepositRecord, CryptoDepositStatus
from .service import CryptoApproval, CryptoDepositService

__all__ = [
    "CryptoApproval",
    "CryptoDepositRecord",
    "CryptoDepositStatus",
    "CryptoDepositService",
    "CryptoDepositError",
    "CryptoDepositNotFoundError",
    "CryptoDepositStateError",
    "DuplicateTransactionError",
]
