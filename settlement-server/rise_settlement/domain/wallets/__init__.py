"""Wallet domain exports"""

from .exceptions import WalletError, WalletNotFoundError
from .models import TransactionType, WalletSnapshot, WalletTransactionRecord
from .service import WalletService, compute_deposit_bonus

__all__ = [
    "TransactionType",
    "WalletSnapshot",
    "WalletTransactionRecord",
    "WalletService",
    "WalletError",
    "WalletNotFoundError",
    "compute_deposit_bonus",
]
