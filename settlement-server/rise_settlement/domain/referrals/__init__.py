"""Referral fan-out exports"""

from .models import ReferralRecord
from .service import ReferralService, compute_referral_bonus

__all__ = ["ReferralRecord", "ReferralService", "compute_referral_bonus"]
