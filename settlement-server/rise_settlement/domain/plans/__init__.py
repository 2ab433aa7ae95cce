"""Plan catalogue exports"""

from .exceptions import PlanNotFoundError
from .models import Plan
from .service import PlanService

__all__ = ["Plan", "PlanService", "PlanNotFoundError"]
