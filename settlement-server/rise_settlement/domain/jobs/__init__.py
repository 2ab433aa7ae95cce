"""Scheduled job bookkeeping exports"""

from .models import JobStatus, JobSummary
from .service import JobLogService

__all__ = ["JobStatus", "JobSummary", "JobLogService"]
