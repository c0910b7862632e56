"""
Database models.
Import all models here to ensure they're registered with Base.
"""

from portal.models.user import User
from portal.models.project import Project
from portal.models.submission import Submission, SubmissionStatusHistory, Payment
from portal.models.time_off import TimeOffEntry
from portal.models.notification import Notification

__all__ = [
    "User",
    "Project",
    "Submission",
    "SubmissionStatusHistory",
    "Payment",
    "TimeOffEntry",
    "Notification",
]
