"""
Database models package.
"""

from app.models.user import User, UserRole
from app.models.job import Job, JobStatus, JobType

__all__ = ["User", "UserRole", "Job", "JobStatus", "JobType"]
