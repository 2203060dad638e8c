"""
CRUD operations for Job model.
"""

from sqlalchemy.orm import Session
from app.models.job import Job


def count(db: Session) -> int:
    """Total number of jobs across all users."""
    return db.query(Job).count()
