"""
CRUD operations for database models.

This layer provides a clean separation between API routes and database operations,
following the Repository pattern.
"""

from app.crud import job, user

__all__ = ["job", "user"]
