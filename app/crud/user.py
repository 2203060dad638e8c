"""
CRUD operations for User model.

Only the reads and the partial update the user endpoints need live here;
accounts are created and deleted by the auth service.
"""

from typing import Any, Dict, Optional
from uuid import UUID
from sqlalchemy.orm import Session
from app.models.user import User


def get_by_id(db: Session, user_id: UUID) -> Optional[User]:
    """
    Retrieve a user by ID.

    Returns:
        User instance if found, None otherwise
    """
    return db.query(User).filter(User.id == user_id).first()


def count(db: Session) -> int:
    """Total number of user accounts."""
    return db.query(User).count()


def update(db: Session, user_id: UUID, fields: Dict[str, Any]) -> Optional[User]:
    """
    Apply a partial update to a user and return the post-update record.

    Args:
        db: Database session
        user_id: User ID to update
        fields: Column name -> new value. Callers are responsible for
            filtering out protected columns.

    Returns:
        Updated User instance if found, None otherwise
    """
    user = get_by_id(db, user_id)
    if not user:
        return None

    for field, value in fields.items():
        setattr(user, field, value)

    db.commit()
    db.refresh(user)

    return user
