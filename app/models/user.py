"""
User model for the job board.

Profile fields are editable by the owner through the update-user endpoint.
`role` and `password` are only ever written by the auth/admin services.
"""

import enum
import uuid
from sqlalchemy import Column, String, DateTime, Enum, Uuid, func
from sqlalchemy.orm import relationship
from app.core.database import Base


class UserRole(str, enum.Enum):
    """Access level of an account."""
    USER = "user"
    ADMIN = "admin"


class User(Base):
    """
    Job board account.

    `avatar_url` and `avatar_asset_id` are always written together: the asset
    id is the media host's handle for the image the URL points to, and is
    what gets deleted when the avatar is replaced.
    """
    __tablename__ = "users"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)

    # User profile
    name = Column(String, nullable=False)
    last_name = Column(String, nullable=False, default="lastName")
    email = Column(String, unique=True, nullable=False, index=True)
    location = Column(String, nullable=False, default="my city")

    # Credentials and access level (never exposed or updated here)
    password = Column(String, nullable=False)
    role = Column(Enum(UserRole), default=UserRole.USER, nullable=False)

    # Avatar hosted on the media host
    avatar_url = Column(String, nullable=True)
    avatar_asset_id = Column(String, nullable=True)

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    jobs = relationship("Job", back_populates="owner", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}', role={self.role.value})>"
