"""
Pydantic schemas for the user endpoints.
"""

from pydantic import BaseModel, EmailStr, Field
from typing import Optional
from datetime import datetime
from uuid import UUID

from app.models.user import UserRole


# Always stripped from the body before it is looked at.
PROTECTED_FIELDS = ("password", "role")


class UserUpdateRequest(BaseModel):
    """
    Partial profile update. Unset fields are left untouched.

    This is the allow-list of fields a user may change on their own record;
    anything else in the request body (avatar fields, ids) is discarded.
    """
    name: Optional[str] = Field(None, min_length=1, max_length=50)
    last_name: Optional[str] = Field(None, min_length=1, max_length=50)
    email: Optional[EmailStr] = None
    location: Optional[str] = Field(None, min_length=1, max_length=100)

    class Config:
        extra = "ignore"


class UserResponse(BaseModel):
    """User profile response (no password)."""
    id: UUID
    name: str
    last_name: str
    email: str
    location: str
    role: UserRole
    avatar_url: Optional[str] = None
    avatar_asset_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class CurrentUserResponse(BaseModel):
    user: UserResponse


class UpdateUserResponse(BaseModel):
    msg: str
    user: UserResponse


class ErrorResponse(BaseModel):
    """Body of every non-2xx response from the user endpoints."""
    error: str
