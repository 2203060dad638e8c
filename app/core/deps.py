"""
FastAPI dependencies for identifying the caller.

The caller id is taken from the token as-is. Whether the account still
exists is for each endpoint to decide, so a deleted account gets a 404 from
the user endpoints rather than a 401 here.
"""

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from typing import Optional
from uuid import UUID

from app.core.errors import AuthenticationError
from app.core.security import JWTError, decode_token

# HTTP Bearer token scheme (Authorization: Bearer <token>)
security = HTTPBearer(auto_error=False)


def get_current_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> UUID:
    """
    Extract the authenticated caller's id from the JWT.

    Raises:
        AuthenticationError: If the token is missing, invalid, expired, or
            its subject is not a user id
    """
    if credentials is None:
        raise AuthenticationError()

    try:
        payload = decode_token(credentials.credentials)
    except JWTError:
        raise AuthenticationError()

    user_id = payload.get("sub")
    if user_id is None:
        raise AuthenticationError()

    try:
        return UUID(str(user_id))
    except ValueError:
        raise AuthenticationError()
