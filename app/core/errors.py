"""
Error types for the user API and their JSON representation.

Every error response has the shape {"error": "<message>"}. Unexpected
exceptions are never turned into an APIError; endpoints log them and answer
with a generic 500 instead.
"""

import logging
from typing import Optional
from fastapi import Request, status
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)

INTERNAL_SERVER_ERROR = "Internal Server Error"


class APIError(Exception):
    """Expected failure with a message that is safe to show the caller."""
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    message: str = INTERNAL_SERVER_ERROR

    def __init__(self, message: Optional[str] = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class AuthenticationError(APIError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Authentication invalid"


class InvalidUpdateError(APIError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Invalid update"


class UserNotFoundError(APIError):
    status_code = status.HTTP_404_NOT_FOUND
    message = "User not found"


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def internal_error_response() -> JSONResponse:
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_SERVER_ERROR)


async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
    """Handles APIErrors raised outside endpoint bodies (e.g. in dependencies)."""
    return error_response(exc.status_code, exc.message)


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Last resort for exceptions that escape endpoints and dependencies."""
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return internal_error_response()
