"""
User endpoints: current profile, application stats, and profile updates.

- GET /users/current-user: Profile of the authenticated caller
- GET /users/admin/app-stats: Total number of users and jobs
- PATCH /users/update-user: Update the caller's profile, optionally
  replacing their avatar on the media host

All errors are returned as {"error": "<message>"}.
"""

import json
import logging
from typing import Any, Callable, Dict, Optional, Tuple
from uuid import UUID
from fastapi import APIRouter, Depends, Request
from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from starlette.datastructures import UploadFile

from app.core.config import settings
from app.core.database import get_db
from app.core.deps import get_current_user_id
from app.core.errors import APIError, InvalidUpdateError, UserNotFoundError, error_response, internal_error_response
from app.core.media import MediaHost, format_image, media_host_provider
from app.crud import job as job_crud
from app.crud import user as user_crud
from app.schemas.stats import AppStatsResponse
from app.schemas.user import (
    PROTECTED_FIELDS,
    CurrentUserResponse,
    ErrorResponse,
    UpdateUserResponse,
    UserResponse,
    UserUpdateRequest,
)

router = APIRouter(prefix="/users", tags=["Users"])
logger = logging.getLogger(__name__)

AVATAR_FIELD = "avatar"
ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    401: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


@router.get("/current-user", response_model=CurrentUserResponse, responses=ERROR_RESPONSES)
def get_current_user(
    user_id: UUID = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """
    Get the authenticated caller's profile.

    The password is never included. Returns 404 if the account was deleted
    after the token was issued.
    """
    try:
        user = user_crud.get_by_id(db, user_id)
        if not user:
            raise UserNotFoundError()

        return {"user": UserResponse.model_validate(user)}

    except APIError as e:
        return error_response(e.status_code, e.message)
    except Exception:
        logger.exception(f"Error fetching user {user_id}")
        return internal_error_response()


@router.get("/admin/app-stats", response_model=AppStatsResponse, responses=ERROR_RESPONSES)
def get_application_stats(db: Session = Depends(get_db)):
    """
    Total number of users and jobs.

    The two counts are separate queries and are not guaranteed to come from
    the same snapshot.
    """
    try:
        users = user_crud.count(db)
        jobs = job_crud.count(db)
        return AppStatsResponse(users=users, jobs=jobs)

    except Exception:
        logger.exception("Error computing application stats")
        return internal_error_response()


@router.patch("/update-user", response_model=UpdateUserResponse, responses=ERROR_RESPONSES)
async def update_user(
    request: Request,
    user_id: UUID = Depends(get_current_user_id),
    db: Session = Depends(get_db),
    get_media_host: Callable[[], MediaHost] = Depends(media_host_provider)
):
    """
    Update the caller's profile.

    Accepts either a JSON object or multipart form fields. A multipart file
    under `avatar` replaces the current avatar.

    Flow:
    1. Drop password and role, validate the remaining updatable fields
    2. Confirm the account exists (nothing is uploaded for unknown users)
    3. Upload the new avatar, if any, to the media host
    4. Write the changes and read back the updated record
    5. Delete the previous avatar from the media host (best effort)

    If the write fails or the account disappeared in the meantime, the
    freshly uploaded avatar is deleted again.
    """
    try:
        body, avatar = await _read_update_payload(request)
        new_fields = sanitize_update(body)
        image = await _encode_avatar(avatar) if avatar is not None else None

        existing = user_crud.get_by_id(db, user_id)
        if not existing:
            raise UserNotFoundError()
        old_asset_id = existing.avatar_asset_id

        media_host = None
        new_asset = None
        if image is not None:
            media_host = get_media_host()
            new_asset = media_host.upload(image)
            new_fields["avatar_url"] = new_asset.url
            new_fields["avatar_asset_id"] = new_asset.asset_id

        try:
            updated_user = user_crud.update(db, user_id, new_fields)
        except IntegrityError:
            db.rollback()
            if new_asset:
                _discard_asset(media_host, new_asset.asset_id)
            raise InvalidUpdateError("Email already in use")
        except Exception:
            db.rollback()
            if new_asset:
                _discard_asset(media_host, new_asset.asset_id)
            raise

        if not updated_user:
            if new_asset:
                _discard_asset(media_host, new_asset.asset_id)
            raise UserNotFoundError()

        # The update is committed; serialize before touching the old asset
        response = {
            "msg": "User updated successfully",
            "user": UserResponse.model_validate(updated_user),
        }

        if new_asset and old_asset_id:
            _discard_asset(media_host, old_asset_id)

        logger.info(
            f"Updated user {user_id}: fields={sorted(new_fields)} "
            f"| avatar replaced: {new_asset is not None}"
        )

        return response

    except APIError as e:
        return error_response(e.status_code, e.message)
    except Exception:
        logger.exception(f"Error updating user {user_id}")
        return internal_error_response()


def sanitize_update(body: Dict[str, Any]) -> Dict[str, Any]:
    """
    Reduce a request body to the fields a user may change on their own record.

    password and role are removed first, then the rest is validated against
    UserUpdateRequest, which silently drops anything it does not declare.

    Raises:
        InvalidUpdateError: If a declared field has an invalid value
    """
    fields = {key: value for key, value in body.items() if key not in PROTECTED_FIELDS}

    try:
        update = UserUpdateRequest.model_validate(fields)
    except ValidationError as e:
        error = e.errors()[0]
        field = ".".join(str(part) for part in error["loc"])
        raise InvalidUpdateError(f"{field}: {error['msg']}")

    return update.model_dump(exclude_unset=True, exclude_none=True)


async def _read_update_payload(request: Request) -> Tuple[Dict[str, Any], Optional[UploadFile]]:
    """Split the request into body fields and the optional avatar upload."""
    content_type = request.headers.get("content-type", "")

    if content_type.startswith(("multipart/form-data", "application/x-www-form-urlencoded")):
        form = await request.form()
        body: Dict[str, Any] = {}
        avatar = None

        for key, value in form.multi_items():
            if isinstance(value, UploadFile):
                if key != AVATAR_FIELD or not value.filename:
                    continue
                if avatar is not None:
                    raise InvalidUpdateError("Only one avatar image can be uploaded")
                avatar = value
            else:
                body[key] = value

        return body, avatar

    raw = await request.body()
    if not raw:
        return {}, None

    try:
        data = json.loads(raw)
    except ValueError:
        raise InvalidUpdateError("Request body must be valid JSON")

    if not isinstance(data, dict):
        raise InvalidUpdateError("Request body must be a JSON object")

    return data, None


async def _encode_avatar(avatar: UploadFile) -> str:
    """
    Validate an uploaded avatar and encode it for the media host.

    Raises:
        InvalidUpdateError: If the file is empty, too large, or not an image
    """
    content = await avatar.read()
    if not content:
        raise InvalidUpdateError("Uploaded image is empty")
    if len(content) > settings.MAX_AVATAR_SIZE_BYTES:
        raise InvalidUpdateError(
            f"Image size too large (max {settings.MAX_AVATAR_SIZE_BYTES // 1024} KB)"
        )

    data_uri = format_image(avatar.filename, avatar.content_type, content)
    content_type = data_uri[len("data:"):data_uri.index(";")]
    if content_type not in settings.ALLOWED_AVATAR_CONTENT_TYPES:
        raise InvalidUpdateError(f"Please provide a valid image file. Received: {content_type}")

    return data_uri


def _discard_asset(media_host: MediaHost, asset_id: str) -> None:
    """Delete an asset from the media host, logging instead of raising on failure."""
    try:
        media_host.delete(asset_id)
        logger.info(f"Deleted avatar asset {asset_id}")
    except Exception as e:
        logger.warning(f"Failed to delete avatar asset {asset_id}: {e}")
