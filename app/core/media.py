"""
Media host abstraction for user avatars, backed by either the local
filesystem or AWS S3.

Uploads take a base64 `data:` URI (see `format_image`) and return the public
URL of the stored image together with an asset id. The asset id is the only
handle needed to delete the image later.
"""

import base64
import binascii
import logging
import mimetypes
import os
import uuid
from functools import lru_cache
from typing import Callable, NamedTuple, Optional, Tuple
import boto3
from botocore.exceptions import BotoCoreError, ClientError
from app.core.config import settings

logger = logging.getLogger(__name__)


class MediaHostError(Exception):
    """Raised when the media host fails to store or delete an asset."""


class MediaAsset(NamedTuple):
    url: str
    asset_id: str


def format_image(filename: Optional[str], content_type: Optional[str], content: bytes) -> str:
    """
    Encode an uploaded image as a data URI.

    The content type falls back to a guess from the file extension when the
    client did not send one.
    """
    if not content_type or content_type == "application/octet-stream":
        guessed, _ = mimetypes.guess_type(filename or "")
        content_type = guessed or "application/octet-stream"

    encoded = base64.b64encode(content).decode("ascii")
    return f"data:{content_type};base64,{encoded}"


def parse_data_uri(data_uri: str) -> Tuple[str, bytes]:
    """Split a base64 data URI into (content_type, raw bytes)."""
    if not data_uri.startswith("data:") or ";base64," not in data_uri:
        raise ValueError("Expected a base64 data URI")

    header, payload = data_uri[len("data:"):].split(";base64,", 1)
    try:
        content = base64.b64decode(payload, validate=True)
    except binascii.Error as e:
        raise ValueError(f"Invalid base64 payload: {e}")

    return header or "application/octet-stream", content


def _extension_for(content_type: str) -> str:
    # mimetypes maps image/jpeg to .jpg on most platforms but not all
    if content_type == "image/jpeg":
        return ".jpg"
    return mimetypes.guess_extension(content_type) or ""


class MediaHost:
    """Abstract base class for media hosts"""

    def upload(self, data_uri: str) -> MediaAsset:
        """Store the encoded file and return its public URL and asset id"""
        raise NotImplementedError

    def delete(self, asset_id: str) -> None:
        """Delete a previously uploaded asset"""
        raise NotImplementedError


class LocalMediaHost(MediaHost):
    """
    Filesystem media host for development.

    Files are written to `base_dir` and are expected to be served under
    `base_url` (e.g. by a static files mount or a reverse proxy).
    """

    def __init__(self, base_dir: str = "uploads/avatars", base_url: str = "/uploads/avatars"):
        self.base_dir = base_dir
        self.base_url = base_url.rstrip("/")
        os.makedirs(self.base_dir, exist_ok=True)

    def upload(self, data_uri: str) -> MediaAsset:
        content_type, content = parse_data_uri(data_uri)
        asset_id = f"{uuid.uuid4().hex}{_extension_for(content_type)}"
        file_path = os.path.join(self.base_dir, asset_id)

        try:
            with open(file_path, "wb") as buffer:
                buffer.write(content)
        except OSError as e:
            raise MediaHostError(f"Failed to write {file_path}: {e}") from e

        logger.info(f"Stored avatar {asset_id} ({len(content)} bytes) on local disk")
        return MediaAsset(url=f"{self.base_url}/{asset_id}", asset_id=asset_id)

    def delete(self, asset_id: str) -> None:
        # basename() keeps a crafted id from escaping base_dir
        file_path = os.path.join(self.base_dir, os.path.basename(asset_id))
        try:
            if os.path.exists(file_path):
                os.remove(file_path)
        except OSError as e:
            raise MediaHostError(f"Failed to delete {file_path}: {e}") from e


class S3MediaHost(MediaHost):
    """AWS S3 media host"""

    def __init__(
        self,
        bucket_name: str,
        region: str = "us-east-1",
        prefix: str = "avatars",
        public_base_url: str = "",
        s3_client=None,
    ):
        self.bucket_name = bucket_name
        self.region = region
        self.prefix = prefix.strip("/")
        self.public_base_url = public_base_url.rstrip("/")

        if s3_client is not None:
            self.s3_client = s3_client
        # If AWS_ACCESS_KEY_ID is not set, boto3 will use IAM roles (for EC2/ECS)
        elif settings.AWS_ACCESS_KEY_ID and settings.AWS_SECRET_ACCESS_KEY:
            self.s3_client = boto3.client(
                's3',
                aws_access_key_id=settings.AWS_ACCESS_KEY_ID,
                aws_secret_access_key=settings.AWS_SECRET_ACCESS_KEY,
                region_name=region
            )
        else:
            self.s3_client = boto3.client('s3', region_name=region)

    def upload(self, data_uri: str) -> MediaAsset:
        content_type, content = parse_data_uri(data_uri)
        s3_key = f"{self.prefix}/{uuid.uuid4().hex}{_extension_for(content_type)}"

        try:
            self.s3_client.put_object(
                Bucket=self.bucket_name,
                Key=s3_key,
                Body=content,
                ContentType=content_type,
            )
        except (BotoCoreError, ClientError) as e:
            raise MediaHostError(f"Failed to upload avatar to S3: {e}") from e

        logger.info(f"Uploaded avatar to s3://{self.bucket_name}/{s3_key}")
        return MediaAsset(url=self.public_url(s3_key), asset_id=s3_key)

    def delete(self, asset_id: str) -> None:
        try:
            self.s3_client.delete_object(Bucket=self.bucket_name, Key=asset_id)
        except (BotoCoreError, ClientError) as e:
            raise MediaHostError(f"Failed to delete s3://{self.bucket_name}/{asset_id}: {e}") from e

    def public_url(self, s3_key: str) -> str:
        if self.public_base_url:
            return f"{self.public_base_url}/{s3_key}"
        return f"https://{self.bucket_name}.s3.{self.region}.amazonaws.com/{s3_key}"


@lru_cache()
def get_media_host() -> MediaHost:
    """Get media host based on MEDIA_BACKEND setting"""
    if settings.MEDIA_BACKEND == "s3":
        if not settings.S3_BUCKET_NAME:
            raise ValueError("S3_BUCKET_NAME must be set when MEDIA_BACKEND=s3")
        return S3MediaHost(
            bucket_name=settings.S3_BUCKET_NAME,
            region=settings.AWS_REGION,
            prefix=settings.S3_AVATAR_PREFIX,
            public_base_url=settings.S3_PUBLIC_BASE_URL,
        )
    if settings.MEDIA_BACKEND == "local":
        return LocalMediaHost(
            base_dir=settings.LOCAL_MEDIA_DIR,
            base_url=settings.LOCAL_MEDIA_BASE_URL,
        )
    raise ValueError(f"Unknown MEDIA_BACKEND: {settings.MEDIA_BACKEND}")


def media_host_provider() -> Callable[[], MediaHost]:
    """
    Dependency that hands out `get_media_host` without calling it.

    Endpoints only build the media host once they actually have a file to
    store, so a misconfigured backend does not break plain profile updates.
    """
    return get_media_host
