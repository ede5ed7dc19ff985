"""Attachment storage on an S3-compatible provider.

Objects are addressed by their key, which doubles as the opaque
``public_id`` stored on chat messages.
"""

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
import re
import uuid

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from chatapp.core.config import settings
from chatapp.core.logging import get_logger

logger = get_logger(__name__)

ATTACHMENT_FOLDER = "chat-attachments"


class StorageError(Exception):
    """Base exception for storage operations."""


class AttachmentTooLargeError(StorageError):
    """Raised when an attachment exceeds the size limit."""


@dataclass
class StoredObject:
    url: str
    public_id: str
    resource_type: str
    content_type: str
    size: int


def sanitize_filename(filename: str) -> str:
    """Strip path components and control characters from an uploaded filename."""
    safe_name = Path(filename).name
    safe_name = safe_name.replace("..", "").replace("/", "").replace("\\", "")
    safe_name = re.sub(r"[\x00-\x1f\x7f]", "", safe_name)

    if not safe_name or safe_name.startswith("."):
        safe_name = "unnamed_file"

    return safe_name


def resource_type_for(content_type: str | None) -> str:
    """Map a MIME type onto the provider resource type ("image", "video", "raw")."""
    if not content_type:
        return "raw"
    if content_type.startswith("image/"):
        return "image"
    if content_type.startswith(("video/", "audio/")):
        return "video"
    return "raw"


@lru_cache(maxsize=1)
def get_s3_client():
    return boto3.client(
        "s3",
        endpoint_url=settings.S3_ENDPOINT_URL,
        aws_access_key_id=settings.S3_ACCESS_KEY,
        aws_secret_access_key=settings.S3_SECRET_KEY,
        config=Config(
            signature_version="s3v4",
            s3={"addressing_style": "path"},
        ),
    )


def ensure_bucket_exists(client=None) -> None:
    if client is None:
        client = get_s3_client()

    try:
        client.head_bucket(Bucket=settings.S3_BUCKET_NAME)
    except ClientError as e:
        error_code = e.response.get("Error", {}).get("Code")
        if error_code in ("404", "NoSuchBucket"):
            logger.info("creating_bucket", bucket=settings.S3_BUCKET_NAME)
            client.create_bucket(Bucket=settings.S3_BUCKET_NAME)
        else:
            raise StorageError(f"Failed to check bucket: {e}") from e


def ping() -> bool:
    """Check that the storage provider is reachable and the bucket exists."""
    try:
        ensure_bucket_exists()
    except (StorageError, ClientError, BotoCoreError) as e:
        logger.warning("storage_ping_failed", error=str(e))
        return False
    return True


def get_attachment_url(public_id: str) -> str:
    return f"{settings.s3_public_base_url}/{settings.S3_BUCKET_NAME}/{public_id}"


def upload_attachment(
    content: bytes,
    filename: str,
    content_type: str | None = None,
) -> StoredObject:
    """Upload a message attachment.

    Args:
        content: File content as bytes
        filename: Original filename
        content_type: MIME type of the file

    Returns:
        The stored object with its public URL and public_id

    Raises:
        AttachmentTooLargeError: If the file exceeds MAX_ATTACHMENT_SIZE_MB
        StorageError: For provider errors
    """
    if len(content) > settings.max_attachment_size_bytes:
        raise AttachmentTooLargeError(
            f"File too large: {len(content)} bytes. "
            f"Maximum size: {settings.max_attachment_size_bytes} bytes"
        )

    content_type = content_type or "application/octet-stream"
    public_id = f"{ATTACHMENT_FOLDER}/{uuid.uuid4()}_{sanitize_filename(filename)}"

    client = get_s3_client()
    try:
        ensure_bucket_exists(client)
        client.put_object(
            Bucket=settings.S3_BUCKET_NAME,
            Key=public_id,
            Body=content,
            ContentType=content_type,
        )
        logger.info("attachment_uploaded", key=public_id, size=len(content))
    except (ClientError, BotoCoreError) as e:
        logger.exception("attachment_upload_failed", key=public_id, error=str(e))
        raise StorageError(f"Failed to upload attachment: {e}") from e

    return StoredObject(
        url=get_attachment_url(public_id),
        public_id=public_id,
        resource_type=resource_type_for(content_type),
        content_type=content_type,
        size=len(content),
    )


def delete_attachment(public_id: str | None, resource_type: str = "image") -> bool:
    """Destroy an attachment on the provider.

    Errors are logged, not raised: a failed destroy must never fail the
    request that triggered it.

    Returns:
        True if deleted, False if there was nothing to delete or the call failed
    """
    if not public_id:
        return False

    client = get_s3_client()
    try:
        client.delete_object(Bucket=settings.S3_BUCKET_NAME, Key=public_id)
        logger.info("attachment_deleted", key=public_id, resource_type=resource_type)
    except (ClientError, BotoCoreError) as e:
        logger.exception("attachment_delete_failed", key=public_id, error=str(e))
        return False
    else:
        return True
