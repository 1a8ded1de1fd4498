import logging
import re
import secrets
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from functools import lru_cache

import boto3
from botocore.config import Config as BotoConfig
from botocore.exceptions import BotoCoreError, ClientError
from sqlalchemy.orm import Session

from skillshub.config import get_settings
from skillshub.errors import InfrastructureError, ValidationError
from skillshub.models import FileObject
from skillshub.models.enums import FileKind
from skillshub.services.access import commit_or_raise

settings = get_settings()
logger = logging.getLogger(__name__)

BUCKET_PREFIXES = {
    FileKind.CV: "applications/cv",
    FileKind.COVER_LETTER: "applications/cover-letters",
    FileKind.RESUME: "profiles/resumes",
    FileKind.PORTFOLIO: "profiles/portfolio",
    FileKind.PROFILE_PHOTO: "profiles/photos",
    FileKind.COMPANY_LOGO: "companies/logos",
    FileKind.OTHER: "misc",
}

IMAGE_TYPES = ["image/jpeg", "image/jpg", "image/png", "image/webp"]


@dataclass
class StoredObject:
    key: str
    size_bytes: int
    etag: str | None = None


class ObjectStore(ABC):
    @abstractmethod
    def put(self, key: str, data: bytes, content_type: str) -> StoredObject:
        ...

    @abstractmethod
    def url_for(self, key: str, expires_in: int | None = None) -> str:
        """Time-limited download URL for the object."""

    @abstractmethod
    def delete(self, key: str) -> None:
        ...


class S3ObjectStore(ObjectStore):
    """Objects in an S3 bucket, or any S3-compatible service via a custom endpoint."""

    def __init__(
        self,
        bucket: str,
        region: str,
        access_key_id: str,
        secret_access_key: str,
        endpoint: str | None = None,
        force_path_style: bool = False,
        timeout: float = 10.0,
        url_expiry: int = 3600,
    ):
        self.bucket = bucket
        self.url_expiry = url_expiry
        self.client = boto3.client(
            "s3",
            region_name=region,
            endpoint_url=endpoint or None,
            aws_access_key_id=access_key_id,
            aws_secret_access_key=secret_access_key,
            config=BotoConfig(
                connect_timeout=timeout,
                read_timeout=timeout,
                retries={"max_attempts": 3, "mode": "standard"},
                s3={"addressing_style": "path" if force_path_style else "auto"},
            ),
        )

    def put(self, key: str, data: bytes, content_type: str) -> StoredObject:
        try:
            result = self.client.put_object(
                Bucket=self.bucket, Key=key, Body=data, ContentType=content_type
            )
        except (BotoCoreError, ClientError) as e:
            logger.exception("Failed to upload %s to bucket %s", key, self.bucket)
            raise InfrastructureError("Failed to upload file") from e
        return StoredObject(key=key, size_bytes=len(data), etag=result.get("ETag"))

    def url_for(self, key: str, expires_in: int | None = None) -> str:
        try:
            return self.client.generate_presigned_url(
                "get_object",
                Params={"Bucket": self.bucket, "Key": key},
                ExpiresIn=expires_in or self.url_expiry,
            )
        except (BotoCoreError, ClientError) as e:
            logger.exception("Failed to sign download URL for %s", key)
            raise InfrastructureError("Failed to generate file URL") from e

    def delete(self, key: str) -> None:
        try:
            self.client.delete_object(Bucket=self.bucket, Key=key)
        except (BotoCoreError, ClientError) as e:
            logger.exception("Failed to delete %s from bucket %s", key, self.bucket)
            raise InfrastructureError("Failed to delete file") from e


class UnconfiguredObjectStore(ObjectStore):
    """Stand-in used when no storage credentials are set."""

    message = "File storage is not configured. Set S3_ACCESS_KEY_ID and S3_SECRET_ACCESS_KEY."

    def put(self, key: str, data: bytes, content_type: str) -> StoredObject:
        raise InfrastructureError(self.message)

    def url_for(self, key: str, expires_in: int | None = None) -> str:
        raise InfrastructureError(self.message)

    def delete(self, key: str) -> None:
        raise InfrastructureError(self.message)


@lru_cache
def get_object_store() -> ObjectStore:
    if not settings.s3_configured:
        logger.warning("S3 credentials not configured, file uploads are disabled")
        return UnconfiguredObjectStore()
    return S3ObjectStore(
        bucket=settings.s3_bucket,
        region=settings.s3_region,
        access_key_id=settings.s3_access_key_id,
        secret_access_key=settings.s3_secret_access_key,
        endpoint=settings.s3_endpoint,
        force_path_style=settings.s3_force_path_style,
        timeout=settings.s3_timeout_seconds,
        url_expiry=settings.s3_url_expiry_seconds,
    )


def bucket_key_prefix(kind: FileKind | str) -> str:
    try:
        return BUCKET_PREFIXES[FileKind(kind)]
    except ValueError:
        return BUCKET_PREFIXES[FileKind.OTHER]


def sanitize_filename(filename: str) -> str:
    name = re.sub(r"[^a-zA-Z0-9._-]", "_", filename or "")
    return name[-100:] or "file"


def build_bucket_key(prefix: str, filename: str) -> str:
    """``prefix/<millis>-<random hex>-<sanitized name>``"""
    return f"{prefix}/{int(time.time() * 1000)}-{secrets.token_hex(8)}-{sanitize_filename(filename)}"


def validate_upload(
    size: int,
    content_type: str | None,
    max_size: int | None = None,
    allowed: list[str] | None = None,
) -> None:
    max_size = max_size if max_size is not None else settings.max_file_size
    allowed = allowed if allowed is not None else settings.allowed_file_type_list

    if size <= 0:
        raise ValidationError("File is empty")
    if size > max_size:
        raise ValidationError(
            f"File size exceeds maximum allowed size of {max_size // (1024 * 1024)}MB"
        )
    if not content_type or content_type not in allowed:
        raise ValidationError(f"File type {content_type} is not allowed")


def store_upload(
    db: Session,
    store: ObjectStore,
    kind: FileKind | str,
    filename: str,
    content_type: str,
    data: bytes,
    user_id: int | None,
) -> FileObject:
    """Upload bytes and add a ``files`` row to the session. The caller commits."""
    key = build_bucket_key(bucket_key_prefix(kind), filename)
    stored = store.put(key, data, content_type)

    file = FileObject(
        bucket_key=stored.key,
        content_type=content_type,
        size_bytes=stored.size_bytes,
        etag=stored.etag,
        created_by_id=user_id,
    )
    db.add(file)
    db.flush()
    return file


def commit_upload(db: Session, store: ObjectStore, file: FileObject, message: str) -> None:
    """Commit the session; on failure remove the already uploaded object and re-raise."""
    key = file.bucket_key
    try:
        commit_or_raise(db, message)
    except InfrastructureError:
        try:
            store.delete(key)
        except Exception:
            logger.warning("Could not remove orphaned object %s after failed commit", key)
        raise
