"""Blob storage for voice complaint recordings.

Two backends, selected by STORAGE_BACKEND: ``local`` writes under
LOCAL_STORAGE_PATH and is served by the app at LOCAL_STORAGE_BASE_URL;
``s3`` writes to S3_BUCKET. Both return a durable URL plus the reference
needed to delete the object later.
"""

import logging
import mimetypes
import os
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from app.core.config import Settings

logger = logging.getLogger(__name__)


class BlobStorageError(Exception):
    """The blob backend could not complete an upload or delete."""


@dataclass(frozen=True)
class StoredBlob:
    url: str
    ref: str


def build_storage_key(enterprise_id: int, content_type: str) -> str:
    """Storage key namespaced by tenant, e.g. ``7/3f2a...c1.webm``."""
    base_type = content_type.split(";", 1)[0].strip().lower()
    ext = mimetypes.guess_extension(base_type) or ".bin"
    return f"{enterprise_id}/{uuid.uuid4().hex}{ext}"


class BlobStore(ABC):
    @abstractmethod
    def upload(self, data: bytes, *, key: str, content_type: str) -> StoredBlob:
        """Store ``data`` under ``key`` and return its durable URL."""

    @abstractmethod
    def delete(self, ref: str) -> None:
        """Delete a previously stored blob. Missing objects are not an error."""


class LocalBlobStore(BlobStore):
    def __init__(self, root: str, base_url: str):
        self.root = root
        self.base_url = base_url.rstrip("/")
        os.makedirs(self.root, exist_ok=True)

    def _path(self, ref: str) -> str:
        path = os.path.realpath(os.path.join(self.root, ref))
        if not path.startswith(os.path.realpath(self.root) + os.sep):
            raise BlobStorageError(f"Storage key escapes storage root: {ref}")
        return path

    def upload(self, data: bytes, *, key: str, content_type: str) -> StoredBlob:
        path = self._path(key)
        try:
            os.makedirs(os.path.dirname(path), exist_ok=True)
            with open(path, "wb") as f:
                f.write(data)
        except OSError as e:
            raise BlobStorageError(f"Failed to write {key}: {e}") from e
        return StoredBlob(url=f"{self.base_url}/{key}", ref=key)

    def delete(self, ref: str) -> None:
        path = self._path(ref)
        try:
            if os.path.exists(path):
                os.remove(path)
        except OSError as e:
            raise BlobStorageError(f"Failed to delete {ref}: {e}") from e


class S3BlobStore(BlobStore):
    def __init__(
        self,
        bucket: str,
        region: str,
        public_base_url: str = "",
        access_key_id: str = "",
        secret_access_key: str = "",
    ):
        self.bucket = bucket
        self.region = region
        self.public_base_url = public_base_url.rstrip("/")
        client_kwargs = {"region_name": region}
        if access_key_id and secret_access_key:
            client_kwargs["aws_access_key_id"] = access_key_id
            client_kwargs["aws_secret_access_key"] = secret_access_key
        self.client = boto3.client("s3", **client_kwargs)

    def _url(self, key: str) -> str:
        if self.public_base_url:
            return f"{self.public_base_url}/{key}"
        return f"https://{self.bucket}.s3.{self.region}.amazonaws.com/{key}"

    def upload(self, data: bytes, *, key: str, content_type: str) -> StoredBlob:
        try:
            self.client.put_object(
                Bucket=self.bucket, Key=key, Body=data, ContentType=content_type
            )
        except (BotoCoreError, ClientError) as e:
            raise BlobStorageError(f"S3 upload failed for {key}: {e}") from e
        return StoredBlob(url=self._url(key), ref=key)

    def delete(self, ref: str) -> None:
        try:
            self.client.delete_object(Bucket=self.bucket, Key=ref)
        except (BotoCoreError, ClientError) as e:
            raise BlobStorageError(f"S3 delete failed for {ref}: {e}") from e


def build_blob_store(settings: Settings) -> BlobStore:
    """Get configured storage backend."""
    if settings.STORAGE_BACKEND == "s3":
        return S3BlobStore(
            bucket=settings.S3_BUCKET,
            region=settings.S3_REGION,
            public_base_url=settings.S3_PUBLIC_BASE_URL,
            access_key_id=settings.AWS_ACCESS_KEY_ID,
            secret_access_key=settings.AWS_SECRET_ACCESS_KEY,
        )
    if settings.STORAGE_BACKEND != "local":
        logger.warning("Unknown STORAGE_BACKEND %r, using local storage", settings.STORAGE_BACKEND)
    return LocalBlobStore(settings.LOCAL_STORAGE_PATH, settings.LOCAL_STORAGE_BASE_URL)
