"""
Blob store for event images.

Images are uploaded to an S3 bucket (or any S3-compatible host reached
through ``S3_ENDPOINT_URL``) with ``boto3``.  ``upload`` returns an
``UploadedImage`` with the public URL and the object key; the key is
what ``delete`` takes to remove the object again.
"""

import logging
import mimetypes
import threading
import uuid
from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import Any, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from .config import settings
from .errors import BlobStoreError, UploadFailedError


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UploadedImage:
    """An object stored in the blob store.

    Attributes:
        url: Public URL of the object.
        id: Object key, used to delete the object.
    """

    url: str
    id: str


class S3BlobStore:
    """Upload and delete images in an S3 bucket."""

    def __init__(
        self,
        *,
        bucket: str,
        prefix: str = "",
        region: str = "us-east-1",
        endpoint_url: Optional[str] = None,
        public_url: Optional[str] = None,
        client: Any = None,
    ) -> None:
        self.bucket = bucket
        self.prefix = prefix
        self.region = region
        self.endpoint_url = endpoint_url or None
        self.public_url = (public_url or "").rstrip("/")
        self._client = client

    @property
    def client(self) -> Any:
        if self._client is None:
            self._client = boto3.client(
                "s3", region_name=self.region, endpoint_url=self.endpoint_url
            )
        return self._client

    def _object_url(self, key: str) -> str:
        if self.public_url:
            return f"{self.public_url}/{key}"
        if self.endpoint_url:
            return f"{self.endpoint_url.rstrip('/')}/{self.bucket}/{key}"
        return f"https://{self.bucket}.s3.{self.region}.amazonaws.com/{key}"

    def upload(
        self,
        data: bytes,
        *,
        filename: str = "",
        content_type: Optional[str] = None,
    ) -> UploadedImage:
        """Store ``data`` under a fresh key and return its URL and key."""
        if not self.bucket:
            raise UploadFailedError("S3_BUCKET is not configured")
        suffix = PurePosixPath(filename).suffix.lower() if filename else ""
        key = f"{self.prefix}{uuid.uuid4().hex}{suffix}"
        content_type = content_type or mimetypes.guess_type(filename)[0] or "application/octet-stream"
        try:
            self.client.put_object(
                Bucket=self.bucket, Key=key, Body=data, ContentType=content_type
            )
        except (BotoCoreError, ClientError) as exc:
            logger.error("Failed to upload %s to s3://%s/%s: %s", filename or "image", self.bucket, key, exc)
            raise UploadFailedError(str(exc)) from exc
        logger.info("Uploaded %s to s3://%s/%s", filename or "image", self.bucket, key)
        return UploadedImage(url=self._object_url(key), id=key)

    def delete(self, id: str) -> None:
        """Remove the object with key ``id``."""
        try:
            self.client.delete_object(Bucket=self.bucket, Key=id)
        except (BotoCoreError, ClientError) as exc:
            raise BlobStoreError(str(exc)) from exc
        logger.info("Deleted s3://%s/%s", self.bucket, id)


_blob_store: Optional[S3BlobStore] = None
_blob_store_lock = threading.Lock()


def get_blob_store() -> S3BlobStore:
    """FastAPI dependency returning the process-wide blob store."""
    global _blob_store
    if _blob_store is None:
        with _blob_store_lock:
            if _blob_store is None:
                _blob_store = S3BlobStore(
                    bucket=settings.s3_bucket,
                    prefix=settings.s3_prefix,
                    region=settings.s3_region,
                    endpoint_url=settings.s3_endpoint_url,
                    public_url=settings.s3_public_url,
                )
    return _blob_store
