"""Tests for the S3 blob store, using a mocked boto3 client."""

from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError

from dev_events.app.core.blob_store import S3BlobStore
from dev_events.app.core.errors import BlobStoreError, UploadFailedError


def client_error(operation):
    return ClientError({"Error": {"Code": "500", "Message": "boom"}}, operation)


def test_upload_returns_url_and_key():
    s3 = MagicMock()
    blobs = S3BlobStore(bucket="dev-events", prefix="events/", region="eu-west-1", client=s3)

    uploaded = blobs.upload(b"data", filename="Banner.PNG")

    assert uploaded.id.startswith("events/") and uploaded.id.endswith(".png")
    assert uploaded.url == f"https://dev-events.s3.eu-west-1.amazonaws.com/{uploaded.id}"
    s3.put_object.assert_called_once_with(
        Bucket="dev-events", Key=uploaded.id, Body=b"data", ContentType="image/png"
    )


def test_upload_uses_public_url_when_configured():
    blobs = S3BlobStore(bucket="b", public_url="https://cdn.example.com/", client=MagicMock())

    uploaded = blobs.upload(b"data", filename="a.jpg")

    assert uploaded.url == f"https://cdn.example.com/{uploaded.id}"


def test_upload_with_custom_endpoint():
    blobs = S3BlobStore(bucket="b", endpoint_url="http://localhost:9000", client=MagicMock())

    uploaded = blobs.upload(b"data")

    assert uploaded.url == f"http://localhost:9000/b/{uploaded.id}"


def test_upload_failure():
    s3 = MagicMock()
    s3.put_object.side_effect = client_error("PutObject")

    with pytest.raises(UploadFailedError):
        S3BlobStore(bucket="b", client=s3).upload(b"data")


def test_upload_without_bucket():
    with pytest.raises(UploadFailedError):
        S3BlobStore(bucket="", client=MagicMock()).upload(b"data")


def test_delete():
    s3 = MagicMock()

    S3BlobStore(bucket="b", client=s3).delete("events/abc.png")

    s3.delete_object.assert_called_once_with(Bucket="b", Key="events/abc.png")


def test_delete_failure():
    s3 = MagicMock()
    s3.delete_object.side_effect = client_error("DeleteObject")

    with pytest.raises(BlobStoreError):
        S3BlobStore(bucket="b", client=s3).delete("events/abc.png")
