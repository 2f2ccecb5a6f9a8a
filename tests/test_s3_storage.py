import dataclasses

import boto3
import pytest
from botocore.exceptions import EndpointConnectionError
from botocore.stub import Stubber

from src.core.interfaces.storage_service import ObjectMetadata, StorageRef
from src.infrastructure.storage.s3_storage import S3StorageService

METADATA = ObjectMetadata(image_id="abc123", original_filename="cat.png", uploaded_at="2026-01-01T00:00:00+00:00")


@pytest.fixture
def s3_client():
    return boto3.client(
        "s3",
        region_name="us-east-1",
        aws_access_key_id="testing",
        aws_secret_access_key="testing",
    )


class RecordingClient:
    def __init__(self):
        self.calls = []

    def put_object(self, **kwargs):
        self.calls.append(kwargs)
        return {"ETag": '"etag-1"'}


class UnreachableClient:
    def put_object(self, **kwargs):
        raise EndpointConnectionError(endpoint_url="https://demo-bucket.s3.amazonaws.com")


def test_put_object_sends_a_single_write_with_metadata():
    client = RecordingClient()
    service = S3StorageService(bucket="demo-bucket", client=client)

    result = service.put_object(b"png-bytes", "images/abc123/cat.png", "image/png", METADATA)

    assert client.calls == [
        {
            "Bucket": "demo-bucket",
            "Key": "images/abc123/cat.png",
            "Body": b"png-bytes",
            "ContentType": "image/png",
            "Metadata": {
                "image-id": "abc123",
                "original-filename": "cat.png",
                "uploaded-at": "2026-01-01T00:00:00+00:00",
            },
        }
    ]
    assert result.ok
    assert result.ref.bucket == "demo-bucket"
    assert result.ref.size_bytes == len(b"png-bytes")
    assert result.ref.etag == "etag-1"


def test_non_ascii_filename_metadata_is_encoded():
    client = RecordingClient()
    service = S3StorageService(bucket="demo-bucket", client=client)
    metadata = ObjectMetadata(image_id="abc123", original_filename="ção.png", uploaded_at="t")

    service.put_object(b"x", "images/abc123/ção.png", "image/png", metadata)

    assert client.calls[0]["Metadata"]["original-filename"] == "%C3%A7%C3%A3o.png"


def test_put_object_against_stubbed_s3(s3_client):
    service = S3StorageService(bucket="demo-bucket", client=s3_client)

    with Stubber(s3_client) as stubber:
        stubber.add_response("put_object", {"ETag": '"etag-2"'})
        result = service.put_object(b"png-bytes", "images/abc123/cat.png", "image/png", METADATA)
        stubber.assert_no_pending_responses()

    assert result.ok
    assert result.ref.etag == "etag-2"


@pytest.mark.parametrize("code,status", [("AccessDenied", 403), ("NoSuchBucket", 404), ("InternalError", 500)])
def test_client_errors_become_storage_unavailable(s3_client, code, status):
    service = S3StorageService(bucket="demo-bucket", client=s3_client)

    with Stubber(s3_client) as stubber:
        stubber.add_client_error("put_object", service_error_code=code, http_status_code=status)
        result = service.put_object(b"x", "images/abc123/cat.png", "image/png", METADATA)

    assert not result.ok
    assert result.ref is None
    assert result.failure.kind == "StorageUnavailable"
    assert result.failure.error_code == code


def test_transport_errors_become_storage_unavailable():
    service = S3StorageService(bucket="demo-bucket", client=UnreachableClient())

    result = service.put_object(b"x", "images/abc123/cat.png", "image/png", METADATA)

    assert not result.ok
    assert result.failure.kind == "StorageUnavailable"


def test_public_url():
    service = S3StorageService(bucket="demo-bucket", client=RecordingClient())
    assert service.public_url("images/abc123/cat.png") == "https://demo-bucket.s3.amazonaws.com/images/abc123/cat.png"

    minio = S3StorageService(bucket="demo-bucket", client=RecordingClient(), public_base_url="http://localhost:9000")
    assert minio.public_url("images/abc123/cat.png") == "http://localhost:9000/demo-bucket/images/abc123/cat.png"


def test_missing_bucket_name_is_rejected():
    with pytest.raises(ValueError):
        S3StorageService(bucket="", client=RecordingClient())


def test_storage_ref_carries_only_write_confirmation():
    assert [f.name for f in dataclasses.fields(StorageRef)] == ["bucket", "key", "size_bytes", "content_type", "etag"]


def test_memory_store_ref_has_no_etag(storage):
    metadata = ObjectMetadata(image_id="x", original_filename="cat.png", uploaded_at="2026-10-18T12:00:00+00:00")

    result = storage.put_object(b"png", "images/x/cat.png", "image/png", metadata)

    assert result.ok
    assert result.ref.etag is None
    assert result.ref.size_bytes == 3
