"""
Adapter: S3 Storage Service

Implementação concreta do contrato IStorageService usando boto3.
Works against AWS S3 or any S3-compatible endpoint (MinIO, LocalStack)
by setting endpoint_url; only the connection settings change.
"""

import logging
from urllib.parse import quote

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from src.core.interfaces.storage_service import (
    IStorageService,
    ObjectMetadata,
    PutObjectResult,
    StorageFailure,
    StorageRef,
)
from src.infrastructure.storage.public_url import build_public_url

logger = logging.getLogger(__name__)


def create_s3_client(
    region: str | None = None,
    endpoint_url: str | None = None,
    access_key: str | None = None,
    secret_key: str | None = None,
):
    """Cria o client boto3. Sem chaves explícitas, usa a credential chain padrão."""
    client_config = {}
    if region:
        client_config["region_name"] = region
    if endpoint_url:
        client_config["endpoint_url"] = endpoint_url
    if access_key and secret_key:
        client_config["aws_access_key_id"] = access_key
        client_config["aws_secret_access_key"] = secret_key
    return boto3.client("s3", **client_config)


def _header_safe(value: str) -> str:
    # S3 user metadata travels as HTTP headers: ASCII only
    return value if value.isascii() else quote(value, safe="")


class S3StorageService(IStorageService):
    """
    Storage de imagens em S3.

    Bucket and public-read policy are provisioned out of band; this
    adapter only writes objects.
    """

    def __init__(self, bucket: str, client=None, public_base_url: str | None = None, **client_kwargs):
        if not bucket:
            raise ValueError("S3 bucket name not configured")
        self._bucket = bucket
        self._client = client or create_s3_client(**client_kwargs)
        self._public_base_url = public_base_url

    @property
    def bucket(self) -> str:
        return self._bucket

    def put_object(
        self,
        data: bytes,
        key: str,
        content_type: str,
        metadata: ObjectMetadata,
    ) -> PutObjectResult:
        try:
            response = self._client.put_object(
                Bucket=self._bucket,
                Key=key,
                Body=data,
                ContentType=content_type,
                Metadata={k: _header_safe(v) for k, v in metadata.to_dict().items()},
            )
        except ClientError as e:
            code = e.response.get("Error", {}).get("Code")
            logger.error(f"S3 put_object failed for {self._bucket}/{key}: {code} {e}")
            return PutObjectResult(
                failure=StorageFailure(message=f"Object store rejected the write ({code})", error_code=code)
            )
        except BotoCoreError as e:
            logger.error(f"S3 put_object failed for {self._bucket}/{key}: {e}")
            return PutObjectResult(failure=StorageFailure(message="Object store unreachable"))

        etag = (response.get("ETag") or "").strip('"') or None
        logger.debug(f"Stored s3://{self._bucket}/{key} etag={etag}")
        return PutObjectResult(
            ref=StorageRef(
                bucket=self._bucket,
                key=key,
                size_bytes=len(data),
                content_type=content_type,
                etag=etag,
            )
        )

    def public_url(self, key: str) -> str:
        return build_public_url(self._bucket, key, self._public_base_url)
