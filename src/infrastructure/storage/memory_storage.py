"""
Adapter: In-Memory Storage Service

Dict-backed store for local development (STORAGE_BACKEND=memory) and tests.
"""

import logging
import threading
from dataclasses import dataclass

from src.core.interfaces.storage_service import (
    IStorageService,
    ObjectMetadata,
    PutObjectResult,
    StorageFailure,
    StorageRef,
)
from src.infrastructure.storage.public_url import build_public_url

logger = logging.getLogger(__name__)


@dataclass
class StoredObject:
    data: bytes
    content_type: str
    metadata: dict[str, str]


class InMemoryStorageService(IStorageService):
    """Set `fail_with` to simulate an unavailable store."""

    def __init__(self, bucket: str = "local-bucket", public_base_url: str | None = None):
        self._bucket = bucket
        self._public_base_url = public_base_url
        self._objects: dict[str, StoredObject] = {}
        self._lock = threading.Lock()
        self.fail_with: str | None = None
        self.put_calls = 0

    @property
    def bucket(self) -> str:
        return self._bucket

    @property
    def objects(self) -> dict[str, StoredObject]:
        with self._lock:
            return dict(self._objects)

    def put_object(
        self,
        data: bytes,
        key: str,
        content_type: str,
        metadata: ObjectMetadata,
    ) -> PutObjectResult:
        with self._lock:
            self.put_calls += 1
            if self.fail_with:
                logger.error(f"In-memory store failing put for {key}: {self.fail_with}")
                return PutObjectResult(failure=StorageFailure(message=self.fail_with))
            self._objects[key] = StoredObject(
                data=bytes(data),
                content_type=content_type,
                metadata=metadata.to_dict(),
            )

        return PutObjectResult(
            ref=StorageRef(
                bucket=self._bucket,
                key=key,
                size_bytes=len(data),
                content_type=content_type,
            )
        )

    def public_url(self, key: str) -> str:
        return build_public_url(self._bucket, key, self._public_base_url)
