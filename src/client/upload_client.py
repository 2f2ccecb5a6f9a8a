"""
Upload Client.

Applies the same upload policy as the service before sending, then posts
the file as multipart/form-data to POST /api/images/upload.
"""

import logging
import mimetypes
from datetime import datetime
from pathlib import Path

import requests

from src.core.entities.image import UploadRequest, UploadResult, base_file_name
from src.core.interfaces.upload_validator import UploadPolicy
from src.infrastructure.rules.image_upload_rules import ImageUploadValidator

logger = logging.getLogger(__name__)

UPLOAD_PATH = "/api/images/upload"
POLICY_PATH = "/api/images/policy"

_IMAGE_TYPES = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".gif": "image/gif",
    ".webp": "image/webp",
}


class UploadClientError(Exception):
    """Upload refused locally or by the service."""

    def __init__(self, kind: str, message: str, status_code: int | None = None):
        super().__init__(f"{kind}: {message}")
        self.kind = kind
        self.message = message
        self.status_code = status_code


def guess_content_type(file_name: str) -> str:
    suffix = Path(file_name).suffix.lower()
    if suffix in _IMAGE_TYPES:
        return _IMAGE_TYPES[suffix]
    guessed, _ = mimetypes.guess_type(file_name)
    return guessed or "application/octet-stream"


class ImageUploadClient:
    """Client HTTP do serviço de upload."""

    def __init__(
        self,
        base_url: str,
        policy: UploadPolicy | None = None,
        session: requests.Session | None = None,
        timeout: float | tuple[float, float] = (5.0, 60.0),
    ):
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout
        self._validator = ImageUploadValidator(policy)

    def fetch_policy(self) -> UploadPolicy:
        """Load the service's active policy and validate against it from now on."""
        r = self.session.get(f"{self.base_url}{POLICY_PATH}", timeout=self.timeout)
        r.raise_for_status()
        body = r.json()
        policy = UploadPolicy(
            max_size_bytes=int(body["max_size_bytes"]),
            allowed_content_types=frozenset(body["allowed_content_types"]),
            allowed_extensions=frozenset(body["allowed_extensions"]),
        )
        self._validator = ImageUploadValidator(policy)
        return policy

    def upload(
        self,
        source: str | Path | bytes,
        file_name: str | None = None,
        content_type: str | None = None,
    ) -> UploadResult:
        """
        Upload an image file (path) or raw bytes.

        Raises:
            UploadClientError: local validation failed or the service refused the upload.
        """
        if isinstance(source, bytes):
            if not file_name:
                raise ValueError("file_name is required when uploading raw bytes")
            content = source
        else:
            path = Path(source)
            content = path.read_bytes()
            file_name = file_name or path.name

        file_name = base_file_name(file_name)

        content_type = content_type or guess_content_type(file_name)
        request = UploadRequest(file_name=file_name, declared_content_type=content_type, content=content)

        failure = self._validator.validate(request)
        if failure is not None:
            raise UploadClientError(failure.kind.value, failure.message)

        r = self.session.post(
            f"{self.base_url}{UPLOAD_PATH}",
            files={"file": (file_name, content, content_type)},
            timeout=self.timeout,
        )
        if r.status_code != 200:
            kind, message = "HttpError", r.text
            try:
                body = r.json()
                kind = body.get("kind", kind)
                message = body.get("message", message)
            except ValueError:
                pass
            logger.error(f"Upload failed: {r.status_code} - {kind}: {message}")
            raise UploadClientError(kind, message, status_code=r.status_code)

        return parse_upload_result(r.json())


def parse_upload_result(body: dict) -> UploadResult:
    uploaded_at = body["uploaded_at"]
    if isinstance(uploaded_at, str):
        uploaded_at = datetime.fromisoformat(uploaded_at.replace("Z", "+00:00"))
    return UploadResult(
        id=body["id"],
        file_name=body["file_name"],
        content_type=body["content_type"],
        size_in_bytes=int(body["size_in_bytes"]),
        storage_key=body["storage_key"],
        container_name=body["container_name"],
        uploaded_at=uploaded_at,
        public_url=body["public_url"],
    )
