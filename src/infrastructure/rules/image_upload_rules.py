"""
Image upload rules.

Checks, in order (first failure wins):
- non-empty payload
- size within the policy limit (inclusive)
- declared content type in the allow-list (case-insensitive)
- file extension in the allow-list (case-insensitive),
  on a plain file name (no path segments)
"""

from src.core.entities.image import UploadRequest
from src.core.interfaces.upload_validator import (
    IUploadValidator,
    UploadPolicy,
    ValidationFailure,
    ValidationKind,
)


class ImageUploadValidator(IUploadValidator):
    """Validator puro: sem I/O, sem estado além da política."""

    def __init__(self, policy: UploadPolicy | None = None):
        self._policy = policy or UploadPolicy()

    @property
    def policy(self) -> UploadPolicy:
        return self._policy

    def validate(self, request: UploadRequest) -> ValidationFailure | None:
        for check in (
            self._check_not_empty,
            self._check_size,
            self._check_content_type,
            self._check_extension,
        ):
            failure = check(request)
            if failure is not None:
                return failure
        return None

    # ─── Regras ─────────────────────────────────────────────

    def _check_not_empty(self, request: UploadRequest) -> ValidationFailure | None:
        if request.byte_length > 0:
            return None
        return ValidationFailure(
            kind=ValidationKind.EMPTY_PAYLOAD,
            message="Image payload is empty",
            received=0,
        )

    def _check_size(self, request: UploadRequest) -> ValidationFailure | None:
        limit = self._policy.max_size_bytes
        if request.byte_length <= limit:
            return None
        # the transport may stop reading past the limit; its size is the real one
        received = max(request.byte_length, request.declared_length or 0)
        return ValidationFailure(
            kind=ValidationKind.PAYLOAD_TOO_LARGE,
            message=f"File size exceeds maximum allowed size of {limit} bytes",
            received=received,
        )

    def _check_content_type(self, request: UploadRequest) -> ValidationFailure | None:
        content_type = (request.declared_content_type or "").strip().lower()
        if content_type in self._policy.allowed_content_types:
            return None
        allowed = ", ".join(sorted(self._policy.allowed_content_types))
        return ValidationFailure(
            kind=ValidationKind.UNSUPPORTED_CONTENT_TYPE,
            message=f"Content type '{request.declared_content_type}' is not supported (allowed: {allowed})",
            received=request.declared_content_type,
        )

    def _check_extension(self, request: UploadRequest) -> ValidationFailure | None:
        if request.has_path_segments:
            return ValidationFailure(
                kind=ValidationKind.UNSUPPORTED_EXTENSION,
                message="File name must not contain path segments",
                received=request.file_name,
            )
        extension = request.extension
        if extension in self._policy.allowed_extensions:
            return None
        allowed = ", ".join(sorted(self._policy.allowed_extensions))
        return ValidationFailure(
            kind=ValidationKind.UNSUPPORTED_EXTENSION,
            message=f"File extension '{extension or '(none)'}' is not supported (allowed: {allowed})",
            received=request.file_name,
        )
