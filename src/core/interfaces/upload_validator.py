"""
Contract: Upload Validator

Decide se um upload pode seguir para o storage. Checks are pure
and run before any I/O; the first failing check wins.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum

from src.core.entities.image import UploadRequest


class ValidationKind(str, Enum):
    EMPTY_PAYLOAD = "EmptyPayload"
    PAYLOAD_TOO_LARGE = "PayloadTooLarge"
    UNSUPPORTED_CONTENT_TYPE = "UnsupportedContentType"
    UNSUPPORTED_EXTENSION = "UnsupportedExtension"


@dataclass(frozen=True)
class UploadPolicy:
    """Limits applied to every upload. Shared by the API and the client."""
    max_size_bytes: int = 10 * 1024 * 1024
    allowed_content_types: frozenset[str] = frozenset(
        {"image/jpeg", "image/jpg", "image/png", "image/gif", "image/webp"}
    )
    allowed_extensions: frozenset[str] = frozenset(
        {".jpg", ".jpeg", ".png", ".gif", ".webp"}
    )
    key_prefix: str = "images/"


@dataclass(frozen=True)
class ValidationFailure:
    """Uma regra violada, com o valor recebido."""
    kind: ValidationKind
    message: str
    received: str | int | None = None


class IUploadValidator(ABC):
    """
    Port: Upload Validator

    Aplica a política de upload (tamanho, content type, extensão)
    sobre um UploadRequest.
    """

    @abstractmethod
    def validate(self, request: UploadRequest) -> ValidationFailure | None:
        """
        Valida o request.

        Args:
            request: Upload recebido.

        Returns:
            None quando o request passa, senão a primeira falha encontrada.
        """
        ...
