"""
Contract: Storage Service

Grava imagens em object storage (S3 / MinIO / memória).
One write per upload; the object is either fully present under
its key or absent.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field


STORAGE_UNAVAILABLE = "StorageUnavailable"


@dataclass
class StorageRef:
    """Referência a um arquivo armazenado."""
    bucket: str
    key: str
    size_bytes: int
    content_type: str
    etag: str | None = None


@dataclass
class StorageFailure:
    """Falha do object store (transporte, auth, permissão, bucket inexistente)."""
    message: str
    kind: str = STORAGE_UNAVAILABLE
    error_code: str | None = None


@dataclass
class PutObjectResult:
    """Resultado de um put: ref XOR failure."""
    ref: StorageRef | None = None
    failure: StorageFailure | None = None

    @property
    def ok(self) -> bool:
        return self.ref is not None and self.failure is None


@dataclass
class ObjectMetadata:
    """Metadados gravados junto com o objeto, para rastreabilidade."""
    image_id: str
    original_filename: str
    uploaded_at: str                     # ISO-8601 UTC
    extra: dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict[str, str]:
        return {
            "image-id": self.image_id,
            "original-filename": self.original_filename,
            "uploaded-at": self.uploaded_at,
            **self.extra,
        }


class IStorageService(ABC):
    """
    Port: Storage Service

    Gerencia persistência de imagens. Implementação pode ser
    S3, MinIO (API S3) ou memória.
    """

    @property
    @abstractmethod
    def bucket(self) -> str:
        """Nome do bucket/container de destino."""
        ...

    @abstractmethod
    def put_object(
        self,
        data: bytes,
        key: str,
        content_type: str,
        metadata: ObjectMetadata,
    ) -> PutObjectResult:
        """
        Faz upload de um objeto.

        Args:
            data: Conteúdo em bytes.
            key: Caminho/chave no storage.
            content_type: MIME type.
            metadata: id, nome original e timestamp do upload.

        Returns:
            PutObjectResult com StorageRef ou StorageFailure.
        """
        ...

    @abstractmethod
    def public_url(self, key: str) -> str:
        """
        URL pública do objeto.

        Args:
            key: Caminho/chave no storage.

        Returns:
            URL derivada do bucket e da chave, válida logo após o put.
        """
        ...
