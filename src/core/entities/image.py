"""
Entity: Image Upload

Request/result do fluxo de upload de imagem.
Modelo puro — sem dependência de framework ou SDK.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import PurePosixPath, PureWindowsPath


def base_file_name(name: str) -> str:
    """Last path segment of a client-supplied name, for either separator style."""
    return PurePosixPath(PureWindowsPath(name or "").name).name


class UploadState(str, Enum):
    RECEIVED = "RECEIVED"
    VALIDATED = "VALIDATED"
    KEY_ASSIGNED = "KEY_ASSIGNED"
    STORED = "STORED"
    COMPLETED = "COMPLETED"
    REJECTED = "REJECTED"
    FAILED = "FAILED"


@dataclass
class UploadRequest:
    """Upload recebido do cliente. Transient, never persisted."""
    file_name: str
    declared_content_type: str
    content: bytes = field(repr=False)
    declared_length: int | None = None   # tamanho reportado pelo transporte

    @property
    def byte_length(self) -> int:
        return len(self.content)

    @property
    def has_path_segments(self) -> bool:
        return base_file_name(self.file_name) != self.file_name

    @property
    def extension(self) -> str:
        """Lowercase extension including the dot, or "" when there is none."""
        name = base_file_name(self.file_name)
        if "." not in name.strip("."):
            return ""
        return "." + name.rsplit(".", 1)[-1].lower()


@dataclass(frozen=True)
class UploadResult:
    """Descriptor returned after a successful store."""
    id: str
    file_name: str
    content_type: str
    size_in_bytes: int
    storage_key: str
    container_name: str
    uploaded_at: datetime
    public_url: str
