"""
Pydantic schemas — Response models para a API.
"""

from datetime import datetime

from pydantic import BaseModel


class UploadResponse(BaseModel):
    id: str
    file_name: str
    content_type: str
    size_in_bytes: int
    storage_key: str
    container_name: str
    uploaded_at: datetime
    public_url: str


class ErrorResponse(BaseModel):
    kind: str
    message: str
    received: str | int | None = None


class PolicyResponse(BaseModel):
    max_size_bytes: int
    allowed_content_types: list[str]
    allowed_extensions: list[str]


class HealthResponse(BaseModel):
    status: str
    version: str
    storage_backend: str
    bucket: str
