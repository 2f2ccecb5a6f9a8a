"""
Routes: /images — upload an image and read the active upload policy.
"""

import logging

from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse

from src.api.schemas.responses import ErrorResponse, PolicyResponse, UploadResponse
from src.config.settings import Settings, get_settings
from src.core.entities.image import UploadRequest, base_file_name
from src.core.interfaces.storage_service import IStorageService, STORAGE_UNAVAILABLE
from src.core.use_cases.upload_image import INTERNAL_ERROR, UploadError, UploadImageUseCase
from src.infrastructure.rules.image_upload_rules import ImageUploadValidator
from src.infrastructure.storage.memory_storage import InMemoryStorageService
from src.infrastructure.storage.s3_storage import S3StorageService

logger = logging.getLogger(__name__)

router = APIRouter()

# Lazy singletons
_storage: IStorageService | None = None
_use_case: UploadImageUseCase | None = None


def build_storage(settings: Settings) -> IStorageService:
    """Factory — adapter de storage conforme STORAGE_BACKEND."""
    if settings.storage_backend == "memory":
        return InMemoryStorageService(
            bucket=settings.s3_bucket_name or "local-bucket",
            public_base_url=settings.s3_public_base_url,
        )
    if settings.storage_backend == "s3":
        return S3StorageService(
            bucket=settings.s3_bucket_name,
            public_base_url=settings.s3_public_base_url,
            region=settings.aws_region,
            endpoint_url=settings.s3_endpoint_url,
            access_key=settings.aws_access_key_id,
            secret_key=settings.aws_secret_access_key,
        )
    raise ValueError(f"Unknown storage backend: {settings.storage_backend}")


def get_storage() -> IStorageService:
    global _storage
    if _storage is None:
        _storage = build_storage(get_settings())
    return _storage


def get_upload_use_case() -> UploadImageUseCase:
    """Factory — build use case with concrete adapters."""
    global _use_case
    if _use_case is None:
        settings = get_settings()
        policy = settings.upload_policy()
        _use_case = UploadImageUseCase(
            validator=ImageUploadValidator(policy),
            storage=get_storage(),
            key_prefix=policy.key_prefix,
        )
    return _use_case


def error_response(error: UploadError) -> JSONResponse:
    """Single place mapping error kinds to HTTP status codes."""
    if error.kind == STORAGE_UNAVAILABLE:
        status_code = 503
    elif error.kind == INTERNAL_ERROR:
        status_code = 500
    else:
        status_code = 400
    body = ErrorResponse(kind=error.kind, message=error.message, received=error.received)
    return JSONResponse(status_code=status_code, content=body.model_dump())


@router.post(
    "/upload",
    response_model=UploadResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}, 503: {"model": ErrorResponse}},
)
async def upload_image(
    file: UploadFile | None = File(None),
    use_case: UploadImageUseCase = Depends(get_upload_use_case),
    settings: Settings = Depends(get_settings),
):
    """
    Upload an image to the object store.

    Accepts JPEG, PNG, GIF or WebP up to the configured size limit and
    returns the stored object's descriptor with its public URL.
    """
    if file is None:
        return error_response(UploadError(kind="MissingFile", message="No file uploaded"))

    # Read at most one byte past the limit: enough to detect oversized payloads
    content = await file.read(settings.max_upload_bytes + 1)
    await file.close()

    request = UploadRequest(
        file_name=base_file_name(file.filename or ""),
        declared_content_type=file.content_type or "",
        content=content,
        declared_length=file.size,
    )

    outcome = await run_in_threadpool(use_case.execute, request)
    if not outcome.ok:
        return error_response(outcome.error)

    result = outcome.result
    return UploadResponse(
        id=result.id,
        file_name=result.file_name,
        content_type=result.content_type,
        size_in_bytes=result.size_in_bytes,
        storage_key=result.storage_key,
        container_name=result.container_name,
        uploaded_at=result.uploaded_at,
        public_url=result.public_url,
    )


@router.get("/policy", response_model=PolicyResponse)
async def upload_policy(settings: Settings = Depends(get_settings)):
    """Active upload policy, so clients can check files before sending them."""
    policy = settings.upload_policy()
    return PolicyResponse(
        max_size_bytes=policy.max_size_bytes,
        allowed_content_types=sorted(policy.allowed_content_types),
        allowed_extensions=sorted(policy.allowed_extensions),
    )
