"""
Use Case: Upload Image.

Orquestra: Validação → Chave → Storage → Resultado
Received → Validated → KeyAssigned → Stored → Completed,
or Received → Rejected / ... → Failed.

Nothing here raises for expected failures: every outcome comes back
as an UploadOutcome carrying either a result or an error.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone

from src.core.entities.image import UploadRequest, UploadResult, UploadState
from src.core.entities.storage_key import DEFAULT_KEY_PREFIX, generate_storage_key
from src.core.interfaces.storage_service import IStorageService, ObjectMetadata, STORAGE_UNAVAILABLE
from src.core.interfaces.upload_validator import IUploadValidator

logger = logging.getLogger(__name__)

INTERNAL_ERROR = "InternalError"


@dataclass
class UploadError:
    """Erro tipado devolvido ao caller."""
    kind: str
    message: str
    received: str | int | None = None

    @property
    def is_validation(self) -> bool:
        return self.kind not in (STORAGE_UNAVAILABLE, INTERNAL_ERROR)


@dataclass
class UploadOutcome:
    """result XOR error, plus the last state reached."""
    state: UploadState
    result: UploadResult | None = None
    error: UploadError | None = None
    transitions: list[UploadState] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.state == UploadState.COMPLETED and self.result is not None


class UploadImageUseCase:
    """
    Use Case: recebe o upload → valida → grava → devolve descriptor.

    Dependency Injection: validator e storage vêm pelo construtor.
    Holds no per-request state, so one instance serves concurrent uploads.
    """

    def __init__(
        self,
        validator: IUploadValidator,
        storage: IStorageService,
        key_prefix: str = DEFAULT_KEY_PREFIX,
    ):
        self._validator = validator
        self._storage = storage
        self._key_prefix = key_prefix

    def execute(self, request: UploadRequest) -> UploadOutcome:
        transitions = [UploadState.RECEIVED]

        def finish(state: UploadState, **kwargs) -> UploadOutcome:
            transitions.append(state)
            return UploadOutcome(state=state, transitions=transitions, **kwargs)

        # ── 1. Validação ───────────────────────────────────
        failure = self._validator.validate(request)
        if failure is not None:
            logger.info(f"Rejected upload '{request.file_name}': {failure.kind.value}")
            return finish(
                UploadState.REJECTED,
                error=UploadError(kind=failure.kind.value, message=failure.message, received=failure.received),
            )
        transitions.append(UploadState.VALIDATED)

        if request.declared_length is not None and request.declared_length != request.byte_length:
            logger.error(
                f"Byte length mismatch for '{request.file_name}': "
                f"declared={request.declared_length} received={request.byte_length}"
            )
            return finish(
                UploadState.FAILED,
                error=UploadError(kind=INTERNAL_ERROR, message="Received size does not match transferred size"),
            )

        # ── 2. Chave ───────────────────────────────────────
        storage_key = generate_storage_key(request.file_name, self._key_prefix)
        transitions.append(UploadState.KEY_ASSIGNED)

        # ── 3. Storage ─────────────────────────────────────
        uploaded_at = datetime.now(timezone.utc)
        metadata = ObjectMetadata(
            image_id=storage_key.image_id,
            original_filename=request.file_name,
            uploaded_at=uploaded_at.isoformat(),
        )
        put = self._storage.put_object(
            data=request.content,
            key=storage_key.key,
            content_type=request.declared_content_type,
            metadata=metadata,
        )
        if not put.ok:
            logger.error(
                f"Failed to upload image {storage_key.image_id} to bucket {self._storage.bucket}: "
                f"{put.failure.message if put.failure else 'no confirmation'}"
            )
            kind = put.failure.kind if put.failure else STORAGE_UNAVAILABLE
            return finish(
                UploadState.FAILED,
                error=UploadError(kind=kind, message="Upload failed: object store unavailable"),
            )
        transitions.append(UploadState.STORED)

        ref = put.ref
        if ref.size_bytes != request.byte_length or ref.key != storage_key.key or storage_key.image_id not in ref.key:
            logger.error(
                f"Store confirmation for image {storage_key.image_id} does not match the request: "
                f"key={ref.key} size={ref.size_bytes} expected_size={request.byte_length}"
            )
            return finish(
                UploadState.FAILED,
                error=UploadError(kind=INTERNAL_ERROR, message="Stored object does not match the upload"),
            )

        logger.info(
            f"Successfully uploaded image {storage_key.image_id} to bucket {ref.bucket} "
            f"({ref.size_bytes} bytes, etag={ref.etag})"
        )

        # ── 4. Resultado ───────────────────────────────────
        result = UploadResult(
            id=storage_key.image_id,
            file_name=request.file_name,
            content_type=request.declared_content_type,
            size_in_bytes=request.byte_length,
            storage_key=storage_key.key,
            container_name=ref.bucket,
            uploaded_at=uploaded_at,
            public_url=self._storage.public_url(storage_key.key),
        )
        return finish(UploadState.COMPLETED, result=result)
