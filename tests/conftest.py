import os

os.environ.setdefault("STORAGE_BACKEND", "memory")
os.environ.setdefault("S3_BUCKET_NAME", "demo-bucket")

import pytest

from src.config.settings import get_settings
from src.core.interfaces.upload_validator import UploadPolicy
from src.core.use_cases.upload_image import UploadImageUseCase
from src.infrastructure.rules.image_upload_rules import ImageUploadValidator
from src.infrastructure.storage.memory_storage import InMemoryStorageService

get_settings.cache_clear()


@pytest.fixture
def policy() -> UploadPolicy:
    return UploadPolicy()


@pytest.fixture
def validator(policy) -> ImageUploadValidator:
    return ImageUploadValidator(policy)


@pytest.fixture
def storage() -> InMemoryStorageService:
    return InMemoryStorageService(bucket="demo-bucket")


@pytest.fixture
def use_case(validator, storage) -> UploadImageUseCase:
    return UploadImageUseCase(validator=validator, storage=storage)
