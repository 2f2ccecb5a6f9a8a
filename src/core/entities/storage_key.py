"""
Storage keys: images/{id}/{file_name}.

The id is embedded in the key path, so reusing a file name never
overwrites an earlier upload.
"""

import uuid
from dataclasses import dataclass

DEFAULT_KEY_PREFIX = "images/"


@dataclass(frozen=True)
class StorageKey:
    image_id: str
    key: str


def new_image_id() -> str:
    """128-bit random id, hex form (no dashes)."""
    return uuid.uuid4().hex


def build_storage_key(image_id: str, file_name: str, prefix: str = DEFAULT_KEY_PREFIX) -> str:
    if prefix and not prefix.endswith("/"):
        prefix += "/"
    return f"{prefix}{image_id}/{file_name}"


def generate_storage_key(file_name: str, prefix: str = DEFAULT_KEY_PREFIX) -> StorageKey:
    image_id = new_image_id()
    return StorageKey(image_id=image_id, key=build_storage_key(image_id, file_name, prefix))
