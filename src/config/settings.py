"""
Application Settings.

Centraliza toda configuração via .env / variáveis de ambiente.
Read once at startup; treat the returned object as immutable.
"""

from functools import lru_cache
from pydantic_settings import BaseSettings

from src.core.interfaces.upload_validator import UploadPolicy


class Settings(BaseSettings):
    """Configurações carregadas de variáveis de ambiente."""

    # --- App ---
    env: str = "development"
    debug: bool = True
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    log_level: str = "INFO"
    cors_allow_origins: list[str] = ["*"]

    # --- Storage ---
    storage_backend: str = "s3"          # "s3" | "memory"
    s3_bucket_name: str = ""
    aws_region: str = "us-east-1"
    s3_endpoint_url: str | None = None   # MinIO / LocalStack
    s3_public_base_url: str | None = None
    aws_access_key_id: str | None = None
    aws_secret_access_key: str | None = None

    # --- Upload policy ---
    max_upload_bytes: int = 10 * 1024 * 1024
    allowed_content_types: list[str] = [
        "image/jpeg",
        "image/jpg",
        "image/png",
        "image/gif",
        "image/webp",
    ]
    allowed_extensions: list[str] = [".jpg", ".jpeg", ".png", ".gif", ".webp"]
    storage_key_prefix: str = "images/"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}

    def upload_policy(self) -> UploadPolicy:
        """Build the immutable policy handed to the validator and the use case."""
        return UploadPolicy(
            max_size_bytes=self.max_upload_bytes,
            allowed_content_types=frozenset(c.lower() for c in self.allowed_content_types),
            allowed_extensions=frozenset(e.lower() for e in self.allowed_extensions),
            key_prefix=self.storage_key_prefix,
        )


@lru_cache
def get_settings() -> Settings:
    """Singleton de settings."""
    return Settings()
