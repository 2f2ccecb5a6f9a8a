"""
FastAPI Application — Image Upload Service.

Architecture:
  - POST /api/images/upload → validate → S3 put → public URL
  - Storage: AWS S3 (prod), any S3-compatible endpoint, or in-memory (dev)
"""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.api.routes.images import get_storage, router as images_router
from src.api.schemas.responses import HealthResponse
from src.config.settings import get_settings

VERSION = "1.0.0"

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


configure_logging(get_settings().log_level)

app = FastAPI(
    title="Image Upload Service",
    description="Validates image uploads and stores them in S3, returning a public URL.",
    version=VERSION,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_allow_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ── Startup ──
@app.on_event("startup")
async def startup():
    """Fail fast on storage misconfiguration (e.g. missing bucket name)."""
    settings = get_settings()
    storage = get_storage()
    logger.info(
        f"Image Upload Service started (backend={settings.storage_backend}, bucket={storage.bucket})"
    )


# Register image routes
app.include_router(images_router, prefix="/api/images", tags=["Images"])


# ── Health ──
@app.get("/health", response_model=HealthResponse)
async def health():
    settings = get_settings()
    return HealthResponse(
        status="ok",
        version=VERSION,
        storage_backend=settings.storage_backend,
        bucket=get_storage().bucket,
    )
