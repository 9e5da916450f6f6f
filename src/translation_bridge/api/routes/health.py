"""Health and root endpoints.

Provides the root ``/`` endpoint (API identity and version) and the
``/health`` liveness check.
"""

from fastapi import APIRouter

from translation_bridge import __version__

router = APIRouter()


@router.get("/")
async def root():
    """Root endpoint showing API identity and current version."""
    return {"message": "Translation Bridge API", "version": __version__}


@router.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "ok"}
