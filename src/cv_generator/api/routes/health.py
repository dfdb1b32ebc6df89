"""Health check routes."""

from __future__ import annotations

from fastapi import APIRouter

from cv_generator.api.dependencies import SettingsDep

router = APIRouter(tags=["health"])


@router.get("/health")
def health_check(settings: SettingsDep) -> dict[str, str | bool]:
    """Return API status and whether the PII directory is present."""
    return {"status": "healthy", "piiPathExists": settings.pii_root.is_dir()}
