"""Configuration routes for the API."""

from __future__ import annotations

from fastapi import APIRouter

from cv_generator.api.dependencies import SettingsDep
from cv_generator.api.schemas.files import PiiPathResponse

router = APIRouter(prefix="/config", tags=["config"])


@router.get("/pii-path", response_model=PiiPathResponse)
def get_pii_path(settings: SettingsDep) -> PiiPathResponse:
    """Return the directory used when a request names no directory."""
    return PiiPathResponse(pii_path=str(settings.pii_root))
