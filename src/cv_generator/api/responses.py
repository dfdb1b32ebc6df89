"""JSON response helpers shared by the file routes.

Every response carries ``success``. Failures answer with
``{"success": false, "error": ...}``; unexpected exceptions become a 500
without a stack trace.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


def respond(payload: dict[str, Any], status_code: int = status.HTTP_200_OK) -> JSONResponse:
    return JSONResponse(content=jsonable_encoder(payload), status_code=status_code)


def failure(error: str, status_code: int) -> JSONResponse:
    return respond({"success": False, "error": error}, status_code)


def unexpected(action: str, exc: Exception) -> JSONResponse:
    logger.exception("Unexpected error while %s", action)
    return failure(str(exc) or type(exc).__name__, status.HTTP_500_INTERNAL_SERVER_ERROR)
