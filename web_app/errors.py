"""Translate shortkey errors into HTTP responses."""

import logging

from fastapi import Request, status
from fastapi.responses import JSONResponse

from shortkey.exceptions import (
    InvalidKeyError,
    NotFoundError,
    RetriesExhaustedError,
    ShortenerError,
    StoreError,
    ValidationError,
)

logger = logging.getLogger("shortkey.web")

STATUS_CODES = {
    ValidationError: status.HTTP_400_BAD_REQUEST,
    InvalidKeyError: status.HTTP_400_BAD_REQUEST,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    RetriesExhaustedError: status.HTTP_500_INTERNAL_SERVER_ERROR,
    StoreError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


async def shortener_error_handler(request: Request, exc: ShortenerError) -> JSONResponse:
    """Render a ShortenerError as ``{"error", "detail"}``."""
    status_code = STATUS_CODES.get(type(exc), status.HTTP_500_INTERNAL_SERVER_ERROR)

    if isinstance(exc, StoreError):
        # Connection strings and SQL stay in the logs
        logger.error(f"Store failure on {request.method} {request.url.path}: {exc.detail}")
        payload = {"error": exc.kind, "detail": "internal server error"}
    else:
        payload = exc.to_dict()

    return JSONResponse(status_code=status_code, content=payload)
