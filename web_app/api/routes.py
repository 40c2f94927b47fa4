"""API routes implementation."""

from datetime import datetime, timezone

from fastapi import APIRouter, Request, status

from .schemas import (
    ErrorResponse,
    HealthResponse,
    ShortenRequest,
    ShortenResponse,
    URLInfoResponse,
)

router = APIRouter()


@router.post(
    "/v1/shorten",
    response_model=ShortenResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid long URL"},
        500: {"model": ErrorResponse, "description": "Internal server error"},
    },
    summary="Create short URL",
    description="Shorten a URL. Shortening the same URL again returns the same short URL.",
)
async def shorten_url(request: Request, body: ShortenRequest):
    """Create a shortened URL."""
    service = request.app.state.service

    short_url = await service.shorten(body.long_url)

    return ShortenResponse(short_url=short_url)


@router.get(
    "/v1/urls/{short_key}",
    response_model=URLInfoResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Malformed short key"},
        404: {"model": ErrorResponse, "description": "Short key not found"},
    },
    summary="Get URL information",
    description="Get a mapping and its click count without counting a click.",
)
async def get_url_info(request: Request, short_key: str):
    """Get information about a shortened URL."""
    service = request.app.state.service

    mapping = await service.get_url_info(short_key)

    return URLInfoResponse(**mapping.to_dict())


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    description="Check if the service is healthy.",
)
async def health_check(request: Request):
    """Health check endpoint for load balancers and monitoring."""
    service = request.app.state.service

    health = await service.health_check()

    return HealthResponse(
        status="healthy" if health["overall"] else "unhealthy",
        database="healthy" if health["database"] else "unhealthy",
        timestamp=datetime.now(timezone.utc),
    )
