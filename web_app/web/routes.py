"""Redirect route."""

from fastapi import APIRouter, Request, status
from fastapi.responses import RedirectResponse

router = APIRouter()


@router.get("/{short_key}", include_in_schema=False)
async def redirect_to_url(request: Request, short_key: str):
    """Redirect to the original URL, counting the click."""
    service = request.app.state.service

    long_url = await service.resolve(short_key)

    # 302 rather than 301 so browsers come back and every click is counted
    return RedirectResponse(url=long_url, status_code=status.HTTP_302_FOUND)
