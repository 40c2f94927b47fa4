"""FastAPI application factory."""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from shortkey import __version__
from shortkey.exceptions import ShortenerError

from .api import api_router
from .errors import shortener_error_handler
from .middleware.logging import LoggingMiddleware
from .web import web_router


def create_app(
    store_instance,
    service_instance,
    config,
) -> FastAPI:
    """Create and configure FastAPI application.

    Args:
        store_instance: Mapping store (None until the lifespan handler sets it)
        service_instance: Service instance (None until the lifespan handler sets it)
        config: Configuration instance

    Returns:
        Configured FastAPI app
    """
    app = FastAPI(
        title="shortkey",
        description="Deterministic URL shortener with click counting",
        version=__version__,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    # Store instances in app state for access in routes
    app.state.store = store_instance
    app.state.service = service_instance
    app.state.config = config

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(LoggingMiddleware)

    app.add_exception_handler(ShortenerError, shortener_error_handler)

    # API routes before the catch-all redirect
    app.include_router(api_router, prefix="/api", tags=["API"])
    app.include_router(web_router, tags=["Web"])

    return app
