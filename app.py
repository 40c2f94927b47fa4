#!/usr/bin/env python3
"""
Main entry point for the shortkey service.

Concurrency: requests are served concurrently on one event loop per worker
(FastAPI + asyncpg connection pool). Set WORKERS > 1 for multi-process
scaling; each worker opens its own pool.

Usage:
    python app.py

Environment variables:
    DATABASE_URL - PostgreSQL connection URL, or memory:// for the in-memory store
    CREATE_TABLES - Set to true to create the schema at startup
    BASE_URL - Base URL for short links
    PORT - Port to listen on
    WORKERS - Number of uvicorn worker processes (default 1)
    LOG_LEVEL - Logging level
"""

import signal
import sys
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from shortkey.common.logging_config import setup_logging
from shortkey.config import load_config
from shortkey.database import create_store
from shortkey.exceptions import StoreError
from shortkey.service import URLShortenerService
from shortkey.shortcode import ShortKeyGenerator
from web_app import create_app


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup and shutdown."""
    config = app.state.config
    logger = app.state.logger

    logger.info("Starting shortkey service...")

    store = create_store(
        config.database_url,
        pool_max_size=config.db_pool_max_size,
        timeout_seconds=config.db_timeout_seconds,
        create_tables=config.create_tables,
        logger=logger,
    )

    try:
        await store.connect()
    except StoreError as e:
        logger.critical(f"FATAL: {e.detail}")
        await store.close()
        raise

    service = URLShortenerService(
        store=store,
        base_url=config.base_url,
        path_prefix=config.path_prefix,
        generator=ShortKeyGenerator(),
        max_collision_retries=config.max_collision_retries,
        max_url_length=config.max_url_length,
        logger=logger,
    )

    app.state.store = store
    app.state.service = service

    logger.info("Service started successfully")

    yield

    logger.info("Shutting down shortkey service...")
    await service.close()
    logger.info("Service stopped")


def main():
    """Main entry point."""
    config = load_config()

    logger = setup_logging(
        level=config.log_level,
        log_file=config.log_file,
        json_format=config.log_json,
    )

    logger.info("shortkey URL shortener")
    logger.info(f"Configuration: {config.model_dump(exclude={'database_url'})}")

    app = create_app(
        store_instance=None,  # Set in lifespan
        service_instance=None,
        config=config,
    )
    app.state.logger = logger
    app.router.lifespan_context = lifespan

    uvicorn_config = uvicorn.Config(
        app,
        host=config.host,
        port=config.port,
        workers=config.workers,
        log_level=config.log_level.lower(),
        access_log=True,
    )
    server = uvicorn.Server(uvicorn_config)

    def handle_signal(signum, frame):
        logger.info(f"Received signal {signum}, initiating graceful shutdown...")
        server.should_exit = True

    signal.signal(signal.SIGINT, handle_signal)
    signal.signal(signal.SIGTERM, handle_signal)

    logger.info(f"Starting server on {config.host}:{config.port}")
    server.run()

    # Lifespan startup failed (store unreachable, bad credentials, ...)
    if not server.started:
        sys.exit(1)


if __name__ == "__main__":
    main()
