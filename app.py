#!/usr/bin/env python3
"""
Run the shortlinks HTTP service.

Usage:
    python app.py

Configuration comes from the environment or a .env file; see config.py.
The most common settings:
    STORE_BACKEND - memory, file or redis
    STORE_PATH - JSON file for the file backend
    REDIS_URL - connection URL for the redis backend
    BASE_URL - base of generated short URLs
    PORT - port to listen on
    LOG_LEVEL - logging level
"""

import logging
import signal
import sys
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from config import Config, load_config
from shortlinks.common.logging_config import setup_logging
from shortlinks.service import URLShortenerService
from shortlinks.shortcode import ShortCodeGenerator
from shortlinks.store import RecordStore, create_backend
from web_app import create_app


def build_service(config: Config, logger: logging.Logger) -> URLShortenerService:
    """Wire backend, record store, code generator and service from configuration."""
    store = RecordStore(
        create_backend(config, logger=logger),
        key_prefix=config.key_prefix,
        logger=logger,
    )
    return URLShortenerService(
        store=store,
        short_code_generator=ShortCodeGenerator(config.short_code_length, logger=logger),
        logger=logger,
        enable_custom_codes=config.enable_custom_codes,
        max_collision_retries=config.max_collision_retries,
        max_batch_size=config.max_batch_size,
        default_validity_minutes=config.default_validity_minutes,
        geolocation_timeout_seconds=config.geolocation_timeout_seconds,
    )


def make_lifespan(logger: logging.Logger):
    """Lifespan that owns the service: built and swept on startup, closed on shutdown."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        config = app.state.config
        service = build_service(config, logger)
        app.state.service = service

        removed = await service.sweep_expired()
        logger.info(f"Service ready on {config.store_backend} store, swept {removed} expired URLs")

        try:
            yield
        finally:
            await service.close()
            logger.info("Service stopped")

    return lifespan


def main():
    config = load_config()
    logger = setup_logging(
        level=config.log_level,
        log_file=config.log_file,
        json_format=config.log_json,
    )
    logger.debug(f"Configuration: {config.model_dump()}")

    app = create_app(config, lifespan=make_lifespan(logger))
    server = uvicorn.Server(
        uvicorn.Config(
            app,
            host=config.host,
            port=config.port,
            log_level=config.log_level.lower(),
        )
    )

    def request_shutdown(signum, frame):
        logger.info(f"Received signal {signum}, shutting down")
        server.should_exit = True

    signal.signal(signal.SIGINT, request_shutdown)
    signal.signal(signal.SIGTERM, request_shutdown)

    logger.info(f"Listening on {config.host}:{config.port}")
    try:
        server.run()
    except Exception as e:
        logger.error(f"Server error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
