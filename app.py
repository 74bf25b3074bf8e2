#!/usr/bin/env python3
"""
Main entry point for the link registry service.

With the in-memory store keep WORKERS=1: each worker process would hold its
own copy of the registry. Point REDIS_URL at a Redis server to share state
across workers and restarts.

Usage:
    python app.py

Environment variables:
    REDIS_URL - Redis connection URL (optional; in-memory store when unset)
    API_TOKENS - JSON object mapping bearer tokens to identities
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

from config import load_config
from link_registry.bootstrap import build_registry
from link_registry.common.logging_config import setup_logging
from web_app import create_app


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup and shutdown."""
    config = app.state.config
    logger = app.state.logger

    logger.info("Starting link registry service...")
    app.state.registry = await build_registry(config, logger)
    logger.info("Service started successfully")

    yield

    logger.info("Shutting down link registry service...")
    if app.state.registry:
        await app.state.registry.close()
    logger.info("Service stopped")


def main():
    """Main entry point."""
    config = load_config()

    logger = setup_logging(
        level=config.log_level,
        log_file=config.log_file,
        json_format=config.log_json,
    )

    logger.info("Link Registry Service")
    logger.info(f"Configuration: {config.safe_dump()}")

    if not config.api_tokens:
        logger.warning("API_TOKENS is empty: every create/update/delete will be rejected")

    app = create_app(registry=None, config=config)
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

    try:
        logger.info(f"Starting server on {config.host}:{config.port}")
        server.run()
    except Exception as e:
        logger.error(f"Server error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
