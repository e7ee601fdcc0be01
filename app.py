#!/usr/bin/env python3
"""
Main entry point for the link registry service.

Concurrency: requests are served with async I/O (FastAPI + asyncpg pool or
redis.asyncio). WORKERS > 1 runs several uvicorn processes, each building its
own app through create_service_app. That needs a shared store (PostgreSQL
or Redis); configuration loading rejects it with memory://.

Usage:
    python app.py

Environment variables:
    DATABASE_URL - Backing store URL (postgresql://, redis:// or memory://)
    DB_CREATE_TABLES - Set to 'true' to create the PostgreSQL schema on startup
    BASE_URL - Base URL for short links
    PORT - Port to listen on
    WORKERS - Number of uvicorn worker processes (default 1)
    CODE_LENGTH - Length of generated codes (6-8)
    MAX_CODE_ATTEMPTS - Generated candidates tried per create (default 10)
    LOG_LEVEL - Logging level
"""

import signal
import sys
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from config import Config, load_config
from linkreg.database import create_store
from linkreg.registry import LinkRegistry
from linkreg.shortcode import ShortCodeGenerator
from linkreg.common.logging_config import setup_logging
from web_app import create_app


def build_registry(config: Config, logger=None) -> LinkRegistry:
    """Build the store and registry described by the configuration."""
    store = create_store(
        config.database_url,
        pool_max_size=config.db_pool_max_size,
        connection_timeout_seconds=config.db_timeout_seconds,
        create_tables=config.db_create_tables,
        redis_key_prefix=config.redis_key_prefix,
        logger=logger,
    )
    return LinkRegistry(
        store=store,
        code_generator=ShortCodeGenerator(default_length=config.code_length),
        logger=logger,
        max_code_attempts=config.max_code_attempts,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup and shutdown."""
    config = app.state.config
    logger = app.state.logger

    logger.info("Starting link registry service...")
    logger.info(f"Using backing store {config.database_url.split('@')[-1]}")

    registry = build_registry(config, logger)
    app.state.registry = registry

    logger.info("Service started successfully")

    yield

    logger.info("Shutting down link registry service...")
    await registry.close()
    logger.info("Service stopped")


def _setup_logging(config: Config):
    return setup_logging(
        level=config.log_level,
        log_file=config.log_file,
        json_format=config.log_json,
    )


def create_service_app() -> FastAPI:
    """Application factory; each uvicorn worker process calls this once."""
    config = load_config()
    app = create_app(registry=None, config=config, lifespan=lifespan)
    app.state.logger = _setup_logging(config)
    return app


def main():
    """Main entry point."""
    config = load_config()
    logger = _setup_logging(config)

    logger.info("Link Registry Service")

    if config.workers > 1:
        # Worker processes are spawned by uvicorn and build their own app
        logger.info(f"Starting {config.workers} workers on {config.host}:{config.port}")
        uvicorn.run(
            "app:create_service_app",
            factory=True,
            host=config.host,
            port=config.port,
            workers=config.workers,
            log_level=config.log_level.lower(),
            access_log=True,
        )
        return

    app = create_app(registry=None, config=config, lifespan=lifespan)
    app.state.logger = logger

    uvicorn_config = uvicorn.Config(
        app,
        host=config.host,
        port=config.port,
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
