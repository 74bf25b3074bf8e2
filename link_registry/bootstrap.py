"""Assemble a registry from configuration."""

import logging
from typing import Optional

from .environment import Authenticator, SystemClock
from .registry import Registry
from .store.base import LinkStore
from .store.memory import MemoryLinkStore
from .store.redis_store import RedisLinkStore


async def build_store(config, logger: logging.Logger) -> LinkStore:
    """Connect the store selected by ``config.redis_url``."""
    if config.redis_url:
        logger.info(f"Connecting to Redis at {config.redis_url}")
        store = RedisLinkStore(
            redis_url=config.redis_url,
            namespace=config.redis_namespace,
            logger=logger,
        )
        await store.connect()
        return store
    
    logger.info("No REDIS_URL configured, using in-memory link store")
    return MemoryLinkStore()


async def build_registry(
    config,
    logger: logging.Logger,
    authenticator: Optional[Authenticator] = None,
) -> Registry:
    """Build a registry with the configured store and ledger clock."""
    store = await build_store(config, logger)
    clock = SystemClock(
        close_seconds=config.ledger_close_seconds,
        genesis=config.ledger_genesis,
    )
    return Registry(
        store=store,
        clock=clock,
        authenticator=authenticator,
        logger=logger,
        max_collision_retries=config.max_collision_retries,
        retention_seconds=config.retention_seconds,
    )
