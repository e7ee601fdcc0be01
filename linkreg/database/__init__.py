"""Backing stores for the link registry."""

import logging
from typing import Optional
from urllib.parse import urlparse

from .base import LinkStoreBase
from .memory import MemoryLinkStore
from .models import Link


def create_store(
    db_url: str,
    pool_max_size: int = 10,
    connection_timeout_seconds: int = 30,
    create_tables: bool = False,
    redis_key_prefix: str = "linkreg",
    logger: Optional[logging.Logger] = None,
) -> LinkStoreBase:
    """Create a store for the given connection URL.

    Supported schemes: postgresql/postgres, redis/rediss, memory.

    Raises:
        ValueError: If the scheme is not supported
    """
    scheme = urlparse(db_url).scheme.lower()

    if scheme in ("postgresql", "postgres"):
        from .postgres import PostgresLinkStore
        return PostgresLinkStore(
            db_config=db_url,
            pool_max_size=pool_max_size,
            connection_timeout_seconds=connection_timeout_seconds,
            create_tables=create_tables,
            logger=logger,
        )

    if scheme in ("redis", "rediss"):
        from .redis_store import RedisLinkStore
        return RedisLinkStore(
            db_config=db_url,
            key_prefix=redis_key_prefix,
            logger=logger,
        )

    if scheme == "memory":
        return MemoryLinkStore(db_config=db_url, logger=logger)

    raise ValueError(f"Unsupported database URL scheme: '{scheme}'")


__all__ = ["LinkStoreBase", "MemoryLinkStore", "Link", "create_store"]
