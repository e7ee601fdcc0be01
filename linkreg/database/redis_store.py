"""Redis implementation of the link store."""

import logging
from typing import Optional, List
from datetime import datetime

import redis.asyncio as redis
from redis.exceptions import RedisError

from .base import LinkStoreBase
from .models import Link
from ..errors import StorageFailure


# KEYS[1] = link hash, KEYS[2] = created_at index
# ARGV = id, code, target_url, created_at (iso), created_at (epoch seconds)
INSERT_SCRIPT = """
if redis.call('EXISTS', KEYS[1]) == 1 then
    return 0
end
redis.call('HSET', KEYS[1],
    'id', ARGV[1], 'code', ARGV[2], 'target_url', ARGV[3], 'clicks', 0,
    'created_at', ARGV[4], 'updated_at', ARGV[4])
redis.call('ZADD', KEYS[2], ARGV[5], ARGV[2])
return 1
"""

# KEYS[1] = link hash; ARGV[1] = access time (iso)
RECORD_HIT_SCRIPT = """
if redis.call('EXISTS', KEYS[1]) == 0 then
    return false
end
redis.call('HINCRBY', KEYS[1], 'clicks', 1)
redis.call('HSET', KEYS[1], 'last_clicked_at', ARGV[1], 'updated_at', ARGV[1])
return redis.call('HGET', KEYS[1], 'target_url')
"""

# KEYS[1] = link hash, KEYS[2] = created_at index; ARGV[1] = code
DELETE_SCRIPT = """
local removed = redis.call('DEL', KEYS[1])
redis.call('ZREM', KEYS[2], ARGV[1])
return removed
"""


class RedisLinkStore(LinkStoreBase):
    """Redis link store.

    Each link is a hash under ``{prefix}:link:{code}``; a sorted set scored
    by creation time backs the newest-first listing. Insert, record-hit and
    delete run as Lua scripts so the existence check and the mutation are
    one atomic server-side step.
    """

    def __init__(
        self,
        db_config: str,
        key_prefix: str = "linkreg",
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize Redis store.

        Args:
            db_config: Redis connection URL (e.g., redis://localhost:6379/0)
            key_prefix: Namespace for all keys written by this store
            logger: Optional logger instance
        """
        super().__init__(db_config)
        self.key_prefix = key_prefix
        self.logger = logger or logging.getLogger(__name__)
        self.client: redis.Redis = redis.from_url(
            db_config,
            encoding="utf-8",
            decode_responses=True,
        )
        self._insert = self.client.register_script(INSERT_SCRIPT)
        self._record_hit = self.client.register_script(RECORD_HIT_SCRIPT)
        self._delete = self.client.register_script(DELETE_SCRIPT)

    def get_link_key(self, code: str) -> str:
        return f"{self.key_prefix}:link:{code}"

    @property
    def index_key(self) -> str:
        return f"{self.key_prefix}:links_by_created"

    def _failure(self, action: str, error: RedisError) -> StorageFailure:
        self.logger.error(f"Redis error during {action}: {error}")
        return StorageFailure(str(error))

    async def insert_link(self, link: Link) -> bool:
        try:
            inserted = await self._insert(
                keys=[self.get_link_key(link.code), self.index_key],
                args=[
                    link.id,
                    link.code,
                    link.target_url,
                    link.created_at.isoformat(),
                    link.created_at.timestamp(),
                ],
            )
        except RedisError as e:
            raise self._failure("insert", e) from e

        if not inserted:
            self.logger.debug(f"Short code already exists: {link.code}")
            return False
        return True

    async def get_link(self, code: str) -> Optional[Link]:
        try:
            data = await self.client.hgetall(self.get_link_key(code))
        except RedisError as e:
            raise self._failure("get", e) from e
        return Link.from_dict(data) if data else None

    async def record_hit(self, code: str, at: datetime) -> Optional[str]:
        try:
            return await self._record_hit(
                keys=[self.get_link_key(code)],
                args=[at.isoformat()],
            )
        except RedisError as e:
            raise self._failure("record_hit", e) from e

    async def list_links(self) -> List[Link]:
        try:
            codes = await self.client.zrevrange(self.index_key, 0, -1)
            async with self.client.pipeline(transaction=False) as pipe:
                for code in codes:
                    pipe.hgetall(self.get_link_key(code))
                rows = await pipe.execute()
        except RedisError as e:
            raise self._failure("list", e) from e
        # A link deleted between the two round-trips comes back empty
        return [Link.from_dict(row) for row in rows if row]

    async def delete_link(self, code: str) -> bool:
        try:
            removed = await self._delete(
                keys=[self.get_link_key(code), self.index_key],
                args=[code],
            )
        except RedisError as e:
            raise self._failure("delete", e) from e
        return removed > 0

    async def health_check(self) -> bool:
        try:
            await self.client.ping()
            return True
        except RedisError as e:
            self.logger.error(f"Health check failed: {e}")
            return False

    async def close(self) -> None:
        """Close Redis connection."""
        await self.client.aclose()
        self.logger.info("Redis connection closed")
