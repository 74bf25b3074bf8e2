"""Redis implementation of the link store."""

import json
import logging
from typing import Optional

import redis.asyncio as redis
from redis.exceptions import RedisError

from ..models import LinkRecord
from .base import LinkStore


class RedisLinkStore(LinkStore):
    """Stores each record as a JSON string under ``<namespace>:link:<short_key>``.

    Insertion uses ``SET NX`` so two processes cannot both claim a key, and
    replacement uses ``SET XX KEEPTTL`` so an update never resurrects a
    deleted key or drops its retention.
    """

    def __init__(
        self,
        redis_url: str,
        namespace: str = "link_registry",
        logger: Optional[logging.Logger] = None,
        client: Optional[redis.Redis] = None,
    ):
        """Initialize Redis store.

        Args:
            redis_url: Redis connection URL (e.g., redis://localhost:6379/0)
            namespace: Prefix for every key this store writes
            logger: Optional logger instance
            client: Optional pre-built client (skips ``connect``)
        """
        self.redis_url = redis_url
        self.namespace = namespace
        self.logger = logger or logging.getLogger(__name__)
        self.client: Optional[redis.Redis] = client

    async def connect(self) -> None:
        """Connect to Redis and verify the connection."""
        if self.client is None:
            self.client = redis.from_url(
                self.redis_url,
                encoding="utf-8",
                decode_responses=True,
            )
        await self.client.ping()
        self.logger.info(f"Connected to Redis link store (namespace={self.namespace})")

    def _key(self, short_key: str) -> str:
        return f"{self.namespace}:link:{short_key}"

    @property
    def _client(self) -> redis.Redis:
        if self.client is None:
            raise RuntimeError("RedisLinkStore.connect() has not been called")
        return self.client

    async def get(self, short_key: str) -> Optional[LinkRecord]:
        raw = await self._client.get(self._key(short_key))
        if raw is None:
            return None
        return LinkRecord.from_dict(json.loads(raw))

    async def insert(
        self, short_key: str, record: LinkRecord, retention: Optional[int] = None
    ) -> bool:
        result = await self._client.set(
            self._key(short_key),
            json.dumps(record.to_dict()),
            nx=True,
            ex=retention,
        )
        return bool(result)

    async def put(self, short_key: str, record: LinkRecord) -> bool:
        result = await self._client.set(
            self._key(short_key),
            json.dumps(record.to_dict()),
            xx=True,
            keepttl=True,
        )
        return bool(result)

    async def delete(self, short_key: str) -> bool:
        return await self._client.delete(self._key(short_key)) > 0

    async def extend_retention(self, short_key: str, min_horizon: int, max_horizon: int) -> None:
        key = self._key(short_key)
        ttl = await self._client.ttl(key)

        # -2: key missing; -1: key has no expiry yet
        if ttl == -2:
            return
        if ttl == -1 or ttl < min_horizon:
            await self._client.expire(key, max_horizon)

    async def health_check(self) -> bool:
        try:
            return bool(await self._client.ping())
        except (RedisError, RuntimeError) as e:
            self.logger.error(f"Redis health check failed: {e}")
            return False

    async def close(self) -> None:
        if self.client is not None:
            await self.client.aclose()
            self.client = None
            self.logger.info("Redis connection closed")
