"""Thumbnail cache store."""

from typing import Protocol

import redis.asyncio as redis
from redis.exceptions import RedisError

from plexcord import log
from plexcord.exceptions import ImageStoreError

__all__ = ["ImageStore", "RedisImageStore"]


class ImageStore(Protocol):
    """Key to binary mapping with per-key expiry."""

    async def exists(self, key: str) -> bool:
        """Return True iff a live entry is stored under ``key``."""
        ...

    async def get_binary(self, key: str) -> bytes | None:
        """Return the bytes stored under ``key``, or None if there is no entry."""
        ...

    async def set_with_expiry(self, key: str, data: bytes, ttl_seconds: int) -> None:
        """Atomically store ``data`` under ``key``, expiring after ``ttl_seconds``."""
        ...

    async def ping(self) -> bool:
        """Return True iff the store is reachable."""
        ...

    async def close(self) -> None:
        """Release any connections held by the store."""
        ...


class RedisImageStore:
    """Image store backed by Redis.

    Every write is a single ``SET key value EX ttl`` so readers only ever see a
    complete entry or none at all. Two writers racing on the same key both store a
    valid thumbnail and the last one wins.
    """

    def __init__(self, client: redis.Redis, key_prefix: str = "") -> None:
        """Initialize the store.

        Args:
            client (redis.Redis): A binary-safe (``decode_responses=False``) client.
            key_prefix (str): Optional namespace prepended to every key.
        """
        self._redis = client
        self.key_prefix = key_prefix

    @classmethod
    def from_url(cls, url: str, key_prefix: str = "") -> "RedisImageStore":
        """Create a store connected to the Redis server at ``url``."""
        client = redis.Redis.from_url(
            url,
            decode_responses=False,
            socket_connect_timeout=5,
            socket_timeout=5,
        )
        return cls(client, key_prefix=key_prefix)

    def _key(self, key: str) -> str:
        return f"{self.key_prefix}{key}"

    async def exists(self, key: str) -> bool:
        """Return True iff a live entry is stored under ``key``.

        Raises:
            ImageStoreError: If Redis cannot be reached.
        """
        try:
            return bool(await self._redis.exists(self._key(key)))
        except (RedisError, OSError) as e:
            raise ImageStoreError(f"Failed to check image {key}: {e}") from e

    async def get_binary(self, key: str) -> bytes | None:
        """Return the bytes stored under ``key``, or None if there is no entry.

        Raises:
            ImageStoreError: If Redis cannot be reached.
        """
        try:
            return await self._redis.get(self._key(key))
        except (RedisError, OSError) as e:
            raise ImageStoreError(f"Failed to read image {key}: {e}") from e

    async def set_with_expiry(self, key: str, data: bytes, ttl_seconds: int) -> None:
        """Atomically store ``data`` under ``key``, expiring after ``ttl_seconds``.

        Raises:
            ImageStoreError: If Redis cannot be reached.
        """
        try:
            await self._redis.set(self._key(key), data, ex=ttl_seconds)
        except (RedisError, OSError) as e:
            raise ImageStoreError(f"Failed to write image {key}: {e}") from e
        log.debug(
            f"Stored $$'{key}'$$ ($${{bytes: {len(data)}, ttl: {ttl_seconds}}}$$)"
        )

    async def ping(self) -> bool:
        """Check whether Redis is reachable."""
        try:
            return bool(await self._redis.ping())
        except (RedisError, OSError):
            return False

    async def close(self) -> None:
        """Close the Redis connection pool."""
        await self._redis.aclose()
