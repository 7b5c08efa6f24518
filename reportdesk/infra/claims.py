"""Report claims shared across bot instances through Redis."""

from __future__ import annotations

from dataclasses import dataclass

from redis.asyncio import Redis
from redis.exceptions import WatchError

from reportdesk.domain.claims import ClaimStore


@dataclass
class RedisClaimStore(ClaimStore):
    """``SET NX EX`` claims with owner-checked release."""

    client: Redis

    async def claim(self, key: str, owner: str, ttl_seconds: int) -> bool:
        return bool(await self.client.set(key, owner, nx=True, ex=ttl_seconds))

    async def release(self, key: str, owner: str) -> None:
        async with self.client.pipeline(transaction=True) as pipe:
            try:
                await pipe.watch(key)
                current = await pipe.get(key)
                if isinstance(current, bytes):
                    current = current.decode("utf-8")
                if current != owner:
                    await pipe.unwatch()
                    return
                pipe.multi()
                pipe.delete(key)
                await pipe.execute()
            except WatchError:
                # Someone else changed the key; it is no longer ours to release
                return
