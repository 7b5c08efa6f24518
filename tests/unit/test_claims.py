from __future__ import annotations

import pytest

from reportdesk.domain.claims import InMemoryClaimStore, claim_key
from reportdesk.infra.claims import RedisClaimStore


def test_claim_key_is_scoped_per_message() -> None:
    assert claim_key(9000) == "report:claim:9000"


@pytest.mark.asyncio
async def test_in_memory_claim_has_single_owner() -> None:
    store = InMemoryClaimStore()
    assert await store.claim("k", "alice", 60)
    assert not await store.claim("k", "bob", 60)

    await store.release("k", "bob")
    assert not await store.claim("k", "bob", 60)

    await store.release("k", "alice")
    assert await store.claim("k", "bob", 60)


@pytest.mark.asyncio
async def test_in_memory_claim_expires() -> None:
    store = InMemoryClaimStore()
    assert await store.claim("k", "alice", 0)
    assert await store.claim("k", "bob", 60)


@pytest.mark.asyncio
async def test_redis_claim_has_single_owner(fake_redis) -> None:
    store = RedisClaimStore(fake_redis)
    key = claim_key(9000)

    assert await store.claim(key, "alice", 60)
    assert not await store.claim(key, "bob", 60)
    assert 0 < await fake_redis.ttl(key) <= 60

    await store.release(key, "bob")
    assert await fake_redis.get(key) == "alice"

    await store.release(key, "alice")
    assert await fake_redis.get(key) is None
    assert await store.claim(key, "bob", 60)
