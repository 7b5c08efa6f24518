"""Single-owner claims on report messages.

Two reviewers may act on the same report at once. Before a terminal
transition touches the report message it claims the message id; whoever
loses the claim is told the report is already being handled.
"""

from __future__ import annotations

import asyncio
import time
from typing import Protocol


class ClaimStore(Protocol):
    async def claim(self, key: str, owner: str, ttl_seconds: int) -> bool:
        """Atomically take ``key`` for ``owner``; ``False`` if someone holds it."""
        ...

    async def release(self, key: str, owner: str) -> None:
        ...


def claim_key(message_id: int) -> str:
    return f"report:claim:{message_id}"


class InMemoryClaimStore(ClaimStore):
    """Process-local claims for single-instance deployments and tests."""

    def __init__(self) -> None:
        self._owners: dict[str, tuple[str, float]] = {}
        self._lock = asyncio.Lock()

    async def claim(self, key: str, owner: str, ttl_seconds: int) -> bool:
        now = time.monotonic()
        async with self._lock:
            current = self._owners.get(key)
            if current is not None and current[1] > now:
                return False
            self._owners[key] = (owner, now + ttl_seconds)
            return True

    async def release(self, key: str, owner: str) -> None:
        async with self._lock:
            current = self._owners.get(key)
            if current is not None and current[0] == owner:
                del self._owners[key]


__all__ = ["ClaimStore", "InMemoryClaimStore", "claim_key"]
