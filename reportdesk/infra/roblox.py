"""Profile lookups against the public Roblox web APIs."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Optional

import httpx

from reportdesk.domain.errors import ProfileLookupError, ProfileNotFoundError
from reportdesk.domain.models import ProfileSnapshot

logger = logging.getLogger(__name__)

USERS_API = "https://users.roblox.com"
FRIENDS_API = "https://friends.roblox.com"
THUMBNAILS_API = "https://thumbnails.roblox.com"


@dataclass
class RobloxProfileDirectory:
    """Resolves usernames and snapshots profiles for report embeds.

    Counts and the avatar are best-effort: a failure there leaves the field
    empty instead of failing the report.
    """

    http: httpx.AsyncClient
    request_timeout: float = 5.0
    users_api: str = USERS_API
    friends_api: str = FRIENDS_API
    thumbnails_api: str = THUMBNAILS_API

    async def resolve_username(self, username: str) -> int:
        try:
            response = await self.http.post(
                f"{self.users_api}/v1/usernames/users",
                json={"usernames": [username], "excludeBannedUsers": False},
                timeout=self.request_timeout,
            )
            response.raise_for_status()
            entries = response.json().get("data") or []
        except (httpx.HTTPError, ValueError) as exc:
            raise ProfileLookupError(f"username lookup failed: {exc}") from exc
        if not entries:
            raise ProfileNotFoundError(f"no user named {username}")
        return int(entries[0]["id"])

    async def fetch_profile(self, user_id: int) -> ProfileSnapshot:
        user = await self._fetch_user(user_id)
        friends, following, followers, avatar_url = await asyncio.gather(
            self._count(f"{self.friends_api}/v1/users/{user_id}/friends/count"),
            self._count(f"{self.friends_api}/v1/users/{user_id}/followings/count"),
            self._count(f"{self.friends_api}/v1/users/{user_id}/followers/count"),
            self._avatar(user_id),
        )
        return ProfileSnapshot(
            user_id=user_id,
            username=str(user.get("name") or user_id),
            display_name=str(user.get("displayName") or user.get("name") or user_id),
            description=str(user.get("description") or ""),
            friend_count=friends,
            following_count=following,
            follower_count=followers,
            avatar_url=avatar_url,
        )

    async def _fetch_user(self, user_id: int) -> dict[str, Any]:
        try:
            response = await self.http.get(f"{self.users_api}/v1/users/{user_id}", timeout=self.request_timeout)
        except httpx.HTTPError as exc:
            raise ProfileLookupError(f"profile request failed: {exc}") from exc
        if response.status_code == 404:
            raise ProfileNotFoundError(f"user {user_id} does not exist")
        try:
            response.raise_for_status()
            return response.json()
        except (httpx.HTTPError, ValueError) as exc:
            raise ProfileLookupError(f"profile request failed: {exc}") from exc

    async def _count(self, url: str) -> Optional[int]:
        try:
            response = await self.http.get(url, timeout=self.request_timeout)
            response.raise_for_status()
            return int(response.json()["count"])
        except (httpx.HTTPError, ValueError, KeyError, TypeError):
            logger.info("profile count unavailable", extra={"url": url})
            return None

    async def _avatar(self, user_id: int) -> Optional[str]:
        try:
            response = await self.http.get(
                f"{self.thumbnails_api}/v1/users/avatar-headshot",
                params={"userIds": str(user_id), "size": "420x420", "format": "Png", "isCircular": "false"},
                timeout=self.request_timeout,
            )
            response.raise_for_status()
            entries = response.json().get("data") or []
        except (httpx.HTTPError, ValueError):
            logger.info("avatar unavailable", extra={"subject_id": user_id})
            return None
        for entry in entries:
            if entry.get("state") == "Completed" and entry.get("imageUrl"):
                return str(entry["imageUrl"])
        return None


__all__ = ["RobloxProfileDirectory"]
