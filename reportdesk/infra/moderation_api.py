"""Client for the moderation API that durably records sanctions."""

from __future__ import annotations

from dataclasses import dataclass

import httpx

from reportdesk.domain.errors import ModerationApiError
from reportdesk.domain.models import ActionRequest


@dataclass
class ModerationApiClient:
    """Records actions on behalf of the reviewer who accepted a report.

    The service token authenticates the bot; the reviewer's platform identity
    rides along in headers so the action is attributed to them.
    """

    http: httpx.AsyncClient
    base_url: str
    token: str
    request_timeout: float = 10.0

    def _identity_headers(self, request: ActionRequest) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.token}",
            "X-Account-Platform": request.actor.platform.value,
            "X-Account-Id": str(request.actor.user_id),
        }

    async def create_action(self, request: ActionRequest) -> None:
        url = f"{self.base_url.rstrip('/')}/users/{request.target_id}/actions"
        try:
            response = await self.http.post(
                url,
                json=request.body(),
                headers=self._identity_headers(request),
                timeout=self.request_timeout,
            )
        except httpx.HTTPError as exc:
            raise ModerationApiError(f"moderation API unreachable: {exc}") from exc
        if response.is_error:
            raise ModerationApiError(
                f"moderation API returned {response.status_code}: {response.text[:200]}",
                status_code=response.status_code,
            )


__all__ = ["ModerationApiClient"]
