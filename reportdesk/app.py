"""Wire settings, collaborators and the Discord client together."""

from __future__ import annotations

import logging

import httpx

from reportdesk import obs
from reportdesk.bot import DiscordReportChannel, ReportDeskClient
from reportdesk.domain import InteractionRouter, ReportPolicy, ReportService
from reportdesk.domain.claims import ClaimStore, InMemoryClaimStore
from reportdesk.infra.claims import RedisClaimStore
from reportdesk.infra.moderation_api import ModerationApiClient
from reportdesk.infra.redis import create_client
from reportdesk.infra.roblox import RobloxProfileDirectory
from reportdesk.settings import Settings

logger = logging.getLogger(__name__)


def build_claims(settings: Settings) -> ClaimStore:
    if settings.redis_url:
        return RedisClaimStore(create_client(settings.redis_url))
    logger.warning("REDIS_URL not set; report claims are local to this process")
    return InMemoryClaimStore()


def build_client(
    settings: Settings,
    *,
    roblox_http: httpx.AsyncClient,
    api_http: httpx.AsyncClient,
    claims: ClaimStore,
) -> ReportDeskClient:
    client = ReportDeskClient(guild_id=settings.guild)
    service = ReportService(
        channel=DiscordReportChannel(
            client,
            reports_channel_id=settings.channels.reports,
            logs_channel_id=settings.channels.logs,
        ),
        profiles=RobloxProfileDirectory(http=roblox_http, request_timeout=settings.roblox_timeout_seconds),
        actions=ModerationApiClient(
            http=api_http,
            base_url=settings.api_url,
            token=settings.api_token,
            request_timeout=settings.api_timeout_seconds,
        ),
        claims=claims,
        policy=ReportPolicy.from_settings(settings),
    )
    client.router = InteractionRouter(service)
    return client


async def run(settings: Settings) -> None:
    obs.init(settings)
    claims = build_claims(settings)
    try:
        async with httpx.AsyncClient() as roblox_http, httpx.AsyncClient() as api_http:
            client = build_client(settings, roblox_http=roblox_http, api_http=api_http, claims=claims)
            async with client:
                await client.start(settings.token)
    finally:
        if isinstance(claims, RedisClaimStore):
            await claims.client.aclose()
