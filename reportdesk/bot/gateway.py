"""Reports and logs channels backed by a discord.py client."""

from __future__ import annotations

import logging
import re
from typing import Any, Optional, Sequence

import discord

from reportdesk.bot.views import build_controls_view, build_log_embed, build_report_embed
from reportdesk.domain.errors import EvidenceUnavailableError
from reportdesk.domain.models import LogEntry, NewReport, ReportMessage

logger = logging.getLogger(__name__)

_SUBMITTER_RE = re.compile(r"^from (<@!?\d+>)")


def _submitter_mention(message: discord.Message) -> Optional[str]:
    if message.mentions:
        return message.mentions[0].mention
    match = _SUBMITTER_RE.match(message.content or "")
    return match.group(1) if match else None


class DiscordReportChannel:
    """Posts, looks up and retires report messages.

    The report message is the report: a missing message means another
    reviewer already finished it or it was removed by hand.
    """

    def __init__(self, client: discord.Client, *, reports_channel_id: int, logs_channel_id: int) -> None:
        self.client = client
        self.reports_channel_id = reports_channel_id
        self.logs_channel_id = logs_channel_id

    async def _channel(self, channel_id: int) -> discord.TextChannel:
        channel = self.client.get_channel(channel_id)
        if channel is None:
            channel = await self.client.fetch_channel(channel_id)
        return channel  # type: ignore[return-value]

    async def post_report(self, report: NewReport) -> int:
        attachment = report.evidence.handle
        try:
            evidence = await attachment.to_file()
        except (discord.HTTPException, AttributeError) as exc:
            raise EvidenceUnavailableError(str(exc)) from exc
        channel = await self._channel(self.reports_channel_id)
        view = build_controls_view(report.controls)
        message = await channel.send(
            content=report.content,
            embed=build_report_embed(report.profile, report.color),
            file=evidence,
            view=view,
            allowed_mentions=discord.AllowedMentions.none(),
        )
        # Clicks arrive through on_interaction; the client must not track the view
        view.stop()
        return message.id

    async def fetch_report(self, message_id: int) -> Optional[ReportMessage]:
        channel = await self._channel(self.reports_channel_id)
        try:
            message = await channel.fetch_message(message_id)
        except discord.NotFound:
            return None
        embed = message.embeds[0] if message.embeds else None
        return ReportMessage(
            message_id=message.id,
            profile_title=embed.title if embed else None,
            profile_url=embed.url if embed else None,
            submitter_mention=_submitter_mention(message),
            evidence=tuple(await self._download(message)),
        )

    async def delete_report(self, message_id: int) -> bool:
        channel = await self._channel(self.reports_channel_id)
        try:
            await channel.get_partial_message(message_id).delete()
        except discord.NotFound:
            return False
        return True

    async def post_log(self, entry: LogEntry, evidence: Sequence[Any]) -> None:
        channel = await self._channel(self.logs_channel_id)
        await channel.send(
            embed=build_log_embed(entry),
            files=list(evidence),
            allowed_mentions=discord.AllowedMentions.none(),
        )

    async def _download(self, message: discord.Message) -> list[discord.File]:
        # Attachment URLs stop resolving once the report message is deleted
        files: list[discord.File] = []
        for attachment in message.attachments:
            try:
                files.append(await attachment.to_file())
            except discord.HTTPException:
                logger.warning(
                    "evidence download failed",
                    extra={"message_id": message.id, "attachment": attachment.filename},
                )
        return files


__all__ = ["DiscordReportChannel"]
