"""discord.py client wiring for the report desk."""

from __future__ import annotations

import logging
from typing import Optional

import discord
from discord import app_commands

from reportdesk.bot.events import interaction_event, report_command
from reportdesk.domain.events import InteractionEvent
from reportdesk.domain.router import REPORT_COMMAND, InteractionRouter

logger = logging.getLogger(__name__)


def register_commands(client: "ReportDeskClient", guild: discord.abc.Snowflake) -> None:
    @client.tree.command(name=REPORT_COMMAND, description="Creates a new report", guild=guild)
    @app_commands.guild_only()
    @app_commands.describe(
        username="Roblox username of the offending user (i.e. @Reselim)",
        details="What is the offending user doing?",
        attachment="An image or video showing proof of the offence",
    )
    async def report(
        interaction: discord.Interaction,
        username: str,
        details: str,
        attachment: discord.Attachment,
    ) -> None:
        await client.route(report_command(interaction, username=username, details=details, attachment=attachment))


class ReportDeskClient(discord.Client):
    """Gateway client; every interaction is handed to the router as a typed event."""

    def __init__(self, *, guild_id: int, router: Optional[InteractionRouter] = None) -> None:
        intents = discord.Intents.none()
        intents.guilds = True
        super().__init__(intents=intents)
        self.guild = discord.Object(id=guild_id)
        self.tree = app_commands.CommandTree(self)
        self.router = router
        register_commands(self, self.guild)

    async def setup_hook(self) -> None:
        logger.info("refreshing guild commands", extra={"guild_id": self.guild.id})
        await self.tree.sync(guild=self.guild)
        logger.info("refreshed guild commands", extra={"guild_id": self.guild.id})

    async def on_ready(self) -> None:
        logger.info("logged into Discord", extra={"bot_user": str(self.user)})

    async def on_interaction(self, interaction: discord.Interaction) -> None:
        event = interaction_event(interaction)
        if event is not None:
            await self.route(event)

    async def route(self, event: InteractionEvent) -> None:
        if self.router is None:
            raise RuntimeError("ReportDeskClient.router must be set before the client starts")
        await self.router.dispatch(event)


__all__ = ["ReportDeskClient", "register_commands"]
