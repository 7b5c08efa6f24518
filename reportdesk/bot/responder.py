"""Interaction acknowledgement for discord.py interactions."""

from __future__ import annotations

import discord

from reportdesk.bot.views import build_modal
from reportdesk.domain.lifecycle import ModalSpec


class DiscordResponder:
    """Answers one interaction, switching to followups once it is acknowledged."""

    def __init__(self, interaction: discord.Interaction) -> None:
        self.interaction = interaction

    async def defer(self) -> None:
        response = self.interaction.response
        if response.is_done():
            return
        if self.interaction.type is discord.InteractionType.application_command:
            await response.defer(ephemeral=True, thinking=True)
        else:
            # Components and modals: acknowledge without touching the message
            await response.defer()

    async def present_modal(self, modal: ModalSpec) -> None:
        await self.interaction.response.send_modal(build_modal(modal))

    async def reply(self, content: str) -> None:
        if self.interaction.response.is_done():
            await self.interaction.followup.send(content, ephemeral=True)
        else:
            await self.interaction.response.send_message(content, ephemeral=True)

    async def acknowledge(self) -> None:
        if not self.interaction.response.is_done():
            await self.interaction.response.defer()
