"""Translate raw discord.py interactions into typed router events."""

from __future__ import annotations

from typing import Any, Iterable, Mapping, Optional

import discord

from reportdesk.bot.responder import DiscordResponder
from reportdesk.domain.events import CommandInvocation, ComponentClick, InteractionEvent, ModalSubmission, ReportOptions
from reportdesk.domain.models import Actor, Evidence

_TEXT_INPUT = discord.ComponentType.text_input.value


def actor_of(interaction: discord.Interaction) -> Actor:
    return Actor(user_id=interaction.user.id)


def evidence_of(attachment: discord.Attachment) -> Evidence:
    return Evidence(
        filename=attachment.filename,
        size=attachment.size,
        url=attachment.url,
        content_type=attachment.content_type,
        handle=attachment,
    )


def report_command(
    interaction: discord.Interaction,
    *,
    username: str,
    details: str,
    attachment: discord.Attachment,
) -> CommandInvocation:
    return CommandInvocation(
        actor=actor_of(interaction),
        responder=DiscordResponder(interaction),
        command=interaction.command.name if interaction.command else "report",
        report=ReportOptions(username=username, details=details, attachment=evidence_of(attachment)),
        interaction_id=interaction.id,
        guild_id=interaction.guild_id,
    )


def _text_inputs(rows: Iterable[Mapping[str, Any]]) -> dict[str, str]:
    values: dict[str, str] = {}
    for row in rows:
        # Action rows nest a list; label containers nest a single component
        children = list(row.get("components") or [])
        if row.get("component"):
            children.append(row["component"])
        if row.get("type") == _TEXT_INPUT:
            children.append(row)
        for child in children:
            if child.get("type") == _TEXT_INPUT and child.get("custom_id"):
                values[str(child["custom_id"])] = str(child.get("value") or "")
    return values


def interaction_event(interaction: discord.Interaction) -> Optional[InteractionEvent]:
    """Component clicks and modal submissions; slash commands go through the tree."""
    data: Mapping[str, Any] = interaction.data or {}
    custom_id = data.get("custom_id")
    if not isinstance(custom_id, str):
        return None
    match interaction.type:
        case discord.InteractionType.component:
            if interaction.message is None:
                return None
            return ComponentClick(
                actor=actor_of(interaction),
                responder=DiscordResponder(interaction),
                custom_id=custom_id,
                message_id=interaction.message.id,
                interaction_id=interaction.id,
                guild_id=interaction.guild_id,
            )
        case discord.InteractionType.modal_submit:
            return ModalSubmission(
                actor=actor_of(interaction),
                responder=DiscordResponder(interaction),
                custom_id=custom_id,
                fields=_text_inputs(data.get("components") or []),
                interaction_id=interaction.id,
                guild_id=interaction.guild_id,
            )
    return None


__all__ = ["actor_of", "evidence_of", "interaction_event", "report_command"]
