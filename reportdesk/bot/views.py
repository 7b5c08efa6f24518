"""Render report specs as discord.py embeds, buttons and modals."""

from __future__ import annotations

from typing import Iterable, Optional

import discord

from reportdesk.domain.lifecycle import Control, ControlStyle, FieldStyle, ModalSpec
from reportdesk.domain.models import LogEntry, ProfileSnapshot

_BUTTON_STYLES = {
    ControlStyle.SECONDARY: discord.ButtonStyle.secondary,
    ControlStyle.DANGER: discord.ButtonStyle.danger,
}

_TEXT_STYLES = {
    FieldStyle.SHORT: discord.TextStyle.short,
    FieldStyle.PARAGRAPH: discord.TextStyle.paragraph,
}

# Stored modals only need to survive one reviewer filling in the form
MODAL_TIMEOUT_SECONDS = 900.0


def build_report_embed(profile: ProfileSnapshot, color: Optional[int] = None) -> discord.Embed:
    embed = discord.Embed(
        title=profile.title,
        url=profile.profile_url,
        description=profile.description or None,
        color=color,
    )
    for name, value in profile.stat_fields():
        embed.add_field(name=name, value=value, inline=True)
    if profile.avatar_url:
        embed.set_thumbnail(url=profile.avatar_url)
    return embed


def build_log_embed(entry: LogEntry) -> discord.Embed:
    embed = discord.Embed(title=entry.title, description=entry.description, color=entry.color)
    for name, value in entry.fields:
        embed.add_field(name=name, value=value or "—", inline=False)
    return embed


def build_controls_view(controls: Iterable[Control]) -> discord.ui.View:
    """Buttons are answered through ``on_interaction``, not view callbacks."""
    view = discord.ui.View(timeout=None)
    for control in controls:
        view.add_item(
            discord.ui.Button(
                label=control.label,
                custom_id=control.custom_id,
                style=_BUTTON_STYLES[control.style],
            )
        )
    return view


def build_modal(spec: ModalSpec) -> discord.ui.Modal:
    modal = discord.ui.Modal(title=spec.title, custom_id=spec.custom_id, timeout=MODAL_TIMEOUT_SECONDS)
    for field in spec.fields:
        modal.add_item(
            discord.ui.TextInput(
                label=field.label,
                custom_id=field.custom_id,
                style=_TEXT_STYLES[field.style],
                required=field.required,
                max_length=field.max_length,
                placeholder=field.placeholder,
            )
        )
    return modal


__all__ = ["build_controls_view", "build_log_embed", "build_modal", "build_report_embed"]
