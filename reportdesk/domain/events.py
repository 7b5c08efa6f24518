"""Typed interaction events delivered to the router."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping, Optional, Protocol, Union

from reportdesk.domain.lifecycle import ModalSpec
from reportdesk.domain.models import Actor, Evidence


class Responder(Protocol):
    """Acknowledges one interaction within the platform's deadlines."""

    async def defer(self) -> None:
        ...

    async def present_modal(self, modal: ModalSpec) -> None:
        ...

    async def reply(self, content: str) -> None:
        """Send an ephemeral message to the acting user."""
        ...

    async def acknowledge(self) -> None:
        """Complete the interaction without visible content."""
        ...


@dataclass(frozen=True, slots=True)
class ReportOptions:
    username: str
    details: str
    attachment: Evidence


@dataclass(frozen=True)
class CommandInvocation:
    actor: Actor
    responder: Responder = field(compare=False, repr=False)
    command: str = ""
    report: Optional[ReportOptions] = None
    interaction_id: Optional[int] = None
    guild_id: Optional[int] = None


@dataclass(frozen=True)
class ComponentClick:
    actor: Actor
    responder: Responder = field(compare=False, repr=False)
    custom_id: str = ""
    message_id: int = 0
    interaction_id: Optional[int] = None
    guild_id: Optional[int] = None


@dataclass(frozen=True)
class ModalSubmission:
    actor: Actor
    responder: Responder = field(compare=False, repr=False)
    custom_id: str = ""
    fields: Mapping[str, str] = field(default_factory=dict)
    interaction_id: Optional[int] = None
    guild_id: Optional[int] = None


InteractionEvent = Union[CommandInvocation, ComponentClick, ModalSubmission]


__all__ = [
    "CommandInvocation",
    "ComponentClick",
    "InteractionEvent",
    "ModalSubmission",
    "ReportOptions",
    "Responder",
]
