"""Dispatch typed interaction events to report lifecycle transitions."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from reportdesk.domain import fragments
from reportdesk.domain.errors import ERROR_PREFIX, ReportWorkflowError
from reportdesk.domain.events import CommandInvocation, ComponentClick, InteractionEvent, ModalSubmission
from reportdesk.domain.lifecycle import InteractionKind, Step, Transition, resolve_step
from reportdesk.domain.reports_service import ReportService
from reportdesk.obs import logging as obs_logging
from reportdesk.obs import metrics as obs_metrics

logger = logging.getLogger(__name__)

REPORT_COMMAND = "report"
SENT_MESSAGE = "✅ Sent report!"
UNEXPECTED_MESSAGE = f"{ERROR_PREFIX}Something went wrong while handling this report"


class InteractionRouter:
    """Routes command, button and modal events to the report service.

    Interactions whose custom id does not decode to a fragment this bot
    minted are ignored without a reply: they belong to someone else.
    """

    def __init__(self, service: ReportService, *, command_name: str = REPORT_COMMAND) -> None:
        self.service = service
        self.command_name = command_name

    async def dispatch(self, event: InteractionEvent) -> None:
        tokens = obs_logging.bind_context(
            interaction_id=str(event.interaction_id) if event.interaction_id else None,
            kind=type(event).__name__,
            guild_id=str(event.guild_id) if event.guild_id else None,
            user_id=str(event.actor.user_id),
        )
        try:
            match event:
                case CommandInvocation():
                    await self._on_command(event)
                case ComponentClick():
                    await self._on_component(event)
                case ModalSubmission():
                    await self._on_modal(event)
        finally:
            obs_logging.reset_context(tokens)

    async def _on_command(self, event: CommandInvocation) -> None:
        if event.command != self.command_name or event.report is None:
            return
        # Profile lookups can outlast the initial acknowledgement window
        await event.responder.defer()
        async with self._transition_boundary(event, "submit"):
            await self.service.submit(
                submitter=event.actor,
                username=event.report.username,
                details=event.report.details,
                evidence=event.report.attachment,
            )
            await event.responder.reply(SENT_MESSAGE)

    async def _on_component(self, event: ComponentClick) -> None:
        step = self._step(InteractionKind.COMPONENT, event.custom_id)
        if step is None:
            return
        if step.transition is Transition.OPEN_DETAILS:
            async with self._transition_boundary(event, step.transition.value):
                modal = self.service.open_action_details(step, event.message_id)
                await event.responder.present_modal(modal)
        elif step.transition is Transition.DECLINE:
            await event.responder.defer()
            async with self._transition_boundary(event, step.transition.value):
                await self.service.decline(reviewer=event.actor, step=step, message_id=event.message_id)

    async def _on_modal(self, event: ModalSubmission) -> None:
        step = self._step(InteractionKind.MODAL, event.custom_id)
        if step is None or step.transition is not Transition.ACCEPT:
            return
        await event.responder.defer()
        async with self._transition_boundary(event, step.transition.value):
            await self.service.accept(reviewer=event.actor, step=step, fields=event.fields)
            await event.responder.acknowledge()

    def _step(self, kind: InteractionKind, custom_id: str) -> Step | None:
        fragment = fragments.decode(custom_id)
        if fragment is None:
            logger.debug("ignoring foreign custom id", extra={"custom_id": custom_id})
            return None
        step = resolve_step(kind, fragment)
        if step is None:
            logger.debug("ignoring unrecognised fragment", extra={"custom_id": custom_id})
        return step

    @asynccontextmanager
    async def _transition_boundary(self, event: InteractionEvent, transition: str) -> AsyncIterator[None]:
        """Contain every failure to the transition it happened in."""
        try:
            yield
        except ReportWorkflowError as exc:
            obs_metrics.REPORT_ERRORS_TOTAL.labels(kind=exc.kind).inc()
            logger.warning(
                "report transition failed",
                extra={"transition": transition, "error_kind": exc.kind, "detail": exc.detail},
            )
            await event.responder.reply(exc.user_message)
        except Exception:  # noqa: BLE001 - one bad interaction must not take the bot down
            obs_metrics.REPORT_ERRORS_TOTAL.labels(kind="unexpected").inc()
            logger.exception("unexpected failure handling report interaction", extra={"transition": transition})
            await event.responder.reply(UNEXPECTED_MESSAGE)


__all__ = ["InteractionRouter", "REPORT_COMMAND", "SENT_MESSAGE", "UNEXPECTED_MESSAGE"]
