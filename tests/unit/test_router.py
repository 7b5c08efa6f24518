from __future__ import annotations

import pytest

from reportdesk.domain.events import CommandInvocation, ComponentClick, ModalSubmission, ReportOptions
from reportdesk.domain.models import Actor
from reportdesk.domain.router import SENT_MESSAGE, UNEXPECTED_MESSAGE

SUBMITTER = Actor(user_id=111)
REVIEWER = Actor(user_id=222)


def _command(responder, evidence, username: str = "Reselim", size: int = 1024) -> CommandInvocation:
    return CommandInvocation(
        actor=SUBMITTER,
        responder=responder,
        command="report",
        report=ReportOptions(username=username, details="spamming", attachment=evidence(size)),
        interaction_id=1,
    )


@pytest.mark.asyncio
async def test_command_defers_then_confirms(router, channel, new_responder, evidence) -> None:
    responder = new_responder()
    await router.dispatch(_command(responder, evidence))

    assert responder.calls == ["defer", "reply"]
    assert responder.replies == [SENT_MESSAGE]
    assert len(channel.posted) == 1


@pytest.mark.asyncio
async def test_command_failure_replies_with_error(router, channel, new_responder, evidence) -> None:
    responder = new_responder()
    await router.dispatch(_command(responder, evidence, username="ghost"))

    assert responder.replies == ['❌ **Error**: Username "ghost" is invalid']
    assert channel.posted == []


@pytest.mark.asyncio
async def test_other_commands_are_ignored(router, new_responder) -> None:
    responder = new_responder()
    await router.dispatch(CommandInvocation(actor=SUBMITTER, responder=responder, command="ping"))
    assert responder.calls == []


@pytest.mark.asyncio
async def test_accept_click_opens_modal_without_deferring(router, new_responder) -> None:
    responder = new_responder()
    await router.dispatch(
        ComponentClick(actor=REVIEWER, responder=responder, custom_id="accept(1234,DRAWBAN)", message_id=9000)
    )

    assert responder.calls == ["modal"]
    assert responder.modals[0].custom_id == "accept(1234,DRAWBAN,9000)"


@pytest.mark.asyncio
async def test_full_accept_flow(router, channel, actions, new_responder, evidence) -> None:
    await router.dispatch(_command(new_responder(), evidence))
    message_id = next(iter(channel.reports))

    clicker = new_responder()
    await router.dispatch(
        ComponentClick(actor=REVIEWER, responder=clicker, custom_id="accept(1234,MUTE)", message_id=message_id)
    )
    submitter = new_responder()
    await router.dispatch(
        ModalSubmission(
            actor=REVIEWER,
            responder=submitter,
            custom_id=clicker.modals[0].custom_id,
            fields={"reason": "spam", "notes": "", "duration": "1h"},
        )
    )

    assert submitter.calls == ["defer", "acknowledge"]
    assert actions.requests[0].duration == 3600
    assert channel.reports == {}
    assert channel.logs[0][0].title == "✅ Report Accepted"


@pytest.mark.asyncio
async def test_decline_of_missing_message_replies_with_error(router, channel, new_responder) -> None:
    responder = new_responder()
    await router.dispatch(ComponentClick(actor=REVIEWER, responder=responder, custom_id="decline(1234)", message_id=77))

    assert responder.calls == ["defer", "reply"]
    assert responder.replies == ["❌ **Error**: Failed to find message with ID 77"]
    assert channel.logs == []


@pytest.mark.asyncio
@pytest.mark.parametrize("custom_id", ["", "poll_vote", "accept()", "accept(1234,KICK)", "other(1,2)", "a(b(c))"])
async def test_foreign_custom_ids_are_ignored(router, new_responder, custom_id: str) -> None:
    responder = new_responder()
    await router.dispatch(ComponentClick(actor=REVIEWER, responder=responder, custom_id=custom_id, message_id=9000))
    await router.dispatch(ModalSubmission(actor=REVIEWER, responder=responder, custom_id=custom_id))
    assert responder.calls == []


@pytest.mark.asyncio
async def test_unexpected_failure_is_contained(router, channel, new_responder, evidence) -> None:
    async def broken_fetch(message_id: int):
        raise RuntimeError("gateway hiccup")

    await router.dispatch(_command(new_responder(), evidence))
    message_id = next(iter(channel.reports))
    channel.fetch_report = broken_fetch

    responder = new_responder()
    await router.dispatch(
        ComponentClick(actor=REVIEWER, responder=responder, custom_id="decline(1234)", message_id=message_id)
    )

    assert responder.replies == [UNEXPECTED_MESSAGE]
    assert message_id in channel.reports
