from __future__ import annotations

from types import SimpleNamespace

import discord
import pytest

from reportdesk.bot.gateway import DiscordReportChannel
from reportdesk.domain.errors import EvidenceUnavailableError
from reportdesk.domain.lifecycle import pending_controls
from reportdesk.domain.models import Actor, Evidence, NewReport, ProfileSnapshot


def _not_found() -> discord.NotFound:
    return discord.NotFound(SimpleNamespace(status=404, reason="Not Found"), "Unknown Message")


class StubAttachment:
    def __init__(self, filename: str = "proof.png", *, fail: bool = False) -> None:
        self.filename = filename
        self.fail = fail

    async def to_file(self):
        if self.fail:
            raise _not_found()
        return f"file:{self.filename}"


class StubPartialMessage:
    def __init__(self, channel: "StubTextChannel", message_id: int) -> None:
        self.channel = channel
        self.id = message_id

    async def delete(self) -> None:
        if self.id not in self.channel.messages:
            raise _not_found()
        del self.channel.messages[self.id]


class StubTextChannel:
    def __init__(self) -> None:
        self.messages: dict[int, SimpleNamespace] = {}
        self.sent: list[dict] = []

    async def send(self, **kwargs) -> SimpleNamespace:
        self.sent.append(kwargs)
        message = SimpleNamespace(id=9000 + len(self.sent))
        return message

    async def fetch_message(self, message_id: int) -> SimpleNamespace:
        if message_id not in self.messages:
            raise _not_found()
        return self.messages[message_id]

    def get_partial_message(self, message_id: int) -> StubPartialMessage:
        return StubPartialMessage(self, message_id)


class StubClient:
    def __init__(self, channel: StubTextChannel) -> None:
        self.channel = channel

    def get_channel(self, channel_id: int) -> StubTextChannel:
        return self.channel


@pytest.fixture
def text_channel() -> StubTextChannel:
    return StubTextChannel()


@pytest.fixture
def gateway(text_channel) -> DiscordReportChannel:
    return DiscordReportChannel(StubClient(text_channel), reports_channel_id=1, logs_channel_id=2)


def _new_report(attachment: StubAttachment) -> NewReport:
    return NewReport(
        submitter=Actor(user_id=111),
        details="spamming",
        profile=ProfileSnapshot(user_id=1234, username="Reselim", display_name="Res"),
        evidence=Evidence(filename="proof.png", size=10, url="https://cdn.example/proof.png", handle=attachment),
        controls=pending_controls(1234),
    )


@pytest.mark.asyncio
async def test_post_report_releases_button_view(gateway, text_channel) -> None:
    message_id = await gateway.post_report(_new_report(StubAttachment()))

    assert message_id == 9001
    sent = text_channel.sent[0]
    assert sent["file"] == "file:proof.png"
    assert [item.custom_id for item in sent["view"].children][-1] == "decline(1234)"
    # Stopped views are dropped from the client's view store
    assert sent["view"].is_finished()


@pytest.mark.asyncio
async def test_post_report_with_unreadable_attachment(gateway, text_channel) -> None:
    with pytest.raises(EvidenceUnavailableError):
        await gateway.post_report(_new_report(StubAttachment(fail=True)))
    assert text_channel.sent == []


@pytest.mark.asyncio
async def test_fetch_report_reads_embed_and_submitter(gateway, text_channel) -> None:
    text_channel.messages[42] = SimpleNamespace(
        id=42,
        embeds=[discord.Embed(title="Res (@Reselim)", url="https://www.roblox.com/users/1234/profile")],
        mentions=[],
        content="from <@111>\n> spamming\n**\n**",
        attachments=[StubAttachment()],
    )

    report = await gateway.fetch_report(42)

    assert report is not None
    assert report.profile_link == "[Res (@Reselim)](https://www.roblox.com/users/1234/profile)"
    assert report.submitter_mention == "<@111>"
    assert report.evidence == ("file:proof.png",)


@pytest.mark.asyncio
async def test_missing_message_is_a_lost_anchor(gateway) -> None:
    assert await gateway.fetch_report(424242) is None
    assert await gateway.delete_report(424242) is False


@pytest.mark.asyncio
async def test_delete_report(gateway, text_channel) -> None:
    text_channel.messages[42] = SimpleNamespace(id=42)
    assert await gateway.delete_report(42) is True
    assert 42 not in text_channel.messages
