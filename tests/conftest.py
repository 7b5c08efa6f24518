import asyncio
from typing import Any, Optional, Sequence

import pytest
import pytest_asyncio
from fakeredis.aioredis import FakeRedis

from reportdesk.domain import InteractionRouter, ReportPolicy, ReportService
from reportdesk.domain.claims import InMemoryClaimStore
from reportdesk.domain.errors import ModerationApiError, ProfileLookupError, ProfileNotFoundError
from reportdesk.domain.lifecycle import ModalSpec
from reportdesk.domain.models import ActionRequest, Evidence, LogEntry, NewReport, ProfileSnapshot, ReportMessage


class StubReportChannel:
    def __init__(self, *, first_message_id: int = 9000) -> None:
        self.reports: dict[int, ReportMessage] = {}
        self.posted: list[NewReport] = []
        self.logs: list[tuple[LogEntry, tuple[Any, ...]]] = []
        self.deleted: list[int] = []
        self._next_id = first_message_id

    async def post_report(self, report: NewReport) -> int:
        message_id = self._next_id
        self._next_id += 1
        self.posted.append(report)
        self.reports[message_id] = ReportMessage(
            message_id=message_id,
            profile_title=report.profile.title,
            profile_url=report.profile.profile_url,
            submitter_mention=report.submitter.mention,
            evidence=(f"file:{report.evidence.filename}",),
        )
        return message_id

    async def fetch_report(self, message_id: int) -> Optional[ReportMessage]:
        # Yield so concurrent transitions interleave like real network calls
        await asyncio.sleep(0)
        return self.reports.get(message_id)

    async def delete_report(self, message_id: int) -> bool:
        await asyncio.sleep(0)
        if self.reports.pop(message_id, None) is None:
            return False
        self.deleted.append(message_id)
        return True

    async def post_log(self, entry: LogEntry, evidence: Sequence[Any]) -> None:
        self.logs.append((entry, tuple(evidence)))


class StubProfiles:
    def __init__(self) -> None:
        self.users: dict[str, int] = {"Reselim": 1234}
        self.profiles: dict[int, ProfileSnapshot] = {
            1234: ProfileSnapshot(
                user_id=1234,
                username="Reselim",
                display_name="Res",
                description="hello",
                friend_count=12,
                following_count=3,
                follower_count=4567,
            )
        }
        self.lookups: list[str] = []
        self.fail_profile = False

    async def resolve_username(self, username: str) -> int:
        self.lookups.append(username)
        if username not in self.users:
            raise ProfileNotFoundError(username)
        return self.users[username]

    async def fetch_profile(self, user_id: int) -> ProfileSnapshot:
        if self.fail_profile:
            raise ProfileLookupError("upstream down")
        return self.profiles[user_id]


class StubActions:
    def __init__(self) -> None:
        self.requests: list[ActionRequest] = []
        self.fail = False

    async def create_action(self, request: ActionRequest) -> None:
        if self.fail:
            raise ModerationApiError("boom", status_code=500)
        self.requests.append(request)


class RecordingResponder:
    def __init__(self) -> None:
        self.calls: list[str] = []
        self.replies: list[str] = []
        self.modals: list[ModalSpec] = []

    async def defer(self) -> None:
        self.calls.append("defer")

    async def present_modal(self, modal: ModalSpec) -> None:
        self.calls.append("modal")
        self.modals.append(modal)

    async def reply(self, content: str) -> None:
        self.calls.append("reply")
        self.replies.append(content)

    async def acknowledge(self) -> None:
        self.calls.append("acknowledge")


def make_evidence(size: int = 1024) -> Evidence:
    return Evidence(filename="proof.png", size=size, url="https://cdn.example/proof.png", content_type="image/png")


@pytest.fixture
def channel() -> StubReportChannel:
    return StubReportChannel()


@pytest.fixture
def profiles() -> StubProfiles:
    return StubProfiles()


@pytest.fixture
def actions() -> StubActions:
    return StubActions()


@pytest.fixture
def service(channel, profiles, actions) -> ReportService:
    return ReportService(
        channel=channel,
        profiles=profiles,
        actions=actions,
        claims=InMemoryClaimStore(),
        policy=ReportPolicy(max_attachment_bytes=25_000_000),
    )


@pytest.fixture
def router(service) -> InteractionRouter:
    return InteractionRouter(service)


@pytest_asyncio.fixture
async def fake_redis():
    client = FakeRedis(decode_responses=True)
    try:
        yield client
    finally:
        await client.flushall()
        await client.aclose()


@pytest.fixture
def new_responder():
    return RecordingResponder


@pytest.fixture
def evidence():
    return make_evidence
