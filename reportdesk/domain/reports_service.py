"""Report intake and triage transitions with their side effects."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any, AsyncIterator, Mapping, Optional, Protocol, Sequence
from uuid import uuid4

from reportdesk.domain.claims import ClaimStore, claim_key
from reportdesk.domain.durations import InvalidDurationError, format_duration, parse_duration
from reportdesk.domain.errors import (
    ActionFailedError,
    EvidenceUnavailableError,
    InvalidSubmissionError,
    LostAnchorError,
    ModerationApiError,
    ProfileLookupError,
    ProfileNotFoundError,
    ReportClaimedError,
    ReportWorkflowError,
)
from reportdesk.domain.lifecycle import (
    ModalSpec,
    ReportState,
    Step,
    Transition,
    action_details_modal,
    ensure_transition,
    pending_controls,
)
from reportdesk.domain.models import (
    ActionRequest,
    Actor,
    Evidence,
    LogEntry,
    NewReport,
    ProfileSnapshot,
    ReportMessage,
    SubmittedReport,
)
from reportdesk.obs import metrics as obs_metrics

logger = logging.getLogger(__name__)


class ReportChannel(Protocol):
    """Reports and logs destinations on the chat platform."""

    async def post_report(self, report: NewReport) -> int:
        ...

    async def fetch_report(self, message_id: int) -> Optional[ReportMessage]:
        ...

    async def delete_report(self, message_id: int) -> bool:
        ...

    async def post_log(self, entry: LogEntry, evidence: Sequence[Any]) -> None:
        ...


class ProfileDirectory(Protocol):
    async def resolve_username(self, username: str) -> int:
        ...

    async def fetch_profile(self, user_id: int) -> ProfileSnapshot:
        ...


class ModerationActions(Protocol):
    async def create_action(self, request: ActionRequest) -> None:
        ...


@dataclass(frozen=True, slots=True)
class ReportPolicy:
    max_attachment_bytes: int = 25_000_000
    claim_ttl_seconds: int = 900
    report_color: Optional[int] = None
    accepted_color: int = 0x4CAF50
    declined_color: int = 0xD32F2F

    @classmethod
    def from_settings(cls, settings: Any) -> "ReportPolicy":
        return cls(
            max_attachment_bytes=settings.max_attachment_bytes,
            claim_ttl_seconds=settings.claim_ttl_seconds,
            report_color=settings.palette.report,
            accepted_color=settings.palette.accepted,
            declined_color=settings.palette.declined,
        )


def parse_optional_duration(text: Optional[str]) -> Optional[int]:
    """Seconds for a sanction, or ``None`` for a permanent one."""
    try:
        return parse_duration(text)
    except InvalidDurationError:
        return None


def declined_entry(reviewer: Actor, report: ReportMessage, color: int) -> LogEntry:
    return LogEntry(
        title="❌ Report Declined",
        description=f"{reviewer.mention} declined a report from {report.submitter_mention or 'an unknown user'}",
        color=color,
        fields=(("User", report.profile_link),),
    )


def accepted_entry(reviewer: Actor, report: ReportMessage, request: ActionRequest, color: int) -> LogEntry:
    fields = [
        ("User", report.profile_link),
        ("Action", request.type.label),
        ("Duration", format_duration(request.duration)),
        ("Reason", request.reason),
    ]
    if request.notes:
        fields.append(("Notes", request.notes))
    return LogEntry(
        title="✅ Report Accepted",
        description=f"{reviewer.mention} accepted a report from {report.submitter_mention or 'an unknown user'}",
        color=color,
        fields=tuple(fields),
    )


@dataclass
class ReportService:
    channel: ReportChannel
    profiles: ProfileDirectory
    actions: ModerationActions
    claims: ClaimStore
    policy: ReportPolicy = ReportPolicy()

    async def submit(self, *, submitter: Actor, username: str, details: str, evidence: Evidence) -> SubmittedReport:
        if evidence.size > self.policy.max_attachment_bytes:
            raise InvalidSubmissionError(f"Attachment exceeds the {self.policy.max_attachment_bytes:,} byte limit")
        username = username.strip().removeprefix("@")
        if not username:
            raise InvalidSubmissionError("A username is required")

        try:
            subject_id = await self.profiles.resolve_username(username)
        except (ProfileNotFoundError, ProfileLookupError) as exc:
            logger.info("report username rejected", extra={"username": username, "error": str(exc)})
            raise InvalidSubmissionError(f'Username "{username}" is invalid') from exc

        try:
            profile = await self.profiles.fetch_profile(subject_id)
        except (ProfileNotFoundError, ProfileLookupError) as exc:
            logger.warning("profile fetch failed", extra={"subject_id": subject_id, "error": str(exc)})
            raise InvalidSubmissionError("Failed to fetch user profile") from exc

        report = NewReport(
            submitter=submitter,
            details=details,
            profile=profile,
            evidence=evidence,
            controls=pending_controls(subject_id),
            color=self.policy.report_color,
        )
        try:
            message_id = await self.channel.post_report(report)
        except EvidenceUnavailableError as exc:
            logger.warning("evidence download failed", extra={"evidence_url": evidence.url, "error": str(exc)})
            raise InvalidSubmissionError("Failed to download the attachment") from exc

        obs_metrics.REPORT_SUBMISSIONS_TOTAL.labels(result="posted").inc()
        logger.info("report posted", extra={"subject_id": subject_id, "message_id": message_id})
        return SubmittedReport(message_id=message_id, subject_id=subject_id)

    def open_action_details(self, step: Step, message_id: int) -> ModalSpec:
        """Accept click: ask the reviewer for the action details."""
        ensure_transition(step.state, ReportState.AWAITING_ACTION_DETAILS)
        assert step.action_type is not None
        obs_metrics.REPORT_TRANSITIONS_TOTAL.labels(transition=Transition.OPEN_DETAILS.value).inc()
        return action_details_modal(step.subject_id, step.action_type, message_id)

    async def decline(self, *, reviewer: Actor, step: Step, message_id: int) -> ReportMessage:
        ensure_transition(step.state, ReportState.DECLINED)
        async with self._claimed(message_id, reviewer):
            report = await self._fetch(message_id)
            if not await self.channel.delete_report(message_id):
                raise LostAnchorError(message_id)
        await self.channel.post_log(declined_entry(reviewer, report, self.policy.declined_color), report.evidence)
        obs_metrics.REPORT_TRANSITIONS_TOTAL.labels(transition=Transition.DECLINE.value).inc()
        logger.info("report declined", extra={"subject_id": step.subject_id, "message_id": message_id})
        return report

    async def accept(self, *, reviewer: Actor, step: Step, fields: Mapping[str, str]) -> ActionRequest:
        """Modal submission: record the action and retire the report."""
        ensure_transition(step.state, ReportState.ACCEPTED)
        assert step.action_type is not None and step.origin_message_id is not None
        reason = (fields.get("reason") or "").strip()
        if not reason:
            raise ReportWorkflowError("A reason is required")
        request = ActionRequest(
            actor=reviewer,
            target_id=step.subject_id,
            type=step.action_type,
            reason=reason,
            notes=(fields.get("notes") or "").strip(),
            duration=parse_optional_duration(fields.get("duration")),
        )
        message_id = step.origin_message_id

        async with self._claimed(message_id, reviewer):
            # The anchor is checked first so a lost report never produces a sanction
            report = await self._fetch(message_id)
            try:
                await self.actions.create_action(request)
            except ModerationApiError as exc:
                obs_metrics.MODERATION_ACTIONS_TOTAL.labels(type=request.type.value, result="error").inc()
                logger.exception(
                    "moderation action failed",
                    extra={"subject_id": request.target_id, "action_type": request.type.value, "message_id": message_id},
                )
                raise ActionFailedError() from exc
            obs_metrics.MODERATION_ACTIONS_TOTAL.labels(type=request.type.value, result="ok").inc()
            removed = await self.channel.delete_report(message_id)

        # The action is recorded either way, so it is always logged
        entry = accepted_entry(reviewer, report, request, self.policy.accepted_color)
        await self.channel.post_log(entry, report.evidence)
        if not removed:
            logger.warning("report vanished after action was recorded", extra={"message_id": message_id})
            raise LostAnchorError(message_id)
        obs_metrics.REPORT_TRANSITIONS_TOTAL.labels(transition=Transition.ACCEPT.value).inc()
        logger.info(
            "report accepted",
            extra={
                "subject_id": request.target_id,
                "action_type": request.type.value,
                "duration": request.duration,
                "message_id": message_id,
            },
        )
        return request

    async def _fetch(self, message_id: int) -> ReportMessage:
        report = await self.channel.fetch_report(message_id)
        if report is None:
            raise LostAnchorError(message_id)
        return report

    @asynccontextmanager
    async def _claimed(self, message_id: int, reviewer: Actor) -> AsyncIterator[None]:
        """Hold the report for this reviewer while it is checked and retired."""
        key = claim_key(message_id)
        owner = f"{reviewer.user_id}:{uuid4().hex}"
        if not await self.claims.claim(key, owner, self.policy.claim_ttl_seconds):
            raise ReportClaimedError()
        try:
            yield
        finally:
            await self.claims.release(key, owner)


__all__ = [
    "ModerationActions",
    "ProfileDirectory",
    "ReportChannel",
    "ReportPolicy",
    "ReportService",
    "accepted_entry",
    "declined_entry",
    "parse_optional_duration",
]
