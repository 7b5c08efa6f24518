"""Values exchanged between the report workflow and its collaborators."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from reportdesk.domain.lifecycle import ActionType, Control


class AccountPlatform(str, Enum):
    DISCORD = "DISCORD"


@dataclass(frozen=True, slots=True)
class Actor:
    """A platform account that triggered an interaction."""

    user_id: int
    platform: AccountPlatform = AccountPlatform.DISCORD

    @property
    def mention(self) -> str:
        return f"<@{self.user_id}>"


@dataclass(frozen=True, slots=True)
class Evidence:
    filename: str
    size: int
    url: str
    content_type: Optional[str] = None
    # Platform attachment object, opaque to the workflow
    handle: Any = field(default=None, compare=False, repr=False)


def _count_label(value: Optional[int]) -> str:
    return f"{value:,}" if value is not None else "Error"


@dataclass(frozen=True, slots=True)
class ProfileSnapshot:
    """Profile details captured once when the report is filed."""

    user_id: int
    username: str
    display_name: str
    description: str = ""
    friend_count: Optional[int] = None
    following_count: Optional[int] = None
    follower_count: Optional[int] = None
    avatar_url: Optional[str] = None

    @property
    def title(self) -> str:
        return f"{self.display_name} (@{self.username})"

    @property
    def profile_url(self) -> str:
        return f"https://www.roblox.com/users/{self.user_id}/profile"

    def stat_fields(self) -> tuple[tuple[str, str], ...]:
        return (
            ("Friends", _count_label(self.friend_count)),
            ("Following", _count_label(self.following_count)),
            ("Followers", _count_label(self.follower_count)),
        )


@dataclass(frozen=True, slots=True)
class NewReport:
    submitter: Actor
    details: str
    profile: ProfileSnapshot
    evidence: Evidence
    controls: tuple[Control, ...]
    color: Optional[int] = None

    @property
    def content(self) -> str:
        return "\n".join(
            [
                f"from {self.submitter.mention}",
                f"> {self.details}",
                "**\n**",
            ]
        )


@dataclass(frozen=True, slots=True)
class ReportMessage:
    """What the workflow needs back from a posted report message."""

    message_id: int
    profile_title: Optional[str]
    profile_url: Optional[str]
    submitter_mention: Optional[str]
    evidence: tuple[Any, ...] = ()

    @property
    def profile_link(self) -> str:
        title = self.profile_title or "Unknown user"
        return f"[{title}]({self.profile_url})" if self.profile_url else title


@dataclass(frozen=True, slots=True)
class LogEntry:
    title: str
    description: str
    color: int
    fields: tuple[tuple[str, str], ...] = ()


@dataclass(frozen=True, slots=True)
class ActionRequest:
    """Payload recorded by the moderation API."""

    actor: Actor
    target_id: int
    type: ActionType  # noqa: A003 - mirrors the API field
    reason: str
    notes: str = ""
    duration: Optional[int] = None

    def body(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "type": self.type.value,
            "reason": self.reason,
            "notes": self.notes,
        }
        if self.duration is not None:
            payload["duration"] = self.duration
        return payload


@dataclass(frozen=True, slots=True)
class SubmittedReport:
    message_id: int
    subject_id: int


__all__ = [
    "AccountPlatform",
    "ActionRequest",
    "Actor",
    "Evidence",
    "LogEntry",
    "NewReport",
    "ProfileSnapshot",
    "ReportMessage",
    "SubmittedReport",
]
