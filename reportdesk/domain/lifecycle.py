"""Report lifecycle states, legal transitions and the controls each state exposes.

A report lives in the reports channel as a single message. While it is
``PENDING`` the message carries four buttons; clicking *accept* opens a modal
(``AWAITING_ACTION_DETAILS``) whose custom id threads the origin message id
through to the submission event. Deleting the message ends the lifecycle in
``ACCEPTED`` or ``DECLINED``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from reportdesk.domain import fragments
from reportdesk.domain.errors import IllegalTransitionError
from reportdesk.domain.fragments import Fragment

ACCEPT = "accept"
DECLINE = "decline"


class ActionType(str, Enum):
    BAN = "BAN"
    DRAWBAN = "DRAWBAN"
    MUTE = "MUTE"

    @property
    def label(self) -> str:
        return _ACTION_LABELS[self]


_ACTION_LABELS = {
    ActionType.BAN: "Ban",
    ActionType.DRAWBAN: "Draw-ban",
    ActionType.MUTE: "Mute",
}


class ReportState(str, Enum):
    PENDING = "pending"
    AWAITING_ACTION_DETAILS = "awaiting_action_details"
    ACCEPTED = "accepted"
    DECLINED = "declined"

    @property
    def is_terminal(self) -> bool:
        return self in (ReportState.ACCEPTED, ReportState.DECLINED)


class Transition(str, Enum):
    OPEN_DETAILS = "open_details"
    DECLINE = "decline"
    ACCEPT = "accept"

    @property
    def source(self) -> ReportState:
        return _TRANSITIONS[self][0]

    @property
    def target(self) -> ReportState:
        return _TRANSITIONS[self][1]


_TRANSITIONS: dict[Transition, tuple[ReportState, ReportState]] = {
    Transition.OPEN_DETAILS: (ReportState.PENDING, ReportState.AWAITING_ACTION_DETAILS),
    Transition.DECLINE: (ReportState.PENDING, ReportState.DECLINED),
    Transition.ACCEPT: (ReportState.AWAITING_ACTION_DETAILS, ReportState.ACCEPTED),
}

ALLOWED_TRANSITIONS: dict[ReportState, frozenset[ReportState]] = {
    ReportState.PENDING: frozenset({ReportState.AWAITING_ACTION_DETAILS, ReportState.DECLINED}),
    ReportState.AWAITING_ACTION_DETAILS: frozenset({ReportState.ACCEPTED}),
    ReportState.ACCEPTED: frozenset(),
    ReportState.DECLINED: frozenset(),
}


def ensure_transition(current: ReportState, target: ReportState) -> None:
    if target not in ALLOWED_TRANSITIONS[current]:
        raise IllegalTransitionError(f"Cannot move a {current.value} report to {target.value}")


class InteractionKind(str, Enum):
    COMPONENT = "component"
    MODAL = "modal"


@dataclass(frozen=True, slots=True)
class Step:
    """A transition recovered from an interaction's fragment."""

    transition: Transition
    subject_id: int
    action_type: Optional[ActionType] = None
    origin_message_id: Optional[int] = None

    @property
    def state(self) -> ReportState:
        return self.transition.source


def _snowflake(value: str) -> Optional[int]:
    return int(value) if value.isascii() and value.isdigit() else None


def _action_type(value: str) -> Optional[ActionType]:
    try:
        return ActionType(value)
    except ValueError:
        return None


def resolve_step(kind: InteractionKind, fragment: Fragment) -> Optional[Step]:
    """Map an event kind and fragment to the transition it requests.

    Returns ``None`` for anything this bot did not mint, including fragments
    with the wrong arity or unparseable arguments.
    """
    match (kind, fragment.name, fragment.args):
        case (InteractionKind.COMPONENT, "accept", (subject, tag)):
            subject_id, action_type = _snowflake(subject), _action_type(tag)
            if subject_id is None or action_type is None:
                return None
            return Step(Transition.OPEN_DETAILS, subject_id, action_type=action_type)
        case (InteractionKind.COMPONENT, "decline", (subject,)):
            subject_id = _snowflake(subject)
            if subject_id is None:
                return None
            return Step(Transition.DECLINE, subject_id)
        case (InteractionKind.MODAL, "accept", (subject, tag, origin)):
            subject_id, action_type, origin_id = _snowflake(subject), _action_type(tag), _snowflake(origin)
            if subject_id is None or action_type is None or origin_id is None:
                return None
            return Step(Transition.ACCEPT, subject_id, action_type=action_type, origin_message_id=origin_id)
    return None


class ControlStyle(str, Enum):
    SECONDARY = "secondary"
    DANGER = "danger"


@dataclass(frozen=True, slots=True)
class Control:
    label: str
    custom_id: str
    style: ControlStyle = ControlStyle.SECONDARY


def pending_controls(subject_id: int) -> tuple[Control, ...]:
    """Buttons attached to a freshly posted report."""
    accept = tuple(
        Control(label=action.label, custom_id=fragments.encode(ACCEPT, subject_id, action.value))
        for action in (ActionType.BAN, ActionType.DRAWBAN, ActionType.MUTE)
    )
    return accept + (Control(label="Decline", custom_id=fragments.encode(DECLINE, subject_id), style=ControlStyle.DANGER),)


class FieldStyle(str, Enum):
    SHORT = "short"
    PARAGRAPH = "paragraph"


@dataclass(frozen=True, slots=True)
class TextField:
    custom_id: str
    label: str
    style: FieldStyle = FieldStyle.SHORT
    required: bool = True
    max_length: Optional[int] = None
    placeholder: Optional[str] = None


@dataclass(frozen=True, slots=True)
class ModalSpec:
    custom_id: str
    title: str
    fields: tuple[TextField, ...]


REASON_MAX_LENGTH = 50

ACTION_DETAIL_FIELDS = (
    TextField(custom_id="reason", label="Reason", max_length=REASON_MAX_LENGTH),
    TextField(custom_id="notes", label="Notes", style=FieldStyle.PARAGRAPH, required=False),
    TextField(custom_id="duration", label="Duration", placeholder="e.g. 3d 12h, or 'permanent'"),
)


def action_details_modal(subject_id: int, action_type: ActionType, origin_message_id: int) -> ModalSpec:
    return ModalSpec(
        custom_id=fragments.encode(ACCEPT, subject_id, action_type.value, origin_message_id),
        title=f"Accept Report — {action_type.value}",
        fields=ACTION_DETAIL_FIELDS,
    )


__all__ = [
    "ACCEPT",
    "ACTION_DETAIL_FIELDS",
    "ALLOWED_TRANSITIONS",
    "ActionType",
    "Control",
    "ControlStyle",
    "DECLINE",
    "FieldStyle",
    "InteractionKind",
    "ModalSpec",
    "ReportState",
    "Step",
    "TextField",
    "Transition",
    "action_details_modal",
    "ensure_transition",
    "pending_controls",
    "resolve_step",
]
