"""Failures raised while moving a report through its lifecycle."""

from __future__ import annotations

ERROR_PREFIX = "❌ **Error**: "


class ReportWorkflowError(Exception):
    """Base class for failures shown to the user who triggered the transition."""

    kind: str = "workflow"
    detail: str = "Something went wrong"

    def __init__(self, detail: str | None = None) -> None:
        super().__init__(detail or self.detail)
        if detail:
            self.detail = detail

    @property
    def user_message(self) -> str:
        return f"{ERROR_PREFIX}{self.detail}"


class InvalidSubmissionError(ReportWorkflowError):
    """The submitted report cannot be accepted; nothing was posted."""

    kind = "invalid_submission"
    detail = "Invalid report"


class LostAnchorError(ReportWorkflowError):
    """The report message was deleted or already processed."""

    kind = "lost_anchor"
    detail = "Failed to find the report message"

    def __init__(self, message_id: int) -> None:
        super().__init__(f"Failed to find message with ID {message_id}")
        self.message_id = message_id


class ReportClaimedError(ReportWorkflowError):
    """Another reviewer is finishing this report."""

    kind = "claimed"
    detail = "This report is already being handled by another reviewer"


class ActionFailedError(ReportWorkflowError):
    """The moderation API refused or failed to record the action."""

    kind = "action_failed"
    detail = "Failed to record the moderation action; the report was left in place"


class IllegalTransitionError(ReportWorkflowError):
    kind = "illegal_transition"
    detail = "This report cannot be changed that way"


class CollaboratorError(Exception):
    """Base class for failures reported by external services."""


class ProfileNotFoundError(CollaboratorError):
    pass


class ProfileLookupError(CollaboratorError):
    pass


class ModerationApiError(CollaboratorError):
    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class EvidenceUnavailableError(CollaboratorError):
    """The evidence attachment could not be downloaded."""


__all__ = [
    "ERROR_PREFIX",
    "CollaboratorError",
    "EvidenceUnavailableError",
    "ModerationApiError",
    "ProfileLookupError",
    "ProfileNotFoundError",
    "ActionFailedError",
    "IllegalTransitionError",
    "InvalidSubmissionError",
    "LostAnchorError",
    "ReportClaimedError",
    "ReportWorkflowError",
]
