"""Report lifecycle: fragments, durations, transitions and routing."""

from reportdesk.domain.reports_service import ReportPolicy, ReportService
from reportdesk.domain.router import InteractionRouter

__all__ = ["InteractionRouter", "ReportPolicy", "ReportService"]
