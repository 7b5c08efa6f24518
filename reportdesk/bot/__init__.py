"""Discord adapter for the report desk."""

from reportdesk.bot.client import ReportDeskClient
from reportdesk.bot.gateway import DiscordReportChannel

__all__ = ["DiscordReportChannel", "ReportDeskClient"]
