"""Moderation report intake and triage bot."""

__version__ = "0.1.0"
