"""Observability package bootstrap."""

from __future__ import annotations

from reportdesk.obs import logging as obs_logging
from reportdesk.obs import metrics
from reportdesk.settings import Settings

_initialised = False


def init(settings: Settings) -> None:
	global _initialised
	if _initialised:
		return
	obs_logging.configure_logging(settings)
	metrics.serve(settings.metrics_port)
	_initialised = True


__all__ = ["init"]
