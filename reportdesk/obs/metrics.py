"""Central registry for Prometheus metrics used by the report desk."""

from __future__ import annotations

import logging

from prometheus_client import Counter, start_http_server

log = logging.getLogger(__name__)


REPORT_SUBMISSIONS_TOTAL = Counter(
	"report_submissions_total",
	"Report submissions received through the slash command",
	["result"],
)

REPORT_TRANSITIONS_TOTAL = Counter(
	"report_transitions_total",
	"Report lifecycle transitions completed",
	["transition"],
)

REPORT_ERRORS_TOTAL = Counter(
	"report_errors_total",
	"Report workflow failures surfaced to users",
	["kind"],
)

MODERATION_ACTIONS_TOTAL = Counter(
	"moderation_actions_total",
	"Moderation actions sent to the moderation API",
	["type", "result"],
)


def serve(port: int | None) -> None:
	"""Expose the default registry over HTTP when a port is configured."""
	if port is None:
		return
	start_http_server(port)
	log.info("metrics exporter listening", extra={"port": port})


__all__ = [
	"REPORT_SUBMISSIONS_TOTAL",
	"REPORT_TRANSITIONS_TOTAL",
	"REPORT_ERRORS_TOTAL",
	"MODERATION_ACTIONS_TOTAL",
	"serve",
]
