"""Structured logging helpers for the report desk."""

from __future__ import annotations

import json
import logging
import random
from contextvars import ContextVar, Token
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from reportdesk.settings import Settings

_INTERACTION_ID: ContextVar[Optional[str]] = ContextVar("obs_interaction_id", default=None)
_INTERACTION_KIND: ContextVar[Optional[str]] = ContextVar("obs_interaction_kind", default=None)
_GUILD_ID: ContextVar[Optional[str]] = ContextVar("obs_guild_id", default=None)
_USER_ID: ContextVar[Optional[str]] = ContextVar("obs_user_id", default=None)

_LOGGER_NAME = "reportdesk"

_SENSITIVE_KEYWORDS = (
	"token",
	"secret",
	"authorization",
	"password",
)

_MAX_STRING_LENGTH = 256
_MAX_COLLECTION_ITEMS = 10

_RESERVED_ATTRS = frozenset(
	{
		"args",
		"msg",
		"levelname",
		"levelno",
		"pathname",
		"filename",
		"module",
		"exc_info",
		"exc_text",
		"stack_info",
		"lineno",
		"funcName",
		"created",
		"msecs",
		"relativeCreated",
		"thread",
		"threadName",
		"process",
		"processName",
		"message",
		"name",
		"taskName",
	}
)


def bind_context(
	*,
	interaction_id: Optional[str] = None,
	kind: Optional[str] = None,
	guild_id: Optional[str] = None,
	user_id: Optional[str] = None,
) -> Dict[str, Token]:
	"""Bind contextual fields for the current interaction and return reset tokens."""
	tokens: Dict[str, Token] = {}
	if interaction_id is not None:
		tokens["interaction_id"] = _INTERACTION_ID.set(interaction_id)
	if kind is not None:
		tokens["kind"] = _INTERACTION_KIND.set(kind)
	if guild_id is not None:
		tokens["guild_id"] = _GUILD_ID.set(guild_id)
	if user_id is not None:
		tokens["user_id"] = _USER_ID.set(user_id)
	return tokens


def reset_context(tokens: Dict[str, Token]) -> None:
	for key, token in tokens.items():
		if key == "interaction_id":
			_INTERACTION_ID.reset(token)
		elif key == "kind":
			_INTERACTION_KIND.reset(token)
		elif key == "guild_id":
			_GUILD_ID.reset(token)
		elif key == "user_id":
			_USER_ID.reset(token)


def _truncate_collection(values: list[Any]) -> list[Any]:
	if len(values) <= _MAX_COLLECTION_ITEMS:
		return values
	trimmed = values[:_MAX_COLLECTION_ITEMS]
	trimmed.append("…")
	return trimmed


def _sanitize_value(value: Any) -> Any:
	if isinstance(value, str):
		return value if len(value) <= _MAX_STRING_LENGTH else f"{value[:_MAX_STRING_LENGTH]}…"
	if isinstance(value, dict):
		result: Dict[str, Any] = {}
		for idx, (key, nested) in enumerate(value.items()):
			if idx >= _MAX_COLLECTION_ITEMS:
				result["…"] = f"+{len(value) - _MAX_COLLECTION_ITEMS} keys"
				break
			result[key] = _sanitize_field(key, nested)
		return result
	if isinstance(value, (list, tuple, set)):
		items = [_sanitize_value(item) for item in list(value)]
		return _truncate_collection(items)
	return value


def _sanitize_field(key: str, value: Any) -> Any:
	lowered = key.lower()
	if any(keyword in lowered for keyword in _SENSITIVE_KEYWORDS):
		return "[redacted]"
	return _sanitize_value(value)


class JSONLogFormatter(logging.Formatter):
	"""Emit logs as JSON objects with structured fields."""

	def __init__(self, *, service: str, environment: str, commit: str) -> None:
		super().__init__()
		self.service = service
		self.environment = environment
		self.commit = commit

	def format(self, record: logging.LogRecord) -> str:  # noqa: A003 (match logging api)
		timestamp = datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat()
		payload: Dict[str, object] = {
			"ts": timestamp,
			"level": record.levelname.lower(),
			"msg": record.getMessage(),
			"logger": record.name,
			"service": self.service,
			"env": self.environment,
			"commit": self.commit,
		}
		interaction_id = _INTERACTION_ID.get()
		if interaction_id:
			payload["interaction_id"] = interaction_id
		kind = _INTERACTION_KIND.get()
		if kind:
			payload["kind"] = kind
		guild_id = _GUILD_ID.get()
		if guild_id:
			payload["guild_id"] = guild_id
		user_id = _USER_ID.get()
		if user_id:
			payload["user_id"] = user_id
		if record.exc_info:
			payload["exc_info"] = self.formatException(record.exc_info)
		for key, value in record.__dict__.items():
			if key in _RESERVED_ATTRS or key in payload:
				continue
			payload[key] = _sanitize_field(key, value)
		return json.dumps(payload, separators=(",", ":"), default=str)


class InfoSamplingFilter(logging.Filter):
	"""Randomly sample info-level logs, keep warnings/errors."""

	def __init__(self, rate: float) -> None:
		super().__init__()
		self.rate = max(0.0, min(1.0, rate))

	def filter(self, record: logging.LogRecord) -> bool:  # noqa: A003
		if record.levelno != logging.INFO:
			return True
		if self.rate >= 1.0:
			return True
		return random.random() < self.rate


def configure_logging(settings: Settings) -> logging.Logger:
	"""Configure root logger with JSON formatting and sampling."""
	root = logging.getLogger()
	root.handlers.clear()
	handler = logging.StreamHandler()
	handler.setFormatter(
		JSONLogFormatter(
			service=settings.service_name,
			environment=settings.environment,
			commit=settings.git_commit,
		)
	)
	handler.addFilter(InfoSamplingFilter(settings.log_sampling_rate_info))
	root.addHandler(handler)
	root.setLevel(settings.log_level)
	# discord.py is chatty at INFO about gateway reconnects
	logging.getLogger("discord").setLevel(max(logging.WARNING, root.level))
	return logging.getLogger(_LOGGER_NAME)


def get_logger(name: Optional[str] = None) -> logging.Logger:
	return logging.getLogger(name or _LOGGER_NAME)
