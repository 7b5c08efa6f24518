"""Compact ``name(arg,...)`` tokens carried in component and modal custom ids.

The report desk keeps no store between interactions. Everything a follow-up
interaction needs is round-tripped through the platform's ``custom_id`` field
as a fragment such as ``accept(1234,MUTE)``.

Arguments are percent-escaped for the four characters that would break the
grammar (``%``, ``,``, ``(`` and ``)``). Numeric ids and enum tags never
contain those, so their encoded form matches identifiers minted before
escaping was introduced.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional, Tuple

# Discord rejects custom ids longer than this
MAX_FRAGMENT_LENGTH = 100

_NAME_RE = re.compile(r"^\w+$")
_FRAGMENT_RE = re.compile(r"^(\w+)\((.+)\)$", re.DOTALL)

_ESCAPES = {"%": "%25", ",": "%2C", "(": "%28", ")": "%29"}
_UNESCAPE_RE = re.compile(r"%(25|2C|28|29)", re.IGNORECASE)


class FragmentError(ValueError):
    """Raised when a fragment cannot be encoded."""


@dataclass(frozen=True, slots=True)
class Fragment:
    name: str
    args: Tuple[str, ...] = ()

    def encode(self) -> str:
        return encode(self.name, *self.args)


def _escape(arg: str) -> str:
    return "".join(_ESCAPES.get(char, char) for char in arg)


def _unescape(arg: str) -> str:
    return _UNESCAPE_RE.sub(lambda match: chr(int(match.group(1), 16)), arg)


def encode(name: str, *args: object) -> str:
    if not _NAME_RE.match(name):
        raise FragmentError(f"invalid fragment name: {name!r}")
    if not args:
        raise FragmentError("fragments need at least one argument")
    body = ",".join(_escape(str(arg)) for arg in args)
    if not body:
        raise FragmentError("fragments cannot have an empty argument group")
    data = f"{name}({body})"
    if len(data) > MAX_FRAGMENT_LENGTH:
        raise FragmentError(f"fragment exceeds {MAX_FRAGMENT_LENGTH} characters")
    return data


def decode(data: Optional[str]) -> Optional[Fragment]:
    """Return the fragment in ``data`` or ``None`` when it is not one of ours."""
    if not data:
        return None
    match = _FRAGMENT_RE.match(data)
    if match is None:
        return None
    name, body = match.groups()
    if "(" in body or ")" in body:
        return None
    return Fragment(name=name, args=tuple(_unescape(arg) for arg in body.split(",")))


__all__ = ["Fragment", "FragmentError", "MAX_FRAGMENT_LENGTH", "decode", "encode"]
