"""Dotted numeric versions and the application's own version."""

from __future__ import annotations

import re
from functools import total_ordering
from itertools import zip_longest

APP_VERSION = "33bbce9"

_INT_MIN = -(1 << 31)
_INT_MAX = (1 << 31) - 1
_LEADING_INT = re.compile(r"[ \t\n\v\f\r]*([+-]?\d+)")


def _parse_part(part: str) -> int:
    match = _LEADING_INT.match(part)
    if match is None:
        raise ValueError(f"invalid version component: {part!r}")
    value = int(match.group(1))
    if not _INT_MIN <= value <= _INT_MAX:
        raise ValueError(f"version component out of range: {part!r}")
    return value


@total_ordering
class Version:
    """A version such as ``1.2.3``; missing trailing parts count as zero."""

    def __init__(self, text: str = "") -> None:
        pieces = text.split(".")
        if pieces and pieces[-1] == "":
            pieces.pop()
        self.parts: list[int] = [_parse_part(p) for p in pieces]

    def _padded(self, other: "Version"):
        return zip_longest(self.parts, other.parts, fillvalue=0)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        for a, b in self._padded(other):
            if a != b:
                return a < b
        return False

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return all(a == b for a, b in self._padded(other))

    def __hash__(self) -> int:
        parts = list(self.parts)
        while parts and parts[-1] == 0:
            parts.pop()
        return hash(tuple(parts))

    def __str__(self) -> str:
        return ".".join(str(p) for p in self.parts)

    def __repr__(self) -> str:
        return f"Version({str(self)!r})"