"""Command-line reading and argument templating."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, MutableSequence, Optional, Sequence


@dataclass(frozen=True)
class CliItem:
    """One item read from the command line; false when the input has ended."""

    short_sw: Optional[str] = None
    long_sw: Optional[str] = None
    text: Optional[str] = None

    @property
    def is_short_sw(self) -> bool:
        return self.short_sw is not None

    @property
    def is_long_sw(self) -> bool:
        return self.long_sw is not None

    @property
    def is_text(self) -> bool:
        return self.text is not None

    @property
    def is_end(self) -> bool:
        return not (self.is_short_sw or self.is_long_sw or self.is_text)

    def __bool__(self) -> bool:
        return not self.is_end


class CliReader:
    """Reads switches, clustered short switches and their values from argv."""

    def __init__(self, args: Sequence[str]) -> None:
        self._args = list(args)
        self._pos = 0
        self._rest = ""

    def next(self) -> CliItem:
        """Read the next item and classify it."""
        if self._rest:
            ch, self._rest = self._rest[0], self._rest[1:]
            return CliItem(short_sw=ch)
        if self._pos >= len(self._args):
            return CliItem()
        arg = self._args[self._pos]
        self._pos += 1
        if arg.startswith("-"):
            if arg.startswith("--"):
                return CliItem(long_sw=arg[2:])
            self._rest = arg[2:]
            return CliItem(short_sw=arg[1:2])
        return CliItem(text=arg)

    def text(self) -> Optional[str]:
        """Read the next item as plain text, or None when nothing is left."""
        if self._rest:
            out, self._rest = self._rest, ""
            return out
        if self._pos < len(self._args):
            out = self._args[self._pos]
            self._pos += 1
            return out
        return None

    def number(self) -> int:
        """Read leading decimal digits of the next item; 0 when there are none."""
        if self._rest:
            source = self._rest
            from_cluster = True
        elif self._pos < len(self._args):
            self._rest = ""
            source = self._args[self._pos]
            self._pos += 1
            from_cluster = False
        else:
            return 0
        count = 0
        while count < len(source) and "0" <= source[count] <= "9":
            count += 1
        if from_cluster:
            self._rest = source[count:]
        return int(source[:count]) if count else 0

    def put_back(self) -> None:
        """Step back one whole argument."""
        if self._pos == 0:
            raise ValueError("nothing to put back")
        self._pos -= 1

    def __bool__(self) -> bool:
        return self._pos < len(self._args) or bool(self._rest)


def append_arguments(
    container: MutableSequence[str], templates: Iterable[str], values: Iterable[str]
) -> MutableSequence[str]:
    """Append each template with its ``{}`` slots filled from ``values`` in turn.

    Slots left once the values run out are removed. Returns ``container``.
    """
    remaining = iter(values)
    for template in templates:
        pieces = template.split("{}")
        out = pieces[0]
        for piece in pieces[1:]:
            out += next(remaining, "") + piece
        container.append(out)
    return container