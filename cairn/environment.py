"""A snapshot of process environment variables."""

from __future__ import annotations

import os
from typing import Iterable, Iterator, Mapping, Optional, Tuple, Union

_WINDOWS = os.name == "nt"


def _fold(key: str) -> str:
    """Return the form of ``key`` used for lookup and ordering."""
    return key.lower() if _WINDOWS else key


class SystemEnvironment:
    """Environment variables kept in key order.

    Keys are case-insensitive on Windows. When a key appears twice, the
    first value is kept.
    """

    def __init__(
        self,
        variables: Optional[Union[Mapping[str, str], Iterable[Tuple[str, str]]]] = None,
    ) -> None:
        self._data: dict[str, tuple[str, str]] = {}
        if variables is not None:
            pairs = variables.items() if isinstance(variables, Mapping) else variables
            for key, value in pairs:
                self._add(key, value)

    def _add(self, key: str, value: str) -> None:
        self._data.setdefault(_fold(key), (key, value))

    @classmethod
    def current(cls) -> "SystemEnvironment":
        """Capture the environment of the running process."""
        return cls(os.environ.items())

    @classmethod
    def parse(cls, data: Union[str, bytes]) -> "SystemEnvironment":
        """Parse ``env -0`` output (``SET`` output on Windows).

        Entries without ``=`` are ignored; a value may itself contain ``=``.
        """
        if isinstance(data, bytes):
            data = data.decode("utf-8", "surrogateescape")
        separator = "\r\n" if _WINDOWS else "\0"
        env = cls()
        for line in data.split(separator):
            key, sep, value = line.partition("=")
            if sep:
                env._add(key, value)
        return env

    def items(self) -> Iterator[tuple[str, str]]:
        """Yield ``(key, value)`` pairs in key order."""
        for folded in sorted(self._data):
            yield self._data[folded]

    def as_dict(self) -> dict[str, str]:
        return dict(self.items())

    def posix_format(self) -> list[str]:
        """Return the variables as ``key=value`` strings in key order."""
        return [f"{key}={value}" for key, value in self.items()]

    def to_windows_format(self) -> str:
        """Return a block of NUL-terminated ``key=value`` strings ending in an extra NUL."""
        return "".join(f"{entry}\0" for entry in self.posix_format()) + "\0"

    def __getitem__(self, key: str) -> str:
        """Return the value of ``key``, or an empty string when it is not set."""
        entry = self._data.get(_fold(key))
        return "" if entry is None else entry[1]

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and _fold(key) in self._data

    def __len__(self) -> int:
        return len(self._data)

    def __iter__(self) -> Iterator[str]:
        return (key for key, _ in self.items())

    def __repr__(self) -> str:
        return f"SystemEnvironment({self.as_dict()!r})"