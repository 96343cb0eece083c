"""A small JSON reader and writer.

Numbers are read as floats and written with twelve significant digits.
The reader tolerates a few things a strict parser would not. Text after the
first value is ignored. A string left open at the end of input ends there.
The character that follows a comma between object members is taken as the
opening quote of the next key without being checked.
"""

from __future__ import annotations

import string
from typing import Any, Callable, Iterator, Optional

from cairn.utf8 import decode_utf16_unknown_order

_WS = " \t\n\v\f\r"
_NUMBER_CHARS = "0123456789-+.eE"
_SIMPLE_ESCAPES = {"n": "\n", "r": "\r", "t": "\t", "f": "\f", "a": "\a"}
_WRITE_ESCAPES = {
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\f": "\\f",
    "\b": "\\b",
    "\\": "\\\\",
    '"': '\\"',
}

_Read = Callable[[], Optional[str]]


class ParseError(ValueError):
    """Raised when text is not valid JSON."""

    def __init__(self, message: str = "json parse error") -> None:
        super().__init__(message)


def _reader(text: str) -> _Read:
    chars: Iterator[str] = iter(text)
    return lambda: next(chars, None)


def _read_skip_ws(read: _Read) -> str:
    c = read()
    while c is not None and c in _WS:
        c = read()
    if c is None:
        raise ParseError()
    return c


def _expect(read: _Read, rest: str) -> None:
    for expected in rest:
        if read() != expected:
            raise ParseError()


def _parse_string(read: _Read) -> str:
    out: list[str] = []
    hex_digits = ""
    escape = False
    pending_surrogate = 0
    c = read()
    while c is not None and (c != '"' or escape or hex_digits or _in_hex(hex_digits, escape)):
        if escape:
            escape = False
            if c == "u":
                hex_digits = "u"
            else:
                out.append(_SIMPLE_ESCAPES.get(c, c))
        elif hex_digits:
            if c not in string.hexdigits:
                raise ParseError()
            hex_digits += c
            if len(hex_digits) == 5:
                cp = int(hex_digits[1:], 16)
                hex_digits = ""
                if 0xD800 <= cp <= 0xDFFF:
                    if pending_surrogate:
                        cp = decode_utf16_unknown_order(cp, pending_surrogate)
                        pending_surrogate = 0
                    else:
                        pending_surrogate = cp
                        c = read()
                        continue
                out.append(chr(cp))
        elif c == "\\":
            escape = True
        else:
            out.append(c)
        c = read()
    return "".join(out)


def _in_hex(hex_digits: str, escape: bool) -> bool:
    return bool(hex_digits) or escape


def _parse_number(c: str, read: _Read) -> tuple[float, Optional[str]]:
    buff = ""
    while c in _NUMBER_CHARS:
        buff += c
        nxt = read()
        c = " " if nxt is None else nxt
    if not buff or buff[0] == "+":
        raise ParseError()
    try:
        value = float(buff)
    except ValueError:
        raise ParseError() from None
    return value, (None if c in _WS else c)


def _parse_value(c: str, read: _Read) -> tuple[Any, Optional[str]]:
    """Parse a value starting at ``c``; return it with the unconsumed next char."""
    if c == "t":
        _expect(read, "rue")
        return True, None
    if c == "f":
        _expect(read, "alse")
        return False, None
    if c == "n":
        _expect(read, "ull")
        return None, None
    if c == '"':
        return _parse_string(read), None
    if c == "[":
        items: list[Any] = []
        c = _read_skip_ws(read)
        if c != "]":
            value, nxt = _parse_value(c, read)
            items.append(value)
            c = nxt if nxt is not None else _read_skip_ws(read)
            while c != "]":
                if c != ",":
                    raise ParseError()
                value, nxt = _parse_value(_read_skip_ws(read), read)
                items.append(value)
                c = nxt if nxt is not None else _read_skip_ws(read)
        return items, None
    if c == "{":
        obj: dict[str, Any] = {}
        c = _read_skip_ws(read)
        if c != "}":
            if c != '"':
                raise ParseError()
            while True:
                key = _parse_string(read)
                if _read_skip_ws(read) != ":":
                    raise ParseError()
                value, nxt = _parse_value(_read_skip_ws(read), read)
                c = nxt if nxt is not None else _read_skip_ws(read)
                if key in obj:
                    raise ParseError()
                obj[key] = value
                if c == ",":
                    _read_skip_ws(read)  # opening quote of the next key
                    continue
                if c != "}":
                    raise ParseError()
                break
        return obj, None
    return _parse_number(c, read)


def parse(text: str) -> Any:
    """Parse the first JSON value in ``text`` into Python objects."""
    read = _reader(text)
    value, _ = _parse_value(_read_skip_ws(read), read)
    return value


def _write_string(s: str, out: list[str]) -> None:
    out.append('"')
    for ch in s:
        escaped = _WRITE_ESCAPES.get(ch)
        if escaped is not None:
            out.append(escaped)
        elif ord(ch) < 32:
            out.append(f"\\u{ord(ch):04x}")
        else:
            out.append(ch)
    out.append('"')


def _write(value: Any, out: list[str]) -> None:
    if value is None:
        out.append("null")
    elif isinstance(value, bool):
        out.append("true" if value else "false")
    elif isinstance(value, str):
        _write_string(value, out)
    elif isinstance(value, (int, float)):
        out.append(f"{float(value):.12g}")
    elif isinstance(value, (list, tuple)):
        out.append("[")
        for index, item in enumerate(value):
            if index:
                out.append(",")
            _write(item, out)
        out.append("]")
    elif isinstance(value, dict):
        out.append("{")
        for index, (key, item) in enumerate(value.items()):
            if not isinstance(key, str):
                raise TypeError(f"object keys must be strings, not {type(key).__name__}")
            if index:
                out.append(",")
            _write_string(key, out)
            out.append(":")
            _write(item, out)
        out.append("}")
    else:
        raise TypeError(f"cannot serialize {type(value).__name__}")


def serialize(value: Any) -> str:
    """Write ``value`` as compact JSON."""
    out: list[str] = []
    _write(value, out)
    return "".join(out)