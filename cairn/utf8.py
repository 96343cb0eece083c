"""Lenient UTF-8 and UTF-16 conversions."""

from __future__ import annotations

from typing import Iterable, Union

REPLACEMENT = 0xFFFD
_MAX_CODE_POINT = 0x10FFFF


def decode_utf8(data: bytes) -> str:
    """Decode UTF-8 bytes, substituting U+FFFD for malformed sequences.

    An incomplete sequence at the end of the data is dropped.
    """
    out: list[str] = []

    def push(cp: int) -> None:
        out.append(chr(cp) if cp <= _MAX_CODE_POINT else chr(REPLACEMENT))

    pending = 0
    cp = 0
    for b in data:
        if pending:
            if b & 0x80:
                cp = (cp << 6) | (b & 0x3F)
                pending -= 1
                if not pending:
                    push(cp)
                continue
            push(REPLACEMENT)
            pending = 0
        if not b & 0x80:
            push(b)
        elif b & 0xE0 == 0xC0:
            cp, pending = b & 0x1F, 1
        elif b & 0xF0 == 0xE0:
            cp, pending = b & 0x0F, 2
        elif b & 0xF8 == 0xF0:
            cp, pending = b & 0x07, 3
        else:
            push(REPLACEMENT)
    return "".join(out)


def decode_utf16_unknown_order(a: int, b: int) -> int:
    """Combine two surrogates given in either order; U+FFFD if they don't pair."""
    a_high = 0xD800 <= a <= 0xDBFF
    a_low = 0xDC00 <= a <= 0xDFFF
    b_high = 0xD800 <= b <= 0xDBFF
    b_low = 0xDC00 <= b <= 0xDFFF
    if a_high and b_low:
        return ((a - 0xD800) << 10) + (b - 0xDC00) + 0x10000
    if b_high and a_low:
        return ((b - 0xD800) << 10) + (a - 0xDC00) + 0x10000
    return REPLACEMENT


def _encode_point(cp: int) -> bytes:
    if cp < 0 or cp > _MAX_CODE_POINT:
        raise ValueError(f"code point out of range: {cp:#x}")
    if cp < 0x80:
        return bytes((cp,))
    if cp < 0x800:
        return bytes((0xC0 | (cp >> 6), 0x80 | (cp & 0x3F)))
    if cp < 0x10000:
        return bytes((0xE0 | (cp >> 12), 0x80 | ((cp >> 6) & 0x3F), 0x80 | (cp & 0x3F)))
    return bytes(
        (
            0xF0 | (cp >> 18),
            0x80 | ((cp >> 12) & 0x3F),
            0x80 | ((cp >> 6) & 0x3F),
            0x80 | (cp & 0x3F),
        )
    )


def encode_utf8(code_units: Union[str, Iterable[int]]) -> bytes:
    """Encode code points or UTF-16 code units as UTF-8.

    Surrogate pairs are joined in whichever order they arrive; an unpaired
    surrogate left at the end is dropped.
    """
    units = map(ord, code_units) if isinstance(code_units, str) else code_units
    out = bytearray()
    pending = 0
    for unit in units:
        if 0xD800 <= unit <= 0xDFFF:
            if not pending:
                pending = unit
                continue
            unit = decode_utf16_unknown_order(pending, unit)
            pending = 0
        out += _encode_point(unit)
    return bytes(out)