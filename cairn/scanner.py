"""Discover a translation unit's module name, kind and imports.

The scanner reads the module preamble only: it finds the ``module``
declaration and then collects the ``import`` declarations that follow, stopping
at the first other declaration. Bracketed blocks, character literals and raw
strings are skipped so their contents never look like declarations.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Optional

from cairn.module_type import ModuleType

_SPACE = " \t\n\v\f\r"
_CLOSERS = {"(": ")", "{": "}", "[": "]"}


@dataclass(frozen=True)
class Reference:
    """A module, partition or header unit that a source refers to."""

    type: ModuleType
    name: str


@dataclass
class SourceInfo:
    """What a scan found in one source file."""

    name: str = ""
    """Logical module name (fully qualified for partitions)."""
    type: ModuleType = ModuleType.SOURCE
    required: list[Reference] = field(default_factory=list)
    """Everything the unit imports, partitions fully qualified."""
    exported: list[Reference] = field(default_factory=list)
    """Imports that are re-exported; each also appears in ``required``."""


class _Kind(Enum):
    KEYWORD = auto()
    STRING = auto()
    SYMBOL = auto()
    ANGLED_INCLUDE = auto()
    END = auto()


@dataclass(frozen=True)
class _Tok:
    kind: _Kind
    text: str = ""


def _is_word_char(c: str) -> bool:
    return (c.isascii() and c.isalnum()) or c in "_:."


def _skip_raw_string(text: str, pos: int) -> int:
    """Skip a raw string whose opening quote has already been consumed."""
    end = len(text)
    start = pos
    while pos < end and text[pos] not in '"(':
        pos += 1
    if pos == end:
        return pos
    if text[pos] == '"':
        return pos + 1
    terminator = ")" + text[start:pos] + '"'
    found = text.find(terminator, pos)
    return end if found < 0 else found + len(terminator)


def _skip_quoted(text: str, pos: int, quote: str) -> int:
    end = len(text)
    while pos < end:
        c = text[pos]
        pos += 1
        if c == "\\":
            pos += 1
            if pos >= end:
                return end
        elif c == quote:
            break
    return pos


def _parse_string(text: str, pos: int) -> tuple[int, str]:
    end = len(text)
    out: list[str] = []
    while pos < end:
        c = text[pos]
        pos += 1
        if c == "\\":
            out.append(c)
            if pos == end:
                break
            out.append(text[pos])
            pos += 1
        elif c == '"':
            break
        out.append(c)
    return pos, "".join(out)


def _parse_header_angled(text: str, pos: int) -> tuple[int, str]:
    close = text.find(">", pos)
    if close < 0:
        return len(text), text[pos:]
    return close + 1, text[pos:close]


def _skip_braces(text: str, closer: str, pos: int) -> int:
    end = len(text)
    while pos < end:
        c = text[pos]
        pos += 1
        if c == closer:
            break
        if c in _CLOSERS:
            pos = _skip_braces(text, _CLOSERS[c], pos)
        elif c in "\"'":
            pos = _skip_quoted(text, pos, c)
    return pos


class _Tokenizer:
    def __init__(self, text: str) -> None:
        self._text = text
        self._pos = 0

    def next(self, header_angled: bool = False) -> _Tok:
        text = self._text
        end = len(text)
        buff: list[str] = []
        while self._pos < end:
            c = text[self._pos]
            if _is_word_char(c):
                buff.append(c)
                self._pos += 1
                continue
            if c == '"' and buff and buff[-1] == "R":
                buff.clear()
                self._pos = _skip_raw_string(text, self._pos + 1)
                continue
            if buff:
                return _Tok(_Kind.KEYWORD, "".join(buff))
            self._pos += 1
            if c in _CLOSERS:
                self._pos = _skip_braces(text, _CLOSERS[c], self._pos)
            elif c == '"':
                self._pos, content = _parse_string(text, self._pos)
                return _Tok(_Kind.STRING, content)
            elif c == "'":
                self._pos = _skip_quoted(text, self._pos, "'")
            elif c == "<":
                if header_angled:
                    self._pos, content = _parse_header_angled(text, self._pos)
                    return _Tok(_Kind.ANGLED_INCLUDE, content)
            elif c not in _SPACE:
                return _Tok(_Kind.SYMBOL, c)
        if buff:
            return _Tok(_Kind.KEYWORD, "".join(buff))
        return _Tok(_Kind.END)


def _header_reference(tok: _Tok) -> Optional[Reference]:
    if tok.kind is _Kind.STRING:
        return Reference(ModuleType.USER_HEADER, tok.text)
    if tok.kind is _Kind.ANGLED_INCLUDE:
        return Reference(ModuleType.SYSTEM_HEADER, tok.text)
    return None


def _qualify_partition(module_name: str, part: str) -> str:
    if not part.startswith(":"):
        return part
    sep = module_name.rfind(":")
    base = module_name if sep < 0 else module_name[:sep]
    return base + part


def scan_string(text: str) -> SourceInfo:
    """Scan source text and report its module declaration and imports."""
    info = SourceInfo()
    tokens = _Tokenizer(text)
    has_export = False

    # Phase one: look for the module declaration (or a leading import).
    while True:
        tok = tokens.next()
        done = False
        if tok.kind is _Kind.KEYWORD:
            if tok.text == "module":
                tok = tokens.next()
                if tok.kind is _Kind.KEYWORD:
                    info.name = tok.text
                    if ":" in tok.text:
                        info.type = ModuleType.PARTITION
                    elif has_export:
                        info.type = ModuleType.INTERFACE
                    else:
                        info.type = ModuleType.IMPLEMENTATION
                        info.required.append(Reference(ModuleType.INTERFACE, info.name))
                    done = True
            elif tok.text == "export":
                has_export = True
                continue
            elif tok.text == "import":
                tok = tokens.next(header_angled=True)
                if tok.kind is _Kind.KEYWORD:
                    info.required.append(Reference(ModuleType.INTERFACE, tok.text))
                    done = True
                else:
                    header = _header_reference(tok)
                    if header is not None:
                        info.required.append(header)
        has_export = False
        if tok.kind is _Kind.END:
            return info
        if done:
            break

    # Phase two: collect imports until any other declaration begins.
    while True:
        tok = tokens.next()
        if tok.kind is _Kind.KEYWORD:
            if tok.text == "export":
                has_export = True
                continue
            if tok.text != "import":
                return info
            tok = tokens.next(header_angled=True)
            if tok.kind is _Kind.KEYWORD:
                name = _qualify_partition(info.name, tok.text)
                kind = ModuleType.PARTITION if ":" in name else ModuleType.INTERFACE
                info.required.append(Reference(kind, name))
            else:
                header = _header_reference(tok)
                if header is not None:
                    info.required.append(header)
            if has_export and info.required:
                info.exported.append(info.required[-1])
        has_export = False
        if tok.kind is _Kind.END:
            return info