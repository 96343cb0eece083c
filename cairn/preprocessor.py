"""A lightweight preprocessor for dependency scanning.

It follows ``#if``/``#ifdef``/``#ifndef``/``#else``/``#endif`` blocks, records
``#define`` and ``#undef`` and reads angle-bracket ``#include`` files to pick
up their definitions. Macros are expanded only inside conditions: lines of
code are copied through unchanged, with comments removed and continued lines
joined.
"""

from __future__ import annotations

import os
from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Iterable, Iterator, Optional, Union

from cairn.pp_tokens import EOF_TOKEN, Token, TokenType, evaluate, tokenize

_SPACE = " \t\n\v\f\r"

PathArg = Union[str, "os.PathLike[str]"]


class ScanMode(Enum):
    SKIP = "skip"
    """Skip lines until the matching ``#endif``; nested blocks are entered."""
    COLLECT = "collect"
    """Record definitions without producing output."""
    COPY = "copy"
    """Copy lines to the output; macros in code are not expanded."""


class Command(Enum):
    IF = "#if"
    IFDEF = "#ifdef"
    IFNDEF = "#ifndef"
    ELIF = "#elif"
    ELIFDEF = "#elifdef"
    ELIFNDEF = "#elifndef"
    ELSE = "#else"
    ENDIF = "#endif"
    DEFINE = "#define"
    UNDEF = "#undef"
    INCLUDE = "#include"
    EOF = ""


_DIRECTIVES = {c.value: c for c in Command if c is not Command.EOF}
_BRANCH_ENDS = (Command.ENDIF, Command.ELSE, Command.ELIF, Command.ELIFDEF)


@dataclass
class _MacroDef:
    content: list[Token] = field(default_factory=list)
    variables: Optional[list[str]] = None


def _join_continued_lines(chars: Iterator[str]) -> Iterator[str]:
    """Drop a backslash and trailing blanks that precede a newline."""
    for c in chars:
        if c != "\\":
            yield c
            continue
        pending = [c]
        for d in chars:
            pending.append(d)
            if d == "\n" or d not in _SPACE:
                break
        else:
            return
        if pending[-1] != "\n":
            yield from pending


def _skip_block_comment(chars: Iterator[str]) -> Optional[str]:
    """Consume a block comment and return the character that follows it."""
    star = False
    for c in chars:
        if c == "*":
            star = True
        elif c == "/" and star:
            return next(chars, None)
        else:
            star = False
    return None


def _strip_comments(chars: Iterator[str]) -> Iterator[str]:
    for c in chars:
        if c != "/":
            yield c
            continue
        d = next(chars, None)
        if d == "*":
            after = _skip_block_comment(chars)
            if after is None:
                return
            yield after
        elif d == "/":
            for e in chars:
                if e == "\n":
                    yield e
                    break
            else:
                return
        else:
            yield c
            if d is None:
                return
            yield d


class _LineSource:
    """Cleaned lines of a text, read one at a time."""

    def __init__(self, text: str) -> None:
        cleaned = "".join(_strip_comments(_join_continued_lines(iter(text))))
        self._lines = deque(cleaned.replace("\r", "").split("\n"))

    def next_line(self) -> tuple[str, bool]:
        """Return the next line and whether more lines follow it."""
        if not self._lines:
            return "", False
        line = self._lines.popleft()
        return line, bool(self._lines)


def _next_significant(tokens: Iterator[Token]) -> Token:
    for tok in tokens:
        if tok.type is not TokenType.WHITE:
            return tok
    return EOF_TOKEN


class Preprocessor:
    """Tracks macro definitions and include paths across processed sources."""

    def __init__(self) -> None:
        self._macros: dict[str, _MacroDef] = {}
        self._includes: list[Path] = []

    @property
    def include_paths(self) -> tuple[Path, ...]:
        return tuple(self._includes)

    def append_includes(self, paths: Union[PathArg, Iterable[PathArg]]) -> None:
        """Add one include directory or several."""
        if isinstance(paths, (str, os.PathLike)):
            self._includes.append(Path(paths))
        else:
            self._includes.extend(Path(p) for p in paths)

    def define_symbol(self, symbol: str, value: str) -> None:
        """Define ``symbol``; tokens of ``value`` are appended to any existing body."""
        macro = self._macros.setdefault(symbol, _MacroDef())
        macro.content.extend(tokenize(value))

    def undef_symbol(self, symbol: str) -> None:
        self._macros.pop(symbol, None)

    def is_defined(self, name: str) -> bool:
        return name in self._macros

    def process_text(self, cur_dir: PathArg, text: str, mode: ScanMode = ScanMode.COPY) -> str:
        """Process ``text`` as if it lived in ``cur_dir`` and return the output."""
        out: list[str] = []
        self._scan(Path(cur_dir), _LineSource(text), mode, out, set())
        return "".join(out)

    def run(self, workdir: PathArg, src_file: PathArg) -> str:
        """Process a source file; an unreadable file gives empty output."""
        try:
            text = Path(src_file).read_text(encoding="utf-8", errors="replace")
        except OSError:
            return ""
        return self.process_text(workdir, text, ScanMode.COPY)

    def _scan(
        self,
        cur_dir: Path,
        lines: _LineSource,
        mode: ScanMode,
        out: list[str],
        disabled: set[Path],
    ) -> tuple[Command, str]:
        more = True
        while more:
            line, more = lines.next_line()
            name, _, rest = line.strip(_SPACE).partition(" ")
            command = _DIRECTIVES.get(name, Command.EOF)
            args = rest.strip(_SPACE)
            if command is Command.EOF:
                if mode is ScanMode.COPY:
                    out.append(line + "\n")
                continue
            if command in _BRANCH_ENDS:
                return command, args
            cond: Optional[bool] = None
            if command is Command.DEFINE:
                if mode is not ScanMode.SKIP:
                    self._parse_define(args)
            elif command is Command.UNDEF:
                if mode is not ScanMode.SKIP:
                    self._parse_undef(args)
            elif command is Command.INCLUDE:
                if mode is not ScanMode.SKIP:
                    self._parse_include(cur_dir, args, disabled)
            elif command is Command.IF:
                cond = self._parse_if(args)
            elif command is Command.IFDEF:
                cond = self._parse_ifdef(args)
            elif command is Command.IFNDEF:
                cond = not self._parse_ifdef(args)
            if cond is None:
                continue
            active = cond
            branch, _ = self._scan(cur_dir, lines, mode if active else ScanMode.SKIP, out, disabled)
            while branch not in (Command.EOF, Command.ENDIF):
                # Only #else switches the active branch; #elif variants keep it.
                if branch is Command.ELSE:
                    active = not active
                branch, _ = self._scan(
                    cur_dir, lines, mode if active else ScanMode.SKIP, out, disabled
                )
        return Command.EOF, ""

    def _parse_define(self, args: str) -> None:
        tokens = tokenize(args)
        name = next(tokens, EOF_TOKEN)
        if name.type is TokenType.EOF:
            return
        macro = _MacroDef()
        follow = next(tokens, EOF_TOKEN)
        if follow.content == "(":
            macro.variables = []
            for tok in tokens:
                if tok.content == ")":
                    break
                if tok.type is TokenType.IDENTIFIER:
                    macro.variables.append(tok.content)
        elif follow.type is not TokenType.WHITE:
            return
        macro.content = list(tokens)
        self._macros[name.content] = macro

    def _parse_undef(self, args: str) -> None:
        name = next(tokenize(args), EOF_TOKEN)
        if name.type is not TokenType.EOF:
            self._macros.pop(name.content, None)

    def _parse_ifdef(self, args: str) -> bool:
        name = next(tokenize(args), EOF_TOKEN)
        return name.type is not TokenType.EOF and name.content in self._macros

    def _parse_include(self, cur_dir: Path, args: str, disabled: set[Path]) -> None:
        tokens = tokenize(args)
        opener = next(tokens, EOF_TOKEN)
        if opener.content == "<":
            closer = ">"
        elif opener.content == '"':
            closer = '"'
        else:
            return
        parts = []
        for tok in tokens:
            if tok.content == closer:
                break
            parts.append(tok.content)
        relative = "".join(parts)
        final = Path(os.path.normpath(cur_dir / relative))
        if closer == ">":
            for directory in self._includes:
                try:
                    final = (directory / relative).resolve(strict=True)
                    break
                except (OSError, RuntimeError):
                    continue
        if final in disabled:
            return
        disabled.add(final)
        try:
            text = final.read_text(encoding="utf-8", errors="replace")
        except OSError:
            return
        self._scan(final.parent, _LineSource(text), ScanMode.COLLECT, [], disabled)

    def _parse_if(self, args: str) -> bool:
        stream: list[Token] = []
        self._expand(tokenize(args), stream, {}, set())
        return evaluate(stream) != 0

    def _expand(
        self,
        tokens: Iterator[Token],
        out: list[Token],
        arguments: dict[str, list[Token]],
        deactivated: set[str],
    ) -> None:
        for tok in tokens:
            if tok.type is TokenType.WHITE:
                continue
            if tok.type is not TokenType.IDENTIFIER:
                out.append(tok)
                continue
            if tok.content == "defined":
                out.append(self._defined(tokens))
                continue
            if tok.content in arguments:
                # Arguments are expanded without further function-like calls.
                self._expand(iter(arguments[tok.content]), out, {}, deactivated)
                continue
            macro = None if tok.content in deactivated else self._macros.get(tok.content)
            if macro is None:
                out.append(tok)
                continue
            if macro.variables is None:
                call_args: dict[str, list[Token]] = {}
            else:
                opener = _next_significant(tokens)
                if opener.content != "(":
                    out.extend((tok, opener))
                    continue
                call_args = self._collect_arguments(tokens, macro.variables)
            deactivated.add(tok.content)
            self._expand(iter(macro.content), out, call_args, deactivated)
            deactivated.discard(tok.content)

    def _defined(self, tokens: Iterator[Token]) -> Token:
        first = _next_significant(tokens)
        if first.content == "(":
            name = _next_significant(tokens)
            for tok in tokens:
                if tok.content == ")":
                    break
        else:
            name = first
        return Token(TokenType.NUMBER, "1" if name.content in self._macros else "0")

    @staticmethod
    def _collect_arguments(tokens: Iterator[Token], variables: list[str]) -> dict[str, list[Token]]:
        # The token right after the opening parenthesis is discarded, and all
        # tokens up to the matching parenthesis are bound to the first parameter.
        next(tokens, None)
        collected: list[Token] = []
        depth = 1
        for tok in tokens:
            if tok.content == "(":
                depth += 1
            elif tok.content == ")":
                depth -= 1
                if not depth:
                    break
            collected.append(tok)
        return {variables[0]: collected} if variables else {}