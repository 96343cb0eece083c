"""Tokens and constant-expression evaluation for preprocessor directives."""

from __future__ import annotations

import string
from dataclasses import dataclass
from enum import Enum, auto
from typing import Callable, Iterable, Iterator

_SPACE = " \t\n\v\f\r"
_LONG_MAX = (1 << 63) - 1
_BITS = 64


class TokenType(Enum):
    BEGIN = auto()
    EOF = auto()
    IDENTIFIER = auto()
    NUMBER = auto()
    XNUMBER = auto()
    NUMBER_SUFFIXED = auto()
    XNUMBER_SUFFIXED = auto()
    STRING = auto()
    SYMBOL = auto()
    WHITE = auto()


@dataclass(frozen=True)
class Token:
    type: TokenType
    content: str = ""


EOF_TOKEN = Token(TokenType.EOF)


def _is_digit(c: str) -> bool:
    return "0" <= c <= "9"


def _is_alnum(c: str) -> bool:
    return c.isascii() and c.isalnum()


def _read_string(chars: Iterator[str]) -> str:
    content = '"'
    slash = False
    for c in chars:
        if not slash and c == '"':
            break
        content += c
        slash = c == "\\"
    return content + '"'


def tokenize(text: str) -> Iterator[Token]:
    """Yield the tokens of a directive line.

    Runs of whitespace form one token; consecutive punctuation merges into one
    symbol except that ``+``, ``-`` and ``!`` always start a new one. String
    tokens keep their quotes; a missing closing quote is supplied.
    """
    chars = iter(text)
    kind = TokenType.BEGIN
    content = ""
    for c in chars:
        if c in _SPACE:
            if kind is TokenType.WHITE:
                content += c
                continue
            new = (TokenType.WHITE, c)
        elif c == "_" or _is_alnum(c):
            if (
                (_is_digit(c) and kind is TokenType.NUMBER)
                or (c in string.hexdigits and kind is TokenType.XNUMBER)
                or kind is TokenType.IDENTIFIER
            ):
                content += c
                continue
            if kind is TokenType.NUMBER and content.startswith("0") and c == "x":
                kind = TokenType.XNUMBER
                content += c
                continue
            if _is_digit(c):
                new = (TokenType.NUMBER, c)
            elif c in "LU" and kind in (TokenType.NUMBER, TokenType.NUMBER_SUFFIXED):
                kind = TokenType.NUMBER_SUFFIXED
                content += c
                continue
            elif c in "LU" and kind in (TokenType.XNUMBER, TokenType.XNUMBER_SUFFIXED):
                kind = TokenType.XNUMBER_SUFFIXED
                content += c
                continue
            else:
                new = (TokenType.IDENTIFIER, c)
        elif c == '"':
            new = (TokenType.STRING, _read_string(chars))
        else:
            if c in "+-!" or kind is not TokenType.SYMBOL:
                new = (TokenType.SYMBOL, c)
            else:
                content += c
                continue
        if kind is not TokenType.BEGIN:
            yield Token(kind, content)
        kind, content = new
    if kind is not TokenType.BEGIN:
        yield Token(kind, content)


def _wrap(value: int) -> int:
    """Reduce to a signed 64-bit value."""
    return ((value + (1 << 63)) % (1 << _BITS)) - (1 << 63)


def _strtol(text: str, base: int) -> int:
    value = 0
    for c in text:
        try:
            digit = int(c, 36)
        except ValueError:
            break
        if digit >= base:
            break
        value = value * base + digit
        if value > _LONG_MAX:
            return _LONG_MAX
    return value


def _divide(a: int, b: int) -> int:
    if b == 0:
        return 0
    quotient = abs(a) // abs(b)
    return _wrap(-quotient if (a < 0) != (b < 0) else quotient)


def _shift_left(a: int, b: int) -> int:
    if b < 0 or b >= _BITS:
        return 0
    return _wrap(a << b)


def _shift_right(a: int, b: int) -> int:
    if b < 0:
        return 0
    if b >= _BITS:
        return -1 if a < 0 else 0
    return a >> b


_Step = Callable[[], "tuple[int, Token]"]
_BinOp = Callable[[int, int], int]


class _Evaluator:
    """Recursive-descent evaluator; each binary level is right-recursive."""

    def __init__(self, tokens: Iterable[Token]) -> None:
        self._tokens = iter(tokens)

    def _fetch(self) -> Token:
        for tok in self._tokens:
            if tok.type is not TokenType.WHITE:
                return tok
        return EOF_TOKEN

    def _level(self, operand: _Step, ops: dict[str, tuple[_BinOp, _Step]]) -> tuple[int, Token]:
        value, tok = operand()
        entry = ops.get(tok.content)
        if entry is None:
            return value, tok
        op, rhs_step = entry
        rhs, follow = rhs_step()
        return _wrap(op(value, rhs)), follow

    def oror(self) -> tuple[int, Token]:
        return self._level(self.andand, {"||": (lambda a, b: int(bool(a) or bool(b)), self.oror)})

    def andand(self) -> tuple[int, Token]:
        return self._level(self.bit_or, {"&&": (lambda a, b: int(bool(a) and bool(b)), self.andand)})

    def bit_or(self) -> tuple[int, Token]:
        return self._level(self.bit_xor, {"|": (lambda a, b: a | b, self.bit_or)})

    def bit_xor(self) -> tuple[int, Token]:
        return self._level(self.bit_and, {"^": (lambda a, b: a ^ b, self.bit_xor)})

    def bit_and(self) -> tuple[int, Token]:
        return self._level(self.equality, {"&": (lambda a, b: a & b, self.bit_and)})

    def equality(self) -> tuple[int, Token]:
        return self._level(
            self.relation,
            {
                "==": (lambda a, b: int(a == b), self.equality),
                "!=": (lambda a, b: int(a != b), self.equality),
            },
        )

    def relation(self) -> tuple[int, Token]:
        return self._level(
            self.shift,
            {
                "<": (lambda a, b: int(a < b), self.relation),
                ">": (lambda a, b: int(a > b), self.relation),
                "<=": (lambda a, b: int(a <= b), self.relation),
                ">=": (lambda a, b: int(a >= b), self.relation),
            },
        )

    def shift(self) -> tuple[int, Token]:
        return self._level(
            self.sum,
            {"<<": (_shift_left, self.shift), ">>": (_shift_right, self.shift)},
        )

    def sum(self) -> tuple[int, Token]:
        return self._level(
            self.product,
            {"+": (lambda a, b: a + b, self.sum), "-": (lambda a, b: a - b, self.sum)},
        )

    def product(self) -> tuple[int, Token]:
        return self._level(
            self.unary,
            {"*": (lambda a, b: a * b, self.product), "/": (_divide, self.sum)},
        )

    def unary(self) -> tuple[int, Token]:
        tok = self._fetch()
        if tok.content == "-":
            value, follow = self.unary()
            return _wrap(-value), follow
        if tok.content == "!":
            value, follow = self.unary()
            return int(not value), follow
        if tok.content == "(":
            value, follow = self.oror()
            if follow.content == ")":
                follow = self._fetch()
            return value, follow
        if tok.type in (TokenType.NUMBER, TokenType.NUMBER_SUFFIXED):
            base = 8 if tok.content.startswith("0") else 10
            return _strtol(tok.content, base), self._fetch()
        if tok.type in (TokenType.XNUMBER, TokenType.XNUMBER_SUFFIXED):
            return _strtol(tok.content[2:], 16), self._fetch()
        return 0, tok


def evaluate(tokens: Iterable[Token]) -> int:
    """Evaluate a constant expression given as tokens; unknown operands are 0."""
    return _Evaluator(tokens).oror()[0]