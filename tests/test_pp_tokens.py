import pytest

from cairn.pp_tokens import Token, TokenType, evaluate, tokenize


def kinds(text):
    return [(t.type, t.content) for t in tokenize(text)]


def contents(text):
    return [t.content for t in tokenize(text)]


def calc(text):
    return evaluate(tokenize(text))


@pytest.mark.parametrize(
    "text",
    ["a + b", "foo(x, y)", "0x1F && 10UL", "  \t spaced   out ", "#define X 1", '"str" tail'],
)
def test_contents_reassemble_input(text):
    assert "".join(contents(text)) == text


def test_empty_input_has_no_tokens():
    assert list(tokenize("")) == []


def test_identifier_white_number():
    assert kinds("abc 12") == [
        (TokenType.IDENTIFIER, "abc"),
        (TokenType.WHITE, " "),
        (TokenType.NUMBER, "12"),
    ]


def test_hex_and_suffixed_numbers():
    assert kinds("0x1F") == [(TokenType.XNUMBER, "0x1F")]
    assert kinds("10UL") == [(TokenType.NUMBER_SUFFIXED, "10UL")]
    assert kinds("0xFFL") == [(TokenType.XNUMBER_SUFFIXED, "0xFFL")]


def test_digit_then_letters_split():
    assert kinds("10abc") == [(TokenType.NUMBER, "10"), (TokenType.IDENTIFIER, "abc")]


def test_symbols_merge_except_signs():
    assert kinds("&&") == [(TokenType.SYMBOL, "&&")]
    assert contents("--") == ["-", "-"]
    assert contents("a!=b") == ["a", "!=", "b"]


def test_string_gets_closing_quote():
    assert kinds('"abc') == [(TokenType.STRING, '"abc"')]


def test_escaped_quote_stays_in_string():
    tokens = list(tokenize(r'"a\"b" c'))
    assert tokens[0] == Token(TokenType.STRING, r'"a\"b"')
    assert tokens[-1] == Token(TokenType.IDENTIFIER, "c")


@pytest.mark.parametrize(
    "expr, expected",
    [
        ("1 + 2 * 3", 1 + 2 * 3),
        ("(1 || 0) && 1", 1),
        ("010", 0o10),
        ("0x10", 0x10),
        ("1 << 4", 1 << 4),
        ("!0", 1),
        ("!5", 0),
        ("6 & 3", 6 & 3),
        ("6 | 3", 6 | 3),
        ("6 ^ 3", 6 ^ 3),
        ("2 < 3", 1),
        ("3 >= 4", 0),
        ("10UL", 10),
        ("-3 + 5", -3 + 5),
    ],
)
def test_evaluate(expr, expected):
    assert calc(expr) == expected


def test_division_by_zero_yields_zero():
    assert calc("7 / 0") == 0


def test_division_truncates_toward_zero():
    assert calc("-7 / 2") == -(7 // 2)


def test_unknown_identifier_is_zero():
    assert calc("FOO") == 0


def test_binary_operators_group_to_the_right():
    assert calc("3 - 1 - 1") == 3 - (1 - 1)


def test_whitespace_does_not_matter_between_operands():
    assert calc("1+2") == calc("  1 + 2  ")


def test_parentheses_preserve_value():
    assert calc("(5)") == calc("5")


def test_large_literal_saturates():
    assert calc("99999999999999999999") == (1 << 63) - 1


def test_evaluate_accepts_token_list():
    tokens = [Token(TokenType.NUMBER, "4"), Token(TokenType.SYMBOL, "*"), Token(TokenType.NUMBER, "5")]
    assert evaluate(tokens) == 4 * 5