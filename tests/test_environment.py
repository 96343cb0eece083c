import os

from cairn.environment import SystemEnvironment


def test_parse_nul_separated_entries():
    env = SystemEnvironment.parse("FOO=bar\0BAZ=qux\0")
    assert env["FOO"] == "bar"
    assert env["BAZ"] == "qux"
    assert len(env) == 2


def test_missing_key_gives_empty_string():
    env = SystemEnvironment.parse("FOO=bar")
    assert env["NOPE"] == ""
    assert "NOPE" not in env
    assert "FOO" in env


def test_value_may_contain_equals():
    env = SystemEnvironment.parse("OPTS=a=b=c\0")
    assert env["OPTS"] == "a=b=c"


def test_entries_without_equals_are_ignored():
    env = SystemEnvironment.parse("junk\0KEY=value\0\0")
    assert list(env) == ["KEY"]


def test_first_duplicate_wins():
    env = SystemEnvironment.parse("K=first\0K=second")
    assert env["K"] == "first"


def test_empty_value_is_kept():
    env = SystemEnvironment.parse("EMPTY=\0")
    assert "EMPTY" in env
    assert env["EMPTY"] == ""


def test_bytes_input():
    env = SystemEnvironment.parse(b"NAME=caf\xc3\xa9\0")
    assert env["NAME"] == "caf\u00e9"


def test_posix_format_is_sorted():
    env = SystemEnvironment.parse("ZED=1\0ALPHA=2\0MID=3")
    assert env.posix_format() == ["ALPHA=2", "MID=3", "ZED=1"]


def test_windows_format_block():
    env = SystemEnvironment.parse("B=2\0A=1")
    assert env.to_windows_format() == "A=1\0B=2\0\0"


def test_windows_format_of_empty_environment():
    assert SystemEnvironment().to_windows_format() == "\0"


def test_round_trip_through_posix_format():
    env = SystemEnvironment({"X": "1", "Y": "a=b"})
    again = SystemEnvironment.parse("\0".join(env.posix_format()))
    assert again.as_dict() == env.as_dict()


def test_current_reflects_process_environment(monkeypatch):
    monkeypatch.setenv("CAIRN_TEST_VARIABLE", "hello")
    env = SystemEnvironment.current()
    assert env["CAIRN_TEST_VARIABLE"] == "hello"
    assert len(env) == len(os.environ)