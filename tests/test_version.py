import pytest

from cairn.version import Version


def test_parts_parsed():
    assert Version("1.2.3").parts == [1, 2, 3]
    assert Version("").parts == []


def test_str_round_trip():
    assert str(Version("10.0.7")) == "10.0.7"


def test_numeric_not_lexical_ordering():
    assert Version("1.2") < Version("1.10")
    assert Version("1.10") > Version("1.2")
    assert not Version("2") < Version("1.99")


def test_missing_parts_count_as_zero():
    assert Version("1.0") == Version("1")
    assert Version("1.0.0") <= Version("1")
    assert Version("1") >= Version("1.0.0")
    assert hash(Version("1.0")) == hash(Version("1"))
    assert Version("1.0.1") > Version("1")


def test_sorting_is_consistent():
    texts = ["2.0", "1.10", "1.2", "1.2.1", "0.9"]
    ordered = sorted(Version(t) for t in texts)
    assert all(a <= b for a, b in zip(ordered, ordered[1:]))
    assert str(ordered[0]) == "0.9"
    assert str(ordered[-1]) == "2.0"


def test_trailing_dot_ignored():
    assert Version("1.2.").parts == Version("1.2").parts


@pytest.mark.parametrize("text", ["1..2", "a.b", ".1", "1.x"])
def test_invalid_component(text):
    with pytest.raises(ValueError):
        Version(text)


def test_leading_digits_of_component_used():
    assert Version("1.2rc1").parts == Version("1.2").parts