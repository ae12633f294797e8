import math

import pytest

from wildscout.utils.errors import InvalidArgument
from wildscout.utils.validation import (
    soft_sanitize, sanitize_text, is_valid_uuid, parse_int, parse_coordinates,
)


def test_soft_sanitize_strips_markup():
    assert soft_sanitize("<img src=x onerror=alert(1)>", 120) == "img srcx alert(1)"
    assert soft_sanitize("  Wild   Garlic  ", 120) == "Wild Garlic"
    assert soft_sanitize("", 10) == ""
    assert soft_sanitize("abcdefghij", 4) == "abcd"


def test_sanitize_text_removes_control_chars():
    assert sanitize_text("near\x00 the\t\tcreek", 100) == "near the creek"


def test_is_valid_uuid():
    assert is_valid_uuid("550e8400-e29b-41d4-a716-446655440000")
    assert not is_valid_uuid("550e8400")
    assert not is_valid_uuid(None)


def test_parse_int():
    assert parse_int(" 7 ", "month") == 7
    assert parse_int(3, "month") == 3
    with pytest.raises(InvalidArgument):
        parse_int("seven", "month")
    with pytest.raises(InvalidArgument):
        parse_int(True, "month")


def test_parse_coordinates():
    assert parse_coordinates("12.5", -45) == (12.5, -45.0)
    assert parse_coordinates(90, 180) == (90.0, 180.0)
    with pytest.raises(InvalidArgument):
        parse_coordinates(math.nan, 0)
    with pytest.raises(InvalidArgument):
        parse_coordinates(0, None)


@pytest.mark.parametrize("value", [42, 3.5, ["x"], {"a": 1}, True])
def test_sanitizers_reject_non_text(value):
    with pytest.raises(InvalidArgument):
        soft_sanitize(value, 50)
    with pytest.raises(InvalidArgument):
        sanitize_text(value, 50)


def test_sanitizers_treat_none_as_empty():
    assert soft_sanitize(None, 50) == ""
    assert sanitize_text(None, 50) == ""
