from __future__ import annotations

import math

import pytest

from blueprintruntime.core.values import (
    describe,
    display_string,
    is_truthy,
    json_literal,
    parse_number,
    to_float,
    to_integer,
)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        (None, None),
        (True, 1),
        (False, 0),
        (42, 42),
        (2.5, 2.5),
        (" 7 ", 7),
        ("-3.25", -3.25),
        ("1e3", 1000.0),
        ("", None),
        ("   ", None),
        ("abc", None),
        ("1_000", None),
        ("inf", None),
        (math.nan, None),
        ([1], None),
    ],
)
def test_parse_number(raw: object, expected: object) -> None:
    assert parse_number(raw) == expected


def test_to_integer_truncates_toward_zero() -> None:
    assert to_integer(3.9) == 3
    assert to_integer(-3.9) == -3
    assert to_integer("12.7") == 12
    assert to_integer("x") is None


def test_to_float() -> None:
    assert to_float("2") == 2.0
    assert isinstance(to_float(2), float)
    assert to_float(None) is None


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (None, False),
        (0, False),
        (0.0, False),
        (math.nan, False),
        ("", False),
        ("false", True),
        ("0", True),
        (-1, True),
        (True, True),
    ],
)
def test_is_truthy(value: object, expected: bool) -> None:
    assert is_truthy(value) is expected


def test_display_string_matches_console_formatting() -> None:
    assert display_string(None) == ""
    assert display_string(True) == "true"
    assert display_string(4.0) == "4"
    assert display_string(0.1) == "0.1"
    assert display_string(math.inf) == "Infinity"
    assert display_string(-math.inf) == "-Infinity"
    assert display_string(math.nan) == "NaN"
    assert display_string(12) == "12"


def test_describe_marks_absent_values() -> None:
    assert describe(None) == "undefined"
    assert describe("") == ""
    assert describe(2.0) == "2"


def test_json_literal() -> None:
    assert json_literal("5") == '"5"'
    assert json_literal(5) == "5"
    assert json_literal(True) == "true"
    assert json_literal(None) == "null"
    assert json_literal(math.nan) == "null"
    assert json_literal("héllo") == '"héllo"'


def test_json_literal_floats_match_console_formatting() -> None:
    assert json_literal(3.0) == "3"
    assert json_literal(-0.0) == "0"
    assert json_literal(2.5) == "2.5"
    assert json_literal(1e21) == "1e+21"
    assert json_literal(math.inf) == "null"
