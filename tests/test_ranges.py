"""Tests for debt range parsing."""

import math

import pytest

from ranges import (
    NumericRange,
    parse_amount,
    parse_debt_range,
    ranges_overlap,
    format_to_million,
    derive_debt_range,
)
from ontology import DEBT_RANGES


@pytest.mark.parametrize("text,expected_min,expected_max", [
    ("$0 - $5M", 0, 5_000_000),
    ("0-5M", 0, 5_000_000),
    ("$5M - $25M", 5_000_000, 25_000_000),
    ("25M to 100M", 25_000_000, 100_000_000),
    ("$0 to 5M", 0, 5_000_000),
    ("25m TO 100m", 25_000_000, 100_000_000),
    ("$1,000,000 - $5M", 1_000_000, 5_000_000),
    ("1.5M - 2.5M", 1_500_000, 2_500_000),
])
def test_parse_closed_ranges(text, expected_min, expected_max):
    """Test the supported separators and magnitude suffixes."""
    result = parse_debt_range(text)
    assert result == NumericRange(min=expected_min, max=expected_max)


def test_parse_open_ended():
    """Test "$X+" bands get an infinite maximum."""
    result = parse_debt_range("$100M+")
    assert result.min == 100_000_000
    assert result.max == math.inf


def test_parse_open_ended_with_separator():
    """Test a trailing plus after a separated range still opens the top."""
    result = parse_debt_range("$25M - $100M+")
    assert result.min == 25_000_000
    assert result.max == math.inf


def test_parse_bare_number_has_no_magnitude():
    """Test a number without M is taken at face value."""
    assert parse_debt_range("5") == NumericRange(min=5, max=5)


def test_parse_single_million_token():
    """Test a single token with M is both bounds."""
    assert parse_debt_range("$10M") == NumericRange(min=10_000_000, max=10_000_000)


def test_parse_empty_returns_none():
    """Test empty input gives no range."""
    assert parse_debt_range("") is None
    assert parse_debt_range(None) is None


def test_parse_missing_upper_bound_reuses_lower():
    """Test "10M-" is read as a zero-width range at the lower bound."""
    assert parse_debt_range("10M-") == NumericRange(min=10_000_000, max=10_000_000)


def test_parse_malformed_degrades_to_nan():
    """Test text outside the grammar yields nan instead of raising."""
    result = parse_debt_range("call us")
    assert result is not None
    assert math.isnan(result.min)
    assert math.isnan(result.max)


def test_parse_amount_uses_leading_number():
    """Test trailing junk after a number is ignored."""
    assert parse_amount("12.5abc") == 12.5
    assert parse_amount("3M") == 3_000_000
    assert math.isnan(parse_amount(""))


def test_ranges_overlap():
    """Test closed interval overlap including touching bounds."""
    a = NumericRange(min=0, max=5_000_000)
    b = NumericRange(min=5_000_000, max=25_000_000)
    c = NumericRange(min=25_000_001, max=math.inf)
    assert ranges_overlap(a, b)
    assert ranges_overlap(b, a)
    assert not ranges_overlap(a, c)


def test_ranges_overlap_nan_never_matches():
    """Test a malformed range overlaps nothing."""
    bad = parse_debt_range("n/a")
    everything = NumericRange(min=0, max=math.inf)
    assert not ranges_overlap(bad, everything)
    assert not ranges_overlap(everything, bad)


def test_format_to_million():
    """Test whole-million formatting."""
    assert format_to_million(2_000_000) == "$2M"
    assert format_to_million(0) == "$0M"
    assert format_to_million(150_000_000) == "$150M"


@pytest.mark.parametrize("amount, expected", [
    (500_000, "$1M"),
    (1_499_999, "$1M"),
    (2_500_000, "$3M"),
    (4_500_000, "$5M"),
])
def test_format_to_million_rounds_half_up(amount, expected):
    """Test half millions round up, never to even."""
    assert format_to_million(amount) == expected


def test_derive_debt_range_from_half_million_bounds():
    """Test derived ranges use the same half-up rounding as the dashboard."""
    assert derive_debt_range(500_000, 4_500_000) == "$1M - $5M"
    assert derive_debt_range(500_000, 1_499_999) == "$1M - $1M"


def test_infinity_literal():
    """Test "Infinity" parses as an unbounded amount."""
    assert parse_amount("Infinity") == math.inf
    assert parse_debt_range("$5M - Infinity") == NumericRange(min=5_000_000, max=math.inf)
    assert format_to_million(math.inf) == "$InfinityM"
    assert parse_debt_range(derive_debt_range(5_000_000, math.inf)).max == math.inf


def test_derive_debt_range_round_trips():
    """Test a derived range parses back to the deal size bounds."""
    text = derive_debt_range(2_000_000, 50_000_000)
    assert text == "$2M - $50M"
    assert parse_debt_range(text) == NumericRange(min=2_000_000, max=50_000_000)


def test_dashboard_debt_bands_parse():
    """Test every selectable debt band parses to a well-formed range."""
    parsed = [parse_debt_range(band) for band in DEBT_RANGES]
    assert all(r is not None and r.min <= r.max for r in parsed)
    assert parsed[-1].max == math.inf
