"""
Tests for decimal string / base unit conversion.
"""
from decimal import Decimal, localcontext

import pytest
from hypothesis import given, settings, strategies as st

from arbwallet_sdk.exceptions import InvalidAmount
from arbwallet_sdk.models import Amount
from arbwallet_sdk.units import (
    ETHER_DECIMALS,
    UINT256_MAX,
    parse_decimal,
    to_base_units,
    to_decimal_string,
)


class TestToBaseUnits:
    """Parsing decimal strings into integer base units."""

    @pytest.mark.parametrize("amount,decimals,expected", [
        ("0.001", 18, 10 ** 15),
        ("1", 18, 10 ** 18),
        ("10.5", 6, 10_500_000),
        ("10", 6, 10_000_000),
        ("0", 0, 0),
        ("7", 0, 7),
        ("0.000000000000000001", 18, 1),
        ("007.50", 2, 750),
        ("123456789012345678901234567890.123456789012345678", 18,
         123456789012345678901234567890123456789012345678),
    ])
    def test_exact_conversion(self, amount, decimals, expected):
        assert to_base_units(amount, decimals) == expected

    def test_over_precision_rejected(self):
        """More fractional digits than decimals is an error, not rounding."""
        with pytest.raises(InvalidAmount):
            to_base_units("10.5", 0)
        with pytest.raises(InvalidAmount):
            to_base_units("0.1234567", 6)
        with pytest.raises(InvalidAmount):
            to_base_units("0.0000000000000000001", ETHER_DECIMALS)

    def test_trailing_zeros_count_toward_precision(self):
        """Fractional digit count includes trailing zeros."""
        with pytest.raises(InvalidAmount):
            to_base_units("1.0", 0)
        with pytest.raises(InvalidAmount):
            to_base_units("1.1000000", 6)

    @pytest.mark.parametrize("amount", [
        "", ".", ".5", "5.", "-1", "+1", "1e18", "1,000", " 1", "1 ", "0x10", "1.2.3", "١",
    ])
    def test_malformed_strings(self, amount):
        with pytest.raises(InvalidAmount):
            to_base_units(amount, ETHER_DECIMALS)

    @pytest.mark.parametrize("amount", [1, 0.5, Decimal("1"), None, b"1"])
    def test_non_string_rejected(self, amount):
        with pytest.raises(InvalidAmount):
            to_base_units(amount, ETHER_DECIMALS)

    @pytest.mark.parametrize("decimals", [-1, 256, 1.5, True])
    def test_invalid_decimals(self, decimals):
        with pytest.raises(ValueError):
            to_base_units("1", decimals)

    def test_parse_decimal_parts(self):
        assert parse_decimal("10.50") == ("10", "50")
        assert parse_decimal("3") == ("3", "")

    def test_uint256_bound(self):
        """Values must fit in uint256 after scaling."""
        assert to_base_units(str(UINT256_MAX), 0) == UINT256_MAX
        with pytest.raises(InvalidAmount):
            to_base_units(str(UINT256_MAX + 1), 0)
        with pytest.raises(InvalidAmount):
            to_base_units("1" + "0" * 80, ETHER_DECIMALS)

    def test_very_long_amount(self):
        """Strings past the int conversion limit are InvalidAmount, not ValueError."""
        with pytest.raises(InvalidAmount, match="too long"):
            to_base_units("1" * 5000, ETHER_DECIMALS)
        with pytest.raises(InvalidAmount):
            to_base_units("0." + "1" * 5000, ETHER_DECIMALS)


class TestToDecimalString:
    """Rendering base units in minimal decimal form."""

    @pytest.mark.parametrize("value,decimals,expected", [
        (10 ** 18, 18, "1"),
        (1500, 3, "1.5"),
        (10 ** 15, 18, "0.001"),
        (1, 18, "0.000000000000000001"),
        (0, 18, "0"),
        (0, 0, "0"),
        (42, 0, "42"),
        (10_500_000, 6, "10.5"),
    ])
    def test_minimal_form(self, value, decimals, expected):
        assert to_decimal_string(value, decimals) == expected

    def test_negative_rejected(self):
        with pytest.raises(InvalidAmount):
            to_decimal_string(-1, 18)

    def test_non_int_rejected(self):
        with pytest.raises(InvalidAmount):
            to_decimal_string(1.0, 18)

    def test_above_uint256_rejected(self):
        assert to_decimal_string(UINT256_MAX, 0) == str(UINT256_MAX)
        with pytest.raises(InvalidAmount):
            to_decimal_string(UINT256_MAX + 1, 18)
        with pytest.raises(InvalidAmount):
            to_decimal_string(10 ** 5000, 0)


@settings(max_examples=200)
@given(data=st.data(), decimals=st.integers(min_value=0, max_value=18))
def test_round_trip(data, decimals):
    """Rendering then parsing returns the original value at any precision up to 18."""
    value = data.draw(st.integers(min_value=0, max_value=10 ** 30))
    rendered = to_decimal_string(value, decimals)
    assert to_base_units(rendered, decimals) == value


@settings(max_examples=100)
@given(
    whole=st.integers(min_value=0, max_value=10 ** 12),
    frac=st.text(alphabet="0123456789", min_size=1, max_size=18),
)
def test_parse_matches_decimal_arithmetic(whole, frac):
    """Integer conversion agrees with exact Decimal scaling."""
    amount = f"{whole}.{frac}"
    with localcontext() as ctx:
        ctx.prec = 100
        expected = Decimal(amount).scaleb(18)
    assert to_base_units(amount, 18) == int(expected)


class TestAmount:
    """The Amount model wraps base units with their precision."""

    def test_str_is_minimal(self):
        assert str(Amount(value=1500, decimals=3)) == "1.5"

    def test_from_decimal_string(self):
        amount = Amount.from_decimal_string("10.5", 6)
        assert amount.value == 10_500_000
        assert amount.decimals == 6

    def test_to_decimal(self):
        assert Amount(value=10 ** 15, decimals=18).to_decimal() == Decimal("0.001")

    def test_negative_value_rejected(self):
        with pytest.raises(ValueError):
            Amount(value=-1, decimals=18)

    def test_value_above_uint256_rejected(self):
        with pytest.raises(ValueError):
            Amount(value=UINT256_MAX + 1, decimals=18)

    def test_frozen(self):
        amount = Amount(value=1, decimals=0)
        with pytest.raises(ValueError):
            amount.value = 2
