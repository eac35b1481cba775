"""Tests for the truncating 18-decimal Dec type."""

from decimal import Decimal

import pytest

from swaprouter.math.fixed_point import ONE_18, Dec, div_trunc


class TestDivTrunc:
    """div_trunc rounds toward zero, unlike //."""

    def test_positive(self):
        assert div_trunc(7, 3) == 2

    def test_negative_dividend(self):
        """-7 / 3 truncates to -2 (floor would give -3)."""
        assert div_trunc(-7, 3) == -2

    def test_negative_divisor(self):
        assert div_trunc(7, -3) == -2

    def test_both_negative(self):
        assert div_trunc(-7, -3) == 2

    def test_zero_divisor_raises(self):
        with pytest.raises(ZeroDivisionError):
            div_trunc(1, 0)


class TestDecConstruction:
    """Parsing and conversion."""

    def test_from_int(self):
        assert Dec.from_int(3).value == 3 * ONE_18

    def test_from_str(self):
        assert Dec.from_str("1.5").value == 1_500_000_000_000_000_000

    def test_from_str_negative(self):
        assert Dec.from_str("-0.25").value == -250_000_000_000_000_000

    def test_from_str_truncates_extra_digits(self):
        """Digits past the 18th fractional place are dropped."""
        assert Dec.from_str("0.0000000000000000019").value == 1

    def test_from_str_without_integer_part(self):
        assert Dec.from_str(".5") == Dec.from_str("0.5")

    @pytest.mark.parametrize(
        "text", ["", "abc", "1.2.3", "1e5", "--1", "-", "+", ".", "-.", " 1.5", "1_000.5"]
    )
    def test_from_str_rejects_malformed(self, text):
        with pytest.raises(ValueError):
            Dec.from_str(text)

    def test_from_decimal(self):
        assert Dec.from_decimal(Decimal("0.003")) == Dec.from_str("0.003")

    def test_raw_value_must_be_int(self):
        with pytest.raises(TypeError):
            Dec(1.5)

    def test_str_has_18_fractional_digits(self):
        assert str(Dec.from_str("1.5")) == "1.500000000000000000"

    def test_str_negative(self):
        assert str(Dec.from_str("-0.5")) == "-0.500000000000000000"

    def test_repr(self):
        assert repr(Dec.from_int(2)) == "Dec('2.000000000000000000')"

    def test_to_decimal(self):
        assert Dec.from_str("2.25").to_decimal() == Decimal("2.25")


class TestDecArithmetic:
    """Operators truncate toward zero at the 18th digit."""

    def test_add_sub(self):
        a = Dec.from_str("1.25")
        b = Dec.from_str("0.75")
        assert a + b == Dec.from_int(2)
        assert a - b == Dec.from_str("0.5")

    def test_int_operands_are_promoted(self):
        a = Dec.from_str("1.5")
        assert a + 1 == Dec.from_str("2.5")
        assert 1 - a == Dec.from_str("-0.5")
        assert a * 2 == Dec.from_int(3)
        assert 3 / Dec.from_int(2) == Dec.from_str("1.5")

    def test_mul_truncates(self):
        """1e-18 * 0.5 truncates to 0."""
        assert Dec(1) * Dec.from_str("0.5") == Dec(0)

    def test_div_truncates(self):
        assert Dec.from_int(1) / Dec.from_int(3) == Dec.from_str("0.333333333333333333")

    def test_div_truncates_negative_toward_zero(self):
        assert Dec.from_int(-1) / Dec.from_int(3) == Dec.from_str("-0.333333333333333333")

    def test_div_by_zero_raises(self):
        with pytest.raises(ZeroDivisionError):
            Dec.from_int(1) / Dec(0)

    def test_neg_abs(self):
        a = Dec.from_str("-2.5")
        assert -a == Dec.from_str("2.5")
        assert abs(a) == Dec.from_str("2.5")

    def test_truncate(self):
        assert Dec.from_str("2.99").truncate() == 2
        assert Dec.from_str("-2.99").truncate() == -2

    def test_unsupported_operand(self):
        with pytest.raises(TypeError):
            Dec.from_int(1) + 1.5


class TestDecPowInt:
    """Exact integer powers."""

    def test_zero_exponent(self):
        assert Dec.from_str("7.5").pow_int(0) == Dec.from_int(1)

    def test_positive_exponent(self):
        assert Dec.from_str("1.5").pow_int(3) == Dec.from_str("3.375")

    def test_negative_exponent_is_reciprocal(self):
        assert Dec.from_int(2).pow_int(-2) == Dec.from_str("0.25")

    def test_large_base(self):
        assert Dec.from_int(10).pow_int(5) == Dec.from_int(100_000)


class TestDecComparison:
    """Ordering, equality and hashing."""

    def test_ordering(self):
        assert Dec.from_str("0.1") < Dec.from_str("0.2")
        assert Dec.from_int(1) >= 1
        assert Dec.from_str("0.5") < 1

    def test_equality_with_int(self):
        assert Dec.from_int(3) == 3
        assert Dec.from_str("3.1") != 3

    def test_hash_matches_int_for_whole_numbers(self):
        assert hash(Dec.from_int(3)) == hash(3)

    def test_usable_as_dict_key(self):
        d = {Dec.from_str("0.5"): "half"}
        assert d[Dec.from_str("0.50")] == "half"

    def test_predicates(self):
        assert Dec(0).is_zero()
        assert Dec(1).is_positive()
        assert Dec(-1).is_negative()
