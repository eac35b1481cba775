"""Signed 18-decimal fixed-point (Dec) math.

All values are stored as integers scaled by 10^18. Every multiplication and
division truncates toward zero at the 18th fractional digit; there is no
banker's rounding anywhere. Token amounts stay plain Python ints.
"""

from __future__ import annotations

import re
from decimal import Decimal
from typing import ClassVar, Union

__all__ = [
    # Classes
    "Dec",
    # Functions
    "div_trunc",
    # Constants
    "PRECISION",
    "ONE_18",
]

# =============================================================================
# Constants
# =============================================================================

PRECISION = 18
ONE_18 = 10**PRECISION

# Sign, integer digits, fraction digits; at least one digit is checked separately
_DECIMAL_STRING_RE = re.compile(r"([+-]?)([0-9]*)(?:\.([0-9]*))?")


# =============================================================================
# Core helpers
# =============================================================================


def div_trunc(a: int, b: int) -> int:
    """Integer division with truncation toward zero.

    Python's // operator rounds toward negative infinity, but fixed-point
    math here truncates toward zero. This matters for negative numbers.

    Args:
        a: Dividend (can be positive or negative)
        b: Divisor (must be non-zero)

    Returns:
        a / b truncated toward zero

    Raises:
        ZeroDivisionError: If b is zero

    Examples:
        Python: -7 // 3 = -3 (rounds toward -inf)
        div_trunc(-7, 3) = -2 (truncates toward zero)
    """
    if b == 0:
        raise ZeroDivisionError("Division by zero in div_trunc")

    # Same sign: result is non-negative, floor and truncate agree
    if (a >= 0) == (b >= 0):
        return a // b
    return -(abs(a) // abs(b))


def _parse_decimal_string(text: str) -> int:
    """Parse a plain decimal string ("-12.345") into a raw scaled integer.

    Digits past the 18th fractional place are truncated.
    """
    match = _DECIMAL_STRING_RE.fullmatch(text)
    if match is None:
        raise ValueError(f"Invalid decimal string: {text!r}")
    sign, int_part, frac_part = match.group(1), match.group(2), match.group(3) or ""
    if not int_part and not frac_part:
        raise ValueError(f"Decimal string has no digits: {text!r}")

    frac_part = (frac_part + "0" * PRECISION)[:PRECISION]
    raw = int(int_part or "0") * ONE_18 + int(frac_part)
    return -raw if sign == "-" else raw


# =============================================================================
# Dec class
# =============================================================================

DecLike = Union["Dec", int]


class Dec:
    """Signed 18-decimal fixed-point number stored as int.

    Example: 1.5 is stored as 1_500_000_000_000_000_000

    Arithmetic operators accept another Dec or a plain int (promoted to a
    whole-number Dec). Results truncate toward zero.
    """

    ONE: ClassVar[int] = ONE_18

    __slots__ = ("value",)

    def __init__(self, value: int) -> None:
        """Create Dec from raw scaled value."""
        if not isinstance(value, int):
            raise TypeError(f"Dec raw value must be int, got {type(value).__name__}")
        self.value = value

    @classmethod
    def from_int(cls, i: int) -> Dec:
        """Create from integer (will be scaled by 10^18)."""
        return cls(i * cls.ONE)

    @classmethod
    def from_str(cls, s: str) -> Dec:
        """Create from a decimal string such as "0.003" or "-4.5"."""
        return cls(_parse_decimal_string(s))

    @classmethod
    def from_decimal(cls, d: Decimal) -> Dec:
        """Create from Decimal, truncating past 18 fractional digits."""
        return cls(_parse_decimal_string(format(d, "f")))

    @classmethod
    def coerce(cls, other: DecLike) -> Dec:
        """Return other as a Dec, promoting ints."""
        if isinstance(other, Dec):
            return other
        if isinstance(other, int):
            return cls.from_int(other)
        raise TypeError(f"Cannot use {type(other).__name__} as Dec")

    def to_decimal(self) -> Decimal:
        """Convert to Decimal for display."""
        return Decimal(str(self))

    def truncate(self) -> int:
        """Drop the fractional part, rounding toward zero."""
        return div_trunc(self.value, self.ONE)

    # -------------------------------------------------------------------------
    # Predicates
    # -------------------------------------------------------------------------

    def is_zero(self) -> bool:
        return self.value == 0

    def is_positive(self) -> bool:
        return self.value > 0

    def is_negative(self) -> bool:
        return self.value < 0

    # -------------------------------------------------------------------------
    # Arithmetic
    # -------------------------------------------------------------------------

    def __add__(self, other: DecLike) -> Dec:
        if not isinstance(other, (Dec, int)):
            return NotImplemented
        return Dec(self.value + Dec.coerce(other).value)

    __radd__ = __add__

    def __sub__(self, other: DecLike) -> Dec:
        if not isinstance(other, (Dec, int)):
            return NotImplemented
        return Dec(self.value - Dec.coerce(other).value)

    def __rsub__(self, other: DecLike) -> Dec:
        if not isinstance(other, (Dec, int)):
            return NotImplemented
        return Dec(Dec.coerce(other).value - self.value)

    def __mul__(self, other: DecLike) -> Dec:
        """Multiply, truncating toward zero: (a * b) / 10^18"""
        if not isinstance(other, (Dec, int)):
            return NotImplemented
        return Dec(div_trunc(self.value * Dec.coerce(other).value, self.ONE))

    __rmul__ = __mul__

    def __truediv__(self, other: DecLike) -> Dec:
        """Divide, truncating toward zero: (a * 10^18) / b"""
        if not isinstance(other, (Dec, int)):
            return NotImplemented
        divisor = Dec.coerce(other).value
        if divisor == 0:
            raise ZeroDivisionError("Dec division by zero")
        return Dec(div_trunc(self.value * self.ONE, divisor))

    def __rtruediv__(self, other: DecLike) -> Dec:
        if not isinstance(other, (Dec, int)):
            return NotImplemented
        return Dec.coerce(other) / self

    def __neg__(self) -> Dec:
        return Dec(-self.value)

    def __abs__(self) -> Dec:
        return Dec(abs(self.value))

    def pow_int(self, n: int) -> Dec:
        """Compute self^n for an integer n by repeated squaring.

        Negative exponents return the reciprocal of the positive power.
        """
        if n == 0:
            return Dec(self.ONE)

        exponent = abs(n)
        result = Dec(self.ONE)
        base = self
        while exponent:
            if exponent & 1:
                result = result * base
            exponent >>= 1
            if exponent:
                base = base * base

        if n < 0:
            return Dec(self.ONE) / result
        return result

    # -------------------------------------------------------------------------
    # Comparison
    # -------------------------------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Dec):
            return self.value == other.value
        if isinstance(other, int):
            return self.value == other * self.ONE
        return NotImplemented

    def __hash__(self) -> int:
        # Whole numbers hash like the int they compare equal to
        whole, frac = divmod(self.value, self.ONE)
        return hash(whole) if frac == 0 else hash(self.value)

    def __lt__(self, other: DecLike) -> bool:
        if not isinstance(other, (Dec, int)):
            return NotImplemented
        return self.value < Dec.coerce(other).value

    def __le__(self, other: DecLike) -> bool:
        if not isinstance(other, (Dec, int)):
            return NotImplemented
        return self.value <= Dec.coerce(other).value

    def __gt__(self, other: DecLike) -> bool:
        if not isinstance(other, (Dec, int)):
            return NotImplemented
        return self.value > Dec.coerce(other).value

    def __ge__(self, other: DecLike) -> bool:
        if not isinstance(other, (Dec, int)):
            return NotImplemented
        return self.value >= Dec.coerce(other).value

    # -------------------------------------------------------------------------
    # Display
    # -------------------------------------------------------------------------

    def __repr__(self) -> str:
        return f"Dec('{self}')"

    def __str__(self) -> str:
        sign = "-" if self.value < 0 else ""
        int_part, frac_part = divmod(abs(self.value), self.ONE)
        return f"{sign}{int_part}.{frac_part:0{PRECISION}d}"
