"""Binomial-series power function for fractional exponents.

Computing base^exp for a fractional exp uses the expansion

    (1 + x)^a = sum_{k>=0} C(a, k) * x^k,    x = base - 1

which converges only for |x| < 1, i.e. 0 < base < 2. The exponent is split
into an integer part (computed exactly by repeated squaring) and a
fractional part in (-1, 1) (computed by the series).
"""

from __future__ import annotations

from swaprouter.errors import InvalidInputError, NonConvergentApproximationError

from .fixed_point import Dec

__all__ = [
    "pow_with_binomial_series",
    "pow_approx",
    "POW_PRECISION",
    "MAX_POW_ITERATIONS",
]

# Series stops once a term drops below this magnitude
POW_PRECISION = Dec.from_str("0.00000001")

# Hard bound on series terms (|x| close to 1 converges slowly)
MAX_POW_ITERATIONS = 10_000

ONE = Dec.from_int(1)
TWO = Dec.from_int(2)


def _abs_difference_with_sign(a: Dec, b: Dec) -> tuple[Dec, bool]:
    """Return (|a - b|, a < b)."""
    if a >= b:
        return a - b, False
    return b - a, True


def pow_with_binomial_series(base: Dec, exp: Dec) -> Dec:
    """Compute base^exp for a strictly positive base.

    Args:
        base: Base, must be > 0. Must be < 2 when exp has a fractional part.
        exp: Exponent, may be negative or fractional.

    Returns:
        base^exp, accurate to about 1e-8.

    Raises:
        InvalidInputError: If base <= 0 (not closed within the reals)
        NonConvergentApproximationError: If base >= 2 with a fractional
            exponent, or the series fails to converge.
    """
    if not base.is_positive():
        raise InvalidInputError(f"pow base must be greater than 0, got {base}")

    integer = exp.truncate()
    fractional = exp - integer

    if fractional.is_zero():
        return base.pow_int(integer)

    if base >= TWO:
        raise NonConvergentApproximationError(
            f"pow base must be lesser than two for fractional exponents, got {base}"
        )

    integer_pow = base.pow_int(integer)
    fractional_pow = pow_approx(base, fractional, POW_PRECISION)
    return integer_pow * fractional_pow


def pow_approx(base: Dec, exp: Dec, precision: Dec) -> Dec:
    """Approximate base^exp with the binomial series around 1.

    Terms are summed until one falls below precision. Each term is the
    previous one times |exp - (k-1)| * |base - 1| / k; the sign is tracked
    separately because Dec magnitudes truncate toward zero.

    Raises:
        NonConvergentApproximationError: If a term fails to shrink or the
            iteration bound is reached.
    """
    if exp.is_zero():
        return ONE

    x, x_negative = _abs_difference_with_sign(base, ONE)
    if x >= ONE:
        raise NonConvergentApproximationError(f"Binomial series diverges for base {base}")

    term = ONE
    total = ONE
    negative = False

    for k in range(1, MAX_POW_ITERATIONS + 1):
        big_k = Dec.from_int(k)
        c, c_negative = _abs_difference_with_sign(exp, big_k - ONE)
        next_term = term * (c * x) / big_k

        if next_term.is_zero():
            return total
        if next_term >= term:
            raise NonConvergentApproximationError(
                f"Binomial series term stopped shrinking at k={k} for base {base}"
            )
        term = next_term

        if x_negative:
            negative = not negative
        if c_negative:
            negative = not negative

        total = total - term if negative else total + term

        if term < precision:
            return total

    raise NonConvergentApproximationError(
        f"Binomial series did not converge within {MAX_POW_ITERATIONS} terms for base {base}"
    )
