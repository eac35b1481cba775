"""Mathematical utilities for pool pricing.

This package provides the numeric primitives for AMM calculations:
- Dec: signed 18-decimal fixed-point arithmetic (truncating)
- pow_with_binomial_series: fractional powers via the binomial series
"""

from swaprouter.math.fixed_point import ONE_18, Dec, div_trunc
from swaprouter.math.pow import POW_PRECISION, pow_approx, pow_with_binomial_series

__all__ = [
    "Dec",
    "ONE_18",
    "POW_PRECISION",
    "div_trunc",
    "pow_approx",
    "pow_with_binomial_series",
]
