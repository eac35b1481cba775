"""Constant-weight (Balancer-style) pools.

- math: spot price, swap, derivative and single-asset join/exit formulas
- pool: the immutable WeightedPool
- parsing: wire-format models and deserialization
"""

from .math import (
    calc_derivative_spot_price_after_swap,
    calc_in_given_out,
    calc_out_given_in,
    calc_pool_in_given_single_out,
    calc_pool_out_given_single_in,
    calc_single_in_given_pool_out,
    calc_single_out_given_pool_in,
    calc_spot_price,
)
from .pool import LIMIT_AMOUNT_RATIO, WeightedPool
from .parsing import WeightedPoolRaw, parse_weighted_pool, parse_weighted_pools

__all__ = [
    # Pool
    "WeightedPool",
    "LIMIT_AMOUNT_RATIO",
    # Wire format
    "WeightedPoolRaw",
    "parse_weighted_pool",
    "parse_weighted_pools",
    # Swap math
    "calc_spot_price",
    "calc_out_given_in",
    "calc_in_given_out",
    "calc_derivative_spot_price_after_swap",
    # Join/exit math
    "calc_pool_out_given_single_in",
    "calc_single_in_given_pool_out",
    "calc_single_out_given_pool_in",
    "calc_pool_in_given_single_out",
]
