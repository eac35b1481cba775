"""Test helpers module for shared test utilities.

- constants: Denoms and common amounts
- factories: Pool record and pool factory functions
- doubles: Pool test doubles
"""

from tests.helpers.constants import (
    ATOM,
    DEFAULT_TOTAL_SHARES,
    ION,
    LARGE_TRADE,
    LUNA,
    OSMO,
    SMALL_TRADE,
)
from tests.helpers.doubles import CountingPool
from tests.helpers.factories import (
    make_deep_pools,
    make_scenario_pools,
    make_weighted_pool,
    make_weighted_pool_raw,
)

__all__ = [
    # Constants
    "OSMO",
    "ION",
    "ATOM",
    "LUNA",
    "DEFAULT_TOTAL_SHARES",
    "SMALL_TRADE",
    "LARGE_TRADE",
    # Factories
    "make_weighted_pool_raw",
    "make_weighted_pool",
    "make_scenario_pools",
    "make_deep_pools",
    # Doubles
    "CountingPool",
]
