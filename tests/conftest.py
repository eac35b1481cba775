"""Pytest configuration and fixtures."""

import pytest

from swaprouter.pools import WeightedPool
from swaprouter.routing import OptimizedRoutes
from tests.helpers import (
    ATOM,
    ION,
    OSMO,
    CountingPool,
    make_deep_pools,
    make_scenario_pools,
    make_weighted_pool,
)

# =============================================================================
# Pool fixtures
# =============================================================================


@pytest.fixture
def scenario_pools() -> list[WeightedPool]:
    """Pools 1-3 of the OSMO/ION/ATOM/LUNA routing scenario."""
    return make_scenario_pools()


@pytest.fixture
def router(scenario_pools: list[WeightedPool]) -> OptimizedRoutes:
    """Router over the scenario pools with default config."""
    return OptimizedRoutes(scenario_pools)


@pytest.fixture
def osmo_ion_pool() -> WeightedPool:
    """Balanced two-asset pool with a 1% swap fee."""
    return make_weighted_pool("10", [(OSMO, 1, 1_000_000_000), (ION, 1, 1_000_000_000)])


@pytest.fixture
def three_asset_pool() -> WeightedPool:
    """Uneven weights, zero swap fee."""
    return make_weighted_pool(
        "11",
        [(OSMO, 2, 500_000_000), (ION, 1, 400_000_000), (ATOM, 1, 300_000_000)],
        swap_fee="0",
    )


@pytest.fixture
def deep_pools() -> list[WeightedPool]:
    """Two OSMO/ION pools holding 1e24 of each side."""
    return make_deep_pools()


# =============================================================================
# Test doubles
# =============================================================================


@pytest.fixture
def counting_pool(osmo_ion_pool: WeightedPool) -> CountingPool:
    """Counting double around the balanced OSMO/ION pool."""
    return CountingPool(osmo_ion_pool)
