"""Factory functions for creating test pools.

Usage:
    from tests.helpers import make_weighted_pool
    # or
    from tests.helpers.factories import make_weighted_pool_raw, make_scenario_pools

    pool = make_weighted_pool("1", [(OSMO, 1, 1000), (ION, 1, 1000)])
"""

from typing import Any

from swaprouter.pools import WeightedPool, WeightedPoolRaw
from tests.helpers.constants import (
    ATOM,
    DEFAULT_EXIT_FEE,
    DEFAULT_SWAP_FEE,
    DEFAULT_TOTAL_SHARES,
    ION,
    LUNA,
    OSMO,
)

# (denom, weight, amount)
AssetSpec = tuple[str, int, int]


def make_weighted_pool_raw(
    pool_id: str,
    assets: list[AssetSpec],
    swap_fee: str = DEFAULT_SWAP_FEE,
    exit_fee: str = DEFAULT_EXIT_FEE,
    total_shares: str = DEFAULT_TOTAL_SHARES,
) -> dict[str, Any]:
    """Create a pool snapshot record in wire format.

    Total weight is the sum of the asset weights and the share denom is
    gamm/pool{pool_id}.

    Args:
        pool_id: Pool identifier
        assets: (denom, weight, amount) per asset
        swap_fee: Decimal string (default: "0.01")
        exit_fee: Decimal string (default: "0")
        total_shares: Integer string share supply

    Returns:
        JSON-like dict accepted by WeightedPoolRaw.model_validate
    """
    return {
        "id": pool_id,
        "poolParams": {
            "lock": False,
            "swapFee": swap_fee,
            "exitFee": exit_fee,
            "smoothWeightChangeParams": None,
        },
        "totalWeight": str(sum(weight for _, weight, _ in assets)),
        "totalShares": {"denom": f"gamm/pool{pool_id}", "amount": total_shares},
        "poolAssets": [
            {"weight": str(weight), "token": {"denom": denom, "amount": str(amount)}}
            for denom, weight, amount in assets
        ],
    }


def make_weighted_pool(
    pool_id: str,
    assets: list[AssetSpec],
    swap_fee: str = DEFAULT_SWAP_FEE,
    exit_fee: str = DEFAULT_EXIT_FEE,
) -> WeightedPool:
    """Create a WeightedPool through the wire-format path."""
    raw = WeightedPoolRaw.model_validate(
        make_weighted_pool_raw(pool_id, assets, swap_fee=swap_fee, exit_fee=exit_fee)
    )
    return WeightedPool.from_raw(raw)


def make_scenario_pools() -> list[WeightedPool]:
    """Three pools where the best OSMO -> ION pool depends on trade size.

    Pool 1 has the better OSMO/ION spot price but little depth, pool 2 the
    worse price but deep liquidity. Pool 3 only connects ATOM to LUNA.
    """
    return [
        make_weighted_pool("1", [(OSMO, 105, 1_000_000_000), (ION, 100, 1_000_000_000)]),
        make_weighted_pool(
            "2",
            [
                (OSMO, 100, 100_000_000_000),
                (ION, 100, 100_000_000_000),
                (ATOM, 50, 100_000_000_000),
            ],
        ),
        make_weighted_pool("3", [(ATOM, 100, 100_000_000), (LUNA, 10, 10**33)]),
    ]


def make_deep_pools() -> list[WeightedPool]:
    """Two identical OSMO/ION pools with 18-decimal scale balances.

    At 1e24 units per side the post-swap price slope is below 1e-18 and
    truncates to zero.
    """
    return [
        make_weighted_pool(pool_id, [(OSMO, 1, 10**24), (ION, 1, 10**24)])
        for pool_id in ("a", "c")
    ]
