"""Type definitions for routing module."""

from __future__ import annotations

from dataclasses import dataclass, replace

from swaprouter.math.fixed_point import Dec
from swaprouter.pools.base import Pool


@dataclass(frozen=True)
class Route:
    """An ordered path of pools from token_in_denom to a final denom.

    token_out_denoms[i] is the denom coming out of pools[i]; the last entry
    is the route's output denom. At most one intermediate denom is used.
    """

    pools: tuple[Pool, ...]
    token_out_denoms: tuple[str, ...]
    token_in_denom: str

    @property
    def token_out_denom(self) -> str:
        return self.token_out_denoms[-1]

    @property
    def pool_ids(self) -> tuple[str, ...]:
        return tuple(pool.id for pool in self.pools)

    @property
    def is_multihop(self) -> bool:
        return len(self.pools) > 1

    def with_amount(self, amount: int) -> RouteWithAmount:
        return RouteWithAmount(
            pools=self.pools,
            token_out_denoms=self.token_out_denoms,
            token_in_denom=self.token_in_denom,
            amount=amount,
        )

    def with_pools(self, pools: tuple[Pool, ...]) -> Route:
        """Same path over different pool objects (e.g. cached wrappers)."""
        return replace(self, pools=pools)


@dataclass(frozen=True)
class RouteWithAmount(Route):
    """A route carrying the input amount allocated to it."""

    amount: int


@dataclass(frozen=True)
class SwapSummary:
    """Aggregate result of swapping through a batch of routes.

    Prices are volume-weighted by each route's share of the total input.

    Attributes:
        amount: Total output amount across routes
        before_spot_price_in_over_out: Weighted spot price before swapping
        before_spot_price_out_over_in: Reciprocal of the above
        after_spot_price_in_over_out: Weighted spot price after swapping
        after_spot_price_out_over_in: Reciprocal of the above
        effective_price_in_over_out: Weighted realized price
        effective_price_out_over_in: Reciprocal of the above
        swap_fee: Weighted fee, compounded across hops
        slippage: effective_price / before_spot_price - 1
    """

    amount: int
    before_spot_price_in_over_out: Dec
    before_spot_price_out_over_in: Dec
    after_spot_price_in_over_out: Dec
    after_spot_price_out_over_in: Dec
    effective_price_in_over_out: Dec
    effective_price_out_over_in: Dec
    swap_fee: Dec
    slippage: Dec


__all__ = ["Route", "RouteWithAmount", "SwapSummary"]
