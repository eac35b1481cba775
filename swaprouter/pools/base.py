"""Pool capability contract and shared value types.

Any curve type (currently only weighted pools) implements the Pool protocol.
Implementations MUST be immutable: a swap never changes a pool, it returns a
new pool value describing the post-swap state. The router relies on this to
query a pool twice and get the same answer, and to keep a reference to a
pre-swap pool while computing with a post-swap one.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from swaprouter.math.fixed_point import Dec


@dataclass(frozen=True)
class TokenAmount:
    """An integer amount of a single denom."""

    denom: str
    amount: int


@dataclass(frozen=True)
class PoolAsset:
    """One asset held by a pool.

    Attributes:
        denom: Token denom, unique within a pool
        amount: Current balance (>= 0)
        weight: Bonding-curve weight (> 0). Integer on the wire, promoted
            to Dec for ratio math.
    """

    denom: str
    amount: int
    weight: int


@dataclass(frozen=True)
class SwapQuote:
    """Result of simulating a swap through a single pool.

    Attributes:
        amount: Output amount (exact-in quotes) or required input amount
            (exact-out quotes), truncated to an integer
        before_spot_price_in_over_out: Spot price before the swap, fee included
        before_spot_price_out_over_in: Reciprocal of the above
        effective_price_in_over_out: Realized input per unit of output
        effective_price_out_over_in: Reciprocal of the above
        slippage: effective_price / before_spot_price - 1
        after_pool: New pool value holding the post-swap balances
    """

    amount: int
    before_spot_price_in_over_out: Dec
    before_spot_price_out_over_in: Dec
    effective_price_in_over_out: Dec
    effective_price_out_over_in: Dec
    slippage: Dec
    after_pool: Pool


@runtime_checkable
class Pool(Protocol):
    """Protocol for read-only liquidity pools.

    All query methods are pure. Methods taking denoms raise
    MissingAssetError when a denom is not held by the pool.
    """

    @property
    def id(self) -> str: ...

    @property
    def swap_fee(self) -> Dec: ...

    @property
    def exit_fee(self) -> Dec: ...

    @property
    def total_weight(self) -> int: ...

    @property
    def total_share(self) -> int: ...

    @property
    def share_denom(self) -> str: ...

    @property
    def pool_assets(self) -> tuple[PoolAsset, ...]: ...

    def get_pool_asset(self, denom: str) -> PoolAsset: ...

    def has_pool_asset(self, denom: str) -> bool: ...

    def get_spot_price_in_over_out(self, token_in_denom: str, token_out_denom: str) -> Dec: ...

    def get_spot_price_out_over_in(self, token_in_denom: str, token_out_denom: str) -> Dec: ...

    def get_spot_price_in_over_out_without_swap_fee(
        self, token_in_denom: str, token_out_denom: str
    ) -> Dec: ...

    def get_spot_price_out_over_in_without_swap_fee(
        self, token_in_denom: str, token_out_denom: str
    ) -> Dec: ...

    def get_token_out_by_token_in(
        self, token_in: TokenAmount, token_out_denom: str
    ) -> SwapQuote: ...

    def get_token_in_by_token_out(
        self, token_out: TokenAmount, token_in_denom: str
    ) -> SwapQuote: ...

    def get_limit_amount(self, denom: str) -> int: ...

    def get_derivative_spot_price_after_token_out_by_token_in(
        self, token_in: TokenAmount, token_out_denom: str
    ) -> Dec: ...


__all__ = ["Pool", "PoolAsset", "SwapQuote", "TokenAmount"]
