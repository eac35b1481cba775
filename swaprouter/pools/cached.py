"""Memoizing pool decorator.

CachedPool wraps any Pool and remembers the result of each query in an
LRUCache. Keys are typed tuples (PoolQuery, *args) rather than formatted
strings. Swap quotes come back with their after_pool wrapped in a fresh
CachedPool, so a chain of hypothetical swaps reuses memoized sub-results.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import replace
from enum import Enum
from typing import Any, TypeVar

from swaprouter.math.fixed_point import Dec

from .base import Pool, PoolAsset, SwapQuote, TokenAmount
from .lru_cache import LRUCache

T = TypeVar("T")

DEFAULT_CACHE_SIZE = 30

_MISSING = object()


class PoolQuery(Enum):
    """Memoized query kinds, the first element of every cache key."""

    GET_POOL_ASSET = "get_pool_asset"
    HAS_POOL_ASSET = "has_pool_asset"
    SPOT_PRICE_IN_OVER_OUT = "spot_price_in_over_out"
    SPOT_PRICE_OUT_OVER_IN = "spot_price_out_over_in"
    SPOT_PRICE_IN_OVER_OUT_WITHOUT_FEE = "spot_price_in_over_out_without_fee"
    SPOT_PRICE_OUT_OVER_IN_WITHOUT_FEE = "spot_price_out_over_in_without_fee"
    TOKEN_OUT_BY_TOKEN_IN = "token_out_by_token_in"
    TOKEN_IN_BY_TOKEN_OUT = "token_in_by_token_out"
    LIMIT_AMOUNT = "limit_amount"
    DERIVATIVE_SPOT_PRICE_AFTER_SWAP = "derivative_spot_price_after_swap"


CacheKey = tuple[Any, ...]


class CachedPool:
    """Pool wrapper memoizing every query in a bounded LRU cache.

    Failed queries are not cached; the exception propagates each time.
    Attribute reads (id, fees, assets) delegate straight to the wrapped pool.

    Args:
        pool: Pool to wrap. Wrapping a CachedPool wraps its inner pool.
        max_size: LRU capacity
    """

    def __init__(self, pool: Pool, max_size: int = DEFAULT_CACHE_SIZE) -> None:
        if isinstance(pool, CachedPool):
            pool = pool.pool
        self._pool = pool
        self._cache: LRUCache[CacheKey, Any] = LRUCache(max_size)

    @property
    def pool(self) -> Pool:
        """The wrapped (uncached) pool."""
        return self._pool

    @property
    def cache(self) -> LRUCache[CacheKey, Any]:
        return self._cache

    def clear_cache(self) -> None:
        """Forget memoized results. The wrapped pool is untouched."""
        self._cache.clear()

    def _get_or_set(self, key: CacheKey, compute: Callable[[], T]) -> T:
        cached = self._cache.get(key, _MISSING)
        if cached is not _MISSING:
            return cached
        value = compute()
        self._cache.set(key, value)
        return value

    def _wrap_quote(self, quote: SwapQuote) -> SwapQuote:
        return replace(
            quote, after_pool=CachedPool(quote.after_pool, self._cache.max_size)
        )

    # -------------------------------------------------------------------------
    # Attributes
    # -------------------------------------------------------------------------

    @property
    def id(self) -> str:
        return self._pool.id

    @property
    def swap_fee(self) -> Dec:
        return self._pool.swap_fee

    @property
    def exit_fee(self) -> Dec:
        return self._pool.exit_fee

    @property
    def total_weight(self) -> int:
        return self._pool.total_weight

    @property
    def total_share(self) -> int:
        return self._pool.total_share

    @property
    def share_denom(self) -> str:
        return self._pool.share_denom

    @property
    def pool_assets(self) -> tuple[PoolAsset, ...]:
        return self._pool.pool_assets

    # -------------------------------------------------------------------------
    # Memoized queries
    # -------------------------------------------------------------------------

    def get_pool_asset(self, denom: str) -> PoolAsset:
        return self._get_or_set(
            (PoolQuery.GET_POOL_ASSET, denom),
            lambda: self._pool.get_pool_asset(denom),
        )

    def has_pool_asset(self, denom: str) -> bool:
        return self._get_or_set(
            (PoolQuery.HAS_POOL_ASSET, denom),
            lambda: self._pool.has_pool_asset(denom),
        )

    def get_spot_price_in_over_out(self, token_in_denom: str, token_out_denom: str) -> Dec:
        return self._get_or_set(
            (PoolQuery.SPOT_PRICE_IN_OVER_OUT, token_in_denom, token_out_denom),
            lambda: self._pool.get_spot_price_in_over_out(token_in_denom, token_out_denom),
        )

    def get_spot_price_out_over_in(self, token_in_denom: str, token_out_denom: str) -> Dec:
        return self._get_or_set(
            (PoolQuery.SPOT_PRICE_OUT_OVER_IN, token_in_denom, token_out_denom),
            lambda: self._pool.get_spot_price_out_over_in(token_in_denom, token_out_denom),
        )

    def get_spot_price_in_over_out_without_swap_fee(
        self, token_in_denom: str, token_out_denom: str
    ) -> Dec:
        return self._get_or_set(
            (PoolQuery.SPOT_PRICE_IN_OVER_OUT_WITHOUT_FEE, token_in_denom, token_out_denom),
            lambda: self._pool.get_spot_price_in_over_out_without_swap_fee(
                token_in_denom, token_out_denom
            ),
        )

    def get_spot_price_out_over_in_without_swap_fee(
        self, token_in_denom: str, token_out_denom: str
    ) -> Dec:
        return self._get_or_set(
            (PoolQuery.SPOT_PRICE_OUT_OVER_IN_WITHOUT_FEE, token_in_denom, token_out_denom),
            lambda: self._pool.get_spot_price_out_over_in_without_swap_fee(
                token_in_denom, token_out_denom
            ),
        )

    def get_token_out_by_token_in(self, token_in: TokenAmount, token_out_denom: str) -> SwapQuote:
        return self._get_or_set(
            (PoolQuery.TOKEN_OUT_BY_TOKEN_IN, token_in.amount, token_in.denom, token_out_denom),
            lambda: self._wrap_quote(
                self._pool.get_token_out_by_token_in(token_in, token_out_denom)
            ),
        )

    def get_token_in_by_token_out(self, token_out: TokenAmount, token_in_denom: str) -> SwapQuote:
        return self._get_or_set(
            (PoolQuery.TOKEN_IN_BY_TOKEN_OUT, token_out.amount, token_out.denom, token_in_denom),
            lambda: self._wrap_quote(
                self._pool.get_token_in_by_token_out(token_out, token_in_denom)
            ),
        )

    def get_limit_amount(self, denom: str) -> int:
        return self._get_or_set(
            (PoolQuery.LIMIT_AMOUNT, denom),
            lambda: self._pool.get_limit_amount(denom),
        )

    def get_derivative_spot_price_after_token_out_by_token_in(
        self, token_in: TokenAmount, token_out_denom: str
    ) -> Dec:
        return self._get_or_set(
            (
                PoolQuery.DERIVATIVE_SPOT_PRICE_AFTER_SWAP,
                token_in.amount,
                token_in.denom,
                token_out_denom,
            ),
            lambda: self._pool.get_derivative_spot_price_after_token_out_by_token_in(
                token_in, token_out_denom
            ),
        )

    def __repr__(self) -> str:
        return f"CachedPool({self._pool!r}, cache={self._cache!r})"


def unwrap_pool(pool: Pool) -> Pool:
    """Return the pool inside a CachedPool, or the pool itself."""
    return pool.pool if isinstance(pool, CachedPool) else pool


__all__ = ["CachedPool", "PoolQuery", "DEFAULT_CACHE_SIZE", "unwrap_pool"]
