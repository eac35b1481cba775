"""Liquidity pools.

This package provides:
- Pool: the read-only capability every curve type implements
- WeightedPool: constant-weight pools, with their math and wire format
- LRUCache and CachedPool: memoization for repeated pool queries
"""

from swaprouter.pools.base import Pool, PoolAsset, SwapQuote, TokenAmount
from swaprouter.pools.cached import DEFAULT_CACHE_SIZE, CachedPool, PoolQuery, unwrap_pool
from swaprouter.pools.lru_cache import LRUCache
from swaprouter.pools.weighted import (
    WeightedPool,
    WeightedPoolRaw,
    parse_weighted_pool,
    parse_weighted_pools,
)

__all__ = [
    # Protocol and values
    "Pool",
    "PoolAsset",
    "SwapQuote",
    "TokenAmount",
    # Weighted pools
    "WeightedPool",
    "WeightedPoolRaw",
    "parse_weighted_pool",
    "parse_weighted_pools",
    # Caching
    "LRUCache",
    "CachedPool",
    "PoolQuery",
    "DEFAULT_CACHE_SIZE",
    "unwrap_pool",
]
