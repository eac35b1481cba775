"""Weighted pool wire format.

Pydantic models for pool snapshots as served by the chain's REST API, and
functions to turn them into immutable WeightedPool values. Integers and
decimals are string-encoded on the wire.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from typing import Annotated, Any

import structlog
from pydantic import BaseModel, BeforeValidator, Field, ValidationError, field_validator, model_validator

from swaprouter.math.fixed_point import Dec

from .pool import WeightedPool

logger = structlog.get_logger()

_INT_STRING_RE = re.compile(r"[+-]?[0-9]+")


def validate_int_string(value: Any) -> str:
    """Validate that a value is a decimal integer string.

    Args:
        value: Value to validate (string or int)

    Returns:
        The integer as a decimal string

    Raises:
        ValueError: If value is not an integer or integer string
    """
    if isinstance(value, bool):
        raise ValueError("Integer string cannot be a bool")
    if isinstance(value, int):
        return str(value)
    if not isinstance(value, str):
        raise ValueError(f"Integer must be string or int, got {type(value).__name__}")
    if _INT_STRING_RE.fullmatch(value) is None:
        raise ValueError(f"Must be a decimal integer string: '{value}'")
    return value


def validate_dec_string(value: Any) -> str:
    """Validate that a value is a plain decimal string ("0.003")."""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        value = str(value)
    if not isinstance(value, str):
        raise ValueError(f"Decimal must be a string, got {type(value).__name__}")
    try:
        Dec.from_str(value)
    except ValueError as err:
        raise ValueError(f"Must be a decimal string: '{value}'") from err
    return value


IntString = Annotated[str, BeforeValidator(validate_int_string)]
DecString = Annotated[str, BeforeValidator(validate_dec_string)]


class TokenRaw(BaseModel):
    """A token balance inside a pool record."""

    denom: str = Field(min_length=1)
    amount: IntString

    model_config = {"frozen": True}

    @field_validator("amount")
    @classmethod
    def _amount_non_negative(cls, v: str) -> str:
        if int(v) < 0:
            raise ValueError(f"Token amount cannot be negative: {v}")
        return v


class PoolAssetRaw(BaseModel):
    """An asset entry: weight plus token balance."""

    weight: IntString
    token: TokenRaw

    model_config = {"frozen": True}

    @field_validator("weight")
    @classmethod
    def _weight_positive(cls, v: str) -> str:
        if int(v) <= 0:
            raise ValueError(f"Weight must be positive: {v}")
        return v


class SmoothWeightChangeParamsRaw(BaseModel):
    """Scheduled weight change (LBP-style). Carried through, not applied."""

    start_time: str = Field(alias="startTime")
    duration: str
    initial_pool_weights: list[PoolAssetRaw] = Field(alias="initialPoolWeights")
    target_pool_weights: list[PoolAssetRaw] = Field(alias="targetPoolWeights")

    model_config = {"populate_by_name": True, "frozen": True}


class PoolParamsRaw(BaseModel):
    """Pool parameters."""

    lock: bool = False
    swap_fee: DecString = Field(alias="swapFee")
    exit_fee: DecString = Field(alias="exitFee")
    smooth_weight_change_params: SmoothWeightChangeParamsRaw | None = Field(
        default=None, alias="smoothWeightChangeParams"
    )

    model_config = {"populate_by_name": True, "frozen": True}

    @field_validator("swap_fee", "exit_fee")
    @classmethod
    def _fee_in_range(cls, v: str) -> str:
        fee = Dec.from_str(v)
        if fee.is_negative() or fee >= Dec.from_int(1):
            raise ValueError(f"Fee must be in [0, 1): {v}")
        return v


class TotalSharesRaw(BaseModel):
    """Pool share supply."""

    denom: str
    amount: IntString

    model_config = {"frozen": True}


class WeightedPoolRaw(BaseModel):
    """A weighted pool snapshot record."""

    id: str
    pool_params: PoolParamsRaw = Field(alias="poolParams")
    total_weight: IntString = Field(alias="totalWeight")
    total_shares: TotalSharesRaw = Field(alias="totalShares")
    pool_assets: list[PoolAssetRaw] = Field(alias="poolAssets", min_length=2)

    model_config = {"populate_by_name": True, "frozen": True}

    @model_validator(mode="after")
    def _check_assets(self) -> WeightedPoolRaw:
        denoms = [asset.token.denom for asset in self.pool_assets]
        if len(set(denoms)) != len(denoms):
            raise ValueError(f"Pool {self.id} has duplicated denoms: {denoms}")

        weight_sum = sum(int(asset.weight) for asset in self.pool_assets)
        if weight_sum != int(self.total_weight):
            raise ValueError(
                f"Pool {self.id} weights sum to {weight_sum}, totalWeight is {self.total_weight}"
            )
        return self


def parse_weighted_pool(record: Mapping[str, Any] | WeightedPoolRaw) -> WeightedPool | None:
    """Parse a pool snapshot record into a WeightedPool.

    Args:
        record: Raw JSON-like mapping or an already validated model

    Returns:
        WeightedPool, or None if the record fails validation
    """
    if isinstance(record, WeightedPoolRaw):
        return WeightedPool.from_raw(record)

    try:
        raw = WeightedPoolRaw.model_validate(record)
    except ValidationError as err:
        logger.warning(
            "weighted_pool_parse_failed",
            pool_id=record.get("id") if isinstance(record, Mapping) else None,
            error_count=err.error_count(),
            errors=[e["msg"] for e in err.errors()],
        )
        return None

    return WeightedPool.from_raw(raw)


def parse_weighted_pools(records: Iterable[Mapping[str, Any]]) -> list[WeightedPool]:
    """Parse many records, skipping the ones that fail validation."""
    pools: list[WeightedPool] = []
    skipped = 0
    for record in records:
        pool = parse_weighted_pool(record)
        if pool is None:
            skipped += 1
            continue
        pools.append(pool)

    logger.debug("weighted_pools_parsed", parsed=len(pools), skipped=skipped)
    return pools


__all__ = [
    "TokenRaw",
    "PoolAssetRaw",
    "SmoothWeightChangeParamsRaw",
    "PoolParamsRaw",
    "TotalSharesRaw",
    "WeightedPoolRaw",
    "parse_weighted_pool",
    "parse_weighted_pools",
]
