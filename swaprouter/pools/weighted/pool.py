"""Immutable weighted pool.

WeightedPool implements the Pool protocol for constant-weight pools. Swap
queries never mutate the pool; the post-swap state comes back as a new
WeightedPool in SwapQuote.after_pool.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING

from swaprouter.errors import InvalidInputError, MissingAssetError
from swaprouter.math.fixed_point import Dec
from swaprouter.pools.base import PoolAsset, SwapQuote, TokenAmount

from .math import (
    calc_derivative_spot_price_after_swap,
    calc_in_given_out,
    calc_out_given_in,
    calc_spot_price,
)

if TYPE_CHECKING:
    from .parsing import SmoothWeightChangeParamsRaw, WeightedPoolRaw

# Tradable cap per asset: 30% of the current balance keeps swaps inside the
# region where the binomial series converges quickly
LIMIT_AMOUNT_RATIO = Dec.from_str("0.3")

ONE = Dec.from_int(1)
ZERO = Dec(0)


@dataclass(frozen=True)
class WeightedPool:
    """Constant-weight liquidity pool snapshot.

    Attributes:
        id: Pool identifier
        pool_assets: Assets held by the pool, denoms unique
        swap_fee: Swap fee in [0, 1)
        exit_fee: Exit fee in [0, 1)
        total_weight: Sum of all asset weights
        total_share: Outstanding pool share supply
        share_denom: Denom of the pool share token
        lock: Pool lock flag from the snapshot, carried through
        smooth_weight_change_params: Scheduled weight change from the
            snapshot, carried through but not applied
    """

    id: str
    pool_assets: tuple[PoolAsset, ...]
    swap_fee: Dec
    exit_fee: Dec
    total_weight: int
    total_share: int
    share_denom: str
    lock: bool = False
    smooth_weight_change_params: SmoothWeightChangeParamsRaw | None = field(
        default=None, compare=False
    )

    def __post_init__(self) -> None:
        denoms = [asset.denom for asset in self.pool_assets]
        if len(set(denoms)) != len(denoms):
            raise InvalidInputError(f"Pool {self.id} has duplicated denoms: {denoms}")
        for asset in self.pool_assets:
            if asset.weight <= 0:
                raise InvalidInputError(f"Pool {self.id} asset {asset.denom} has non-positive weight")
            if asset.amount < 0:
                raise InvalidInputError(f"Pool {self.id} asset {asset.denom} has negative amount")
        weight_sum = sum(asset.weight for asset in self.pool_assets)
        if weight_sum != self.total_weight:
            raise InvalidInputError(
                f"Pool {self.id} weights sum to {weight_sum}, total weight is {self.total_weight}"
            )
        for name, fee in (("swap_fee", self.swap_fee), ("exit_fee", self.exit_fee)):
            if fee.is_negative() or fee >= ONE:
                raise InvalidInputError(f"Pool {self.id} {name} must be in [0, 1), got {fee}")

    # -------------------------------------------------------------------------
    # Wire format
    # -------------------------------------------------------------------------

    @classmethod
    def from_raw(cls, raw: WeightedPoolRaw) -> WeightedPool:
        """Build a pool from a validated snapshot record."""
        return cls(
            id=raw.id,
            pool_assets=tuple(
                PoolAsset(
                    denom=asset.token.denom,
                    amount=int(asset.token.amount),
                    weight=int(asset.weight),
                )
                for asset in raw.pool_assets
            ),
            swap_fee=Dec.from_str(raw.pool_params.swap_fee),
            exit_fee=Dec.from_str(raw.pool_params.exit_fee),
            total_weight=int(raw.total_weight),
            total_share=int(raw.total_shares.amount),
            share_denom=raw.total_shares.denom,
            lock=raw.pool_params.lock,
            smooth_weight_change_params=raw.pool_params.smooth_weight_change_params,
        )

    def to_raw(self) -> WeightedPoolRaw:
        """Serialize back to the snapshot record format."""
        from .parsing import WeightedPoolRaw

        return WeightedPoolRaw.model_validate(
            {
                "id": self.id,
                "poolParams": {
                    "lock": self.lock,
                    "swapFee": str(self.swap_fee),
                    "exitFee": str(self.exit_fee),
                    "smoothWeightChangeParams": self.smooth_weight_change_params,
                },
                "totalWeight": str(self.total_weight),
                "totalShares": {"denom": self.share_denom, "amount": str(self.total_share)},
                "poolAssets": [
                    {
                        "weight": str(asset.weight),
                        "token": {"denom": asset.denom, "amount": str(asset.amount)},
                    }
                    for asset in self.pool_assets
                ],
            }
        )

    # -------------------------------------------------------------------------
    # Assets
    # -------------------------------------------------------------------------

    def get_pool_asset(self, denom: str) -> PoolAsset:
        """Get the asset for a denom.

        Raises:
            MissingAssetError: If the pool doesn't hold denom
        """
        for asset in self.pool_assets:
            if asset.denom == denom:
                return asset
        raise MissingAssetError(f"Pool {self.id} doesn't have the pool asset for {denom}")

    def has_pool_asset(self, denom: str) -> bool:
        return any(asset.denom == denom for asset in self.pool_assets)

    def _pair(self, token_in_denom: str, token_out_denom: str) -> tuple[PoolAsset, PoolAsset]:
        if token_in_denom == token_out_denom:
            raise InvalidInputError(f"Token in and token out are both {token_in_denom}")
        return self.get_pool_asset(token_in_denom), self.get_pool_asset(token_out_denom)

    # -------------------------------------------------------------------------
    # Spot prices
    # -------------------------------------------------------------------------

    def _spot_price(self, token_in_denom: str, token_out_denom: str, swap_fee: Dec) -> Dec:
        asset_in, asset_out = self._pair(token_in_denom, token_out_denom)
        return calc_spot_price(
            Dec.from_int(asset_in.amount),
            Dec.from_int(asset_in.weight),
            Dec.from_int(asset_out.amount),
            Dec.from_int(asset_out.weight),
            swap_fee,
        )

    def get_spot_price_in_over_out(self, token_in_denom: str, token_out_denom: str) -> Dec:
        return self._spot_price(token_in_denom, token_out_denom, self.swap_fee)

    def get_spot_price_in_over_out_without_swap_fee(
        self, token_in_denom: str, token_out_denom: str
    ) -> Dec:
        return self._spot_price(token_in_denom, token_out_denom, ZERO)

    def get_spot_price_out_over_in(self, token_in_denom: str, token_out_denom: str) -> Dec:
        return ONE / self.get_spot_price_in_over_out(token_in_denom, token_out_denom)

    def get_spot_price_out_over_in_without_swap_fee(
        self, token_in_denom: str, token_out_denom: str
    ) -> Dec:
        return ONE / self.get_spot_price_in_over_out_without_swap_fee(
            token_in_denom, token_out_denom
        )

    # -------------------------------------------------------------------------
    # Swaps
    # -------------------------------------------------------------------------

    def get_token_out_by_token_in(self, token_in: TokenAmount, token_out_denom: str) -> SwapQuote:
        """Simulate selling exactly token_in for token_out_denom.

        Raises:
            InvalidInputError: If the amount is not positive
            MissingAssetError: If either denom is absent
            ZeroDivisionError: If the output truncates to zero
        """
        if token_in.amount <= 0:
            raise InvalidInputError(f"Token in amount must be positive, got {token_in.amount}")
        asset_in, asset_out = self._pair(token_in.denom, token_out_denom)

        before_spot_price = self.get_spot_price_in_over_out(token_in.denom, token_out_denom)
        token_out_amount = calc_out_given_in(
            Dec.from_int(asset_in.amount),
            Dec.from_int(asset_in.weight),
            Dec.from_int(asset_out.amount),
            Dec.from_int(asset_out.weight),
            Dec.from_int(token_in.amount),
            self.swap_fee,
        ).truncate()

        effective_price = Dec.from_int(token_in.amount) / Dec.from_int(token_out_amount)

        return SwapQuote(
            amount=token_out_amount,
            before_spot_price_in_over_out=before_spot_price,
            before_spot_price_out_over_in=ONE / before_spot_price,
            effective_price_in_over_out=effective_price,
            effective_price_out_over_in=ONE / effective_price,
            slippage=effective_price / before_spot_price - ONE,
            after_pool=self._apply_pool_asset_changes(
                [
                    TokenAmount(token_in.denom, token_in.amount),
                    TokenAmount(token_out_denom, -token_out_amount),
                ]
            ),
        )

    def get_token_in_by_token_out(self, token_out: TokenAmount, token_in_denom: str) -> SwapQuote:
        """Simulate buying exactly token_out with token_in_denom.

        Raises:
            InvalidInputError: If the amount is not positive or drains the pool
            MissingAssetError: If either denom is absent
        """
        if token_out.amount <= 0:
            raise InvalidInputError(f"Token out amount must be positive, got {token_out.amount}")
        asset_in, asset_out = self._pair(token_in_denom, token_out.denom)

        before_spot_price = self.get_spot_price_in_over_out(token_in_denom, token_out.denom)
        token_in_amount = calc_in_given_out(
            Dec.from_int(asset_in.amount),
            Dec.from_int(asset_in.weight),
            Dec.from_int(asset_out.amount),
            Dec.from_int(asset_out.weight),
            Dec.from_int(token_out.amount),
            self.swap_fee,
        ).truncate()

        effective_price = Dec.from_int(token_in_amount) / Dec.from_int(token_out.amount)

        return SwapQuote(
            amount=token_in_amount,
            before_spot_price_in_over_out=before_spot_price,
            before_spot_price_out_over_in=ONE / before_spot_price,
            effective_price_in_over_out=effective_price,
            effective_price_out_over_in=ONE / effective_price,
            slippage=effective_price / before_spot_price - ONE,
            after_pool=self._apply_pool_asset_changes(
                [
                    TokenAmount(token_in_denom, token_in_amount),
                    TokenAmount(token_out.denom, -token_out.amount),
                ]
            ),
        )

    def get_limit_amount(self, denom: str) -> int:
        """Conservative tradable amount of denom: 30% of its balance."""
        return (Dec.from_int(self.get_pool_asset(denom).amount) * LIMIT_AMOUNT_RATIO).truncate()

    def get_derivative_spot_price_after_token_out_by_token_in(
        self, token_in: TokenAmount, token_out_denom: str
    ) -> Dec:
        """d(post-swap spot price in over out) / d(token_in.amount)."""
        asset_in, asset_out = self._pair(token_in.denom, token_out_denom)
        return calc_derivative_spot_price_after_swap(
            Dec.from_int(asset_in.amount),
            Dec.from_int(asset_in.weight),
            Dec.from_int(asset_out.amount),
            Dec.from_int(asset_out.weight),
            Dec.from_int(token_in.amount),
            self.swap_fee,
        )

    def _apply_pool_asset_changes(self, changes: list[TokenAmount]) -> WeightedPool:
        """Return a new pool with signed balance deltas applied.

        Raises:
            InvalidInputError: If a denom appears twice in changes
            MissingAssetError: If a change targets a denom the pool lacks
        """
        deltas: dict[str, int] = {}
        for change in changes:
            if change.denom in deltas:
                raise InvalidInputError(f"Changes are duplicated: {change.denom}")
            deltas[change.denom] = change.amount

        assets = []
        for asset in self.pool_assets:
            delta = deltas.pop(asset.denom, None)
            if delta is None:
                assets.append(asset)
            else:
                assets.append(replace(asset, amount=asset.amount + delta))

        if deltas:
            raise MissingAssetError(
                f"Pool {self.id} has no assets for remaining changes: {sorted(deltas)}"
            )

        return replace(self, pool_assets=tuple(assets))


__all__ = ["WeightedPool", "LIMIT_AMOUNT_RATIO"]
