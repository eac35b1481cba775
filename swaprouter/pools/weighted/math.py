"""Weighted pool math.

Pure functions over Dec inputs for constant-weight (Balancer-style) pools.
Weights do not need to be normalized for the swap formulas, only their ratio
matters. The single-asset join/exit formulas take the pool's total weight.
"""

from __future__ import annotations

from swaprouter.errors import InvalidInputError
from swaprouter.math.fixed_point import Dec
from swaprouter.math.pow import pow_with_binomial_series

ONE = Dec.from_int(1)


def _validate_weights(*weights: Dec) -> None:
    for weight in weights:
        if not weight.is_positive():
            raise InvalidInputError(f"Weight must be positive, got {weight}")


def _validate_balances(*balances: Dec) -> None:
    for balance in balances:
        if not balance.is_positive():
            raise InvalidInputError(f"Balance must be positive, got {balance}")


def _validate_fee(fee: Dec, name: str = "swap_fee") -> None:
    if fee.is_negative() or fee >= ONE:
        raise InvalidInputError(f"{name} must be in [0, 1), got {fee}")


def calc_spot_price(
    balance_in: Dec,
    weight_in: Dec,
    balance_out: Dec,
    weight_out: Dec,
    swap_fee: Dec,
) -> Dec:
    """Calculate the spot price of the output token in units of the input.

    Formula:
        spot_price = (balance_in / weight_in) / (balance_out / weight_out) * 1 / (1 - swap_fee)
    """
    _validate_weights(weight_in, weight_out)
    _validate_balances(balance_in, balance_out)
    _validate_fee(swap_fee)

    numer = balance_in / weight_in
    denom = balance_out / weight_out
    scale = ONE / (ONE - swap_fee)

    return numer / denom * scale


def calc_out_given_in(
    balance_in: Dec,
    weight_in: Dec,
    balance_out: Dec,
    weight_out: Dec,
    amount_in: Dec,
    swap_fee: Dec,
) -> Dec:
    """Calculate output amount for a given input (exact-in swap).

    The swap fee is charged on the input before it reaches the curve.

    Formula:
        amount_out = balance_out * (1 - (balance_in / (balance_in + amount_in * (1 - swap_fee)))^(weight_in / weight_out))

    Raises:
        InvalidInputError: If a weight or balance is not positive, or the fee
            is outside [0, 1)
        NonConvergentApproximationError: If the power cannot be approximated
    """
    _validate_weights(weight_in, weight_out)
    _validate_balances(balance_in, balance_out)
    _validate_fee(swap_fee)

    weight_ratio = weight_in / weight_out
    adjusted_in = amount_in * (ONE - swap_fee)
    base = balance_in / (balance_in + adjusted_in)
    power = pow_with_binomial_series(base, weight_ratio)

    return balance_out * (ONE - power)


def calc_in_given_out(
    balance_in: Dec,
    weight_in: Dec,
    balance_out: Dec,
    weight_out: Dec,
    amount_out: Dec,
    swap_fee: Dec,
) -> Dec:
    """Calculate input amount required for a given output (exact-out swap).

    Formula:
        amount_in = balance_in * ((balance_out / (balance_out - amount_out))^(weight_out / weight_in) - 1) / (1 - swap_fee)

    Raises:
        InvalidInputError: If a weight or balance is not positive, the fee is
            outside [0, 1), or amount_out drains the output balance
        NonConvergentApproximationError: If the power cannot be approximated
    """
    _validate_weights(weight_in, weight_out)
    _validate_balances(balance_in, balance_out)
    _validate_fee(swap_fee)

    if amount_out >= balance_out:
        raise InvalidInputError(
            f"amount_out {amount_out} must be less than balance_out {balance_out}"
        )

    weight_ratio = weight_out / weight_in
    base = balance_out / (balance_out - amount_out)
    power = pow_with_binomial_series(base, weight_ratio)

    return balance_in * (power - ONE) / (ONE - swap_fee)


def calc_derivative_spot_price_after_swap(
    balance_in: Dec,
    weight_in: Dec,
    balance_out: Dec,
    weight_out: Dec,
    amount_in: Dec,
    swap_fee: Dec,
) -> Dec:
    """Derivative of the post-swap spot price with respect to amount_in.

    With no fee, the post-swap spot price is
        SPaS(x) = w_out / (w_in * balance_out) * balance_in^(-r) * (balance_in + x)^(1 + r),
    r = w_in / w_out, which differentiates to the closed form below.

    Formula:
        (weight_in + weight_out) * (balance_in / (balance_in - amount_in * swap_fee + amount_in))^(-weight_in / weight_out) / (balance_out * weight_in)
    """
    _validate_weights(weight_in, weight_out)
    _validate_balances(balance_in, balance_out)
    _validate_fee(swap_fee)

    base = balance_in / (balance_in - amount_in * swap_fee + amount_in)
    power = pow_with_binomial_series(base, -(weight_in / weight_out))

    return (weight_in + weight_out) * power / (balance_out * weight_in)


# =============================================================================
# Single-asset join/exit
# =============================================================================


def calc_pool_out_given_single_in(
    balance_in: Dec,
    weight_in: Dec,
    pool_supply: Dec,
    total_weight: Dec,
    amount_in: Dec,
    swap_fee: Dec,
) -> Dec:
    """Pool shares minted for a single-asset deposit.

    Only the non-proportional share of the deposit, (1 - normalized_weight),
    pays the swap fee.
    """
    _validate_weights(weight_in, total_weight)
    _validate_balances(balance_in, pool_supply)
    _validate_fee(swap_fee)

    normalized_weight = weight_in / total_weight
    fee_share = (ONE - normalized_weight) * swap_fee
    amount_in_after_fee = amount_in * (ONE - fee_share)

    token_in_ratio = (balance_in + amount_in_after_fee) / balance_in
    pool_ratio = pow_with_binomial_series(token_in_ratio, normalized_weight)

    return pool_ratio * pool_supply - pool_supply


def calc_single_in_given_pool_out(
    balance_in: Dec,
    weight_in: Dec,
    pool_supply: Dec,
    total_weight: Dec,
    pool_amount_out: Dec,
    swap_fee: Dec,
) -> Dec:
    """Single-asset deposit required to mint pool_amount_out shares."""
    _validate_weights(weight_in, total_weight)
    _validate_balances(balance_in, pool_supply)
    _validate_fee(swap_fee)

    normalized_weight = weight_in / total_weight
    pool_ratio = (pool_supply + pool_amount_out) / pool_supply
    token_in_ratio = pow_with_binomial_series(pool_ratio, ONE / normalized_weight)

    amount_in_after_fee = token_in_ratio * balance_in - balance_in
    fee_share = (ONE - normalized_weight) * swap_fee

    return amount_in_after_fee / (ONE - fee_share)


def calc_single_out_given_pool_in(
    balance_out: Dec,
    weight_out: Dec,
    pool_supply: Dec,
    total_weight: Dec,
    pool_amount_in: Dec,
    swap_fee: Dec,
    exit_fee: Dec | None = None,
) -> Dec:
    """Single asset withdrawn when burning pool_amount_in shares."""
    exit_fee = exit_fee if exit_fee is not None else Dec(0)
    _validate_weights(weight_out, total_weight)
    _validate_balances(balance_out, pool_supply)
    _validate_fee(swap_fee)
    _validate_fee(exit_fee, "exit_fee")

    normalized_weight = weight_out / total_weight
    pool_amount_in_after_exit_fee = pool_amount_in * (ONE - exit_fee)
    pool_ratio = (pool_supply - pool_amount_in_after_exit_fee) / pool_supply

    token_out_ratio = pow_with_binomial_series(pool_ratio, ONE / normalized_weight)
    amount_out_before_fee = balance_out - token_out_ratio * balance_out

    fee_share = (ONE - normalized_weight) * swap_fee
    return amount_out_before_fee * (ONE - fee_share)


def calc_pool_in_given_single_out(
    balance_out: Dec,
    weight_out: Dec,
    pool_supply: Dec,
    total_weight: Dec,
    amount_out: Dec,
    swap_fee: Dec,
    exit_fee: Dec | None = None,
) -> Dec:
    """Pool shares burned to withdraw exactly amount_out of one asset."""
    exit_fee = exit_fee if exit_fee is not None else Dec(0)
    _validate_weights(weight_out, total_weight)
    _validate_balances(balance_out, pool_supply)
    _validate_fee(swap_fee)
    _validate_fee(exit_fee, "exit_fee")

    normalized_weight = weight_out / total_weight
    fee_share = (ONE - normalized_weight) * swap_fee
    amount_out_before_fee = amount_out / (ONE - fee_share)

    token_out_ratio = (balance_out - amount_out_before_fee) / balance_out
    pool_ratio = pow_with_binomial_series(token_out_ratio, normalized_weight)

    pool_amount_in_after_exit_fee = pool_supply - pool_ratio * pool_supply
    return pool_amount_in_after_exit_fee / (ONE - exit_fee)


__all__ = [
    "calc_spot_price",
    "calc_out_given_in",
    "calc_in_given_out",
    "calc_derivative_spot_price_after_swap",
    "calc_pool_out_given_single_in",
    "calc_single_in_given_pool_out",
    "calc_single_out_given_pool_in",
    "calc_pool_in_given_single_out",
]
