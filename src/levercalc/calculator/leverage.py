"""Inverse solvers: leverage needed for a target liquidation price or risk.

Both invert the liquidation formula in contract.py and floor the answer at
MIN_LEVERAGE. A zero, negative or non-finite denominator has no physical
leverage; those inputs clamp to MIN_LEVERAGE and are reported as degenerate
on the LeverageSolution so the caller can tell a real 1x answer from a
clamped one.
"""

import math
from dataclasses import dataclass

from levercalc.calculator.models import DEFAULT_MAINTENANCE_RATE, PositionType
from levercalc.calculator.numerics import ieee_divide
from levercalc.logging import get_logger

logger = get_logger(__name__)

MIN_LEVERAGE = 1.0


@dataclass(frozen=True)
class LeverageSolution:
    """Result of an inverse solve.

    Attributes:
        leverage: Solved leverage, floored at MIN_LEVERAGE.
        raw_leverage: Unclamped 1/denominator (may be inf, negative or NaN).
        degenerate: True when the denominator was not a positive finite number.
    """

    leverage: float
    raw_leverage: float
    degenerate: bool


def _solve(denominator: float, **context: object) -> LeverageSolution:
    raw = ieee_divide(1.0, denominator)
    if not math.isfinite(denominator) or denominator <= 0:
        logger.warning(
            "degenerate_leverage_input",
            denominator=denominator,
            raw_leverage=raw,
            **context,
        )
        return LeverageSolution(leverage=MIN_LEVERAGE, raw_leverage=raw, degenerate=True)
    return LeverageSolution(
        leverage=max(MIN_LEVERAGE, raw), raw_leverage=raw, degenerate=False
    )


def solve_leverage_from_liquidation_price(
    open_price: float,
    target_liquidation_price: float,
    position_type: PositionType | str,
    maintenance_rate: float = DEFAULT_MAINTENANCE_RATE,
) -> LeverageSolution:
    """Leverage whose liquidation price equals target_liquidation_price.

    LONG:  L = 1 / (1 - ratio + m)
    SHORT: L = 1 / (ratio - 1 - m)
    where ratio = target_liquidation_price / open_price.
    """
    position_type = PositionType(position_type)
    ratio = ieee_divide(target_liquidation_price, open_price)
    if position_type is PositionType.LONG:
        denominator = 1 - ratio + maintenance_rate
    else:
        denominator = ratio - 1 - maintenance_rate
    return _solve(
        denominator,
        solver="liquidation_price",
        position_type=position_type.value,
        open_price=open_price,
        target_liquidation_price=target_liquidation_price,
    )


def solve_leverage_from_risk_percentage(
    risk_percentage: float,
    position_type: PositionType | str,
    maintenance_rate: float = DEFAULT_MAINTENANCE_RATE,
) -> LeverageSolution:
    """Leverage whose liquidation sits risk_percentage away from the open price.

    L = 1 / (risk_percentage / 100 + m). Risk percentage is an unsigned
    distance, so position_type is validated but does not enter the formula.
    """
    position_type = PositionType(position_type)
    return _solve(
        risk_percentage / 100 + maintenance_rate,
        solver="risk_percentage",
        position_type=position_type.value,
        risk_percentage=risk_percentage,
    )


def leverage_from_liquidation_price(
    open_price: float,
    target_liquidation_price: float,
    position_type: PositionType | str,
    maintenance_rate: float = DEFAULT_MAINTENANCE_RATE,
) -> float:
    """Float-only form of solve_leverage_from_liquidation_price."""
    return solve_leverage_from_liquidation_price(
        open_price, target_liquidation_price, position_type, maintenance_rate
    ).leverage


def leverage_from_risk_percentage(
    risk_percentage: float,
    position_type: PositionType | str,
    maintenance_rate: float = DEFAULT_MAINTENANCE_RATE,
) -> float:
    """Float-only form of solve_leverage_from_risk_percentage."""
    return solve_leverage_from_risk_percentage(
        risk_percentage, position_type, maintenance_rate
    ).leverage
