"""Leveraged contract metrics: liquidation, risk, fees, funding and break-even.

Everything here is plain float arithmetic with no rounding; rounding belongs
to the display layer (see formatting.py).

Liquidation (maintenance margin rate m, leverage L):
  - LONG:  open_price * (1 - 1/L + m)
  - SHORT: open_price * (1 + 1/L - m)
The 1/L term is the adverse fractional move that consumes the margin; the
maintenance buffer shortens it.

Degenerate inputs (zero open price, zero leverage, zero margin) are not
rejected. They flow through as NaN/Infinity and the caller decides how to
present them.
"""

from levercalc.calculator.models import (
    CalculationResult,
    ContractParameters,
    PositionType,
    ProfitProfile,
)
from levercalc.calculator.numerics import ieee_divide

# Conservative pad on the fee-derived break-even offset. The exact
# fee-neutral price uses a factor of 1.0 (exact_break_even_price).
BREAK_EVEN_SAFETY_FACTOR = 1.1

HOURS_PER_DAY = 24


def liquidation_price(
    open_price: float,
    leverage: float,
    position_type: PositionType,
    maintenance_rate: float,
) -> float:
    """Price at which the position's equity falls to the maintenance requirement."""
    inverse_leverage = ieee_divide(1.0, leverage)
    if position_type is PositionType.LONG:
        return open_price * (1 - inverse_leverage + maintenance_rate)
    return open_price * (1 + inverse_leverage - maintenance_rate)


def break_even_price(
    open_price: float,
    fee_fraction: float,
    position_type: PositionType,
    safety_factor: float = BREAK_EVEN_SAFETY_FACTOR,
) -> float:
    """Price that recovers fee_fraction of notional, padded by safety_factor.

    Args:
        open_price: Entry price.
        fee_fraction: Total round-trip fee divided by position size.
        position_type: LONG needs the price to rise, SHORT to fall.
        safety_factor: Multiplier on the fee offset (1.0 = exact break-even).
    """
    offset = fee_fraction * safety_factor
    if position_type is PositionType.LONG:
        return open_price * (1 + offset)
    return open_price * (1 - offset)


def calculate_contract(params: ContractParameters) -> CalculationResult:
    """Compute all derived metrics for a leveraged position.

    Steps:
    1. position_size = margin * leverage (notional, quote currency)
    2. position_size_in_underlying = position_size / open_price
    3. open/close fees = position_size * rate, total = sum
    4. liquidation price (direction-dependent, see module docstring)
    5. risk_percentage = |liq - open| / open * 100 (never negative)
    6. liquidation_price_percent = (liq - open) / open * 100 (signed)
    7. max_loss = margin in both margin modes
    8. funding per period and normalized per day
    9. break-even with the 1.1 pad, plus the exact break-even
    10-11. profit and profit percent at any price, via ProfitProfile

    Args:
        params: Position parameters.

    Returns:
        A new CalculationResult. Equal parameters always yield equal results.
    """
    open_price = params.open_price

    position_size = params.margin * params.leverage
    position_size_in_underlying = ieee_divide(position_size, open_price)

    open_fee_amount = position_size * params.open_fee_rate
    close_fee_amount = position_size * params.close_fee_rate
    total_fee_amount = open_fee_amount + close_fee_amount

    liq_price = liquidation_price(
        open_price, params.leverage, params.position_type, params.maintenance_rate
    )
    price_move = liq_price - open_price
    risk_percentage = ieee_divide(abs(price_move), open_price) * 100
    liquidation_price_percent = ieee_divide(price_move, open_price) * 100

    funding_fee_per_period = position_size * params.funding_rate
    funding_fee_per_day = (
        ieee_divide(funding_fee_per_period, params.funding_period_hours) * HOURS_PER_DAY
    )

    fee_fraction = ieee_divide(total_fee_amount, position_size)

    return CalculationResult(
        position_size=position_size,
        position_size_in_underlying=position_size_in_underlying,
        liquidation_price=liq_price,
        liquidation_price_percent=liquidation_price_percent,
        risk_percentage=risk_percentage,
        max_loss=params.margin,
        margin_mode=params.margin_mode,
        open_fee_amount=open_fee_amount,
        close_fee_amount=close_fee_amount,
        total_fee_amount=total_fee_amount,
        funding_fee_per_period=funding_fee_per_period,
        funding_fee_per_day=funding_fee_per_day,
        break_even_price=break_even_price(open_price, fee_fraction, params.position_type),
        exact_break_even_price=break_even_price(
            open_price, fee_fraction, params.position_type, safety_factor=1.0
        ),
        profit=ProfitProfile(
            open_price=open_price,
            margin=params.margin,
            position_type=params.position_type,
            position_size_in_underlying=position_size_in_underlying,
            total_fee_amount=total_fee_amount,
        ),
    )
