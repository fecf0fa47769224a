"""Contract calculator core -- pure float math for leveraged positions."""

from levercalc.calculator.comparison import (
    ComparisonEntry,
    PositionComparison,
    compare_positions,
)
from levercalc.calculator.contract import BREAK_EVEN_SAFETY_FACTOR, calculate_contract
from levercalc.calculator.formatting import format_currency, format_percent, format_price
from levercalc.calculator.leverage import (
    MIN_LEVERAGE,
    LeverageSolution,
    leverage_from_liquidation_price,
    leverage_from_risk_percentage,
    solve_leverage_from_liquidation_price,
    solve_leverage_from_risk_percentage,
)
from levercalc.calculator.models import (
    CalculationResult,
    ContractParameters,
    MarginMode,
    PositionType,
    ProfitProfile,
    RateDefaults,
)

__all__ = [
    "BREAK_EVEN_SAFETY_FACTOR",
    "CalculationResult",
    "ComparisonEntry",
    "ContractParameters",
    "LeverageSolution",
    "MIN_LEVERAGE",
    "MarginMode",
    "PositionComparison",
    "PositionType",
    "ProfitProfile",
    "RateDefaults",
    "calculate_contract",
    "compare_positions",
    "format_currency",
    "format_percent",
    "format_price",
    "leverage_from_liquidation_price",
    "leverage_from_risk_percentage",
    "solve_leverage_from_liquidation_price",
    "solve_leverage_from_risk_percentage",
]
