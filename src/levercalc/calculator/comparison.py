"""Side-by-side evaluation of several positions at one market price."""

from dataclasses import dataclass, field

from levercalc.calculator.contract import calculate_contract
from levercalc.calculator.models import CalculationResult, ContractParameters


@dataclass(frozen=True)
class ComparisonEntry:
    """One position's metrics and its profit at the comparison price."""

    name: str
    params: ContractParameters
    result: CalculationResult
    profit: float
    profit_percent: float


@dataclass(frozen=True)
class PositionComparison:
    """Per-position entries plus portfolio totals at current_price."""

    current_price: float
    entries: list[ComparisonEntry] = field(default_factory=list)
    total_margin: float = 0.0
    total_position_size: float = 0.0
    total_profit: float = 0.0
    total_profit_percent: float = 0.0
    average_liquidation_price: float = 0.0


def compare_positions(
    positions: list[tuple[str, ContractParameters]],
    current_price: float,
) -> PositionComparison:
    """Evaluate every (name, params) pair at current_price and aggregate.

    total_profit_percent is total profit over total margin, and is 0 when the
    total margin is not positive. average_liquidation_price is the plain mean
    of the liquidation prices, 0 for an empty list.
    """
    entries = []
    for name, params in positions:
        result = calculate_contract(params)
        entries.append(
            ComparisonEntry(
                name=name,
                params=params,
                result=result,
                profit=result.profit_at_price(current_price),
                profit_percent=result.profit_percent_at_price(current_price),
            )
        )

    total_margin = sum(e.params.margin for e in entries)
    total_profit = sum(e.profit for e in entries)

    return PositionComparison(
        current_price=current_price,
        entries=entries,
        total_margin=total_margin,
        total_position_size=sum(e.result.position_size for e in entries),
        total_profit=total_profit,
        total_profit_percent=(
            total_profit / total_margin * 100 if total_margin > 0 else 0.0
        ),
        average_liquidation_price=(
            sum(e.result.liquidation_price for e in entries) / len(entries)
            if entries
            else 0.0
        ),
    )
