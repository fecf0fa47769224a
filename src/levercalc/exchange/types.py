"""Exchange-side rate types and bracket selection.

Values are floats because they feed straight into the float calculator core.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class CommissionRates:
    """Maker/taker commission rates for a futures symbol.

    is_default is True when the rates are the configured fallback rather
    than the account's actual rates.
    """

    maker: float
    taker: float
    is_default: bool = False


@dataclass(frozen=True)
class LeverageBracket:
    """One notional tier of a symbol's leverage/maintenance-margin schedule."""

    bracket: int
    initial_leverage: float
    notional_floor: float
    notional_cap: float
    maint_margin_ratio: float

    def contains(self, notional: float) -> bool:
        return self.notional_floor <= notional < self.notional_cap


def select_bracket(
    brackets: list[LeverageBracket], notional: float | None = None
) -> LeverageBracket:
    """Pick the bracket that applies to a position of the given notional.

    Brackets are ordered by notional floor. With no notional the first
    (smallest) bracket is returned; a notional above every cap falls into the
    last bracket.

    Raises:
        ValueError: If brackets is empty.
    """
    if not brackets:
        raise ValueError("No leverage brackets to select from")

    ordered = sorted(brackets, key=lambda b: b.notional_floor)
    if notional is None:
        return ordered[0]
    for bracket in ordered:
        if bracket.contains(notional):
            return bracket
    return ordered[-1]
