"""Calculator data models: parameters, rate defaults and results.

All values are plain floats. Results are frozen dataclasses, so two results
computed from equal parameters compare equal field by field.
"""

from __future__ import annotations

import struct
from dataclasses import asdict, dataclass, field, fields, replace
from enum import Enum
from typing import TYPE_CHECKING, Any

from levercalc.calculator.numerics import ieee_divide

if TYPE_CHECKING:
    from levercalc.config import RateSettings


class PositionType(str, Enum):
    """Position direction."""

    LONG = "long"
    SHORT = "short"


class MarginMode(str, Enum):
    """Margin mode. Informational only: never changes the arithmetic."""

    ISOLATED = "isolated"
    CROSS = "cross"

    @property
    def max_loss_label(self) -> str:
        if self is MarginMode.ISOLATED:
            return "limited to this margin"
        return "entire account at risk"


DEFAULT_MAINTENANCE_RATE = 0.005
DEFAULT_OPEN_FEE_RATE = 0.0002
DEFAULT_CLOSE_FEE_RATE = 0.0002
DEFAULT_FUNDING_RATE = 0.0
DEFAULT_FUNDING_PERIOD_HOURS = 8.0


@dataclass(frozen=True)
class RateDefaults:
    """Named defaults for the optional rate fields of ContractParameters."""

    maintenance_rate: float = DEFAULT_MAINTENANCE_RATE
    open_fee_rate: float = DEFAULT_OPEN_FEE_RATE
    close_fee_rate: float = DEFAULT_CLOSE_FEE_RATE
    funding_rate: float = DEFAULT_FUNDING_RATE
    funding_period_hours: float = DEFAULT_FUNDING_PERIOD_HOURS

    @classmethod
    def from_settings(cls, settings: RateSettings) -> RateDefaults:
        return cls(
            maintenance_rate=settings.maintenance_rate,
            open_fee_rate=settings.open_fee_rate,
            close_fee_rate=settings.close_fee_rate,
            funding_rate=settings.funding_rate,
            funding_period_hours=settings.funding_period_hours,
        )

    def merged(self, **overrides: float | None) -> RateDefaults:
        """Return a copy with every non-None override applied.

        Raises:
            TypeError: If an override names a field RateDefaults does not have.
        """
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})


@dataclass(frozen=True)
class ContractParameters:
    """Immutable input to calculate_contract.

    position_type and margin_mode accept their string values and are coerced
    to the enums here, so an unknown value fails at construction with
    ValueError instead of silently taking the short branch mid-formula.
    Numeric fields are not validated: degenerate numbers propagate as
    NaN/Infinity through the result.
    """

    open_price: float
    margin: float
    leverage: float
    position_type: PositionType
    margin_mode: MarginMode = MarginMode.ISOLATED
    maintenance_rate: float = DEFAULT_MAINTENANCE_RATE
    open_fee_rate: float = DEFAULT_OPEN_FEE_RATE
    close_fee_rate: float = DEFAULT_CLOSE_FEE_RATE
    funding_rate: float = DEFAULT_FUNDING_RATE
    funding_period_hours: float = DEFAULT_FUNDING_PERIOD_HOURS

    def __post_init__(self) -> None:
        object.__setattr__(self, "position_type", PositionType(self.position_type))
        object.__setattr__(self, "margin_mode", MarginMode(self.margin_mode))

    @classmethod
    def from_rates(
        cls,
        open_price: float,
        margin: float,
        leverage: float,
        position_type: PositionType | str,
        margin_mode: MarginMode | str = MarginMode.ISOLATED,
        rates: RateDefaults | None = None,
    ) -> ContractParameters:
        """Build parameters taking every rate field from a RateDefaults."""
        rates = rates or RateDefaults()
        return cls(
            open_price=open_price,
            margin=margin,
            leverage=leverage,
            position_type=position_type,  # type: ignore[arg-type]
            margin_mode=margin_mode,  # type: ignore[arg-type]
            maintenance_rate=rates.maintenance_rate,
            open_fee_rate=rates.open_fee_rate,
            close_fee_rate=rates.close_fee_rate,
            funding_rate=rates.funding_rate,
            funding_period_hours=rates.funding_period_hours,
        )


def _field_key(value: Any) -> Any:
    if isinstance(value, float):
        return struct.pack("<d", value)
    return value


class _BitwiseEquality:
    """Field-wise equality and hashing with floats compared by bit pattern.

    Results of degenerate inputs hold NaN, which never equals itself; two
    results computed from equal parameters still compare equal.
    """

    def _key(self) -> tuple:
        return tuple(_field_key(getattr(self, f.name)) for f in fields(self))

    def __eq__(self, other: object) -> bool:
        if other.__class__ is not self.__class__:
            return NotImplemented
        return self._key() == other._key()  # type: ignore[attr-defined]

    def __hash__(self) -> int:
        return hash(self._key())


@dataclass(frozen=True, eq=False)
class ProfitProfile(_BitwiseEquality):
    """Precomputed state for evaluating profit at any later price.

    Holds only what the two price functions need, so a result can be asked
    for profit at many prices without recomputing anything else.
    """

    open_price: float
    margin: float
    position_type: PositionType
    position_size_in_underlying: float
    total_fee_amount: float

    def profit_at_price(self, price: float) -> float:
        """Net profit in quote currency if the position is closed at price."""
        if self.position_type is PositionType.LONG:
            move = price - self.open_price
        else:
            move = self.open_price - price
        return move * self.position_size_in_underlying - self.total_fee_amount

    def profit_percent_at_price(self, price: float) -> float:
        """Net profit at price as a percentage of margin."""
        return ieee_divide(self.profit_at_price(price), self.margin) * 100


@dataclass(frozen=True, eq=False)
class CalculationResult(_BitwiseEquality):
    """Derived metrics for one ContractParameters evaluation."""

    position_size: float
    position_size_in_underlying: float
    liquidation_price: float
    liquidation_price_percent: float
    risk_percentage: float
    max_loss: float
    margin_mode: MarginMode
    open_fee_amount: float
    close_fee_amount: float
    total_fee_amount: float
    funding_fee_per_period: float
    funding_fee_per_day: float
    break_even_price: float
    exact_break_even_price: float
    profit: ProfitProfile = field(repr=False)

    @property
    def max_loss_label(self) -> str:
        return self.margin_mode.max_loss_label

    def profit_at_price(self, price: float) -> float:
        return self.profit.profit_at_price(price)

    def profit_percent_at_price(self, price: float) -> float:
        return self.profit.profit_percent_at_price(price)

    def to_dict(self) -> dict[str, Any]:
        """Scalar fields as a plain dict (the profit profile is left out)."""
        data = asdict(self)
        data.pop("profit")
        data["margin_mode"] = self.margin_mode.value
        data["max_loss_label"] = self.max_loss_label
        return data
