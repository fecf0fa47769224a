"""Tests for compare_positions."""

import math

import pytest

from levercalc.calculator import ContractParameters, PositionType, compare_positions


@pytest.fixture
def default_positions() -> list[tuple[str, ContractParameters]]:
    return [
        (
            "Position 1",
            ContractParameters(
                open_price=60000.0, margin=20.0, leverage=5.0, position_type=PositionType.LONG
            ),
        ),
        (
            "Position 2",
            ContractParameters(
                open_price=60000.0, margin=50.0, leverage=3.0, position_type=PositionType.LONG
            ),
        ),
    ]


class TestComparePositions:
    def test_entry_profits(self, default_positions) -> None:
        comparison = compare_positions(default_positions, 62000.0)
        first, second = comparison.entries
        assert first.name == "Position 1"
        assert first.profit == pytest.approx(3.2933333)
        # 2000 * (150 / 60000) - 0.06
        assert second.profit == pytest.approx(4.94)
        assert second.profit_percent == pytest.approx(9.88)

    def test_totals(self, default_positions) -> None:
        comparison = compare_positions(default_positions, 62000.0)
        assert comparison.current_price == 62000.0
        assert comparison.total_margin == pytest.approx(70.0)
        assert comparison.total_position_size == pytest.approx(250.0)
        assert comparison.total_profit == pytest.approx(8.2333333)
        assert comparison.total_profit_percent == pytest.approx(11.7619048)

    def test_average_liquidation_price(self, default_positions) -> None:
        comparison = compare_positions(default_positions, 62000.0)
        # (48300 + 40300) / 2
        assert comparison.average_liquidation_price == pytest.approx(44300.0)

    def test_mixed_directions(self, default_positions) -> None:
        name, params = default_positions[1]
        short = ContractParameters(
            open_price=params.open_price,
            margin=params.margin,
            leverage=params.leverage,
            position_type=PositionType.SHORT,
        )
        comparison = compare_positions([default_positions[0], (name, short)], 62000.0)
        assert comparison.entries[1].profit < 0

    def test_empty(self) -> None:
        comparison = compare_positions([], 62000.0)
        assert comparison.entries == []
        assert comparison.total_margin == 0.0
        assert comparison.total_profit == 0.0
        assert comparison.total_profit_percent == 0.0
        assert comparison.average_liquidation_price == 0.0

    def test_zero_total_margin(self) -> None:
        params = ContractParameters(
            open_price=100.0, margin=0.0, leverage=2.0, position_type=PositionType.LONG
        )
        comparison = compare_positions([("empty", params)], 110.0)
        assert comparison.total_profit_percent == 0.0
        assert math.isnan(comparison.entries[0].profit_percent)
