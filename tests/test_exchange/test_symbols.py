"""Tests for the symbol catalog and validation."""

import pytest

from levercalc.exceptions import UnknownSymbolError
from levercalc.exchange.symbols import (
    MAIN_SYMBOLS,
    display_name,
    get_main_symbols,
    split_symbol,
    to_unified_symbol,
)


class TestCatalog:
    def test_main_symbols(self) -> None:
        symbols = get_main_symbols()
        assert len(symbols) == 10
        assert symbols[0] == "BTCUSDT"
        assert symbols == list(MAIN_SYMBOLS)

    def test_display_name(self) -> None:
        assert display_name("ETHUSDT") == "Ethereum (ETH)"
        assert display_name("PEPEUSDT") == "PEPEUSDT"


class TestSplitSymbol:
    def test_usdt(self) -> None:
        assert split_symbol("BTCUSDT") == ("BTC", "USDT")

    def test_usdc(self) -> None:
        assert split_symbol("ETHUSDC") == ("ETH", "USDC")

    def test_normalizes_case_and_whitespace(self) -> None:
        assert split_symbol("  solusdt ") == ("SOL", "USDT")

    @pytest.mark.parametrize("symbol", ["USDT", "BTCUSD", "BTC/USDT", "", "BTC-USDT"])
    def test_rejects(self, symbol: str) -> None:
        with pytest.raises(UnknownSymbolError):
            split_symbol(symbol)


class TestToUnifiedSymbol:
    def test_linear_perpetual_form(self) -> None:
        assert to_unified_symbol("dogeusdt") == "DOGE/USDT:USDT"
        assert to_unified_symbol("ETHUSDC") == "ETH/USDC:USDC"

    def test_unknown(self) -> None:
        with pytest.raises(UnknownSymbolError):
            to_unified_symbol("BTC/USDT:USDT")
