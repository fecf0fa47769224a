"""Exchange client layer -- Binance USD-M futures market data via ccxt."""

from levercalc.exchange.binance_client import BinanceFuturesClient
from levercalc.exchange.client import MarketDataClient
from levercalc.exchange.symbols import (
    display_name,
    get_main_symbols,
    split_symbol,
    to_unified_symbol,
)
from levercalc.exchange.types import CommissionRates, LeverageBracket, select_bracket

__all__ = [
    "BinanceFuturesClient",
    "CommissionRates",
    "LeverageBracket",
    "MarketDataClient",
    "display_name",
    "get_main_symbols",
    "select_bracket",
    "split_symbol",
    "to_unified_symbol",
]
