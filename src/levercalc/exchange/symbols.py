"""Symbol catalog and Binance USD-M symbol validation."""

from levercalc.exceptions import UnknownSymbolError

MAIN_SYMBOLS: dict[str, str] = {
    "BTCUSDT": "Bitcoin (BTC)",
    "ETHUSDT": "Ethereum (ETH)",
    "BNBUSDT": "Binance Coin (BNB)",
    "XRPUSDT": "Ripple (XRP)",
    "ADAUSDT": "Cardano (ADA)",
    "DOGEUSDT": "Dogecoin (DOGE)",
    "SOLUSDT": "Solana (SOL)",
    "DOTUSDT": "Polkadot (DOT)",
    "LTCUSDT": "Litecoin (LTC)",
    "LINKUSDT": "Chainlink (LINK)",
}

# Settlement assets of USD-M linear perpetuals
QUOTE_ASSETS = ("USDT", "USDC")


def get_main_symbols() -> list[str]:
    return list(MAIN_SYMBOLS)


def display_name(symbol: str) -> str:
    """Human-readable name for a symbol id, or the id itself if unknown."""
    return MAIN_SYMBOLS.get(symbol, symbol)


def normalize_symbol(symbol: str) -> str:
    return symbol.strip().upper()


def split_symbol(symbol: str) -> tuple[str, str]:
    """Split a futures id into (base, quote), e.g. "BTCUSDT" -> ("BTC", "USDT").

    Raises:
        UnknownSymbolError: If the id is not alphanumeric, has no recognised
            quote asset, or has an empty base.
    """
    symbol = normalize_symbol(symbol)
    if symbol.isalnum():
        for quote in QUOTE_ASSETS:
            if symbol.endswith(quote) and len(symbol) > len(quote):
                return symbol[: -len(quote)], quote
    raise UnknownSymbolError(f"Unknown USD-M futures symbol {symbol!r}")


def to_unified_symbol(symbol: str) -> str:
    """Map a futures id to ccxt's linear perpetual form, "BTCUSDT" -> "BTC/USDT:USDT".

    Raises:
        UnknownSymbolError: If the id cannot be split into base and quote.
    """
    base, quote = split_symbol(symbol)
    return f"{base}/{quote}:{quote}"
