"""Binance USD-M futures market-data client via ccxt async.

Wraps ccxt.async_support.binanceusdm with market loading, symbol mapping to
ccxt's unified linear-perpetual form, default-fee fallback and async cleanup.
The ticker is public; commission rates and leverage brackets need API keys.
"""

import ccxt
import ccxt.async_support as ccxt_async

from levercalc.config import ExchangeSettings, FeeSettings
from levercalc.exceptions import PriceUnavailableError, RateLookupError
from levercalc.exchange.client import MarketDataClient
from levercalc.exchange.symbols import to_unified_symbol
from levercalc.exchange.types import CommissionRates, LeverageBracket
from levercalc.logging import get_logger

logger = get_logger(__name__)


class BinanceFuturesClient(MarketDataClient):
    """Concrete Binance USD-M client using ccxt async."""

    def __init__(self, settings: ExchangeSettings, fee_settings: FeeSettings) -> None:
        self._settings = settings
        self._fee_settings = fee_settings

        config: dict = {
            "apiKey": settings.api_key.get_secret_value(),
            "secret": settings.api_secret.get_secret_value(),
            "enableRateLimit": True,
        }
        self._exchange = ccxt_async.binanceusdm(config)
        self._markets: dict = {}

    @property
    def exchange(self) -> ccxt_async.binanceusdm:
        """Access the underlying ccxt exchange instance."""
        return self._exchange

    @property
    def is_authenticated(self) -> bool:
        return self._settings.has_credentials

    async def connect(self) -> None:
        """Initialize connection by loading markets."""
        logger.info("connecting_to_binance", authenticated=self.is_authenticated)
        self._markets = await self._exchange.load_markets()
        logger.info("binance_connected", market_count=len(self._markets))

    async def close(self) -> None:
        """Clean up ccxt async resources. Must be called to avoid session leaks."""
        await self._exchange.close()
        logger.info("binance_connection_closed")

    async def fetch_price(self, symbol: str) -> float:
        unified = to_unified_symbol(symbol)
        try:
            ticker = await self._exchange.fetch_ticker(unified)
        except ccxt.BaseError as e:
            raise PriceUnavailableError(f"Failed to fetch price for {symbol}: {e}") from e

        price = ticker.get("last") or ticker.get("close")
        if price is None or price <= 0:
            raise PriceUnavailableError(f"No usable price for {symbol}: {price!r}")

        logger.debug("price_fetched", symbol=unified, price=price)
        return float(price)

    def _default_commission(self) -> CommissionRates:
        return CommissionRates(
            maker=self._fee_settings.maker,
            taker=self._fee_settings.taker,
            is_default=True,
        )

    async def fetch_commission_rates(self, symbol: str) -> CommissionRates:
        """Account commission rates, or the configured fallback.

        Without credentials the fallback is returned directly. An
        authenticated request that fails also degrades to the fallback
        rather than failing the calculation.
        """
        unified = to_unified_symbol(symbol)
        if not self.is_authenticated:
            logger.debug("commission_rates_default", symbol=unified, reason="no_credentials")
            return self._default_commission()

        try:
            fee = await self._exchange.fetch_trading_fee(unified)
            rates = CommissionRates(maker=float(fee["maker"]), taker=float(fee["taker"]))
        except (ccxt.BaseError, KeyError, TypeError, ValueError):
            logger.warning("commission_rates_fetch_failed", symbol=unified, exc_info=True)
            return self._default_commission()

        logger.debug("commission_rates_fetched", symbol=unified, taker=rates.taker)
        return rates

    async def fetch_leverage_brackets(self, symbol: str) -> list[LeverageBracket]:
        """Fetch the notional brackets for a symbol, ordered by bracket number."""
        unified = to_unified_symbol(symbol)
        if not self.is_authenticated:
            raise RateLookupError(f"Leverage brackets for {symbol} require API credentials")

        try:
            tiers = await self._exchange.fetch_leverage_tiers([unified])
            brackets = [
                LeverageBracket(
                    bracket=int(tier["tier"]),
                    initial_leverage=float(tier["maxLeverage"]),
                    notional_floor=float(tier["minNotional"]),
                    notional_cap=float(tier["maxNotional"]),
                    maint_margin_ratio=float(tier["maintenanceMarginRate"]),
                )
                for tier in tiers.get(unified) or []
            ]
        except (ccxt.BaseError, KeyError, TypeError, ValueError) as e:
            raise RateLookupError(
                f"Failed to fetch leverage brackets for {symbol}: {e}"
            ) from e

        if not brackets:
            raise RateLookupError(f"No leverage brackets returned for {symbol}")

        brackets.sort(key=lambda b: b.bracket)
        logger.debug("leverage_brackets_fetched", symbol=unified, count=len(brackets))
        return brackets
