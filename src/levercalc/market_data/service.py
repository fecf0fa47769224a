"""Market data service -- cached price and rate lookups feeding the calculator.

Each lookup is cached for CacheSettings.ttl_seconds. When a refresh fails, the
last cached value is served (even if expired) and the failure is logged; with
nothing cached the error propagates to the caller.
"""

from collections.abc import Awaitable, Callable
from typing import Any

from levercalc.calculator.models import (
    ContractParameters,
    MarginMode,
    PositionType,
    RateDefaults,
)
from levercalc.config import CacheSettings, RateSettings
from levercalc.exceptions import MarketDataError, RateLookupError
from levercalc.exchange.client import MarketDataClient
from levercalc.exchange.symbols import normalize_symbol
from levercalc.exchange.types import CommissionRates, LeverageBracket, select_bracket
from levercalc.logging import get_logger
from levercalc.market_data.ttl_cache import TtlCache

logger = get_logger(__name__)


class MarketDataService:
    """Resolves symbol -> price / fee rates / maintenance rate, with caching.

    Args:
        client: Exchange market-data client.
        rate_settings: Calculator rate defaults used by build_parameters.
        cache_settings: Cache TTL configuration.
        cache: Optional cache instance (a fresh TtlCache by default).
    """

    def __init__(
        self,
        client: MarketDataClient,
        rate_settings: RateSettings,
        cache_settings: CacheSettings,
        cache: TtlCache | None = None,
    ) -> None:
        self._client = client
        self._rate_settings = rate_settings
        self._ttl = cache_settings.ttl_seconds
        self._cache = cache or TtlCache()

    @property
    def client(self) -> MarketDataClient:
        return self._client

    async def _cached(self, key: str, fetch: Callable[[], Awaitable[Any]]) -> Any:
        cached = await self._cache.get(key, self._ttl)
        if cached is not None:
            return cached

        try:
            value = await fetch()
        except MarketDataError:
            stale = await self._cache.get_stale(key)
            if stale is None:
                raise
            logger.warning(
                "serving_stale_market_data",
                key=key,
                age=await self._cache.age(key),
                exc_info=True,
            )
            return stale

        await self._cache.set(key, value)
        return value

    async def get_price(self, symbol: str) -> float:
        symbol = normalize_symbol(symbol)
        return await self._cached(
            f"price:{symbol}", lambda: self._client.fetch_price(symbol)
        )

    async def get_commission_rates(self, symbol: str) -> CommissionRates:
        symbol = normalize_symbol(symbol)
        return await self._cached(
            f"fees:{symbol}", lambda: self._client.fetch_commission_rates(symbol)
        )

    async def get_leverage_brackets(self, symbol: str) -> list[LeverageBracket]:
        symbol = normalize_symbol(symbol)
        return await self._cached(
            f"brackets:{symbol}", lambda: self._client.fetch_leverage_brackets(symbol)
        )

    async def get_maintenance_rate(
        self, symbol: str, notional: float | None = None
    ) -> float:
        """Maintenance margin ratio of the bracket that applies to notional."""
        brackets = await self.get_leverage_brackets(symbol)
        return select_bracket(brackets, notional).maint_margin_ratio

    async def clear_cache(self) -> None:
        await self._cache.clear()
        logger.info("market_data_cache_cleared")

    async def build_parameters(
        self,
        symbol: str,
        margin: float,
        leverage: float,
        position_type: PositionType | str,
        margin_mode: MarginMode | str = MarginMode.ISOLATED,
        use_exchange_rates: bool = False,
        open_price: float | None = None,
        **rate_overrides: float | None,
    ) -> ContractParameters:
        """Assemble ContractParameters for a symbol.

        Precedence for each rate, lowest to highest: RateSettings defaults,
        exchange lookups (when use_exchange_rates), explicit rate_overrides.
        Exchange fees use the taker rate for both legs. A failed bracket
        lookup keeps the default maintenance rate.

        Args:
            symbol: Binance futures id, e.g. "BTCUSDT".
            margin: Margin in quote currency.
            leverage: Leverage multiple.
            position_type: "long" or "short".
            margin_mode: "isolated" or "cross".
            use_exchange_rates: Look up commission and maintenance rates.
            open_price: Explicit entry price; the current price is fetched if None.
            **rate_overrides: Any RateDefaults field; None values are ignored.

        Raises:
            PriceUnavailableError: If open_price is None and no price is available.
            UnknownSymbolError: If the symbol cannot be mapped.
            TypeError: If rate_overrides names an unknown rate field.
        """
        rates = RateDefaults.from_settings(self._rate_settings)

        if open_price is None:
            open_price = await self.get_price(symbol)

        if use_exchange_rates:
            commission = await self.get_commission_rates(symbol)
            try:
                maintenance_rate: float | None = await self.get_maintenance_rate(
                    symbol, notional=margin * leverage
                )
            except RateLookupError:
                logger.warning(
                    "maintenance_rate_lookup_failed", symbol=symbol, exc_info=True
                )
                maintenance_rate = None
            rates = rates.merged(
                open_fee_rate=commission.taker,
                close_fee_rate=commission.taker,
                maintenance_rate=maintenance_rate,
            )

        rates = rates.merged(**rate_overrides)
        logger.debug(
            "parameters_built",
            symbol=symbol,
            open_price=open_price,
            use_exchange_rates=use_exchange_rates,
        )
        return ContractParameters.from_rates(
            open_price=open_price,
            margin=margin,
            leverage=leverage,
            position_type=position_type,
            margin_mode=margin_mode,
            rates=rates,
        )
