"""Tests for BinanceFuturesClient.

All tests use mocked ccxt exchange methods to avoid real API calls.
"""

from unittest.mock import AsyncMock

import ccxt
import pytest

from levercalc.config import ExchangeSettings, FeeSettings
from levercalc.exceptions import PriceUnavailableError, RateLookupError, UnknownSymbolError
from levercalc.exchange.binance_client import BinanceFuturesClient
from levercalc.exchange.types import CommissionRates


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

MOCK_TIERS = {
    "BTC/USDT:USDT": [
        {
            "tier": 2.0,
            "currency": "USDT",
            "minNotional": 50000.0,
            "maxNotional": 250000.0,
            "maintenanceMarginRate": 0.005,
            "maxLeverage": 100.0,
            "info": {},
        },
        {
            "tier": 1.0,
            "currency": "USDT",
            "minNotional": 0.0,
            "maxNotional": 50000.0,
            "maintenanceMarginRate": 0.004,
            "maxLeverage": 125.0,
            "info": {},
        },
    ]
}


@pytest.fixture
def exchange_settings() -> ExchangeSettings:
    """Exchange settings for testing."""
    return ExchangeSettings(
        api_key="test-key",  # type: ignore[arg-type]
        api_secret="test-secret",  # type: ignore[arg-type]
    )


@pytest.fixture
def public_settings() -> ExchangeSettings:
    """Exchange settings without credentials."""
    return ExchangeSettings(api_key="", api_secret="")  # type: ignore[arg-type]


@pytest.fixture
def fee_settings() -> FeeSettings:
    return FeeSettings(maker=0.0002, taker=0.0004)


@pytest.fixture
def binance_client(
    exchange_settings: ExchangeSettings, fee_settings: FeeSettings
) -> BinanceFuturesClient:
    return BinanceFuturesClient(exchange_settings, fee_settings)


@pytest.fixture
def public_client(
    public_settings: ExchangeSettings, fee_settings: FeeSettings
) -> BinanceFuturesClient:
    return BinanceFuturesClient(public_settings, fee_settings)


# ---------------------------------------------------------------------------
# Initialization and lifecycle
# ---------------------------------------------------------------------------


class TestBinanceClientInit:
    def test_rate_limit_enabled(self, binance_client: BinanceFuturesClient) -> None:
        assert binance_client.exchange.enableRateLimit is True

    def test_credentials_passed_to_ccxt(self, binance_client: BinanceFuturesClient) -> None:
        assert binance_client.exchange.apiKey == "test-key"
        assert binance_client.exchange.secret == "test-secret"

    def test_is_authenticated(
        self, binance_client: BinanceFuturesClient, public_client: BinanceFuturesClient
    ) -> None:
        assert binance_client.is_authenticated is True
        assert public_client.is_authenticated is False


class TestLifecycle:
    @pytest.mark.asyncio
    async def test_connect_loads_markets(self, binance_client: BinanceFuturesClient) -> None:
        binance_client._exchange.load_markets = AsyncMock(
            return_value={"BTC/USDT:USDT": {"id": "BTCUSDT"}}
        )
        await binance_client.connect()
        binance_client._exchange.load_markets.assert_awaited_once()
        assert len(binance_client._markets) == 1

    @pytest.mark.asyncio
    async def test_close_calls_exchange_close(
        self, binance_client: BinanceFuturesClient
    ) -> None:
        binance_client._exchange.close = AsyncMock()
        await binance_client.close()
        binance_client._exchange.close.assert_awaited_once()


# ---------------------------------------------------------------------------
# Price
# ---------------------------------------------------------------------------


class TestFetchPrice:
    @pytest.mark.asyncio
    async def test_uses_unified_symbol(self, binance_client: BinanceFuturesClient) -> None:
        binance_client._exchange.fetch_ticker = AsyncMock(
            return_value={"symbol": "BTC/USDT:USDT", "last": 60000.1, "close": 60000.1}
        )
        assert await binance_client.fetch_price("btcusdt") == pytest.approx(60000.1)
        binance_client._exchange.fetch_ticker.assert_awaited_once_with("BTC/USDT:USDT")

    @pytest.mark.asyncio
    async def test_falls_back_to_close(self, binance_client: BinanceFuturesClient) -> None:
        binance_client._exchange.fetch_ticker = AsyncMock(
            return_value={"last": None, "close": 3000.0}
        )
        assert await binance_client.fetch_price("ETHUSDT") == 3000.0

    @pytest.mark.asyncio
    async def test_exchange_error_wrapped(self, binance_client: BinanceFuturesClient) -> None:
        binance_client._exchange.fetch_ticker = AsyncMock(
            side_effect=ccxt.NetworkError("timeout")
        )
        with pytest.raises(PriceUnavailableError, match="timeout"):
            await binance_client.fetch_price("BTCUSDT")

    @pytest.mark.asyncio
    async def test_missing_price(self, binance_client: BinanceFuturesClient) -> None:
        binance_client._exchange.fetch_ticker = AsyncMock(
            return_value={"last": None, "close": None}
        )
        with pytest.raises(PriceUnavailableError):
            await binance_client.fetch_price("BTCUSDT")

    @pytest.mark.asyncio
    async def test_non_positive_price(self, binance_client: BinanceFuturesClient) -> None:
        binance_client._exchange.fetch_ticker = AsyncMock(return_value={"last": -1.0})
        with pytest.raises(PriceUnavailableError):
            await binance_client.fetch_price("BTCUSDT")

    @pytest.mark.asyncio
    async def test_unknown_symbol_makes_no_request(
        self, binance_client: BinanceFuturesClient
    ) -> None:
        binance_client._exchange.fetch_ticker = AsyncMock()
        with pytest.raises(UnknownSymbolError):
            await binance_client.fetch_price("BTC-PERP")
        binance_client._exchange.fetch_ticker.assert_not_awaited()


# ---------------------------------------------------------------------------
# Commission rates
# ---------------------------------------------------------------------------


class TestFetchCommissionRates:
    @pytest.mark.asyncio
    async def test_account_rates(self, binance_client: BinanceFuturesClient) -> None:
        binance_client._exchange.fetch_trading_fee = AsyncMock(
            return_value={"symbol": "BTC/USDT:USDT", "maker": 0.0001, "taker": 0.0003}
        )
        rates = await binance_client.fetch_commission_rates("BTCUSDT")
        assert rates == CommissionRates(maker=0.0001, taker=0.0003)
        binance_client._exchange.fetch_trading_fee.assert_awaited_once_with("BTC/USDT:USDT")

    @pytest.mark.asyncio
    async def test_defaults_without_credentials(
        self, public_client: BinanceFuturesClient
    ) -> None:
        public_client._exchange.fetch_trading_fee = AsyncMock()
        rates = await public_client.fetch_commission_rates("ETHUSDT")
        assert rates == CommissionRates(maker=0.0002, taker=0.0004, is_default=True)
        public_client._exchange.fetch_trading_fee.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_defaults_on_failure(self, binance_client: BinanceFuturesClient) -> None:
        binance_client._exchange.fetch_trading_fee = AsyncMock(
            side_effect=ccxt.AuthenticationError("invalid key")
        )
        rates = await binance_client.fetch_commission_rates("BTCUSDT")
        assert rates.is_default is True
        assert rates.taker == 0.0004


# ---------------------------------------------------------------------------
# Leverage brackets
# ---------------------------------------------------------------------------


class TestFetchLeverageBrackets:
    @pytest.mark.asyncio
    async def test_maps_and_sorts_tiers(self, binance_client: BinanceFuturesClient) -> None:
        binance_client._exchange.fetch_leverage_tiers = AsyncMock(return_value=MOCK_TIERS)
        brackets = await binance_client.fetch_leverage_brackets("BTCUSDT")
        assert [b.bracket for b in brackets] == [1, 2]
        assert brackets[0].maint_margin_ratio == 0.004
        assert brackets[0].initial_leverage == 125.0
        assert brackets[1].notional_floor == 50000.0
        assert brackets[1].notional_cap == 250000.0
        binance_client._exchange.fetch_leverage_tiers.assert_awaited_once_with(
            ["BTC/USDT:USDT"]
        )

    @pytest.mark.asyncio
    async def test_requires_credentials(self, public_client: BinanceFuturesClient) -> None:
        public_client._exchange.fetch_leverage_tiers = AsyncMock()
        with pytest.raises(RateLookupError):
            await public_client.fetch_leverage_brackets("BTCUSDT")
        public_client._exchange.fetch_leverage_tiers.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_exchange_error_wrapped(self, binance_client: BinanceFuturesClient) -> None:
        binance_client._exchange.fetch_leverage_tiers = AsyncMock(
            side_effect=ccxt.ExchangeError("bad request")
        )
        with pytest.raises(RateLookupError):
            await binance_client.fetch_leverage_brackets("BTCUSDT")

    @pytest.mark.asyncio
    async def test_symbol_missing_from_response(
        self, binance_client: BinanceFuturesClient
    ) -> None:
        binance_client._exchange.fetch_leverage_tiers = AsyncMock(return_value={})
        with pytest.raises(RateLookupError):
            await binance_client.fetch_leverage_brackets("BTCUSDT")

    @pytest.mark.asyncio
    async def test_malformed_tier(self, binance_client: BinanceFuturesClient) -> None:
        binance_client._exchange.fetch_leverage_tiers = AsyncMock(
            return_value={"BTC/USDT:USDT": [{"tier": 1}]}
        )
        with pytest.raises(RateLookupError):
            await binance_client.fetch_leverage_brackets("BTCUSDT")
