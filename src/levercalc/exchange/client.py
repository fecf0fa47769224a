"""Abstract market-data client interface.

The market data service depends only on this interface, keeping
Binance-specific details isolated in the concrete implementation.
"""

from abc import ABC, abstractmethod

from levercalc.exchange.types import CommissionRates, LeverageBracket


class MarketDataClient(ABC):
    """Abstract base class for futures market-data clients."""

    @abstractmethod
    async def connect(self) -> None:
        """Open the connection and check the API is reachable."""
        ...

    @abstractmethod
    async def close(self) -> None:
        """Release the underlying HTTP connection pool."""
        ...

    @property
    @abstractmethod
    def is_authenticated(self) -> bool:
        """True when private endpoints can be called."""
        ...

    @abstractmethod
    async def fetch_price(self, symbol: str) -> float:
        """Return the last traded price for an exchange symbol id (e.g. "BTCUSDT").

        Raises:
            PriceUnavailableError: If the request fails or returns no positive price.
        """
        ...

    @abstractmethod
    async def fetch_commission_rates(self, symbol: str) -> CommissionRates:
        """Return maker/taker rates, falling back to configured defaults."""
        ...

    @abstractmethod
    async def fetch_leverage_brackets(self, symbol: str) -> list[LeverageBracket]:
        """Return the leverage/maintenance-margin brackets for a symbol.

        Raises:
            RateLookupError: If the brackets cannot be fetched.
        """
        ...
