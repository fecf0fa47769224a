"""Custom exceptions for the contract calculator service.

The calculator core never raises on numeric input; these cover the
market-data collaborators and the HTTP layer that feed it.
"""


class LevercalcError(Exception):
    """Base exception for all levercalc errors."""


class UnknownSymbolError(LevercalcError):
    """Raised when a symbol cannot be mapped to a linear perpetual market."""


class MarketDataError(LevercalcError):
    """Raised when the exchange request for market data fails."""


class PriceUnavailableError(MarketDataError):
    """Raised when no usable price can be obtained for a symbol."""


class RateLookupError(MarketDataError):
    """Raised when fee or maintenance-margin rates cannot be looked up."""
