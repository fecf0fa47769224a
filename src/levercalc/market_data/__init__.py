"""Market data layer -- cached price and rate lookups."""

from levercalc.market_data.service import MarketDataService
from levercalc.market_data.ttl_cache import TtlCache

__all__ = ["MarketDataService", "TtlCache"]
