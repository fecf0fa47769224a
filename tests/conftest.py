"""Shared test fixtures for the contract calculator."""

import pytest

from levercalc.calculator import ContractParameters, PositionType
from levercalc.config import (
    ApiSettings,
    AppSettings,
    CacheSettings,
    ExchangeSettings,
    FeeSettings,
    RateSettings,
)


@pytest.fixture
def mock_settings() -> AppSettings:
    """AppSettings with test defaults (dummy API keys, default rates)."""
    return AppSettings(
        log_level="DEBUG",
        exchange=ExchangeSettings(
            api_key="test-api-key",  # type: ignore[arg-type]
            api_secret="test-api-secret",  # type: ignore[arg-type]
        ),
        fees=FeeSettings(),
        rates=RateSettings(),
        cache=CacheSettings(ttl_seconds=60.0),
        api=ApiSettings(),
    )


@pytest.fixture
def long_params() -> ContractParameters:
    """Default example position: 20 USDT margin, 5x long at 60,000."""
    return ContractParameters(
        open_price=60000.0,
        margin=20.0,
        leverage=5.0,
        position_type=PositionType.LONG,
    )


@pytest.fixture
def short_params() -> ContractParameters:
    """Same numbers as long_params, short direction."""
    return ContractParameters(
        open_price=60000.0,
        margin=20.0,
        leverage=5.0,
        position_type=PositionType.SHORT,
    )
