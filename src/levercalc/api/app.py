"""FastAPI application factory for the calculator API."""

from __future__ import annotations

from typing import Any

from fastapi import FastAPI

from levercalc.api import routes
from levercalc.config import AppSettings
from levercalc.market_data.service import MarketDataService


def create_app(
    settings: AppSettings,
    market_data: MarketDataService,
    lifespan: Any = None,
) -> FastAPI:
    """Create and configure the API application.

    Args:
        settings: Application settings; rate defaults and exchange status are
            read from here by the route handlers.
        market_data: Service used for symbol price and rate lookups.
        lifespan: Optional async context manager for startup/shutdown.
            Used by main.py to connect and close the exchange client.

    Returns:
        Configured FastAPI application with routes mounted under /api.
    """
    app = FastAPI(title="Leveraged Contract Calculator", lifespan=lifespan)

    app.state.settings = settings
    app.state.market_data = market_data

    app.include_router(routes.router, prefix="/api")

    return app
