"""Entry point for the contract calculator API.

Wiring order (in build_app):
1. AppSettings (configuration)
2. Logging setup
3. BinanceFuturesClient (ccxt async)
4. MarketDataService (cached lookups)
5. FastAPI app with a lifespan that connects/closes the exchange client
"""

import asyncio
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from levercalc.api.app import create_app
from levercalc.config import AppSettings
from levercalc.exchange.binance_client import BinanceFuturesClient
from levercalc.logging import get_logger, setup_logging
from levercalc.market_data.service import MarketDataService


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Connect the exchange client on startup and close it on shutdown.

    A failed connect is logged and the API still starts: the calculator
    endpoints need no market data, and lookups retry on each request.
    """
    logger = get_logger("levercalc.main")
    client = app.state.market_data.client

    try:
        await client.connect()
    except Exception:
        logger.warning("exchange_connect_failed", exc_info=True)

    logger.info("lifespan_started", authenticated=client.is_authenticated)

    try:
        yield
    finally:
        await client.close()
        logger.info("levercalc_stopped")


def build_app(settings: AppSettings) -> FastAPI:
    """Build the exchange client, market data service and API app."""
    logger = get_logger("levercalc.main")

    client = BinanceFuturesClient(settings.exchange, settings.fees)
    if not client.is_authenticated:
        logger.warning(
            "no_api_keys_configured",
            note="Prices work via public endpoints. Commission rates fall back "
            "to configured defaults and leverage brackets are unavailable.",
        )

    market_data = MarketDataService(client, settings.rates, settings.cache)
    return create_app(settings, market_data, lifespan=lifespan)


async def run() -> None:
    """Run the API server in the current event loop."""
    settings = AppSettings()
    setup_logging(settings.log_level, settings.log_format)
    logger = get_logger("levercalc.main")

    app = build_app(settings)

    logger.info("starting_api", host=settings.api.host, port=settings.api.port)
    config = uvicorn.Config(
        app,
        host=settings.api.host,
        port=settings.api.port,
        log_level="warning",  # structlog handles application logging
    )
    server = uvicorn.Server(config)
    await server.serve()


def main() -> None:
    """Synchronous entry point."""
    asyncio.run(run())


if __name__ == "__main__":
    main()
