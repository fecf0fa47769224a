"""JSON API endpoints for the contract calculator, symbol catalog and market data."""

from __future__ import annotations

import math
from typing import Any

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from levercalc.calculator import (
    CalculationResult,
    ContractParameters,
    LeverageSolution,
    RateDefaults,
    calculate_contract,
    compare_positions,
    solve_leverage_from_liquidation_price,
    solve_leverage_from_risk_percentage,
)
from levercalc.exceptions import MarketDataError, UnknownSymbolError
from levercalc.exchange.symbols import display_name, get_main_symbols
from levercalc.exchange.types import select_bracket
from levercalc.logging import get_logger

logger = get_logger(__name__)

router = APIRouter()

RATE_FIELDS = (
    "maintenance_rate",
    "open_fee_rate",
    "close_fee_rate",
    "funding_rate",
    "funding_period_hours",
)


def _finite_or_none(obj: Any) -> Any:
    """Recursively replace NaN/Infinity floats with None (JSON has no encoding for them)."""
    if isinstance(obj, float):
        return obj if math.isfinite(obj) else None
    if isinstance(obj, dict):
        return {k: _finite_or_none(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_finite_or_none(item) for item in obj]
    return obj


def _result_payload(result: CalculationResult, target_price: float | None) -> dict:
    """Serialize a result; non-finite fields become null and are listed in non_finite."""
    data = result.to_dict()
    if target_price is not None:
        data["target_price"] = target_price
        data["target_profit"] = result.profit_at_price(target_price)
        data["target_profit_percent"] = result.profit_percent_at_price(target_price)
    data["non_finite"] = sorted(
        k for k, v in data.items() if isinstance(v, float) and not math.isfinite(v)
    )
    return _finite_or_none(data)


def _solution_payload(solution: LeverageSolution) -> dict:
    return _finite_or_none({
        "leverage": solution.leverage,
        "raw_leverage": solution.raw_leverage,
        "degenerate": solution.degenerate,
    })


def _error(message: str, status_code: int) -> JSONResponse:
    return JSONResponse(content={"error": message}, status_code=status_code)


async def _read_body(request: Request) -> dict | None:
    try:
        body = await request.json()
    except Exception:
        return None
    return body if isinstance(body, dict) else None


def _missing(body: dict, fields: tuple[str, ...]) -> str | None:
    for field in fields:
        if body.get(field) is None:
            return field
    return None


def _optional_float(body: dict, field: str) -> float | None:
    value = body.get(field)
    return None if value is None else float(value)


def _rate_overrides(body: dict) -> dict[str, float | None]:
    return {field: _optional_float(body, field) for field in RATE_FIELDS}


def _parse_parameters(body: dict, defaults: RateDefaults) -> ContractParameters:
    """Build ContractParameters from a request body.

    Raises:
        ValueError: On a non-numeric value or an unknown enum value.
        TypeError: On a value of the wrong JSON type.
    """
    return ContractParameters.from_rates(
        open_price=float(body["open_price"]),
        margin=float(body["margin"]),
        leverage=float(body["leverage"]),
        position_type=body["position_type"],
        margin_mode=body.get("margin_mode", "isolated"),
        rates=defaults.merged(**_rate_overrides(body)),
    )


def _rate_defaults(request: Request) -> RateDefaults:
    return RateDefaults.from_settings(request.app.state.settings.rates)


POSITION_FIELDS = ("open_price", "margin", "leverage", "position_type")


# ---------------------------------------------------------------------------
# Catalog and market data
# ---------------------------------------------------------------------------


@router.get("/symbols")
async def get_symbols() -> JSONResponse:
    """Main symbols with display names."""
    return JSONResponse(content=[
        {"symbol": symbol, "display_name": display_name(symbol)}
        for symbol in get_main_symbols()
    ])


@router.get("/status")
async def get_status(request: Request) -> JSONResponse:
    """Exchange configuration status (never exposes the credentials themselves)."""
    exchange = request.app.state.settings.exchange
    return JSONResponse(content={
        "configured": exchange.has_credentials,
        "has_api_key": bool(exchange.api_key.get_secret_value()),
        "has_api_secret": bool(exchange.api_secret.get_secret_value()),
    })


@router.get("/price/{symbol}")
async def get_price(request: Request, symbol: str) -> JSONResponse:
    market_data = request.app.state.market_data
    try:
        price = await market_data.get_price(symbol)
    except UnknownSymbolError as e:
        return _error(str(e), 404)
    except MarketDataError as e:
        logger.error("price_request_failed", symbol=symbol, error=str(e))
        return _error(f"Failed to fetch price for {symbol}", 502)
    return JSONResponse(content={"symbol": symbol.upper(), "price": price})


@router.get("/fees/{symbol}")
async def get_fees(request: Request, symbol: str) -> JSONResponse:
    market_data = request.app.state.market_data
    try:
        rates = await market_data.get_commission_rates(symbol)
    except UnknownSymbolError as e:
        return _error(str(e), 404)
    except MarketDataError as e:
        logger.error("fees_request_failed", symbol=symbol, error=str(e))
        return _error("Failed to fetch commission rates", 502)
    return JSONResponse(content={
        "maker": rates.maker,
        "taker": rates.taker,
        "is_default": rates.is_default,
    })


@router.get("/leverage-brackets/{symbol}")
async def get_leverage_brackets(
    request: Request, symbol: str, notional: float | None = None
) -> JSONResponse:
    """Brackets for a symbol plus the one that applies to notional.

    Without notional the selected bracket is the first (smallest-notional)
    tier, the one a new small position falls into, not the highest tier.
    """
    market_data = request.app.state.market_data
    try:
        brackets = await market_data.get_leverage_brackets(symbol)
    except UnknownSymbolError as e:
        return _error(str(e), 404)
    except MarketDataError as e:
        logger.error("brackets_request_failed", symbol=symbol, error=str(e))
        return _error(f"Failed to fetch leverage brackets for {symbol}", 502)

    selected = select_bracket(brackets, notional)
    return JSONResponse(content=_finite_or_none({
        "maint_margin_ratio": selected.maint_margin_ratio,
        "initial_leverage": selected.initial_leverage,
        "bracket": selected.bracket,
        "brackets": [
            {
                "bracket": b.bracket,
                "initial_leverage": b.initial_leverage,
                "notional_floor": b.notional_floor,
                "notional_cap": b.notional_cap,
                "maint_margin_ratio": b.maint_margin_ratio,
            }
            for b in brackets
        ],
    }))


# ---------------------------------------------------------------------------
# Calculator
# ---------------------------------------------------------------------------


@router.post("/calculate")
async def calculate(request: Request) -> JSONResponse:
    """Compute position metrics from explicit parameters.

    Body: open_price, margin, leverage, position_type, optional margin_mode,
    rate fields and target_price.
    """
    body = await _read_body(request)
    if body is None:
        return _error("Invalid JSON body", 400)
    missing = _missing(body, POSITION_FIELDS)
    if missing:
        return _error(f"Missing required field: {missing}", 400)

    try:
        params = _parse_parameters(body, _rate_defaults(request))
        target_price = _optional_float(body, "target_price")
    except (TypeError, ValueError) as e:
        return _error(str(e), 400)

    result = calculate_contract(params)
    return JSONResponse(content=_result_payload(result, target_price))


@router.post("/calculate/symbol")
async def calculate_for_symbol(request: Request) -> JSONResponse:
    """Compute position metrics using the symbol's current price.

    Body: symbol, margin, leverage, position_type, optional margin_mode,
    use_exchange_rates, open_price, rate fields and target_price.
    """
    body = await _read_body(request)
    if body is None:
        return _error("Invalid JSON body", 400)
    missing = _missing(body, ("symbol", "margin", "leverage", "position_type"))
    if missing:
        return _error(f"Missing required field: {missing}", 400)

    use_exchange_rates = body.get("use_exchange_rates")
    if use_exchange_rates is None:
        use_exchange_rates = False
    if not isinstance(use_exchange_rates, bool):
        return _error("use_exchange_rates must be a boolean", 400)

    market_data = request.app.state.market_data
    try:
        params = await market_data.build_parameters(
            symbol=str(body["symbol"]),
            margin=float(body["margin"]),
            leverage=float(body["leverage"]),
            position_type=body["position_type"],
            margin_mode=body.get("margin_mode", "isolated"),
            use_exchange_rates=use_exchange_rates,
            open_price=_optional_float(body, "open_price"),
            **_rate_overrides(body),
        )
        target_price = _optional_float(body, "target_price")
    except UnknownSymbolError as e:
        return _error(str(e), 404)
    except MarketDataError as e:
        logger.error("symbol_calculation_failed", symbol=body["symbol"], error=str(e))
        return _error(f"Failed to fetch market data for {body['symbol']}", 502)
    except (TypeError, ValueError) as e:
        return _error(str(e), 400)

    result = calculate_contract(params)
    payload = _result_payload(result, target_price)
    payload["open_price"] = params.open_price
    payload["rates"] = {field: getattr(params, field) for field in RATE_FIELDS}
    return JSONResponse(content=_finite_or_none(payload))


@router.post("/compare")
async def compare(request: Request) -> JSONResponse:
    """Evaluate several positions at current_price.

    Body: current_price, positions (list of parameter objects, each with an
    optional name).
    """
    body = await _read_body(request)
    if body is None:
        return _error("Invalid JSON body", 400)
    missing = _missing(body, ("current_price", "positions"))
    if missing:
        return _error(f"Missing required field: {missing}", 400)
    if not isinstance(body["positions"], list):
        return _error("positions must be a list", 400)

    defaults = _rate_defaults(request)
    positions = []
    for index, item in enumerate(body["positions"], start=1):
        if not isinstance(item, dict):
            return _error(f"Position {index} must be an object", 400)
        missing = _missing(item, POSITION_FIELDS)
        if missing:
            return _error(f"Position {index} missing required field: {missing}", 400)
        name = str(item.get("name") or f"Position {index}")
        try:
            positions.append((name, _parse_parameters(item, defaults)))
        except (TypeError, ValueError) as e:
            return _error(f"Position {index}: {e}", 400)

    try:
        current_price = float(body["current_price"])
    except (TypeError, ValueError) as e:
        return _error(str(e), 400)

    comparison = compare_positions(positions, current_price)
    return JSONResponse(content=_finite_or_none({
        "current_price": comparison.current_price,
        "positions": [
            {
                "name": entry.name,
                "position_type": entry.params.position_type.value,
                "margin_mode": entry.params.margin_mode.value,
                "margin": entry.params.margin,
                "leverage": entry.params.leverage,
                "position_size": entry.result.position_size,
                "liquidation_price": entry.result.liquidation_price,
                "risk_percentage": entry.result.risk_percentage,
                "profit": entry.profit,
                "profit_percent": entry.profit_percent,
            }
            for entry in comparison.entries
        ],
        "total_margin": comparison.total_margin,
        "total_position_size": comparison.total_position_size,
        "total_profit": comparison.total_profit,
        "total_profit_percent": comparison.total_profit_percent,
        "average_liquidation_price": comparison.average_liquidation_price,
    }))


@router.post("/leverage/from-liquidation-price")
async def leverage_from_liquidation(request: Request) -> JSONResponse:
    """Body: open_price, target_liquidation_price, position_type, optional maintenance_rate."""
    body = await _read_body(request)
    if body is None:
        return _error("Invalid JSON body", 400)
    missing = _missing(body, ("open_price", "target_liquidation_price", "position_type"))
    if missing:
        return _error(f"Missing required field: {missing}", 400)

    try:
        maintenance_rate = _optional_float(body, "maintenance_rate")
        solution = solve_leverage_from_liquidation_price(
            open_price=float(body["open_price"]),
            target_liquidation_price=float(body["target_liquidation_price"]),
            position_type=body["position_type"],
            maintenance_rate=(
                maintenance_rate
                if maintenance_rate is not None
                else _rate_defaults(request).maintenance_rate
            ),
        )
    except (TypeError, ValueError) as e:
        return _error(str(e), 400)

    return JSONResponse(content=_solution_payload(solution))


@router.post("/leverage/from-risk")
async def leverage_from_risk(request: Request) -> JSONResponse:
    """Body: risk_percentage, position_type, optional maintenance_rate."""
    body = await _read_body(request)
    if body is None:
        return _error("Invalid JSON body", 400)
    missing = _missing(body, ("risk_percentage", "position_type"))
    if missing:
        return _error(f"Missing required field: {missing}", 400)

    try:
        maintenance_rate = _optional_float(body, "maintenance_rate")
        solution = solve_leverage_from_risk_percentage(
            risk_percentage=float(body["risk_percentage"]),
            position_type=body["position_type"],
            maintenance_rate=(
                maintenance_rate
                if maintenance_rate is not None
                else _rate_defaults(request).maintenance_rate
            ),
        )
    except (TypeError, ValueError) as e:
        return _error(str(e), 400)

    return JSONResponse(content=_solution_payload(solution))
