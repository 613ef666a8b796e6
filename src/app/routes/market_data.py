from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from market_data.exceptions import (
    UNAVAILABLE_MESSAGE,
    DataNotFoundError,
    MarketDataError,
    RateLimitedError,
)
from market_data.provider import PriceProvider
from market_data.utils import get_benchmark_series, get_equity_series
from src.app.deps import price_provider
from src.core.parser import COLON_REJECTION_ERROR
from src.core.types import DEFAULT_RANGE, VALID_BENCHMARKS, VALID_RANGES, is_valid_benchmark, is_valid_range


router = APIRouter(prefix="/api", tags=["market-data"])


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def market_data_error_response(exc: MarketDataError) -> JSONResponse:
    if isinstance(exc, DataNotFoundError):
        return _error(404, str(exc))
    if isinstance(exc, RateLimitedError):
        return _error(429, UNAVAILABLE_MESSAGE)
    return _error(502, UNAVAILABLE_MESSAGE)


def _invalid_range(range_value: str) -> JSONResponse:
    return _error(400, f"Invalid range: {range_value}. Valid ranges: {', '.join(VALID_RANGES)}")


@router.get("/market-data")
def market_data(
    tickers: str | None = None,
    range: str = DEFAULT_RANGE,
    provider: PriceProvider = Depends(price_provider),
):
    """
    GET /api/market-data?tickers=AAPL,MSFT&range=1y

    Close-price series per ticker. Tickers are expected to be pre-validated by the
    compare parser; only the reserved weight syntax is re-checked here.
    """
    if not tickers:
        return _error(400, "Missing tickers parameter")
    if not is_valid_range(range):
        return _invalid_range(range)

    ticker_list = [t.strip().upper() for t in tickers.split(",") if t.strip()]
    if not ticker_list:
        return _error(400, "No valid tickers provided")
    if any(":" in t for t in ticker_list):
        return _error(400, COLON_REJECTION_ERROR)

    try:
        series = get_equity_series(ticker_list, range, provider=provider)
    except MarketDataError as e:
        return market_data_error_response(e)
    return {"series": [s.model_dump() for s in series]}


@router.get("/benchmark")
def benchmark(
    benchmarks: str | None = None,
    range: str = DEFAULT_RANGE,
    provider: PriceProvider = Depends(price_provider),
):
    """
    GET /api/benchmark?benchmarks=gold|eth|usd&range=1y
    """
    if not benchmarks:
        return _error(400, "Missing benchmarks parameter")
    if not is_valid_range(range):
        return _invalid_range(range)

    bench_list = [b.strip().lower() for b in benchmarks.split("|") if b.strip()]
    if not bench_list:
        return _error(400, "No valid benchmarks provided")
    for b in bench_list:
        if not is_valid_benchmark(b):
            return _error(400, f"Unknown benchmark: {b}. Valid benchmarks: {', '.join(VALID_BENCHMARKS)}")

    try:
        series = get_benchmark_series(bench_list, range, provider=provider)
    except MarketDataError as e:
        return market_data_error_response(e)
    return {"series": [s.model_dump() for s in series]}
