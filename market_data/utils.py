from __future__ import annotations

import datetime as dt
import logging
from typing import Sequence

from market_data.provider import PriceProvider
from market_data.series import CASH_SOURCE, usd_baseline
from market_data.symbols import BENCHMARK_DISPLAY, BENCHMARK_TO_YAHOO, yahoo_symbol
from src.core.types import SeriesData

logger = logging.getLogger(__name__)


def get_equity_series(tickers: Sequence[str], range_value: str, *, provider: PriceProvider) -> list[SeriesData]:
    """
    Fetch one price series per ticker, in order. The first failure aborts the batch:
    a comparison with a missing ticker would silently misweight its portfolio.
    """
    out: list[SeriesData] = []
    for t in tickers:
        ticker = (t or "").strip().upper()
        out.append(provider.fetch_series(yahoo_symbol(ticker), range_value, ticker=ticker, kind="ticker"))
    logger.debug("Fetched %d equity series (range=%s)", len(out), range_value)
    return out


def get_benchmark_series(
    benchmarks: Sequence[str],
    range_value: str,
    *,
    provider: PriceProvider,
    today: dt.date | None = None,
) -> list[SeriesData]:
    """
    Fetch benchmark series by benchmark id ("gold", "eth", "usd"). Series are labelled
    with display names ("Gold", "ETH", "USD"); "usd" is synthesized, never fetched.
    """
    out: list[SeriesData] = []
    for b in benchmarks:
        key = (b or "").strip().lower()
        display = BENCHMARK_DISPLAY[key]
        if key == "usd":
            out.append(SeriesData(ticker=display, points=usd_baseline(range_value, today=today), source=CASH_SOURCE))
            continue
        out.append(provider.fetch_series(BENCHMARK_TO_YAHOO[key], range_value, ticker=display, kind="benchmark"))
    logger.debug("Fetched %d benchmark series (range=%s)", len(out), range_value)
    return out
