from __future__ import annotations

__all__ = [
    "YahooChartProvider",
    "YFinanceProvider",
    "build_provider",
    "DataNotFoundError",
    "FetchError",
    "MarketDataError",
    "RateLimitedError",
    "normalize_series",
    "normalize_all_series",
    "usd_baseline",
    "get_equity_series",
    "get_benchmark_series",
]

from market_data.exceptions import DataNotFoundError, FetchError, MarketDataError, RateLimitedError
from market_data.provider import YahooChartProvider, YFinanceProvider, build_provider
from market_data.series import normalize_all_series, normalize_series, usd_baseline
from market_data.utils import get_benchmark_series, get_equity_series
