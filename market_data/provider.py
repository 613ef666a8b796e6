from __future__ import annotations

import datetime as dt
import json
import logging
import math
import urllib.parse
from typing import Any, Protocol

from market_data.config import MarketDataConfig
from market_data.exceptions import DataNotFoundError, FetchError, RateLimitedError
from market_data.series import range_start
from market_data.symbols import chart_params
from src.core.net import HttpStatusError, NetworkError, http_get
from src.core.types import PricePoint, SeriesData

logger = logging.getLogger(__name__)

SOURCE_NAME = "Yahoo Finance"


class PriceProvider(Protocol):
    name: str

    def fetch_series(self, symbol: str, range_value: str, *, ticker: str, kind: str = "ticker") -> SeriesData:
        ...


def _not_found(kind: str, ticker: str) -> DataNotFoundError:
    return DataNotFoundError(f"No data found for {kind}: {ticker}")


def _iso_day(ts: Any) -> str | None:
    try:
        return dt.datetime.fromtimestamp(int(ts), tz=dt.timezone.utc).date().isoformat()
    except (TypeError, ValueError, OverflowError, OSError):
        return None


def parse_chart_payload(payload: Any, *, ticker: str, kind: str = "ticker") -> list[PricePoint]:
    """
    Reshape a Yahoo chart API response into (date, close) points.

    Reads chart.result[0].timestamp and chart.result[0].indicators.quote[0].close;
    points with a null, non-finite or non-positive close are dropped.
    """
    try:
        result0 = ((payload or {}).get("chart") or {}).get("result")[0]
    except (AttributeError, IndexError, TypeError):
        result0 = None
    if not result0:
        raise _not_found(kind, ticker)

    timestamps = result0.get("timestamp") or []
    quotes = (result0.get("indicators") or {}).get("quote") or []
    closes = ((quotes[0] or {}).get("close") or []) if isinstance(quotes, list) and quotes else []

    points: list[PricePoint] = []
    for i, ts in enumerate(timestamps):
        close = closes[i] if i < len(closes) else None
        if close is None:
            continue
        try:
            close_f = float(close)
        except (TypeError, ValueError):
            continue
        if not math.isfinite(close_f) or close_f <= 0:
            continue
        day = _iso_day(ts)
        if day is None:
            continue
        points.append(PricePoint(date=day, close=close_f))

    if not points:
        raise _not_found(kind, ticker)
    return points


class YahooChartProvider:
    name = "yahoo_chart"

    def __init__(self, config: MarketDataConfig | None = None):
        self.config = (config or MarketDataConfig()).yahoo

    def chart_url(self, symbol: str, range_value: str) -> str:
        params = chart_params(range_value)
        qs = urllib.parse.urlencode({"range": params.range, "interval": params.interval, "events": "div"})
        return f"{self.config.base_url.rstrip('/')}/{urllib.parse.quote(symbol, safe='')}?{qs}"

    def fetch_series(self, symbol: str, range_value: str, *, ticker: str, kind: str = "ticker") -> SeriesData:
        url = self.chart_url(symbol, range_value)
        logger.debug("Fetching %s chart for %s (%s)", kind, ticker, symbol)
        try:
            resp = http_get(
                url,
                headers={"User-Agent": self.config.user_agent, "Accept": "application/json,text/plain,*/*"},
                timeout_s=float(self.config.timeout_seconds),
                max_retries=int(self.config.max_retries),
                backoff_s=float(self.config.backoff_base_seconds),
            )
        except HttpStatusError as e:
            if e.status_code == 404:
                raise _not_found(kind, ticker) from e
            if e.status_code == 429:
                raise RateLimitedError() from e
            logger.warning("Chart request for %s failed: %s", symbol, e)
            raise FetchError() from e
        except NetworkError as e:
            logger.warning("Chart request for %s failed: %s", symbol, e)
            raise FetchError() from e

        try:
            payload = json.loads(resp.content.decode("utf-8"))
        except (UnicodeDecodeError, ValueError) as e:
            logger.warning("Chart response for %s is not JSON: %s", symbol, type(e).__name__)
            raise FetchError() from e

        points = parse_chart_payload(payload, ticker=ticker, kind=kind)
        return SeriesData(ticker=ticker, points=points, source=SOURCE_NAME)


class YFinanceProvider:
    name = "yfinance"

    def fetch_series(self, symbol: str, range_value: str, *, ticker: str, kind: str = "ticker") -> SeriesData:
        try:
            import yfinance as yf  # type: ignore
        except Exception as e:  # pragma: no cover
            raise RuntimeError("yfinance is required for the yfinance provider.") from e

        params = chart_params(range_value)
        logger.debug("Fetching %s history for %s (%s) via yfinance", kind, ticker, symbol)
        try:
            tk = yf.Ticker(symbol)
            if range_value == "max":
                df = tk.history(period="max", interval=params.interval, auto_adjust=False)
            else:
                df = tk.history(start=range_start(range_value).isoformat(), interval=params.interval, auto_adjust=False)
        except Exception as e:
            logger.warning("yfinance history for %s failed: %s: %s", symbol, type(e).__name__, e)
            raise FetchError() from e

        if df is None or getattr(df, "empty", True) or "Close" not in df.columns:
            raise _not_found(kind, ticker)

        points: list[PricePoint] = []
        for idx, close in df["Close"].items():
            try:
                close_f = float(close)
            except (TypeError, ValueError):
                continue
            if not math.isfinite(close_f) or close_f <= 0:
                continue
            points.append(PricePoint(date=idx.date().isoformat(), close=close_f))
        if not points:
            raise _not_found(kind, ticker)
        return SeriesData(ticker=ticker, points=points, source=SOURCE_NAME)


def build_provider(config: MarketDataConfig | None = None) -> PriceProvider:
    cfg = config or MarketDataConfig()
    if cfg.provider == "yfinance":
        return YFinanceProvider()
    return YahooChartProvider(cfg)
