from __future__ import annotations

import datetime as dt
from typing import Sequence

import pandas as pd

from market_data.exceptions import DataNotFoundError
from src.core.types import NormalizedPoint, NormalizedSeries, PricePoint, SeriesData


CASH_SOURCE = "Cash baseline"

# Lookback for the synthetic cash series when the range is "max".
MAX_RANGE_YEARS = 20

_RANGE_OFFSETS: dict[str, pd.DateOffset] = {
    "1m": pd.DateOffset(months=1),
    "3m": pd.DateOffset(months=3),
    "6m": pd.DateOffset(months=6),
    "1y": pd.DateOffset(years=1),
    "3y": pd.DateOffset(years=3),
    "5y": pd.DateOffset(years=5),
    "max": pd.DateOffset(years=MAX_RANGE_YEARS),
}


def range_start(range_value: str, *, today: dt.date | None = None) -> dt.date:
    """
    First calendar day covered by a range, counting back from `today`.
    "ytd" starts on January 1st of the current year.
    """
    end = today or dt.date.today()
    if range_value == "ytd":
        return dt.date(end.year, 1, 1)
    try:
        offset = _RANGE_OFFSETS[range_value]
    except KeyError:
        raise ValueError(f"Unsupported range: {range_value}") from None
    return (pd.Timestamp(end) - offset).date()


def usd_baseline(range_value: str, *, today: dt.date | None = None) -> list[PricePoint]:
    """
    Flat 1.0 daily series over the range: holding cash in USD returns 0%.
    """
    end = today or dt.date.today()
    start = range_start(range_value, today=end)
    days = pd.date_range(start=start, end=end, freq="D")
    return [PricePoint(date=d.date().isoformat(), close=1.0) for d in days]


def base_close(series: SeriesData) -> float:
    """First close of a non-empty series; percent changes are measured against it."""
    start = series.points[0].close
    if not start > 0:
        raise DataNotFoundError(f"No usable price data for {series.ticker}")
    return start


def normalize_series(series: SeriesData) -> NormalizedSeries:
    """
    Express each close as percent change from the first close (first point = 0.0, +15.5 means +15.5%).
    """
    if not series.points:
        return NormalizedSeries(ticker=series.ticker, points=[], source=series.source)
    start = base_close(series)
    return NormalizedSeries(
        ticker=series.ticker,
        source=series.source,
        points=[NormalizedPoint(date=p.date, value=(p.close - start) / start * 100.0) for p in series.points],
    )


def normalize_all_series(all_series: Sequence[SeriesData]) -> list[NormalizedSeries]:
    """
    Normalize every series, then keep only the dates present in all of them.

    Each series is indexed to its own first point before alignment, so the first
    common date is not necessarily 0%.
    """
    if not all_series:
        return []
    normalized = [normalize_series(s) for s in all_series]

    columns = []
    for s in normalized:
        col = pd.Series({p.date: p.value for p in s.points}, dtype=float)
        columns.append(col)
    # Positional keys: two series may share a display ticker.
    frame = pd.concat(columns, axis=1, keys=range(len(columns)), join="inner")
    common = set(frame.index)

    return [
        NormalizedSeries(
            ticker=s.ticker,
            source=s.source,
            points=[p for p in s.points if p.date in common],
        )
        for s in normalized
    ]
