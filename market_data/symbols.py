from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ChartParams:
    range: str
    interval: str


# App range -> Yahoo chart API (range, interval). Longer windows use coarser bars.
RANGE_TO_YAHOO: dict[str, ChartParams] = {
    "1m": ChartParams(range="1mo", interval="1d"),
    "3m": ChartParams(range="3mo", interval="1d"),
    "6m": ChartParams(range="6mo", interval="1d"),
    "ytd": ChartParams(range="ytd", interval="1d"),
    "1y": ChartParams(range="1y", interval="1d"),
    "3y": ChartParams(range="3y", interval="1wk"),
    "5y": ChartParams(range="5y", interval="1wk"),
    "max": ChartParams(range="max", interval="1mo"),
}

# "usd" has no provider symbol; it is synthesized as a flat cash series.
BENCHMARK_TO_YAHOO: dict[str, str] = {
    "gold": "GC=F",
    "eth": "ETH-USD",
}

BENCHMARK_DISPLAY: dict[str, str] = {
    "gold": "Gold",
    "eth": "ETH",
    "usd": "USD",
}


def chart_params(range_value: str) -> ChartParams:
    try:
        return RANGE_TO_YAHOO[range_value]
    except KeyError:
        raise ValueError(f"Unsupported range: {range_value}") from None


def yahoo_symbol(ticker: str) -> str:
    """
    Map a validated equity ticker to the Yahoo Finance symbol.

    - Class shares: "BRK.B" -> "BRK-B" (Yahoo uses '-')
    - Everything else passes through uppercased.
    """
    t = (ticker or "").strip().upper()
    if "." in t and not t.endswith(".") and not t.startswith("."):
        return t.replace(".", "-")
    return t
