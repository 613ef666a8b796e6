from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Mapping, Sequence

from src.core.types import NormalizedPoint, NormalizedSeries


@dataclass(frozen=True)
class WeightedTicker:
    ticker: str
    weight: float


@dataclass(frozen=True)
class WeightedPortfolio:
    tickers: tuple[WeightedTicker, ...]

    @property
    def symbols(self) -> tuple[str, ...]:
        return tuple(t.ticker for t in self.tickers)

    def as_dict(self) -> dict:
        return {"tickers": [{"ticker": t.ticker, "weight": t.weight} for t in self.tickers]}


def build_equal_weight_portfolio(tickers: Sequence[str]) -> WeightedPortfolio:
    """
    Assign weight 1/N to each of N tickers.

    Callers pass validated, non-empty portfolios; an empty list is rejected.
    """
    n = len(tickers)
    if n == 0:
        raise ValueError("Cannot build a portfolio from zero tickers.")
    weight = 1.0 / n
    return WeightedPortfolio(tickers=tuple(WeightedTicker(ticker=t, weight=weight) for t in tickers))


def compute_portfolio_return(ticker_returns: Mapping[str, float], portfolio: WeightedPortfolio) -> float:
    """
    Weighted sum of per-ticker returns (percent change from start) for one date.
    Tickers without a return for that date contribute nothing.
    """
    total = 0.0
    for wt in portfolio.tickers:
        r = ticker_returns.get(wt.ticker)
        if r is not None:
            total += wt.weight * r
    return total


def portfolio_label(portfolio_num: int, *, count: int) -> str:
    return "Portfolio" if count <= 1 else f"Portfolio {portfolio_num}"


def portfolio_series(
    portfolios: Sequence[WeightedPortfolio],
    normalized: Iterable[NormalizedSeries],
) -> list[NormalizedSeries]:
    """
    Combine aligned, normalized equity series into one return series per portfolio.

    `normalized` is expected to share a common date axis (see market_data.series.normalize_all_series).
    """
    by_ticker: dict[str, dict[str, float]] = {}
    dates: list[str] = []
    for s in normalized:
        by_ticker[s.ticker.upper()] = {p.date: p.value for p in s.points}
        if not dates:
            dates = [p.date for p in s.points]

    out: list[NormalizedSeries] = []
    for num, portfolio in enumerate(portfolios, start=1):
        points: list[NormalizedPoint] = []
        for d in dates:
            returns = {t: vals[d] for t, vals in by_ticker.items() if d in vals}
            points.append(NormalizedPoint(date=d, value=compute_portfolio_return(returns, portfolio)))
        out.append(
            NormalizedSeries(
                ticker=portfolio_label(num, count=len(portfolios)),
                points=points,
                source="Equal-weight portfolio",
            )
        )
    return out
