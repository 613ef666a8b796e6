from __future__ import annotations

import datetime as dt
import logging
from typing import Any, Sequence

from pydantic import BaseModel, Field

from market_data.provider import PriceProvider
from market_data.series import base_close, normalize_all_series
from market_data.utils import get_benchmark_series, get_equity_series
from src.core.portfolio import portfolio_series
from src.core.query import CompareQuery
from src.core.types import CompareSummary, NormalizedSeries, SeriesData, SummaryRow, SummaryTotal


log = logging.getLogger(__name__)


class CompareReport(BaseModel):
    query: dict[str, Any]
    equity_series: list[SeriesData] = Field(default_factory=list)
    benchmark_series: list[SeriesData] = Field(default_factory=list)
    normalized: list[NormalizedSeries] = Field(default_factory=list)
    portfolios: list[NormalizedSeries] = Field(default_factory=list)
    summary: CompareSummary


def build_summary(
    equity_series: Sequence[SeriesData],
    benchmark_series: Sequence[SeriesData],
    *,
    amount: float,
) -> CompareSummary:
    """
    Start/end/return per series, plus the value of `amount` split evenly across the equities.

    Benchmarks are listed for reference only and carry no invested value.
    """
    rows: list[SummaryRow] = []
    tagged = [(s, False) for s in equity_series] + [(s, True) for s in benchmark_series]
    for s, is_bench in tagged:
        if not s.points:
            continue
        start = base_close(s)
        end = s.points[-1].close
        rows.append(
            SummaryRow(
                ticker=s.ticker,
                start_price=start,
                end_price=end,
                return_pct=(end - start) / start * 100.0,
                is_benchmark=is_bench,
            )
        )

    equity_rows = [r for r in rows if not r.is_benchmark]
    if not equity_rows:
        return CompareSummary(amount=amount, rows=rows, total=None)

    per_ticker = amount / len(equity_rows)
    for r in equity_rows:
        r.end_value = per_ticker * (1.0 + r.return_pct / 100.0)
    total = SummaryTotal(
        return_pct=sum(r.return_pct for r in equity_rows) / len(equity_rows),
        end_value=sum(r.end_value or 0.0 for r in equity_rows),
    )
    return CompareSummary(amount=amount, rows=rows, total=total)


def build_compare_report(
    query: CompareQuery,
    *,
    provider: PriceProvider,
    today: dt.date | None = None,
) -> CompareReport:
    """
    Fetch equity and benchmark series for a validated query and derive the comparison.

    Market data errors (market_data.exceptions) propagate to the caller.
    """
    tickers = query.all_tickers
    equity = get_equity_series(tickers, query.range, provider=provider) if tickers else []
    benchmarks = (
        get_benchmark_series(query.benchmarks, query.range, provider=provider, today=today) if query.benchmarks else []
    )

    normalized = normalize_all_series([*equity, *benchmarks])
    normalized_equity = normalized[: len(equity)]
    log.info(
        "Compare report: %d portfolio(s), %d ticker(s), %d benchmark(s), range=%s",
        len(query.portfolios),
        len(tickers),
        len(benchmarks),
        query.range,
    )
    return CompareReport(
        query=query.as_dict(),
        equity_series=equity,
        benchmark_series=benchmarks,
        normalized=normalized,
        portfolios=portfolio_series(query.portfolios, normalized_equity),
        summary=build_summary(equity, benchmarks, amount=query.amount),
    )
