from __future__ import annotations

import pytest

from src.core.portfolio import (
    build_equal_weight_portfolio,
    compute_portfolio_return,
    portfolio_label,
    portfolio_series,
)
from src.core.types import NormalizedPoint, NormalizedSeries


@pytest.mark.parametrize("n", [1, 2, 3, 7, 20])
def test_equal_weights_sum_to_one(n):
    p = build_equal_weight_portfolio([f"T{i}" for i in range(n)])
    assert len(p.tickers) == n
    assert all(t.weight == pytest.approx(1 / n) for t in p.tickers)
    assert sum(t.weight for t in p.tickers) == pytest.approx(1.0)


def test_empty_portfolio_rejected():
    with pytest.raises(ValueError):
        build_equal_weight_portfolio([])


def test_compute_portfolio_return():
    p = build_equal_weight_portfolio(["AAPL", "MSFT"])
    assert compute_portfolio_return({"AAPL": 10.0, "MSFT": -4.0}, p) == pytest.approx(3.0)
    # Missing ticker contributes nothing.
    assert compute_portfolio_return({"AAPL": 10.0}, p) == pytest.approx(5.0)


def test_portfolio_label():
    assert portfolio_label(1, count=1) == "Portfolio"
    assert portfolio_label(2, count=3) == "Portfolio 2"


def _ns(ticker: str, values: list[float]) -> NormalizedSeries:
    return NormalizedSeries(
        ticker=ticker,
        source="test",
        points=[NormalizedPoint(date=f"2025-01-0{i + 1}", value=v) for i, v in enumerate(values)],
    )


def test_portfolio_series():
    portfolios = [build_equal_weight_portfolio(["AAPL", "MSFT"]), build_equal_weight_portfolio(["GOOG"])]
    normalized = [_ns("AAPL", [0.0, 10.0, 20.0]), _ns("MSFT", [0.0, 0.0, -10.0]), _ns("GOOG", [0.0, 5.0, 10.0])]
    out = portfolio_series(portfolios, normalized)
    assert [s.ticker for s in out] == ["Portfolio 1", "Portfolio 2"]
    assert [p.value for p in out[0].points] == pytest.approx([0.0, 5.0, 5.0])
    assert [p.value for p in out[1].points] == pytest.approx([0.0, 5.0, 10.0])
    assert [p.date for p in out[0].points] == ["2025-01-01", "2025-01-02", "2025-01-03"]
