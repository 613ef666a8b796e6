from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any

from src.core.params import QueryParams
from src.core.parser import parse_portfolios
from src.core.portfolio import WeightedPortfolio, build_equal_weight_portfolio
from src.core.types import (
    DEFAULT_AMOUNT,
    DEFAULT_RANGE,
    VALID_BENCHMARKS,
    VALID_RANGES,
    Err,
    Ok,
    Result,
    is_valid_benchmark,
    is_valid_range,
    trim,
)


BENCHMARK_PARAM = "benchmark"
RANGE_PARAM = "range"
AMOUNT_PARAM = "amount"


@dataclass(frozen=True)
class CompareQuery:
    portfolios: tuple[WeightedPortfolio, ...]
    benchmarks: tuple[str, ...]
    range: str
    amount: float

    @property
    def all_tickers(self) -> tuple[str, ...]:
        """Distinct tickers across all portfolios, first-seen order."""
        out: list[str] = []
        for p in self.portfolios:
            for t in p.symbols:
                if t not in out:
                    out.append(t)
        return tuple(out)

    def as_dict(self) -> dict[str, Any]:
        return {
            "portfolios": [p.as_dict() for p in self.portfolios],
            "benchmarks": list(self.benchmarks),
            "range": self.range,
            "amount": self.amount,
        }


def parse_benchmarks(raw: str | None) -> Result[tuple[str, ...]]:
    if raw is None or raw == "":
        return Ok(())
    out: list[str] = []
    for part in raw.split("|"):
        token = trim(part).lower()
        if not token or token in out:
            continue
        if not is_valid_benchmark(token):
            return Err(f"Unknown benchmark: '{token}'. Valid benchmarks: {', '.join(VALID_BENCHMARKS)}")
        out.append(token)
    return Ok(tuple(out))


def parse_range(raw: str | None) -> Result[str]:
    if raw is None or raw == "":
        return Ok(DEFAULT_RANGE)
    r = trim(raw).lower()
    if not is_valid_range(r):
        return Err(f"Invalid range: '{raw}'. Valid ranges: {', '.join(VALID_RANGES)}")
    return Ok(r)


def parse_amount(raw: str | None) -> Result[float]:
    if raw is None or raw == "":
        return Ok(DEFAULT_AMOUNT)
    s = trim(raw)
    # float() is looser than plain decimal text: it takes "1_000" and non-ASCII digits.
    if "_" in s or not s.isascii() or any(c.isspace() for c in s):
        value = math.nan
    else:
        try:
            value = float(s)
        except ValueError:
            value = math.nan
    if not math.isfinite(value) or value <= 0:
        return Err(f"Invalid amount: '{raw}'. Must be a positive number.")
    return Ok(value)


def parse_compare_query(params: Any) -> Result[CompareQuery]:
    """
    Parse the full set of compare parameters: equity (repeatable), benchmark, range, amount.

    Errors are reported in that order of precedence; the first one wins.
    Unrecognized parameters are ignored.
    """
    qp = QueryParams.coerce(params)

    equity = parse_portfolios(qp)
    if not equity.ok:
        return equity

    benchmarks = parse_benchmarks(qp.get(BENCHMARK_PARAM))
    if not benchmarks.ok:
        return benchmarks

    rng = parse_range(qp.get(RANGE_PARAM))
    if not rng.ok:
        return rng

    amount = parse_amount(qp.get(AMOUNT_PARAM))
    if not amount.ok:
        return amount

    return Ok(
        CompareQuery(
            portfolios=tuple(build_equal_weight_portfolio(t) for t in equity.value),
            benchmarks=benchmarks.value,
            range=rng.value,
            amount=amount.value,
        )
    )
