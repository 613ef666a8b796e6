from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Literal, TypeVar, Union

from pydantic import BaseModel, Field


RangeValue = Literal["1m", "3m", "6m", "ytd", "1y", "3y", "5y", "max"]

VALID_BENCHMARKS: tuple[str, ...] = ("gold", "eth", "usd")
VALID_RANGES: tuple[str, ...] = ("1m", "3m", "6m", "ytd", "1y", "3y", "5y", "max")

DEFAULT_RANGE: RangeValue = "1y"
DEFAULT_AMOUNT: float = 10000.0

MAX_PORTFOLIOS = 5
MAX_TICKERS_PER_PORTFOLIO = 20
MAX_TICKER_LENGTH = 10

# Characters trimmed around query values. Unlike str.strip(), the \x1c-\x1f
# separators are not whitespace here, so they fail as illegal characters.
TRIM_CHARS = (
    " \t\n\v\f\r\u00a0\u1680\u2000\u2001\u2002\u2003\u2004\u2005\u2006"
    "\u2007\u2008\u2009\u200a\u2028\u2029\u202f\u205f\u3000\ufeff"
)


T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T
    ok: Literal[True] = True


@dataclass(frozen=True)
class Err:
    error: str
    ok: Literal[False] = False


Result = Union[Ok[T], Err]


def trim(value: str) -> str:
    return value.strip(TRIM_CHARS)


def is_valid_range(value: str) -> bool:
    return value in VALID_RANGES


def is_valid_benchmark(value: str) -> bool:
    return value in VALID_BENCHMARKS


# Market data payloads. These cross the HTTP boundary as JSON.


class PricePoint(BaseModel):
    date: str
    close: float


class SeriesData(BaseModel):
    ticker: str
    points: list[PricePoint] = Field(default_factory=list)
    source: str


class NormalizedPoint(BaseModel):
    date: str
    value: float


class NormalizedSeries(BaseModel):
    ticker: str
    points: list[NormalizedPoint] = Field(default_factory=list)
    source: str


class SummaryRow(BaseModel):
    ticker: str
    start_price: float
    end_price: float
    return_pct: float
    is_benchmark: bool = False
    end_value: float | None = None


class SummaryTotal(BaseModel):
    return_pct: float
    end_value: float


class CompareSummary(BaseModel):
    amount: float
    rows: list[SummaryRow]
    total: SummaryTotal | None = None
