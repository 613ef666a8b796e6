from __future__ import annotations

import re
from typing import Any

from src.core.params import QueryParams
from src.core.types import (
    MAX_PORTFOLIOS,
    MAX_TICKER_LENGTH,
    MAX_TICKERS_PER_PORTFOLIO,
    Err,
    Ok,
    Result,
    trim,
)


EQUITY_PARAM = "equity"

# Pinned: clients compare these strings for exact equality.
COLON_REJECTION_ERROR = 'Weights (:) are not supported in v1. Use a comma-separated list of tickers like "AAPL,MSFT".'
EQUALS_REJECTION_TEMPLATE = "Invalid character '=' in ticker '{ticker}' — equals signs are reserved"

_LEGAL_CHAR_RE = re.compile(r"[A-Za-z0-9.\-]")


Portfolios = tuple[tuple[str, ...], ...]


def _first_illegal_char(token: str) -> str | None:
    for ch in token:
        if not _LEGAL_CHAR_RE.fullmatch(ch):
            return ch
    return None


def _starts_with_letter(token: str) -> bool:
    # ASCII letters only; str.isalpha() would accept e.g. "É".
    return bool(token) and ("A" <= token[0] <= "Z" or "a" <= token[0] <= "z")


def validate_ticker(token: str, *, position: int, suffix: str = "") -> Result[str]:
    """
    Validate one raw comma-separated token and return its normalized (uppercase) form.

    `position` is the 1-based index of the token within its portfolio; `suffix` is the
    portfolio context (" in portfolio 2") appended when several portfolios were given.
    Duplicate detection needs the portfolio's accepted set and lives in parse_portfolio.
    """
    t = trim(token)
    if not t:
        return Err(f"Empty ticker at position {position}{suffix}")

    # Reserved for weighted syntax; checked before the general charset so the
    # dedicated messages win.
    if ":" in t:
        return Err(COLON_REJECTION_ERROR)
    if "=" in t:
        return Err(EQUALS_REJECTION_TEMPLATE.format(ticker=t))

    bad = _first_illegal_char(t)
    if bad is not None:
        return Err(f"Invalid character '{bad}' in ticker '{t}'{suffix}")

    if not _starts_with_letter(t):
        return Err(f"Invalid ticker format: '{t}' — must start with a letter{suffix}")

    if len(t) > MAX_TICKER_LENGTH:
        return Err(f"Ticker too long: '{t}' exceeds {MAX_TICKER_LENGTH} character limit{suffix}")

    return Ok(t.upper())


def parse_portfolio(raw: str, *, portfolio_num: int, multi: bool) -> Result[tuple[str, ...]]:
    """
    Validate one occurrence of the equity parameter.
    """
    suffix = f" in portfolio {portfolio_num}" if multi else ""

    if raw == "":
        return Err(f"Empty equity parameter{suffix}")

    seen: set[str] = set()
    tickers: list[str] = []
    for idx, token in enumerate(raw.split(","), start=1):
        res = validate_ticker(token, position=idx, suffix=suffix)
        if not res.ok:
            return res
        ticker = res.value
        if ticker in seen:
            return Err(f"Duplicate ticker: {ticker}{suffix}")
        seen.add(ticker)
        tickers.append(ticker)

    # Count check runs after the per-token pass: a malformed token in an
    # over-long list is reported first.
    if len(tickers) > MAX_TICKERS_PER_PORTFOLIO:
        return Err(
            f"Too many tickers in portfolio {portfolio_num}: {len(tickers)} exceeds maximum of {MAX_TICKERS_PER_PORTFOLIO}"
        )
    return Ok(tuple(tickers))


def parse_portfolios(params: Any) -> Result[Portfolios]:
    """
    Parse every `equity` parameter into validated portfolios.

    Pipeline:
      1. portfolio count (fails before any value is inspected)
      2. per occurrence: empty value, split on ",", per-token validation, duplicates
      3. per occurrence: ticker count

    The first violation anywhere in the input is returned; nothing is collected.
    A missing `equity` parameter is a success with no portfolios.
    """
    qp = QueryParams.coerce(params)
    values = qp.get_all(EQUITY_PARAM)

    if not values:
        return Ok(())

    if len(values) > MAX_PORTFOLIOS:
        return Err(f"Too many portfolios: {len(values)} exceeds maximum of {MAX_PORTFOLIOS}")

    multi = len(values) > 1
    portfolios: list[tuple[str, ...]] = []
    for num, raw in enumerate(values, start=1):
        res = parse_portfolio(raw, portfolio_num=num, multi=multi)
        if not res.ok:
            return res
        portfolios.append(res.value)
    return Ok(tuple(portfolios))
