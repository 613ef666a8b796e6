from __future__ import annotations

import datetime as dt
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from market_data.exceptions import DataNotFoundError
from src.core.types import PricePoint, SeriesData


class FakeProvider:
    """
    In-memory provider: symbol -> list of closes on consecutive days from 2025-01-01.
    Records every call as (symbol, range, ticker, kind).
    """

    name = "fake"

    def __init__(self, closes: dict[str, list[float]], *, start: dt.date = dt.date(2025, 1, 1)):
        self.closes = closes
        self.start = start
        self.calls: list[tuple[str, str, str, str]] = []

    def fetch_series(self, symbol: str, range_value: str, *, ticker: str, kind: str = "ticker") -> SeriesData:
        self.calls.append((symbol, range_value, ticker, kind))
        if symbol not in self.closes:
            raise DataNotFoundError(f"No data found for {kind}: {ticker}")
        points = [
            PricePoint(date=(self.start + dt.timedelta(days=i)).isoformat(), close=c)
            for i, c in enumerate(self.closes[symbol])
        ]
        return SeriesData(ticker=ticker, points=points, source="Fake")


@pytest.fixture()
def fake_provider() -> FakeProvider:
    return FakeProvider(
        {
            "AAPL": [100.0, 110.0, 120.0],
            "MSFT": [200.0, 200.0, 180.0],
            "GOOG": [50.0, 55.0, 60.0],
            "BRK-B": [400.0, 404.0, 408.0],
            "GC=F": [2000.0, 2020.0, 2040.0],
            "ETH-USD": [3000.0, 2700.0, 3300.0],
        }
    )


@pytest.fixture()
def client(fake_provider: FakeProvider):
    from fastapi.testclient import TestClient

    from src.app.deps import price_provider
    from src.app.main import create_app

    app = create_app()
    app.dependency_overrides[price_provider] = lambda: fake_provider
    with TestClient(app) as c:
        yield c
