from __future__ import annotations

from src.core.parser import COLON_REJECTION_ERROR


def test_healthz(client):
    assert client.get("/healthz").json() == {"ok": True}


def test_validate_success(client):
    res = client.get("/api/compare/validate?equity=AAPL,MSFT&equity=GOOG,TSLA")
    assert res.status_code == 200
    assert res.json() == {"portfolios": [["AAPL", "MSFT"], ["GOOG", "TSLA"]]}


def test_validate_requires_equity(client):
    res = client.get("/api/compare/validate")
    assert res.status_code == 400
    assert res.json() == {"error": "equity param is required"}


def test_validate_errors(client):
    cases = {
        "equity=": "Empty equity parameter",
        "equity=AAPL:0.5": COLON_REJECTION_ERROR,
        "equity=AAPL%3A0.5": COLON_REJECTION_ERROR,
        "equity=AAPL,aapl": "Duplicate ticker: AAPL",
        "equity=A&equity=B&equity=C&equity=D&equity=E&equity=F": "Too many portfolios: 6 exceeds maximum of 5",
        "equity=AA$PL": "Invalid character '$' in ticker 'AA$PL'",
    }
    for qs, message in cases.items():
        res = client.get(f"/api/compare/validate?{qs}")
        assert res.status_code == 400, qs
        assert res.json() == {"error": message}, qs


def test_compare_success(client):
    res = client.get("/api/compare?equity=AAPL,MSFT&benchmark=gold|usd&range=1m&amount=1000")
    assert res.status_code == 200
    body = res.json()
    assert body["query"]["range"] == "1m"
    assert body["query"]["benchmarks"] == ["gold", "usd"]
    assert [s["ticker"] for s in body["equity_series"]] == ["AAPL", "MSFT"]
    assert [s["ticker"] for s in body["benchmark_series"]] == ["Gold", "USD"]
    assert body["portfolios"][0]["ticker"] == "Portfolio"
    assert body["summary"]["amount"] == 1000.0


def test_compare_parse_error(client):
    res = client.get("/api/compare?equity=AAPL&range=2y")
    assert res.status_code == 400
    assert res.json()["error"].startswith("Invalid range: '2y'")


def test_compare_requires_equity(client):
    res = client.get("/api/compare?benchmark=gold")
    assert res.status_code == 400
    assert res.json() == {"error": "equity param is required"}


def test_compare_unknown_ticker_is_404(client):
    res = client.get("/api/compare?equity=AAPL,NOPE")
    assert res.status_code == 404
    assert res.json() == {"error": "No data found for ticker: NOPE"}


def test_compare_zero_close_is_404(client, fake_provider):
    fake_provider.closes["ZERO"] = [0.0, 1.0, 2.0]
    res = client.get("/api/compare?equity=ZERO")
    assert res.status_code == 404
    assert res.json() == {"error": "No usable price data for ZERO"}


def test_market_data_route(client, fake_provider):
    res = client.get("/api/market-data?tickers=aapl,%20brk.b&range=3y")
    assert res.status_code == 200
    assert [s["ticker"] for s in res.json()["series"]] == ["AAPL", "BRK.B"]
    assert [c[:2] for c in fake_provider.calls] == [("AAPL", "3y"), ("BRK-B", "3y")]


def test_market_data_route_errors(client):
    assert client.get("/api/market-data").json() == {"error": "Missing tickers parameter"}
    assert client.get("/api/market-data?tickers=,,").json() == {"error": "No valid tickers provided"}
    res = client.get("/api/market-data?tickers=AAPL&range=2y")
    assert res.status_code == 400
    assert res.json() == {"error": "Invalid range: 2y. Valid ranges: 1m, 3m, 6m, ytd, 1y, 3y, 5y, max"}
    res = client.get("/api/market-data?tickers=AAPL:0.5")
    assert res.status_code == 400
    assert res.json() == {"error": COLON_REJECTION_ERROR}


def test_market_data_upstream_failures(client, fake_provider):
    from market_data.exceptions import FetchError, RateLimitedError

    def throttled(*args, **kwargs):
        raise RateLimitedError()

    fake_provider.fetch_series = throttled
    res = client.get("/api/market-data?tickers=AAPL")
    assert res.status_code == 429
    assert res.json() == {"error": "Data temporarily unavailable. Please try again."}

    def broken(*args, **kwargs):
        raise FetchError()

    fake_provider.fetch_series = broken
    res = client.get("/api/market-data?tickers=AAPL")
    assert res.status_code == 502


def test_benchmark_route(client):
    res = client.get("/api/benchmark?benchmarks=GOLD|eth|usd")
    assert res.status_code == 200
    assert [s["ticker"] for s in res.json()["series"]] == ["Gold", "ETH", "USD"]


def test_benchmark_route_errors(client):
    assert client.get("/api/benchmark").json() == {"error": "Missing benchmarks parameter"}
    assert client.get("/api/benchmark?benchmarks=||").json() == {"error": "No valid benchmarks provided"}
    res = client.get("/api/benchmark?benchmarks=gold|bitcoin")
    assert res.status_code == 400
    assert res.json() == {"error": "Unknown benchmark: bitcoin. Valid benchmarks: gold, eth, usd"}
