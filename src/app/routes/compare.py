from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from market_data.exceptions import MarketDataError
from market_data.provider import PriceProvider
from src.app.deps import price_provider
from src.app.routes.market_data import market_data_error_response
from src.core.compare_service import build_compare_report
from src.core.parser import parse_portfolios
from src.core.query import parse_compare_query


router = APIRouter(prefix="/api/compare", tags=["compare"])


@router.get("/validate")
def compare_validate(request: Request):
    """
    Validate the `equity=` parameters without fetching anything.

    GET /api/compare/validate?equity=AAPL,MSFT&equity=GOOG,TSLA
    """
    result = parse_portfolios(request.query_params)
    if not result.ok:
        return JSONResponse(status_code=400, content={"error": result.error})
    if not result.value:
        return JSONResponse(status_code=400, content={"error": "equity param is required"})
    return {"portfolios": [list(p) for p in result.value]}


@router.get("")
def compare(request: Request, provider: PriceProvider = Depends(price_provider)):
    result = parse_compare_query(request.query_params)
    if not result.ok:
        return JSONResponse(status_code=400, content={"error": result.error})
    query = result.value
    if not query.portfolios:
        return JSONResponse(status_code=400, content={"error": "equity param is required"})
    try:
        report = build_compare_report(query, provider=provider)
    except MarketDataError as e:
        return market_data_error_response(e)
    return report.model_dump()
