"""Stocks API router — quote proxy and watchlist."""

from __future__ import annotations

from fastapi import APIRouter, Request

from portfolai.modules.stocks import service
from portfolai.modules.stocks.schemas import StockQuote, WatchlistResponse

router = APIRouter(prefix="/stocks", tags=["stocks"])


@router.get("", response_model=WatchlistResponse)
async def get_watchlist(request: Request):
    """Latest watchlist quotes held by the background refresher."""
    refresher: service.QuoteRefresher | None = getattr(request.app.state, "quote_refresher", None)
    if refresher is None:
        return WatchlistResponse(quotes=[], refreshed=False)
    return WatchlistResponse(quotes=refresher.quotes, refreshed=refresher.running)


@router.get("/{symbol}", response_model=StockQuote)
async def get_quote(symbol: str):
    return await service.fetch_quote(symbol)
