"""Stocks — Pydantic schemas."""

from __future__ import annotations

from pydantic import BaseModel


class StockQuote(BaseModel):
    symbol: str
    price: float
    change: float
    change_percent: float
    is_mock: bool = False


class WatchlistResponse(BaseModel):
    quotes: list[StockQuote]
    refreshed: bool
