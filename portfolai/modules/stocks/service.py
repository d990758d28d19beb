"""Stocks service — Finnhub quote proxy and the background watchlist refresher."""

from __future__ import annotations

import asyncio
import random
import re
from collections.abc import Awaitable, Callable

import httpx
import structlog

from portfolai.core.config import settings
from portfolai.core.errors import QuoteUnavailableError, ValidationError
from portfolai.modules.stocks.schemas import StockQuote

logger = structlog.get_logger()

_QUOTE_TIMEOUT = 10.0

_SYMBOL_PATTERN = re.compile(r"^[A-Z][A-Z0-9.\-]{0,9}$")

# ── Mock data helpers ─────────────────────────────────────────────────────────

_MOCK_BASE: dict[str, float] = {
    "SPY": 450.0,
    "QQQ": 380.0,
    "DIA": 350.0,
    "IWM": 195.0,
}


def normalize_symbol(symbol: str) -> str:
    cleaned = symbol.strip().upper()
    if not _SYMBOL_PATTERN.match(cleaned):
        raise ValidationError("Invalid ticker symbol.", detail={"symbol": symbol})
    return cleaned


def mock_quote(symbol: str, rng: random.Random | None = None) -> StockQuote:
    """Plausible quote within +/-5 of a fixed base price, for running without an API key."""
    rng = rng or random.Random()
    base = _MOCK_BASE.get(symbol, 100.0)
    change = (rng.random() - 0.5) * 10
    return StockQuote(
        symbol=symbol,
        price=base + change,
        change=change,
        change_percent=change / base * 100,
        is_mock=True,
    )


async def _get_finnhub_quote(client: httpx.AsyncClient, symbol: str) -> StockQuote:
    resp = await client.get(
        f"{settings.FINNHUB_BASE_URL}/quote",
        params={"symbol": symbol, "token": settings.FINNHUB_API_KEY},
    )
    resp.raise_for_status()
    data = resp.json()
    if not isinstance(data, dict):
        raise ValueError(f"unexpected quote payload: {data!r}")

    # Finnhub: c = current price, d = change, dp = percent change
    return StockQuote(
        symbol=symbol,
        price=float(data.get("c") or 0),
        change=float(data.get("d") or 0),
        change_percent=float(data.get("dp") or 0),
    )


async def fetch_quote(symbol: str, client: httpx.AsyncClient | None = None) -> StockQuote:
    """Current quote for ``symbol``. Mock data when FINNHUB_API_KEY is unset."""
    symbol = normalize_symbol(symbol)
    if not settings.FINNHUB_API_KEY:
        return mock_quote(symbol)

    try:
        if client is not None:
            return await _get_finnhub_quote(client, symbol)
        else:
            async with httpx.AsyncClient(timeout=_QUOTE_TIMEOUT) as own_client:
                return await _get_finnhub_quote(own_client, symbol)
    except (httpx.HTTPError, ValueError, TypeError) as exc:
        logger.warning("stocks.quote_failed", symbol=symbol, error=str(exc))
        raise QuoteUnavailableError("Failed to fetch stock data.") from exc


class QuoteRefresher:
    """Keeps the watchlist quotes fresh on a fixed interval.

    ``start()`` launches one asyncio task; ``stop()`` cancels it and waits for it
    to finish. A symbol that fails to refresh keeps its previous quote.
    """

    def __init__(
        self,
        symbols: list[str],
        interval: float,
        fetch: Callable[[str], Awaitable[StockQuote]] = fetch_quote,
    ) -> None:
        self.symbols = [normalize_symbol(s) for s in symbols]
        self.interval = interval
        self._fetch = fetch
        self._quotes: dict[str, StockQuote] = {}
        self._task: asyncio.Task[None] | None = None

    @property
    def quotes(self) -> list[StockQuote]:
        return [self._quotes[s] for s in self.symbols if s in self._quotes]

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def refresh_once(self) -> None:
        for symbol in self.symbols:
            try:
                self._quotes[symbol] = await self._fetch(symbol)
            except QuoteUnavailableError as exc:
                logger.warning("stocks.refresh_failed", symbol=symbol, error=exc.message)
            except Exception as exc:  # noqa: BLE001
                logger.exception("stocks.refresh_failed", symbol=symbol, error=str(exc))
        logger.debug("stocks.refreshed", count=len(self._quotes))

    async def _run(self) -> None:
        while True:
            await self.refresh_once()
            await asyncio.sleep(self.interval)

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self._run(), name="quote-refresher")
        logger.info("stocks.refresher_started", symbols=self.symbols, interval=self.interval)

    async def stop(self) -> None:
        if self._task is None:
            return
        task, self._task = self._task, None
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        except Exception as exc:  # noqa: BLE001
            logger.error("stocks.refresher_crashed", error=str(exc))
        logger.info("stocks.refresher_stopped")
