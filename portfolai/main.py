from contextlib import asynccontextmanager
from collections.abc import AsyncGenerator

import structlog
from fastapi import APIRouter, FastAPI, HTTPException, status
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException
from sqlalchemy import text

import portfolai.models  # noqa: F401 — register all models at startup

from portfolai.auth.router import router as auth_router
from portfolai.core.config import settings
from portfolai.core.database import async_session_factory, create_tables
from portfolai.core.errors import (
    PortfolAIError,
    domain_exception_handler,
    global_exception_handler,
    http_exception_handler,
)
from portfolai.core.sentry import init_sentry
from portfolai.middleware.request_logging import RequestLoggingMiddleware
from portfolai.modules.clients.router import router as clients_router
from portfolai.modules.dashboard.router import router as dashboard_router
from portfolai.modules.meetings.router import router as meetings_router
from portfolai.modules.stocks.router import router as stocks_router
from portfolai.modules.stocks.service import QuoteRefresher

# ── Sentry — must be initialised BEFORE FastAPI app is created ────────────────
init_sentry(settings.SENTRY_DSN, settings.SENTRY_ENVIRONMENT, settings.APP_VERSION)

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    logger.info("Starting PortfolAI API", env=settings.APP_ENV)

    refresher: QuoteRefresher | None = None
    if settings.STOCK_REFRESH_ENABLED:
        refresher = QuoteRefresher(
            settings.STOCK_WATCHLIST,
            interval=settings.STOCK_REFRESH_INTERVAL_SECONDS,
        )
        refresher.start()
    app.state.quote_refresher = refresher

    yield

    if refresher is not None:
        await refresher.stop()
    logger.info("Shutting down PortfolAI API")


_is_prod = settings.APP_ENV == "production"

app = FastAPI(
    title="PortfolAI API",
    description="Client, meeting and call tracking for financial advisors, with AI meeting summaries.",
    version="0.1.0",
    docs_url=None if _is_prod else "/docs",
    redoc_url=None if _is_prod else "/redoc",
    openapi_url=None if _is_prod else "/openapi.json",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.FRONTEND_URL],
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type", "Accept", "X-Request-ID"],
)
app.add_middleware(RequestLoggingMiddleware)

app.add_exception_handler(PortfolAIError, domain_exception_handler)  # type: ignore[arg-type]
app.add_exception_handler(StarletteHTTPException, http_exception_handler)  # type: ignore[arg-type]
app.add_exception_handler(Exception, global_exception_handler)


# ── /api router ───────────────────────────────────────────────────────────────

api = APIRouter(prefix="/api")


@api.get("/health")
async def health_check() -> dict:
    """Liveness plus a database probe."""
    checks: dict[str, dict] = {}
    try:
        async with async_session_factory() as db:
            await db.execute(text("SELECT 1"))
        checks["database"] = {"status": "healthy"}
    except Exception as exc:  # noqa: BLE001
        checks["database"] = {"status": "unhealthy", "error": str(exc)}

    return {"status": "ok", "message": "Server is running", "checks": checks}


@api.post("/setup-database")
async def setup_database() -> dict:
    """Create all tables from the models. Development only; production runs Alembic."""
    if _is_prod:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Route not found",
        )
    await create_tables()
    return {"status": "success", "message": "Database tables created successfully!"}


api.include_router(auth_router)
api.include_router(clients_router)
api.include_router(meetings_router)
api.include_router(dashboard_router)
api.include_router(stocks_router)

app.include_router(api)
