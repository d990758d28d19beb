"""Shared test fixtures for the PortfolAI API test suite."""

import os

# Settings are read at import time; point them at an in-memory database and
# keep background tasks and external providers out of the test run.
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["STOCK_REFRESH_ENABLED"] = "false"
os.environ["ANTHROPIC_API_KEY"] = ""
os.environ["FINNHUB_API_KEY"] = ""
os.environ["SENTRY_DSN"] = ""

import uuid  # noqa: E402
from collections.abc import AsyncGenerator  # noqa: E402

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from portfolai.auth.dependencies import get_current_user  # noqa: E402
from portfolai.core.database import Base, enable_sqlite_foreign_keys, get_db  # noqa: E402
from portfolai.core.errors import SummarizationError  # noqa: E402
from portfolai.main import app  # noqa: E402
from portfolai.models.core import User  # noqa: E402
from portfolai.models.crm import Client  # noqa: E402
from portfolai.models.enums import Sentiment  # noqa: E402
from portfolai.schemas.auth import CurrentUser  # noqa: E402
from portfolai.services.summarizer import SummaryResult, get_summarizer  # noqa: E402


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
async def engine() -> AsyncGenerator[AsyncEngine]:
    """Fresh in-memory database per test, foreign keys enforced."""
    test_engine = create_async_engine("sqlite+aiosqlite://", poolclass=StaticPool)
    enable_sqlite_foreign_keys(test_engine)
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield test_engine
    await test_engine.dispose()


@pytest.fixture
async def db(engine: AsyncEngine) -> AsyncGenerator[AsyncSession]:
    async with AsyncSession(engine, expire_on_commit=False) as session:
        yield session


# ── Sample data fixtures ──────────────────────────────────────────────────

SAMPLE_USER_ID = uuid.UUID("00000000-0000-0000-0000-000000000001")
OTHER_USER_ID = uuid.UUID("00000000-0000-0000-0000-000000000002")

SAMPLE_CURRENT_USER = CurrentUser(
    user_id=SAMPLE_USER_ID,
    email="advisor@example.com",
    full_name="Ada Advisor",
)

POSITIVE_SUMMARY = SummaryResult(
    summary="Portfolio reviewed; client satisfied.",
    sentiment=Sentiment.POSITIVE,
)


class StubSummarizer:
    """Stands in for MeetingSummarizer: returns a fixed result or raises a fixed error."""

    def __init__(
        self,
        result: SummaryResult = POSITIVE_SUMMARY,
        error: Exception | None = None,
    ) -> None:
        self.result = result
        self.error = error
        self.calls: list[str] = []

    async def summarize(self, notes: str) -> SummaryResult:
        self.calls.append(notes)
        if self.error is not None:
            raise self.error
        return self.result


@pytest.fixture
async def sample_user(db: AsyncSession) -> User:
    user = User(
        id=SAMPLE_USER_ID,
        email="advisor@example.com",
        password_hash="not-a-real-hash",
        full_name="Ada Advisor",
    )
    db.add(user)
    await db.flush()
    return user


@pytest.fixture
async def other_user(db: AsyncSession) -> User:
    user = User(
        id=OTHER_USER_ID,
        email="someone.else@example.com",
        password_hash="not-a-real-hash",
        full_name="Other Advisor",
    )
    db.add(user)
    await db.flush()
    return user


@pytest.fixture
async def sample_client(db: AsyncSession, sample_user: User) -> Client:
    client = Client(user_id=sample_user.id, name="Jane Doe", phone="555-1234")
    db.add(client)
    await db.commit()
    return client


@pytest.fixture
async def foreign_client(db: AsyncSession, other_user: User) -> Client:
    """A client owned by a different advisor."""
    client = Client(user_id=other_user.id, name="Not Yours", phone=None)
    db.add(client)
    await db.commit()
    return client


@pytest.fixture
def summarizer() -> StubSummarizer:
    return StubSummarizer()


@pytest.fixture
def failing_summarizer() -> StubSummarizer:
    return StubSummarizer(error=SummarizationError("AI summarization failed: upstream 529"))


def _override_auth(user: CurrentUser):
    async def _override():
        return user
    return _override


@pytest.fixture
async def test_client(
    db: AsyncSession, sample_user: User, summarizer: StubSummarizer
) -> AsyncGenerator[AsyncClient]:
    """Client authenticated as the sample advisor, sharing the test DB session."""
    app.dependency_overrides[get_current_user] = _override_auth(SAMPLE_CURRENT_USER)
    app.dependency_overrides[get_db] = lambda: db
    app.dependency_overrides[get_summarizer] = lambda: summarizer
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
async def anon_client(db: AsyncSession) -> AsyncGenerator[AsyncClient]:
    """Client with real bearer-token auth against the test DB."""
    app.dependency_overrides[get_db] = lambda: db
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as ac:
        yield ac
    app.dependency_overrides.clear()
