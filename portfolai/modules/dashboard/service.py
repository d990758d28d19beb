"""Dashboard service — load clients with their meetings and build summaries."""

from __future__ import annotations

import datetime as dt
import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from portfolai.core.errors import NotFoundError
from portfolai.models.crm import Client
from portfolai.modules.dashboard.aggregation import (
    CalendarEntry,
    ClientSummary,
    aggregate,
    calendar_for_date,
)


def _with_meetings(stmt):
    # populate_existing: collections already in the session may predate new meetings
    return stmt.options(
        selectinload(Client.meetings),
        selectinload(Client.scheduled_meetings),
    ).execution_options(populate_existing=True)


async def client_summaries(
    db: AsyncSession,
    owner_id: uuid.UUID,
    now: dt.datetime | None = None,
) -> list[ClientSummary]:
    result = await db.execute(
        _with_meetings(select(Client))
        .where(Client.user_id == owner_id)
        .order_by(Client.created_at.desc())
    )
    return [
        aggregate(client, client.meetings, client.scheduled_meetings, now=now)
        for client in result.scalars().all()
    ]


async def client_summary(
    db: AsyncSession,
    owner_id: uuid.UUID,
    client_id: uuid.UUID,
    now: dt.datetime | None = None,
) -> ClientSummary:
    result = await db.execute(
        _with_meetings(select(Client)).where(Client.id == client_id, Client.user_id == owner_id)
    )
    client = result.scalar_one_or_none()
    if client is None:
        raise NotFoundError("Client not found.")
    return aggregate(client, client.meetings, client.scheduled_meetings, now=now)


async def calendar_day(db: AsyncSession, owner_id: uuid.UUID, day: dt.date) -> list[CalendarEntry]:
    return calendar_for_date(await client_summaries(db, owner_id), day)
