"""Persistence helpers for clients, meetings and scheduled meetings.

Every lookup that starts from a client id is scoped to the owning user, so a
client that exists but belongs to someone else is indistinguishable from one
that does not exist.
"""

from __future__ import annotations

import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from portfolai.models.crm import Client, Meeting, ScheduledMeeting


async def find_client(db: AsyncSession, client_id: uuid.UUID, owner_id: uuid.UUID) -> Client | None:
    result = await db.execute(
        select(Client).where(Client.id == client_id, Client.user_id == owner_id)
    )
    return result.scalar_one_or_none()


async def insert_meeting(db: AsyncSession, meeting: Meeting) -> Meeting:
    db.add(meeting)
    await db.flush()
    return meeting


async def insert_scheduled_meeting(db: AsyncSession, scheduled: ScheduledMeeting) -> ScheduledMeeting:
    db.add(scheduled)
    await db.flush()
    return scheduled


async def list_meetings(db: AsyncSession, client_id: uuid.UUID) -> list[Meeting]:
    """Meetings for a client, most recent date first."""
    result = await db.execute(
        select(Meeting)
        .where(Meeting.client_id == client_id)
        .order_by(Meeting.date.desc(), Meeting.created_at.desc())
    )
    return list(result.scalars().all())


async def list_scheduled_meetings(db: AsyncSession, client_id: uuid.UUID) -> list[ScheduledMeeting]:
    """Scheduled meetings for a client, earliest slot first."""
    result = await db.execute(
        select(ScheduledMeeting)
        .where(ScheduledMeeting.client_id == client_id)
        .order_by(ScheduledMeeting.date, ScheduledMeeting.time)
    )
    return list(result.scalars().all())
