"""Meetings service — document meetings with an AI summary, schedule future ones.

Ownership of the client is checked before anything else is read or written.
A documented meeting is only stored once the summarizer has produced both a
summary and a sentiment; when summarization fails nothing is stored.
"""

from __future__ import annotations

import re
import uuid
from datetime import date, datetime, time

import structlog
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from portfolai.core.errors import NotFoundError, PersistenceError, ValidationError
from portfolai.models.crm import Client, Meeting, ScheduledMeeting
from portfolai.modules.clients import service as client_service
from portfolai.modules.meetings import repository
from portfolai.services.summarizer import MeetingSummarizer, SummaryResult

logger = structlog.get_logger()

# 24-hour clock, leading zero required ("09:00", not "9:00")
TIME_PATTERN = re.compile(r"^([01][0-9]|2[0-3]):[0-5][0-9]$")


async def _owned_client(db: AsyncSession, owner_id: uuid.UUID, client_id: uuid.UUID) -> Client:
    client = await repository.find_client(db, client_id, owner_id)
    if client is None:
        raise NotFoundError("Client not found.")
    return client


def _clean_notes(notes: str | None) -> str:
    cleaned = (notes or "").strip()
    if not cleaned:
        raise ValidationError("Meeting notes are required.")
    return cleaned


def parse_meeting_time(value: str) -> time:
    """Parse an ``HH:MM`` 24-hour string. Raises ValidationError otherwise."""
    if not isinstance(value, str) or not TIME_PATTERN.match(value):
        raise ValidationError(
            "Time must be in 24-hour HH:MM format.", detail={"time": value}
        )
    return datetime.strptime(value, "%H:%M").time()


# ── Documented meetings ───────────────────────────────────────────────────────


async def document_meeting(
    db: AsyncSession,
    summarizer: MeetingSummarizer,
    owner_id: uuid.UUID,
    client_id: uuid.UUID,
    meeting_date: date,
    notes: str,
) -> Meeting:
    """Summarize the notes and store the meeting.

    Raises NotFoundError, ValidationError, SummarizationError (nothing stored)
    or PersistenceError (summary produced but the write failed).
    """
    client = await _owned_client(db, owner_id, client_id)
    cleaned_notes = _clean_notes(notes)

    result = await summarizer.summarize(cleaned_notes)

    meeting = Meeting(
        client_id=client.id,
        date=meeting_date,
        notes=cleaned_notes,
        summary=result.summary,
        sentiment=result.sentiment,
    )
    try:
        await repository.insert_meeting(db, meeting)
    except SQLAlchemyError as exc:
        logger.error("meetings.persist_failed", client_id=str(client.id), error=str(exc))
        raise PersistenceError("Failed to save the meeting.") from exc

    logger.info(
        "meetings.documented",
        meeting_id=str(meeting.id),
        client_id=str(client.id),
        sentiment=meeting.sentiment.value if meeting.sentiment else None,
    )
    return meeting


async def create_client_then_document_meeting(
    db: AsyncSession,
    summarizer: MeetingSummarizer,
    owner_id: uuid.UUID,
    client_name: str,
    client_phone: str | None,
    meeting_date: date,
    notes: str,
) -> tuple[Client, Meeting]:
    """Create a client, commit it, then document its first meeting.

    The client is committed before summarization runs, so it survives a
    SummarizationError raised by the second step.
    """
    client = await client_service.create_client(
        db, owner_id=owner_id, name=client_name, phone=client_phone
    )
    await db.commit()

    meeting = await document_meeting(
        db,
        summarizer,
        owner_id=owner_id,
        client_id=client.id,
        meeting_date=meeting_date,
        notes=notes,
    )
    return client, meeting


async def summarize_preview(summarizer: MeetingSummarizer, notes: str) -> SummaryResult:
    """Run the summarizer on notes without storing anything."""
    return await summarizer.summarize(_clean_notes(notes))


async def list_meetings(
    db: AsyncSession, owner_id: uuid.UUID, client_id: uuid.UUID
) -> list[Meeting]:
    client = await _owned_client(db, owner_id, client_id)
    return await repository.list_meetings(db, client.id)


# ── Scheduled meetings ────────────────────────────────────────────────────────


async def schedule_meeting(
    db: AsyncSession,
    owner_id: uuid.UUID,
    client_id: uuid.UUID,
    meeting_date: date,
    meeting_time: str,
) -> ScheduledMeeting:
    """Book a future slot. Overlapping slots are allowed."""
    client = await _owned_client(db, owner_id, client_id)
    slot_time = parse_meeting_time(meeting_time)

    scheduled = ScheduledMeeting(client_id=client.id, date=meeting_date, time=slot_time)
    try:
        await repository.insert_scheduled_meeting(db, scheduled)
    except SQLAlchemyError as exc:
        logger.error("meetings.schedule_persist_failed", client_id=str(client.id), error=str(exc))
        raise PersistenceError("Failed to save the scheduled meeting.") from exc

    logger.info(
        "meetings.scheduled",
        scheduled_meeting_id=str(scheduled.id),
        client_id=str(client.id),
    )
    return scheduled


async def list_scheduled_meetings(
    db: AsyncSession, owner_id: uuid.UUID, client_id: uuid.UUID
) -> list[ScheduledMeeting]:
    client = await _owned_client(db, owner_id, client_id)
    return await repository.list_scheduled_meetings(db, client.id)
