"""Meetings API router — documented meetings, scheduled meetings, summary preview."""

from __future__ import annotations

import uuid

import structlog
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from portfolai.auth.dependencies import get_current_user
from portfolai.core.database import get_db
from portfolai.modules.clients.schemas import ClientResponse
from portfolai.modules.meetings import service
from portfolai.modules.meetings.schemas import (
    DocumentMeetingRequest,
    MeetingListResponse,
    MeetingResponse,
    NewClientMeetingRequest,
    NewClientMeetingResponse,
    ScheduledMeetingListResponse,
    ScheduledMeetingResponse,
    ScheduleMeetingRequest,
    SummaryPreviewRequest,
    SummaryPreviewResponse,
)
from portfolai.schemas.auth import CurrentUser
from portfolai.services.summarizer import MeetingSummarizer, get_summarizer

logger = structlog.get_logger()

router = APIRouter(tags=["meetings"])


@router.get("/clients/{client_id}/meetings", response_model=MeetingListResponse)
async def list_meetings(
    client_id: uuid.UUID,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """List a client's documented meetings, most recent first."""
    meetings = await service.list_meetings(db, owner_id=current_user.user_id, client_id=client_id)
    return MeetingListResponse(
        items=[MeetingResponse.model_validate(m) for m in meetings],
        total=len(meetings),
    )


@router.post(
    "/clients/{client_id}/meetings",
    response_model=MeetingResponse,
    status_code=status.HTTP_201_CREATED,
)
async def document_meeting(
    client_id: uuid.UUID,
    body: DocumentMeetingRequest,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    summarizer: MeetingSummarizer = Depends(get_summarizer),
):
    """Summarize meeting notes with AI and store the meeting.

    Returns 502 and stores nothing when summarization fails.
    """
    meeting = await service.document_meeting(
        db,
        summarizer,
        owner_id=current_user.user_id,
        client_id=client_id,
        meeting_date=body.date,
        notes=body.notes,
    )
    await db.commit()
    return MeetingResponse.model_validate(meeting)


@router.post(
    "/meetings/with-new-client",
    response_model=NewClientMeetingResponse,
    status_code=status.HTTP_201_CREATED,
)
async def document_meeting_for_new_client(
    body: NewClientMeetingRequest,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    summarizer: MeetingSummarizer = Depends(get_summarizer),
):
    """Create a client and document its first meeting.

    If summarization fails the client has already been created and is kept.
    """
    client, meeting = await service.create_client_then_document_meeting(
        db,
        summarizer,
        owner_id=current_user.user_id,
        client_name=body.client_name,
        client_phone=body.client_phone,
        meeting_date=body.date,
        notes=body.notes,
    )
    await db.commit()
    return NewClientMeetingResponse(
        client=ClientResponse.model_validate(client),
        meeting=MeetingResponse.model_validate(meeting),
    )


@router.post("/meetings/summary-preview", response_model=SummaryPreviewResponse)
async def summary_preview(
    body: SummaryPreviewRequest,
    current_user: CurrentUser = Depends(get_current_user),
    summarizer: MeetingSummarizer = Depends(get_summarizer),
):
    """Generate a summary and sentiment for notes without saving a meeting."""
    result = await service.summarize_preview(summarizer, body.notes)
    return SummaryPreviewResponse(summary=result.summary, sentiment=result.sentiment)


@router.get("/clients/{client_id}/scheduled-meetings", response_model=ScheduledMeetingListResponse)
async def list_scheduled_meetings(
    client_id: uuid.UUID,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    scheduled = await service.list_scheduled_meetings(
        db, owner_id=current_user.user_id, client_id=client_id
    )
    return ScheduledMeetingListResponse(
        items=[ScheduledMeetingResponse.model_validate(s) for s in scheduled],
        total=len(scheduled),
    )


@router.post(
    "/clients/{client_id}/scheduled-meetings",
    response_model=ScheduledMeetingResponse,
    status_code=status.HTTP_201_CREATED,
)
async def schedule_meeting(
    client_id: uuid.UUID,
    body: ScheduleMeetingRequest,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    scheduled = await service.schedule_meeting(
        db,
        owner_id=current_user.user_id,
        client_id=client_id,
        meeting_date=body.date,
        meeting_time=body.time,
    )
    await db.commit()
    return ScheduledMeetingResponse.model_validate(scheduled)
