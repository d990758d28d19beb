"""Meetings — Pydantic schemas."""

from __future__ import annotations

import datetime as dt
import uuid

from pydantic import BaseModel, ConfigDict

from portfolai.models.enums import Sentiment
from portfolai.modules.clients.schemas import ClientResponse


class DocumentMeetingRequest(BaseModel):
    date: dt.date
    notes: str


class NewClientMeetingRequest(BaseModel):
    """Create a client and document its first meeting in one call."""
    client_name: str
    client_phone: str | None = None
    date: dt.date
    notes: str


class ScheduleMeetingRequest(BaseModel):
    date: dt.date
    time: str  # HH:MM, 24-hour


class SummaryPreviewRequest(BaseModel):
    notes: str


class SummaryPreviewResponse(BaseModel):
    summary: str
    sentiment: Sentiment


class MeetingResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    client_id: uuid.UUID
    date: dt.date
    notes: str
    summary: str | None
    sentiment: Sentiment | None
    created_at: dt.datetime
    updated_at: dt.datetime


class MeetingListResponse(BaseModel):
    items: list[MeetingResponse]
    total: int


class NewClientMeetingResponse(BaseModel):
    client: ClientResponse
    meeting: MeetingResponse


class ScheduledMeetingResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    client_id: uuid.UUID
    date: dt.date
    time: dt.time
    created_at: dt.datetime
    updated_at: dt.datetime


class ScheduledMeetingListResponse(BaseModel):
    items: list[ScheduledMeetingResponse]
    total: int
