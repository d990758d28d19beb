"""Dashboard — Pydantic schemas for client summaries and the calendar."""

from __future__ import annotations

import datetime as dt
import uuid
from typing import Literal

from pydantic import BaseModel, ConfigDict

from portfolai.models.crm import Meeting, ScheduledMeeting
from portfolai.models.enums import CalendarEntryKind, Sentiment
from portfolai.modules.dashboard.aggregation import NO_MEETING, ClientSummary
from portfolai.modules.meetings.schemas import MeetingResponse, ScheduledMeetingResponse


class ClientSummaryResponse(BaseModel):
    client_id: uuid.UUID
    name: str
    phone: str | None
    last_meeting: MeetingResponse | Literal["-"]
    last_sentiment: Sentiment | None
    next_meeting: ScheduledMeetingResponse | Literal["-"]
    meeting_count: int
    scheduled_meeting_count: int

    @classmethod
    def from_summary(cls, summary: ClientSummary) -> "ClientSummaryResponse":
        last = summary.last_meeting
        upcoming = summary.next_meeting
        return cls(
            client_id=summary.client.id,
            name=summary.client.name,
            phone=summary.client.phone,
            last_meeting=(
                MeetingResponse.model_validate(last) if isinstance(last, Meeting) else NO_MEETING
            ),
            last_sentiment=summary.last_sentiment,
            next_meeting=(
                ScheduledMeetingResponse.model_validate(upcoming)
                if isinstance(upcoming, ScheduledMeeting)
                else NO_MEETING
            ),
            meeting_count=len(summary.meetings),
            scheduled_meeting_count=len(summary.scheduled_meetings),
        )


class DashboardResponse(BaseModel):
    clients: list[ClientSummaryResponse]
    total: int


class CalendarEntryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    kind: CalendarEntryKind
    entry_id: uuid.UUID
    client_id: uuid.UUID
    client_name: str
    date: dt.date
    time: dt.time | None
    summary: str | None
    notes: str | None
    sentiment: Sentiment | None


class CalendarResponse(BaseModel):
    date: dt.date
    entries: list[CalendarEntryResponse]
