"""Client aggregation — derive dashboard and calendar fields from a client's meetings.

Everything here is recomputed from the two source lists on every read; nothing
derived (last meeting, next meeting) is ever stored.
"""

from __future__ import annotations

import datetime as dt
import uuid
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from portfolai.models.crm import Client, Meeting, ScheduledMeeting
from portfolai.models.enums import CalendarEntryKind, Sentiment

# Shown in place of a meeting when there is none
NO_MEETING = "-"


@dataclass(frozen=True)
class CalendarEntry:
    kind: CalendarEntryKind
    entry_id: uuid.UUID
    client_id: uuid.UUID
    client_name: str
    date: dt.date
    time: dt.time | None = None
    summary: str | None = None
    notes: str | None = None
    # Scheduled entries display as neutral; that value is never persisted
    sentiment: Sentiment | None = None


@dataclass
class ClientSummary:
    client: Client
    last_meeting: Meeting | str
    next_meeting: ScheduledMeeting | str
    meetings: list[Meeting] = field(default_factory=list)
    scheduled_meetings: list[ScheduledMeeting] = field(default_factory=list)

    @property
    def last_sentiment(self) -> Sentiment | None:
        if isinstance(self.last_meeting, Meeting):
            return self.last_meeting.sentiment
        return None

    def meetings_on_date(self, day: dt.date) -> list[CalendarEntry]:
        """Documented and scheduled meetings falling on ``day``, documented first."""
        entries = [
            CalendarEntry(
                kind=CalendarEntryKind.DOCUMENTED,
                entry_id=meeting.id,
                client_id=self.client.id,
                client_name=self.client.name,
                date=meeting.date,
                summary=meeting.summary,
                notes=meeting.notes,
                sentiment=meeting.sentiment,
            )
            for meeting in self.meetings
            if meeting.date == day
        ]
        entries.extend(
            CalendarEntry(
                kind=CalendarEntryKind.SCHEDULED,
                entry_id=scheduled.id,
                client_id=self.client.id,
                client_name=self.client.name,
                date=scheduled.date,
                time=scheduled.time,
                sentiment=Sentiment.NEUTRAL,
            )
            for scheduled in self.scheduled_meetings
            if scheduled.date == day
        )
        return entries


def _slot(scheduled: ScheduledMeeting) -> dt.datetime:
    return dt.datetime.combine(scheduled.date, scheduled.time)


def last_meeting(meetings: Iterable[Meeting]) -> Meeting | str:
    """Meeting with the latest date; on equal dates the one created last wins."""
    latest: Meeting | None = None
    # sorted() is stable, so rows without a creation time keep their given order
    for meeting in sorted(meetings, key=lambda m: m.created_at or dt.datetime.min):
        if latest is None or meeting.date >= latest.date:
            latest = meeting
    return latest if latest is not None else NO_MEETING


def next_meeting(
    scheduled_meetings: Iterable[ScheduledMeeting],
    now: dt.datetime | None = None,
) -> ScheduledMeeting | str:
    """Earliest scheduled slot strictly after ``now``. Past slots are ignored."""
    now = now or dt.datetime.now()
    upcoming = [s for s in scheduled_meetings if _slot(s) > now]
    if not upcoming:
        return NO_MEETING
    return min(upcoming, key=_slot)


def aggregate(
    client: Client,
    meetings: Sequence[Meeting],
    scheduled_meetings: Sequence[ScheduledMeeting],
    now: dt.datetime | None = None,
) -> ClientSummary:
    return ClientSummary(
        client=client,
        last_meeting=last_meeting(meetings),
        next_meeting=next_meeting(scheduled_meetings, now=now),
        meetings=list(meetings),
        scheduled_meetings=list(scheduled_meetings),
    )


def calendar_for_date(summaries: Iterable[ClientSummary], day: dt.date) -> list[CalendarEntry]:
    """All meetings on ``day`` across a set of clients, grouped by client."""
    entries: list[CalendarEntry] = []
    for summary in summaries:
        entries.extend(summary.meetings_on_date(day))
    return entries
