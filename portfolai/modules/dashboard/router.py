"""Dashboard API router — per-client summaries and the calendar day view."""

from __future__ import annotations

import datetime as dt
import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from portfolai.auth.dependencies import get_current_user
from portfolai.core.database import get_db
from portfolai.modules.dashboard import service
from portfolai.modules.dashboard.schemas import (
    CalendarEntryResponse,
    CalendarResponse,
    ClientSummaryResponse,
    DashboardResponse,
)
from portfolai.schemas.auth import CurrentUser

router = APIRouter(tags=["dashboard"])


@router.get("/dashboard", response_model=DashboardResponse)
async def get_dashboard(
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Every client with its last meeting, last sentiment and next scheduled meeting."""
    summaries = await service.client_summaries(db, owner_id=current_user.user_id)
    return DashboardResponse(
        clients=[ClientSummaryResponse.from_summary(s) for s in summaries],
        total=len(summaries),
    )


@router.get("/clients/{client_id}/summary", response_model=ClientSummaryResponse)
async def get_client_summary(
    client_id: uuid.UUID,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    summary = await service.client_summary(
        db, owner_id=current_user.user_id, client_id=client_id
    )
    return ClientSummaryResponse.from_summary(summary)


@router.get("/calendar/{day}", response_model=CalendarResponse)
async def get_calendar_day(
    day: dt.date,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Documented and scheduled meetings across all clients on one day."""
    entries = await service.calendar_day(db, owner_id=current_user.user_id, day=day)
    return CalendarResponse(
        date=day,
        entries=[CalendarEntryResponse.model_validate(e) for e in entries],
    )
