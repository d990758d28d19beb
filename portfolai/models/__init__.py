"""SQLAlchemy models package — import all models so Base.metadata is populated."""

from portfolai.models.base import BaseModel, ModelMixin
from portfolai.models.core import User
from portfolai.models.crm import Client, Meeting, ScheduledMeeting
from portfolai.models.enums import CalendarEntryKind, Sentiment

__all__ = [
    "BaseModel",
    "CalendarEntryKind",
    "Client",
    "Meeting",
    "ModelMixin",
    "ScheduledMeeting",
    "Sentiment",
    "User",
]
