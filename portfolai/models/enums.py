"""Enums shared by models and schemas."""

import enum


class Sentiment(str, enum.Enum):
    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"


class CalendarEntryKind(str, enum.Enum):
    DOCUMENTED = "documented"
    SCHEDULED = "scheduled"
