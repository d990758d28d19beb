"""Advisor CRM models: Client, Meeting (documented), ScheduledMeeting."""

import datetime as dt
import uuid

from sqlalchemy import Date, Enum, ForeignKey, Index, String, Text, Time
from sqlalchemy.orm import Mapped, mapped_column, relationship

from portfolai.models.base import BaseModel
from portfolai.models.enums import Sentiment


class Client(BaseModel):
    """A person an advisor works with. Owned by exactly one user."""

    __tablename__ = "clients"
    __table_args__ = (
        Index("ix_clients_user_id", "user_id"),
    )

    user_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[str | None] = mapped_column(String(50))

    # Relationships
    owner: Mapped["User"] = relationship(back_populates="clients")  # type: ignore[name-defined]  # noqa: F821
    meetings: Mapped[list["Meeting"]] = relationship(
        back_populates="client",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by=lambda: Meeting.date.desc(),
    )
    scheduled_meetings: Mapped[list["ScheduledMeeting"]] = relationship(
        back_populates="client",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by=lambda: (ScheduledMeeting.date, ScheduledMeeting.time),
    )

    def __repr__(self) -> str:
        return f"<Client(id={self.id}, name={self.name!r})>"


class Meeting(BaseModel):
    """A documented past meeting. Immutable once created.

    summary and sentiment are written together by the summarizer, or not at all.
    """

    __tablename__ = "meetings"
    __table_args__ = (
        Index("ix_meetings_client_id", "client_id"),
        Index("ix_meetings_date", "date"),
    )

    client_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("clients.id", ondelete="CASCADE"),
        nullable=False,
    )
    date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    notes: Mapped[str] = mapped_column(Text, nullable=False)
    summary: Mapped[str | None] = mapped_column(Text)
    sentiment: Mapped[Sentiment | None] = mapped_column(
        Enum(
            Sentiment,
            native_enum=False,
            length=20,
            values_callable=lambda enum_cls: [member.value for member in enum_cls],
        )
    )

    client: Mapped["Client"] = relationship(back_populates="meetings")


class ScheduledMeeting(BaseModel):
    """A future meeting slot. Carries no notes until it is documented separately."""

    __tablename__ = "scheduled_meetings"
    __table_args__ = (
        Index("ix_scheduled_meetings_client_id", "client_id"),
        Index("ix_scheduled_meetings_date", "date"),
    )

    client_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("clients.id", ondelete="CASCADE"),
        nullable=False,
    )
    date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    time: Mapped[dt.time] = mapped_column(Time, nullable=False)

    client: Mapped["Client"] = relationship(back_populates="scheduled_meetings")
