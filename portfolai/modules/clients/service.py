"""Clients service — owner-scoped CRUD for an advisor's clients."""

from __future__ import annotations

import uuid

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from portfolai.core.errors import NotFoundError, ValidationError
from portfolai.models.crm import Client
from portfolai.modules.meetings import repository

logger = structlog.get_logger()


def _clean_name(name: str | None) -> str:
    cleaned = (name or "").strip()
    if not cleaned:
        raise ValidationError("Client name is required.")
    return cleaned


def _clean_phone(phone: str | None) -> str | None:
    cleaned = (phone or "").strip()
    return cleaned or None


async def list_clients(db: AsyncSession, owner_id: uuid.UUID) -> list[Client]:
    result = await db.execute(
        select(Client)
        .where(Client.user_id == owner_id)
        .order_by(Client.created_at.desc())
    )
    return list(result.scalars().all())


async def get_client(db: AsyncSession, client_id: uuid.UUID, owner_id: uuid.UUID) -> Client:
    client = await repository.find_client(db, client_id, owner_id)
    if client is None:
        raise NotFoundError("Client not found.")
    return client


async def create_client(
    db: AsyncSession,
    owner_id: uuid.UUID,
    name: str,
    phone: str | None = None,
) -> Client:
    client = Client(user_id=owner_id, name=_clean_name(name), phone=_clean_phone(phone))
    db.add(client)
    await db.flush()
    logger.info("clients.created", client_id=str(client.id))
    return client


async def update_client(
    db: AsyncSession,
    client_id: uuid.UUID,
    owner_id: uuid.UUID,
    name: str,
    phone: str | None = None,
) -> Client:
    client = await get_client(db, client_id, owner_id)
    client.name = _clean_name(name)
    client.phone = _clean_phone(phone)
    await db.flush()
    return client


async def delete_client(db: AsyncSession, client_id: uuid.UUID, owner_id: uuid.UUID) -> None:
    """Delete a client; its meetings and scheduled meetings go with it (ON DELETE CASCADE)."""
    client = await get_client(db, client_id, owner_id)
    await db.delete(client)
    await db.flush()
    logger.info("clients.deleted", client_id=str(client_id))
