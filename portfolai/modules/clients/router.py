"""Clients API router."""

from __future__ import annotations

import uuid

import structlog
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from portfolai.auth.dependencies import get_current_user
from portfolai.core.database import get_db
from portfolai.modules.clients import service
from portfolai.modules.clients.schemas import ClientListResponse, ClientRequest, ClientResponse
from portfolai.schemas.auth import CurrentUser

logger = structlog.get_logger()

router = APIRouter(prefix="/clients", tags=["clients"])


@router.get("", response_model=ClientListResponse)
async def list_clients(
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """List the current advisor's clients, newest first."""
    clients = await service.list_clients(db, owner_id=current_user.user_id)
    return ClientListResponse(
        items=[ClientResponse.model_validate(c) for c in clients],
        total=len(clients),
    )


@router.post("", response_model=ClientResponse, status_code=status.HTTP_201_CREATED)
async def create_client(
    body: ClientRequest,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    client = await service.create_client(
        db, owner_id=current_user.user_id, name=body.name, phone=body.phone
    )
    await db.commit()
    return ClientResponse.model_validate(client)


@router.get("/{client_id}", response_model=ClientResponse)
async def get_client(
    client_id: uuid.UUID,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    client = await service.get_client(db, client_id=client_id, owner_id=current_user.user_id)
    return ClientResponse.model_validate(client)


@router.put("/{client_id}", response_model=ClientResponse)
async def update_client(
    client_id: uuid.UUID,
    body: ClientRequest,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    client = await service.update_client(
        db,
        client_id=client_id,
        owner_id=current_user.user_id,
        name=body.name,
        phone=body.phone,
    )
    await db.commit()
    return ClientResponse.model_validate(client)


@router.delete("/{client_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_client(
    client_id: uuid.UUID,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Delete a client together with all of its meetings and scheduled meetings."""
    await service.delete_client(db, client_id=client_id, owner_id=current_user.user_id)
    await db.commit()
