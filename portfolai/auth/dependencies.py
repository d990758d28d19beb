"""FastAPI auth dependencies: get_current_user."""

import uuid

import sentry_sdk
import structlog
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from portfolai.core.database import get_db
from portfolai.core.security import decode_access_token
from portfolai.models.core import User
from portfolai.schemas.auth import CurrentUser

logger = structlog.get_logger()

bearer_scheme = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db),
) -> CurrentUser:
    """
    Verify the bearer JWT and resolve the advisor it was issued to.

    Every request carries its own credential; nothing about the caller is
    held between requests.
    """
    if credentials is None:
        raise _unauthorized("Access denied. No token provided.")

    try:
        payload = decode_access_token(credentials.credentials)
    except JWTError as e:
        logger.warning("jwt_verification_failed", error=str(e))
        raise _unauthorized("Invalid or expired token") from e

    subject = payload.get("sub")
    try:
        user_id = uuid.UUID(str(subject))
    except ValueError as e:
        raise _unauthorized("Token missing subject claim") from e

    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()
    if user is None:
        logger.warning("user_not_found_for_token", user_id=str(user_id))
        raise _unauthorized("User not found")

    # PII-free: no email
    sentry_sdk.set_user({"id": str(user.id)})

    return CurrentUser(user_id=user.id, email=user.email, full_name=user.full_name)
