from __future__ import annotations

from collections.abc import AsyncIterator

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from instructormatch.core.auth import (
    PROFILE_CLAIMS,
    TokenError,
    create_access_token,
    decode_access_token,
)
from instructormatch.domain import User
from instructormatch.domain.services.profiles import ProfileService
from instructormatch.infrastructure.db.models import UserModel
from instructormatch.infrastructure.db.session import get_session
from sqlalchemy.ext.asyncio import AsyncSession

bearer_scheme = HTTPBearer(auto_error=False)


async def get_db_session() -> AsyncIterator[AsyncSession]:
    """Provide an async SQLAlchemy session for API handlers."""
    async for session in get_session():
        yield session


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),  # noqa: B008
) -> User:
    """Resolve the authenticated subject from a bearer token."""
    if credentials is None:
        raise _unauthorized("Unauthorized")

    try:
        payload = decode_access_token(credentials.credentials)
    except TokenError as exc:
        raise _unauthorized(str(exc)) from exc

    user_id = payload.get("sub")
    if not user_id:
        raise _unauthorized("Token missing subject")

    return User(
        user_id=str(user_id),
        **{claim: payload.get(claim) for claim in PROFILE_CLAIMS},
        claims=payload,
    )


async def get_current_account(
    user: User = Depends(get_current_user),  # noqa: B008
    session: AsyncSession = Depends(get_db_session),  # noqa: B008
) -> UserModel:
    """Return the local users row for the caller, creating it on first login."""
    return await ProfileService(session).ensure_user(user)


def issue_smoke_token(user_id: str, *, email: str | None = None) -> str:
    """Generate a signed token for manual smoke testing."""
    return create_access_token(user_id, email=email)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )
