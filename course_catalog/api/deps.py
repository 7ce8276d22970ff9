from __future__ import annotations

from collections.abc import AsyncIterator

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from course_catalog.core.auth import TokenError, decode_access_token
from course_catalog.domain import User
from course_catalog.infrastructure.db.session import get_session
from course_catalog.libs.rating_client import RatingClient

bearer_scheme = HTTPBearer(auto_error=False)


def _user_from_credentials(credentials: HTTPAuthorizationCredentials) -> User:
    try:
        payload = decode_access_token(credentials.credentials)
    except TokenError as exc:
        raise _unauthorized(str(exc)) from exc

    return User(
        user_id=payload["sub"],
        name=payload.get("name"),
        image=payload.get("image"),
        email=payload.get("email", ""),
    )


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),  # noqa: B008
) -> User:
    """Resolve the authenticated user from a bearer token."""
    if credentials is None:
        raise _unauthorized("Unauthorized")
    return _user_from_credentials(credentials)


async def get_optional_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),  # noqa: B008
) -> User | None:
    """Resolve the user when a token is sent; anonymous callers get None."""
    if credentials is None:
        return None
    return _user_from_credentials(credentials)


async def get_db_session() -> AsyncIterator[AsyncSession]:
    """Provide an async SQLAlchemy session for API handlers."""
    async for session in get_session():
        yield session


def get_rating_client() -> RatingClient:
    return RatingClient()


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)
