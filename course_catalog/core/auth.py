from __future__ import annotations

from datetime import UTC, datetime, timedelta

import jwt

from course_catalog.core.config import get_settings


class TokenError(Exception):
    """Raised when a token cannot be decoded or validated."""


def create_access_token(
    subject: str,
    *,
    name: str | None = None,
    image: str | None = None,
    email: str | None = None,
    expires_delta: timedelta | None = None,
) -> str:
    """Generate a signed session token as issued by the identity provider."""
    settings = get_settings()

    now = datetime.now(UTC)
    ttl = expires_delta or timedelta(seconds=settings.access_token_ttl_seconds)
    payload = {
        "sub": subject,
        "iat": int(now.timestamp()),
        "exp": int((now + ttl).timestamp()),
        "iss": settings.app_name,
    }

    # Optional profile claims are embedded into non-anonymous insights
    if name:
        payload["name"] = name
    if image:
        payload["image"] = image
    if email:
        payload["email"] = email

    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> dict:
    """Decode and validate a session token."""
    settings = get_settings()

    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            options={"require": ["sub", "exp"]},
        )
    except jwt.PyJWTError as exc:  # pragma: no cover - third-party raises numerous subclasses
        raise TokenError("Invalid token") from exc

    if not payload.get("sub"):
        raise TokenError("Token missing subject")
    return payload
