from datetime import timedelta

import pytest

from course_catalog.core.auth import TokenError, create_access_token, decode_access_token


def test_create_and_decode_token_roundtrip() -> None:
    token = create_access_token(
        "user-123", name="Alex Student", image="https://example.com/a.png", email="a@example.com"
    )

    payload = decode_access_token(token)

    assert payload["sub"] == "user-123"
    assert payload["name"] == "Alex Student"
    assert payload["image"] == "https://example.com/a.png"
    assert payload["email"] == "a@example.com"


def test_optional_profile_claims_are_omitted() -> None:
    payload = decode_access_token(create_access_token("user-123"))

    assert "name" not in payload
    assert "image" not in payload


def test_expired_token_is_rejected() -> None:
    token = create_access_token("user-123", expires_delta=timedelta(seconds=-10))

    with pytest.raises(TokenError):
        decode_access_token(token)


def test_garbage_token_is_rejected() -> None:
    with pytest.raises(TokenError):
        decode_access_token("not-a-token")
