"""
Tests for access and refresh token issuing and verification.
"""
from datetime import datetime, timedelta, timezone

import pytest

from woundiq.auth.exceptions import InvalidTokenException, TokenExpiredException
from woundiq.auth.tokens import TokenIssuer, TokenSettings


def test_access_token_round_trip(token_issuer):
    issued = token_issuer.create_access_token(7, "nurse@woundcare.org", "clinician")

    claims = token_issuer.verify_access_token(issued.token)

    assert claims.user_id == 7
    assert claims.email == "nurse@woundcare.org"
    assert claims.role == "clinician"


def test_access_token_expires_after_24_hours(token_issuer):
    before = datetime.now(timezone.utc)
    issued = token_issuer.create_access_token(1, "a@x.com", "patient")

    assert timedelta(hours=23, minutes=59) < issued.expires_at - before <= timedelta(hours=24, seconds=1)


def test_refresh_token_expires_after_7_days(token_issuer):
    before = datetime.now(timezone.utc)
    issued = token_issuer.create_refresh_token(1)

    assert timedelta(days=6, hours=23) < issued.expires_at - before <= timedelta(days=7, seconds=1)
    assert token_issuer.verify_refresh_token(issued.token) == 1


def test_refresh_tokens_are_unique_per_issue(token_issuer):
    first = token_issuer.create_refresh_token(1)
    second = token_issuer.create_refresh_token(1)

    assert first.token != second.token


def test_expired_token_is_reported_distinctly():
    issuer = TokenIssuer(TokenSettings(
        secret_key="test-signing-key",
        access_token_ttl=timedelta(seconds=-5),
        refresh_token_ttl=timedelta(seconds=-5),
    ))
    access = issuer.create_access_token(1, "a@x.com", "patient")
    refresh = issuer.create_refresh_token(1)

    with pytest.raises(TokenExpiredException):
        issuer.verify_access_token(access.token)
    with pytest.raises(TokenExpiredException):
        issuer.verify_refresh_token(refresh.token)


def test_token_signed_with_other_key_is_invalid(token_issuer):
    other = TokenIssuer(TokenSettings(secret_key="another-key"))
    issued = other.create_access_token(1, "a@x.com", "patient")

    with pytest.raises(InvalidTokenException):
        token_issuer.verify_access_token(issued.token)


def test_malformed_token_is_invalid(token_issuer):
    with pytest.raises(InvalidTokenException):
        token_issuer.verify_access_token("not.a.jwt")


def test_token_types_are_not_interchangeable(token_issuer):
    access = token_issuer.create_access_token(1, "a@x.com", "patient")
    refresh = token_issuer.create_refresh_token(1)

    with pytest.raises(InvalidTokenException):
        token_issuer.verify_access_token(refresh.token)
    with pytest.raises(InvalidTokenException):
        token_issuer.verify_refresh_token(access.token)


def test_empty_signing_key_is_rejected():
    with pytest.raises(ValueError):
        TokenSettings(secret_key="")
