"""
Unit tests for JwtTokenIssuer
"""

from datetime import UTC, datetime, timedelta
from uuid import uuid4

import pytest
from jose import jwt

from auth_service.app.services.token_issuer import (
    ExpiredTokenError,
    InvalidSignatureError,
)


def test_issue_and_verify_both_tokens(issuer):
    user_id = uuid4()

    pair = issuer.issue(user_id, "user@example.com")

    access = issuer.verify_access(pair.access_token)
    refresh = issuer.verify_refresh(pair.refresh_token)

    assert access.subject == user_id
    assert access.email == "user@example.com"
    assert access.token_type == "access"
    assert refresh.subject == user_id
    assert refresh.token_type == "refresh"
    assert access.expires_at - access.issued_at == timedelta(minutes=15)
    assert refresh.expires_at - refresh.issued_at == timedelta(days=7)


def test_tokens_are_not_interchangeable(issuer):
    pair = issuer.issue(uuid4(), "user@example.com")

    with pytest.raises(InvalidSignatureError):
        issuer.verify_access(pair.refresh_token)

    with pytest.raises(InvalidSignatureError):
        issuer.verify_refresh(pair.access_token)


def test_each_issue_yields_new_tokens(issuer):
    user_id = uuid4()

    first = issuer.issue(user_id, "user@example.com")
    second = issuer.issue(user_id, "user@example.com")

    assert first.refresh_token != second.refresh_token
    assert first.access_token != second.access_token


def test_expired_refresh_token(issuer, settings):
    past = datetime.now(UTC) - timedelta(days=8)
    token = jwt.encode(
        {
            "sub": str(uuid4()),
            "email": "user@example.com",
            "type": "refresh",
            "iat": past,
            "exp": past + timedelta(days=7),
        },
        settings.refresh_secret,
        algorithm="HS256",
    )

    with pytest.raises(ExpiredTokenError):
        issuer.verify_refresh(token)


def test_token_signed_with_foreign_key_is_rejected(issuer):
    now = datetime.now(UTC)
    token = jwt.encode(
        {
            "sub": str(uuid4()),
            "email": "user@example.com",
            "type": "refresh",
            "iat": now,
            "exp": now + timedelta(days=1),
        },
        "attacker-chosen-secret-0123456789",
        algorithm="HS256",
    )

    with pytest.raises(InvalidSignatureError):
        issuer.verify_refresh(token)


def test_tampered_and_garbage_tokens_are_rejected(issuer):
    pair = issuer.issue(uuid4(), "user@example.com")
    header, payload, signature = pair.access_token.split(".")
    tampered = ".".join([header, payload, signature[:-2] + "AA"])

    for token in [tampered, "not.a.jwt", ""]:
        with pytest.raises(InvalidSignatureError):
            issuer.verify_access(token)


def test_missing_claims_are_rejected(issuer, settings):
    now = datetime.now(UTC)
    token = jwt.encode(
        {"type": "access", "iat": now, "exp": now + timedelta(minutes=5)},
        settings.access_secret,
        algorithm="HS256",
    )

    with pytest.raises(InvalidSignatureError):
        issuer.verify_access(token)
