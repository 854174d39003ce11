"""
Unit tests for RefreshTokenUseCase

The mocked repository writes the refresh slot back onto the User so that
rotation can be observed across calls.
"""

from datetime import UTC, datetime, timedelta
from uuid import uuid4

import pytest
import pytest_asyncio
from jose import jwt

from auth_service.app.use_cases.auth import LogoutUseCase, RefreshTokenUseCase
from auth_service.domain.entities import User


@pytest_asyncio.fixture
async def session(mock_uow, hasher, issuer):
    """A logged-in user and the pair it was issued"""
    user = User(id=uuid4(), email="user@example.com", username="alice", password_hash="x")
    tokens = issuer.issue(user.id, user.email)
    user.refresh_token_hash = await hasher.hash(tokens.refresh_token)

    async def store_refresh_hash(user_id, refresh_token_hash):
        if user_id == user.id:
            user.refresh_token_hash = refresh_token_hash

    mock_uow.users.get_by_id.return_value = user
    mock_uow.users.update_refresh_token_hash.side_effect = store_refresh_hash
    return user, tokens


@pytest.mark.asyncio
async def test_successful_refresh_rotates_tokens(mock_uow, hasher, issuer, session):
    user, tokens = session
    old_hash = user.refresh_token_hash
    use_case = RefreshTokenUseCase(mock_uow, hasher, issuer)

    result = await use_case.execute(user.id, tokens.refresh_token)

    assert result.is_ok()
    data = result.value
    assert data.refresh_token != tokens.refresh_token
    assert user.refresh_token_hash != old_hash
    assert await hasher.verify(user.refresh_token_hash, data.refresh_token)
    assert issuer.verify_access(data.access_token).subject == user.id
    mock_uow.commit.assert_called_once()


@pytest.mark.asyncio
async def test_rotated_out_token_is_rejected(mock_uow, hasher, issuer, session):
    user, pair_a = session
    use_case = RefreshTokenUseCase(mock_uow, hasher, issuer)

    pair_b = await use_case.execute(user.id, pair_a.refresh_token)
    replay = await use_case.execute(user.id, pair_a.refresh_token)

    assert pair_b.is_ok()
    assert replay.is_err()
    assert replay.error.code == "INVALID_REFRESH_TOKEN"

    # The newest token keeps working
    pair_c = await use_case.execute(user.id, pair_b.value.refresh_token)
    assert pair_c.is_ok()


@pytest.mark.asyncio
async def test_refresh_after_logout_is_denied(mock_uow, hasher, issuer, session):
    user, tokens = session

    await LogoutUseCase(mock_uow).execute(user.id)
    result = await RefreshTokenUseCase(mock_uow, hasher, issuer).execute(
        user.id, tokens.refresh_token
    )

    assert user.refresh_token_hash is None
    assert result.is_err()
    assert result.error.code == "ACCESS_DENIED"


@pytest.mark.asyncio
async def test_refresh_unknown_user_is_denied(mock_uow, hasher, issuer):
    user_id = uuid4()
    tokens = issuer.issue(user_id, "ghost@example.com")
    mock_uow.users.get_by_id.return_value = None

    result = await RefreshTokenUseCase(mock_uow, hasher, issuer).execute(
        user_id, tokens.refresh_token
    )

    assert result.error.code == "ACCESS_DENIED"
    mock_uow.commit.assert_not_called()


@pytest.mark.asyncio
async def test_refresh_with_other_subjects_token(mock_uow, hasher, issuer, session):
    user, _ = session
    foreign = issuer.issue(uuid4(), "other@example.com")

    result = await RefreshTokenUseCase(mock_uow, hasher, issuer).execute(
        user.id, foreign.refresh_token
    )

    assert result.error.code == "INVALID_REFRESH_TOKEN"
    mock_uow.users.get_by_id.assert_not_called()


@pytest.mark.asyncio
async def test_access_token_cannot_refresh(mock_uow, hasher, issuer, session):
    user, tokens = session

    result = await RefreshTokenUseCase(mock_uow, hasher, issuer).execute(
        user.id, tokens.access_token
    )

    assert result.error.code == "INVALID_REFRESH_TOKEN"


@pytest.mark.asyncio
async def test_expired_refresh_token(mock_uow, hasher, issuer, settings, session):
    user, _ = session
    past = datetime.now(UTC) - timedelta(days=30)
    expired = jwt.encode(
        {
            "sub": str(user.id),
            "email": user.email,
            "type": "refresh",
            "iat": past,
            "exp": past + settings.refresh_token_ttl,
        },
        settings.refresh_secret,
        algorithm="HS256",
    )

    result = await RefreshTokenUseCase(mock_uow, hasher, issuer).execute(user.id, expired)

    assert result.error.code == "TOKEN_EXPIRED"
    mock_uow.users.update_refresh_token_hash.assert_not_called()


@pytest.mark.asyncio
async def test_corrupted_stored_hash_fails_closed(mock_uow, hasher, issuer, session):
    user, tokens = session
    user.refresh_token_hash = "$argon2id$corrupted"

    result = await RefreshTokenUseCase(mock_uow, hasher, issuer).execute(
        user.id, tokens.refresh_token
    )

    assert result.error.code == "INVALID_REFRESH_TOKEN"
