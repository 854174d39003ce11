"""
Unit tests for RequestPasswordResetUseCase
"""

from datetime import datetime, timedelta
from uuid import uuid4

import pytest

from auth_service.app.use_cases.auth import RequestPasswordResetUseCase
from auth_service.domain.entities import User

NOW = datetime(2026, 1, 1, 12, 0, 0)


@pytest.mark.asyncio
async def test_successful_password_reset_request(mock_uow, hasher, settings):
    user = User(id=uuid4(), email="user@example.com", username="alice", password_hash="x")
    mock_uow.users.get_by_email.return_value = user
    use_case = RequestPasswordResetUseCase(mock_uow, hasher, settings, clock=lambda: NOW)

    result = await use_case.execute("user@example.com")

    assert result.is_ok()
    data = result.value
    assert data.expires_at == NOW + timedelta(hours=1)
    # 32 random bytes, url-safe base64 without padding
    assert len(data.reset_token) >= 43

    mock_uow.users.update_reset_token.assert_called_once()
    user_id, token_hash, expiry = mock_uow.users.update_reset_token.call_args.args
    assert user_id == user.id
    assert token_hash != data.reset_token
    assert await hasher.verify(token_hash, data.reset_token)
    assert expiry == data.expires_at
    mock_uow.commit.assert_called_once()
    mock_uow.users.purge_expired_resets.assert_called_once_with(NOW)


@pytest.mark.asyncio
async def test_password_reset_request_unknown_email(mock_uow, hasher, settings):
    mock_uow.users.get_by_email.return_value = None
    use_case = RequestPasswordResetUseCase(mock_uow, hasher, settings)

    result = await use_case.execute("nobody@example.com")

    assert result.is_err()
    assert result.error.code == "USER_NOT_FOUND"
    mock_uow.users.update_reset_token.assert_not_called()
    mock_uow.users.purge_expired_resets.assert_not_called()
    mock_uow.commit.assert_not_called()


@pytest.mark.asyncio
async def test_each_request_issues_a_fresh_token(mock_uow, hasher, settings):
    mock_uow.users.get_by_email.return_value = User(
        id=uuid4(), email="user@example.com", username="alice", password_hash="x"
    )
    use_case = RequestPasswordResetUseCase(mock_uow, hasher, settings)

    first = await use_case.execute("user@example.com")
    second = await use_case.execute("user@example.com")

    assert first.value.reset_token != second.value.reset_token
    assert mock_uow.users.update_reset_token.call_count == 2
