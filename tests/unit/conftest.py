from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest

from auth_service.adapter.services.argon2_secret_hasher import Argon2SecretHasher
from auth_service.adapter.services.jwt_token_issuer import JwtTokenIssuer
from auth_service.app.services.auth_settings import AuthSettings


@pytest.fixture
def settings():
    """Real settings with cheap Argon2 parameters"""
    return AuthSettings(
        access_token_ttl=timedelta(minutes=15),
        refresh_token_ttl=timedelta(days=7),
        reset_token_ttl=timedelta(hours=1),
        access_secret="unit-test-access-secret-0123456789",
        refresh_secret="unit-test-refresh-secret-0123456789",
        argon2_memory_cost=1024,
        argon2_time_cost=1,
        argon2_parallelism=1,
    )


@pytest.fixture
def hasher(settings):
    return Argon2SecretHasher(settings)


@pytest.fixture
def issuer(settings):
    return JwtTokenIssuer(settings)


@pytest.fixture
def mock_uow():
    """Mock UnitOfWork with the user repository"""
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock(return_value=False)  # Must return False to not suppress exceptions
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()

    uow.users = MagicMock()
    uow.users.get_by_email = AsyncMock(return_value=None)
    uow.users.get_by_username = AsyncMock(return_value=None)
    uow.users.get_by_id = AsyncMock(return_value=None)
    uow.users.create = AsyncMock()
    uow.users.update_refresh_token_hash = AsyncMock()
    uow.users.update_reset_token = AsyncMock()
    uow.users.update_password = AsyncMock(return_value=True)
    uow.users.purge_expired_resets = AsyncMock(return_value=0)
    return uow
