"""Unit tests for IdentityService."""

from datetime import timedelta
from uuid import uuid4

import pytest

from tally.config import AuthSettings
from tally.domain.error import InvalidCredentialError, MissingCredentialError
from tally.domain.service import IdentityService
from tally.domain.value import UserId
from tally.util.jwt import create_token
from tests.harness import create_env_fixture

unit_env = create_env_fixture()


class TestAuthenticate:
    """Tests for authenticate."""

    @pytest.mark.asyncio
    async def test_valid_bearer_token_yields_user_id(self, unit_env):
        identity_service = await unit_env.get(IdentityService)
        user_id = UserId(uuid4())
        token = create_token(str(user_id), identity_service.auth_settings)

        assert identity_service.authenticate(f"Bearer {token}") == user_id

    @pytest.mark.asyncio
    async def test_scheme_is_case_insensitive(self, unit_env):
        identity_service = await unit_env.get(IdentityService)
        user_id = UserId(uuid4())
        token = create_token(str(user_id), identity_service.auth_settings)

        assert identity_service.authenticate(f"bearer {token}") == user_id

    @pytest.mark.asyncio
    @pytest.mark.parametrize("header", [None, "", "Bearer", "Bearer  ", "Basic abc", "token"])
    async def test_missing_or_malformed_header(self, unit_env, header):
        identity_service = await unit_env.get(IdentityService)

        with pytest.raises(MissingCredentialError):
            identity_service.authenticate(header)

    @pytest.mark.asyncio
    async def test_expired_token(self, unit_env):
        identity_service = await unit_env.get(IdentityService)
        auth_settings = await unit_env.get(AuthSettings)
        token = create_token(
            str(uuid4()), auth_settings, expires_in=timedelta(seconds=-10)
        )

        with pytest.raises(InvalidCredentialError):
            identity_service.authenticate(f"Bearer {token}")

    @pytest.mark.asyncio
    async def test_token_signed_with_another_secret(self, unit_env):
        identity_service = await unit_env.get(IdentityService)
        token = create_token(str(uuid4()), AuthSettings(jwt_secret="someone-else"))

        with pytest.raises(InvalidCredentialError):
            identity_service.authenticate(f"Bearer {token}")

    @pytest.mark.asyncio
    async def test_subject_must_be_a_user_id(self, unit_env):
        identity_service = await unit_env.get(IdentityService)
        auth_settings = await unit_env.get(AuthSettings)
        token = create_token("alice", auth_settings)

        with pytest.raises(InvalidCredentialError):
            identity_service.authenticate(f"Bearer {token}")

    @pytest.mark.asyncio
    async def test_missing_and_invalid_are_distinct(self, unit_env):
        """Callers can tell 'log in' apart from 'log in again'."""
        assert not issubclass(MissingCredentialError, InvalidCredentialError)
        assert not issubclass(InvalidCredentialError, MissingCredentialError)


class TestOptionalUser:
    """Tests for optional_user."""

    @pytest.mark.asyncio
    async def test_no_header_is_anonymous(self, unit_env):
        identity_service = await unit_env.get(IdentityService)

        assert identity_service.optional_user(None) is None

    @pytest.mark.asyncio
    async def test_bad_token_still_raises(self, unit_env):
        identity_service = await unit_env.get(IdentityService)

        with pytest.raises(InvalidCredentialError):
            identity_service.optional_user("Bearer not-a-jwt")
