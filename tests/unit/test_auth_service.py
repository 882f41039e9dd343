"""Unit tests for AuthService with mocked repositories."""

from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest

from vidtube.domain.exceptions import (
    InvalidCredentialsError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)
from vidtube.domain.services import AuthService
from vidtube.infrastructure.auth import (
    AccessClaims,
    TokenClass,
    TokenConfig,
    TokenIssuer,
    TokenVerifier,
    hash_password,
)


@pytest.fixture
def user():
    user = MagicMock()
    user.id = "user-1"
    user.username = "alice"
    user.email = "a@x.com"
    user.full_name = "Alice"
    user.password_hash = hash_password("Secret1")
    return user


@pytest.fixture
def user_repo(user):
    repo = MagicMock()
    repo.get_by_identifier = AsyncMock(return_value=user)
    repo.get_by_id = AsyncMock(return_value=user)
    repo.update_password_hash = AsyncMock()
    return repo


@pytest.fixture
def token_repo():
    repo = MagicMock()
    repo.set = AsyncMock()
    repo.clear = AsyncMock()
    repo.matches = AsyncMock(return_value=True)
    return repo


@pytest.fixture
def service(user_repo, token_repo, issuer, verifier):
    return AuthService(user_repo, token_repo, issuer, verifier)


class TestLogin:
    @pytest.mark.asyncio
    async def test_success_stores_new_refresh_token(self, service, token_repo, verifier):
        result = await service.login("alice", "Secret1")

        assert result.user.id == "user-1"
        token_repo.set.assert_awaited_once_with("user-1", result.tokens.refresh_token)
        assert verifier.verify(result.tokens.access_token, TokenClass.ACCESS).is_valid
        assert verifier.verify(result.tokens.refresh_token, TokenClass.REFRESH).is_valid

    @pytest.mark.asyncio
    @pytest.mark.parametrize("identifier, password", [("", "Secret1"), ("   ", "x"), ("alice", ""), (None, None)])
    async def test_missing_fields(self, service, token_repo, identifier, password):
        with pytest.raises(ValidationError):
            await service.login(identifier, password)
        token_repo.set.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unknown_user(self, service, user_repo, token_repo):
        user_repo.get_by_identifier.return_value = None

        with pytest.raises(NotFoundError, match="User does not exist"):
            await service.login("nobody", "Secret1")
        token_repo.set.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_wrong_password(self, service, token_repo):
        with pytest.raises(InvalidCredentialsError):
            await service.login("alice", "wrong")
        token_repo.set.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_store_failure_propagates(self, service, token_repo):
        token_repo.set.side_effect = RuntimeError("database is unavailable")

        with pytest.raises(RuntimeError):
            await service.login("alice", "Secret1")


class TestRefresh:
    @pytest.mark.asyncio
    async def test_rotates_tokens(self, service, issuer, token_repo):
        presented = issuer.issue_refresh("user-1")

        tokens = await service.refresh(presented)

        assert tokens.refresh_token != presented
        token_repo.matches.assert_awaited_once_with("user-1", presented)
        token_repo.set.assert_awaited_once_with("user-1", tokens.refresh_token)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("presented", [None, ""])
    async def test_missing_token(self, service, presented):
        with pytest.raises(UnauthorizedError, match="Unauthorized request"):
            await service.refresh(presented)

    @pytest.mark.asyncio
    async def test_invalid_token(self, service, token_repo):
        with pytest.raises(UnauthorizedError, match="Invalid refresh token"):
            await service.refresh("not-a-jwt")
        token_repo.set.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_expired_token(self, user_repo, token_repo, token_config):
        expired = TokenConfig(
            access_secret=token_config.access_secret,
            refresh_secret=token_config.refresh_secret,
            access_ttl=token_config.access_ttl,
            refresh_ttl=timedelta(seconds=-1),
        )
        service = AuthService(
            user_repo, token_repo, TokenIssuer(expired), TokenVerifier(token_config)
        )
        presented = TokenIssuer(expired).issue_refresh("user-1")

        with pytest.raises(UnauthorizedError, match="Refresh token has expired"):
            await service.refresh(presented)

    @pytest.mark.asyncio
    async def test_access_token_is_rejected(self, service, issuer):
        access = issuer.issue_access(
            AccessClaims(id="user-1", email="a@x.com", username="alice", display_name="Alice")
        )
        with pytest.raises(UnauthorizedError, match="Invalid refresh token"):
            await service.refresh(access)

    @pytest.mark.asyncio
    async def test_fails_when_user_not_found(self, service, issuer, user_repo, token_repo):
        # Identity lookup must fail when the user is missing, not when found
        user_repo.get_by_id.return_value = None

        with pytest.raises(UnauthorizedError, match="Invalid refresh token"):
            await service.refresh(issuer.issue_refresh("user-1"))
        token_repo.matches.assert_not_awaited()
        token_repo.set.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_superseded_token(self, service, issuer, token_repo):
        token_repo.matches.return_value = False

        with pytest.raises(UnauthorizedError, match="Refresh token is expired or used"):
            await service.refresh(issuer.issue_refresh("user-1"))
        token_repo.set.assert_not_awaited()


class TestLogout:
    @pytest.mark.asyncio
    async def test_clears_slot(self, service, token_repo):
        await service.logout("user-1")
        token_repo.clear.assert_awaited_once_with("user-1")


class TestChangePassword:
    @pytest.mark.asyncio
    async def test_success_keeps_refresh_token(self, service, user_repo, token_repo):
        await service.change_password("user-1", "Secret1", "Secret2")

        user_repo.update_password_hash.assert_awaited_once()
        user_id, new_hash = user_repo.update_password_hash.await_args.args
        assert user_id == "user-1"
        assert new_hash.startswith("$argon2id$")
        token_repo.set.assert_not_awaited()
        token_repo.clear.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_wrong_old_password(self, service, user_repo):
        with pytest.raises(InvalidCredentialsError, match="Invalid old password"):
            await service.change_password("user-1", "wrong", "Secret2")
        user_repo.update_password_hash.assert_not_awaited()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("old, new", [("", "Secret2"), ("Secret1", ""), (None, None)])
    async def test_missing_passwords(self, service, old, new):
        with pytest.raises(ValidationError):
            await service.change_password("user-1", old, new)

    @pytest.mark.asyncio
    async def test_unknown_user(self, service, user_repo):
        user_repo.get_by_id.return_value = None
        with pytest.raises(NotFoundError):
            await service.change_password("user-1", "Secret1", "Secret2")


class TestAuthenticate:
    @pytest.mark.asyncio
    async def test_valid_access_token(self, service, issuer, user):
        result = await service.login("alice", "Secret1")
        assert await service.authenticate(result.tokens.access_token) is user

    @pytest.mark.asyncio
    async def test_refresh_token_is_not_accepted(self, service, issuer):
        with pytest.raises(UnauthorizedError, match="Invalid access token"):
            await service.authenticate(issuer.issue_refresh("user-1"))

    @pytest.mark.asyncio
    async def test_missing_token(self, service):
        with pytest.raises(UnauthorizedError):
            await service.authenticate(None)
