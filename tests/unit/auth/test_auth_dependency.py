"""Unit tests for the bearer-token dependencies."""

import pytest
from fastapi.security import HTTPAuthorizationCredentials

from api.dependencies.auth import get_current_user, get_optional_user
from core.exceptions import AuthenticationError, ErrorCode
from infrastructure.auth.jwt_provider import JWTAuthProvider
from infrastructure.auth.provider import TokenUser

SECRET = "test-secret"


@pytest.fixture
def provider() -> JWTAuthProvider:
    return JWTAuthProvider(secret_key=SECRET, algorithm="HS256", expire_minutes=30)


@pytest.fixture
def alice() -> TokenUser:
    return TokenUser(id="alice-1f2e3d4c", email="alice@example.com", name="Alice")


def _bearer(token: str) -> HTTPAuthorizationCredentials:
    return HTTPAuthorizationCredentials(scheme="Bearer", credentials=token)


def _expired_token(user: TokenUser) -> str:
    return JWTAuthProvider(secret_key=SECRET, algorithm="HS256", expire_minutes=-1).create_token(
        user
    )


class TestGetCurrentUser:
    @pytest.mark.asyncio
    async def test_token_subject_becomes_acting_user(
        self, provider: JWTAuthProvider, alice: TokenUser
    ) -> None:
        user = await get_current_user(_bearer(provider.create_token(alice)), provider)

        assert user.id == "alice-1f2e3d4c"
        assert user.name == "Alice"

    @pytest.mark.asyncio
    async def test_missing_header_is_unauthorized(self, provider: JWTAuthProvider) -> None:
        with pytest.raises(AuthenticationError) as exc_info:
            await get_current_user(None, provider)

        assert exc_info.value.error_code == ErrorCode.UNAUTHORIZED

    @pytest.mark.asyncio
    @pytest.mark.parametrize("kind", ["garbage", "expired", "foreign"])
    async def test_rejected_tokens_are_invalid(
        self, provider: JWTAuthProvider, alice: TokenUser, kind: str
    ) -> None:
        tokens = {
            "garbage": "invalid.jwt.token",
            "expired": _expired_token(alice),
            "foreign": JWTAuthProvider(
                secret_key="other-secret", algorithm="HS256", expire_minutes=30
            ).create_token(alice),
        }

        with pytest.raises(AuthenticationError) as exc_info:
            await get_current_user(_bearer(tokens[kind]), provider)

        assert exc_info.value.error_code == ErrorCode.INVALID_TOKEN


class TestGetOptionalUser:
    @pytest.mark.asyncio
    async def test_anonymous_caller_is_none(self, provider: JWTAuthProvider) -> None:
        assert await get_optional_user(None, provider) is None

    @pytest.mark.asyncio
    async def test_expired_token_falls_back_to_anonymous(
        self, provider: JWTAuthProvider, alice: TokenUser
    ) -> None:
        assert await get_optional_user(_bearer(_expired_token(alice)), provider) is None

    @pytest.mark.asyncio
    async def test_valid_token_resolves_user(
        self, provider: JWTAuthProvider, alice: TokenUser
    ) -> None:
        user = await get_optional_user(_bearer(provider.create_token(alice)), provider)

        assert user == alice
