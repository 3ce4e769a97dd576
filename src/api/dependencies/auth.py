"""Bearer-token dependencies that resolve the acting user for a request."""

from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from core.exceptions import AuthenticationError, ErrorCode
from infrastructure.auth.jwt_provider import JWTAuthProvider
from infrastructure.auth.provider import TokenUser

# auto_error=False so invite validation can run anonymously
security = HTTPBearer(auto_error=False)
Credentials = Annotated[HTTPAuthorizationCredentials | None, Depends(security)]

_auth_provider: JWTAuthProvider | None = None


def get_auth_provider() -> JWTAuthProvider:
    """Get or create the auth provider singleton."""
    global _auth_provider
    if _auth_provider is None:
        _auth_provider = JWTAuthProvider()
    return _auth_provider


async def _resolve(
    credentials: HTTPAuthorizationCredentials | None, auth_provider: JWTAuthProvider
) -> TokenUser | None:
    if not credentials:
        return None
    return await auth_provider.validate_token(credentials.credentials)


async def get_current_user(
    credentials: Credentials,
    auth_provider: JWTAuthProvider = Depends(get_auth_provider),
) -> TokenUser:
    """Resolve the caller; every service call acts as the token subject.

    Raises:
        AuthenticationError: If no token was sent or it does not validate.
    """
    if not credentials:
        raise AuthenticationError(
            message="Authorization header required",
            error_code=ErrorCode.UNAUTHORIZED,
        )
    user = await _resolve(credentials, auth_provider)
    if user is None:
        raise AuthenticationError(
            message="Invalid or expired token",
            error_code=ErrorCode.INVALID_TOKEN,
        )
    return user


async def get_optional_user(
    credentials: Credentials,
    auth_provider: JWTAuthProvider = Depends(get_auth_provider),
) -> TokenUser | None:
    """Resolve the caller if a valid token was sent, else None."""
    return await _resolve(credentials, auth_provider)


CurrentUser = Annotated[TokenUser, Depends(get_current_user)]
OptionalUser = Annotated[TokenUser | None, Depends(get_optional_user)]
