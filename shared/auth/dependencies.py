"""
FastAPI Authentication Dependencies
===================================

Dependency injection for route protection.

Version: 0.1.0
"""

from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from pydantic import BaseModel, Field

from shared.auth.jwt import decode_token
from shared.auth.principal import PrincipalAuthenticator
from shared.logging import get_logger


logger = get_logger(__name__)

# OAuth2 scheme for token extraction from Authorization header
oauth2_scheme = OAuth2PasswordBearer(
    tokenUrl="/auth/token",
    auto_error=False,
)


class User(BaseModel):
    """Authenticated caller."""

    id: str = Field(..., description="Ledger identity the caller controls")


async def get_current_user(
    token: Annotated[str | None, Depends(oauth2_scheme)],
) -> User:
    """
    Extract and validate the caller from a JWT token.

    Args:
        token: JWT token from Authorization header

    Returns:
        User: Authenticated caller

    Raises:
        HTTPException: 401 if token is missing or invalid
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    if token is None:
        logger.warning("auth_token_missing")
        raise credentials_exception

    token_data = decode_token(token, verify_type="access")

    if token_data is None:
        logger.warning("auth_token_invalid")
        raise credentials_exception

    logger.debug("caller_authenticated", identity=token_data.sub)

    return User(id=token_data.sub)


async def get_authenticator(
    current_user: Annotated[User, Depends(get_current_user)],
) -> PrincipalAuthenticator:
    """Authenticator proving the caller's own identity and nothing else."""
    return PrincipalAuthenticator({current_user.id})
