"""
Authentication Module
=====================

JWT-based caller authentication for the warranty ledger.

Features:
- JWT token generation and validation
- FastAPI dependencies for route protection
- Bridging of proven identities to the ledger Authenticator contract

Usage:
    from shared.auth import create_access_token, get_authenticator

    token = create_access_token({"sub": "GABC..."})

    @app.post("/protected")
    async def protected(auth: PrincipalAuthenticator = Depends(get_authenticator)):
        auth.require_auth("GABC...")
"""

from shared.auth.jwt import (
    create_access_token,
    decode_token,
    TokenData,
)
from shared.auth.principal import PrincipalAuthenticator
from shared.auth.dependencies import (
    User,
    get_authenticator,
    get_current_user,
    oauth2_scheme,
)

__all__ = [
    # JWT
    "create_access_token",
    "decode_token",
    "TokenData",
    # Ledger bridge
    "PrincipalAuthenticator",
    # Dependencies
    "User",
    "get_current_user",
    "get_authenticator",
    "oauth2_scheme",
]
