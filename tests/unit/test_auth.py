"""
Unit tests for authentication module.
"""

from datetime import timedelta

import pytest
from jose import jwt

from shared.auth import PrincipalAuthenticator, create_access_token, decode_token
from shared.auth.jwt import TokenData
from shared.config import settings
from shared.ledger import AuthenticationFailed


IDENTITY = "GOWNERAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAA"


class TestJWTTokens:
    """Tests for JWT token functions."""

    def test_create_access_token(self) -> None:
        """Test access token creation."""
        token = create_access_token({"sub": IDENTITY})

        assert isinstance(token, str)
        assert len(token) > 50

    def test_decode_access_token(self) -> None:
        """Subject survives encode/decode as the ledger identity."""
        token = create_access_token({"sub": IDENTITY})

        decoded = decode_token(token, verify_type="access")

        assert decoded is not None
        assert decoded.sub == IDENTITY
        assert decoded.token_type == "access"
        assert decoded.exp > decoded.iat

    def test_decode_wrong_token_type(self) -> None:
        """Test that decoding with wrong type returns None."""
        token = create_access_token({"sub": IDENTITY})

        assert decode_token(token, verify_type="refresh") is None

    def test_decode_invalid_token(self) -> None:
        """Test that invalid token returns None."""
        assert decode_token("invalid.token.string") is None

    def test_decode_expired_token(self) -> None:
        """Expired tokens are rejected."""
        token = create_access_token({"sub": IDENTITY}, expires_delta=timedelta(minutes=-1))

        assert decode_token(token) is None

    def test_decode_foreign_signature(self) -> None:
        """Tokens signed with another key are rejected."""
        token = jwt.encode(
            {"sub": IDENTITY, "token_type": "access"},
            "some-other-secret",
            algorithm=settings.jwt.algorithm,
        )

        assert decode_token(token) is None

    def test_decode_without_subject(self) -> None:
        """A token that names no identity proves nothing."""
        token = create_access_token({"scope": "warranties"})

        assert decode_token(token) is None

    def test_token_with_custom_expiry(self) -> None:
        """Test token with custom expiration."""
        token = create_access_token({"sub": IDENTITY}, expires_delta=timedelta(minutes=5))

        assert decode_token(token) is not None


class TestTokenData:
    """Tests for TokenData model."""

    def test_token_data_required_fields(self) -> None:
        """Test TokenData requires sub and exp."""
        from datetime import datetime, UTC

        token_data = TokenData(sub=IDENTITY, exp=datetime.now(UTC))

        assert token_data.sub == IDENTITY
        assert token_data.token_type == "access"


class TestPrincipalAuthenticator:
    """Tests for the bridge from proven identities to ledger auth."""

    def test_proven_identity_passes(self) -> None:
        auth = PrincipalAuthenticator({IDENTITY})

        auth.require_auth(IDENTITY)

    def test_unproven_identity_fails(self) -> None:
        auth = PrincipalAuthenticator({IDENTITY})

        with pytest.raises(AuthenticationFailed) as exc_info:
            auth.require_auth("GSOMEONEELSE")

        assert exc_info.value.identity == "GSOMEONEELSE"

    def test_empty_authenticator_proves_nothing(self) -> None:
        auth = PrincipalAuthenticator()

        assert auth.proven == frozenset()
        with pytest.raises(AuthenticationFailed):
            auth.require_auth(IDENTITY)
