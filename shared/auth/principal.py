"""
Principal Authenticator
=======================

Bridges identities proven at the API edge to the ledger's
authentication contract.

Version: 0.1.0
"""

from collections.abc import Iterable

from shared.ledger.client import AuthenticationFailed, Authenticator
from shared.logging import get_logger


logger = get_logger(__name__)


class PrincipalAuthenticator(Authenticator):
    """
    Authenticator for a single invocation.

    Holds the identities the invoking principal has proven control of
    (for HTTP calls, the subject of a verified bearer token).
    """

    def __init__(self, proven: Iterable[str] = ()) -> None:
        self._proven = frozenset(proven)

    @property
    def proven(self) -> frozenset[str]:
        return self._proven

    def require_auth(self, identity: str) -> None:
        if identity not in self._proven:
            logger.warning(
                "ledger_auth_failed",
                identity=identity,
                proven=sorted(self._proven),
            )
            raise AuthenticationFailed(identity)
