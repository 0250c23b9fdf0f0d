"""
JWT access token issuer - Implements TokenIssuer protocol.

Signs the login claim set (email, role, isVerified, isBlocked) with a
server-held secret via PyJWT. Tokens carry a fixed expiry; there is no
refresh or rotation.
"""

import logging
from datetime import datetime, timedelta, timezone

import jwt

from src.domain.models import ClaimSet, Role

logger = logging.getLogger(__name__)


class JwtTokenIssuer:
    """
    Implements TokenIssuer protocol via PyJWT.

    Uses structural subtyping - no explicit inheritance from Protocol.
    """

    def __init__(self, secret: str, algorithm: str = "HS256", ttl_seconds: int = 86400) -> None:
        self._secret = secret
        self._algorithm = algorithm
        self._ttl = timedelta(seconds=ttl_seconds)

    def issue(self, claims: ClaimSet) -> str:
        """Sign a claim set into a bearer token that expires after the TTL."""
        now = datetime.now(timezone.utc)
        payload = {**claims.as_dict(), "iat": now, "exp": now + self._ttl}
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def verify(self, token: str) -> ClaimSet | None:
        """
        Decode a token back into its claim set.

        Returns:
            The ClaimSet, or None if the token is expired, tampered with
            or malformed
        """
        try:
            payload = jwt.decode(token, self._secret, algorithms=[self._algorithm])
        except jwt.InvalidTokenError as e:
            logger.info("Rejected access token: %s", e)
            return None

        return ClaimSet(
            email=payload["email"],
            role=Role(payload["role"]),
            is_verified=bool(payload["isVerified"]),
            is_blocked=bool(payload["isBlocked"]),
        )
