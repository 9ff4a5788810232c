# core/auth/tokens.py
"""Signed, stateless session tokens.

Tokens are HS256 JWTs carrying a snapshot of the user's claims at issuance
plus ``iat``/``exp``. There is no server-side revocation list: expiry is the
only way a token stops working.
"""

from datetime import datetime, timedelta, UTC
from typing import Any, Dict, Mapping

import jwt

from core.exceptions import InvalidTokenError

RESERVED_CLAIMS = ('iat', 'exp')


class TokenService:
    def __init__(self, secret: str, algorithm: str = "HS256", ttl: timedelta = timedelta(days=90)):
        if not secret:
            raise ValueError("A signing secret is required")
        self.secret = secret
        self.algorithm = algorithm
        self.ttl = ttl

    def issue(self, claims: Mapping[str, Any], now: datetime | None = None) -> str:
        """Sign the given claims into a token valid for the configured window."""
        issued_at = now or datetime.now(UTC)
        payload = {key: value for key, value in claims.items() if key not in RESERVED_CLAIMS}
        payload['iat'] = issued_at
        payload['exp'] = issued_at + self.ttl
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def verify(self, token: str) -> Dict[str, Any]:
        """Return the token's claims.
        
        Raises:
            InvalidTokenError: On a bad signature, a malformed token or expiry
        """
        if not token:
            raise InvalidTokenError("Missing session token")
        try:
            return jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                options={"require": ["exp", "iat"]},
            )
        except jwt.ExpiredSignatureError as exc:
            raise InvalidTokenError("Token has expired") from exc
        except jwt.InvalidTokenError as exc:
            raise InvalidTokenError() from exc

    @staticmethod
    def user_claims(user) -> Dict[str, Any]:
        """Identity snapshot embedded in a token for the given user."""
        return {
            "id": user.id,
            "email": user.email,
            "username": user.username,
            "nickname": user.nickname,
            "bio": user.bio,
        }
