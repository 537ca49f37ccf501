"""JWT token service.

Issues and verifies access tokens shaped like those of the hosted identity
service (``sub``, ``email``, ``aud``, ``role`` and ``user_metadata`` claims),
so bearer tokens from either identity backend are verified the same way.
"""

import uuid
from datetime import datetime, timedelta, timezone
from typing import Any

import jwt

from memberdesk.core.config import get_settings


class JWTError(Exception):
    """Base exception for JWT-related errors."""

    pass


class TokenExpiredError(JWTError):
    """Raised when a token has expired."""

    pass


class InvalidTokenError(JWTError):
    """Raised when a token is invalid."""

    pass


class JWTService:
    """Service for creating and validating JWT tokens."""

    ALGORITHM = "HS256"

    def __init__(self, secret_key: str | None = None, audience: str | None = None) -> None:
        """Initialize the JWT service.

        Args:
            secret_key: Secret key for signing tokens. If not provided,
                        uses the configured secret from settings.
            audience: Expected ``aud`` claim. Defaults to the configured audience.
        """
        self._secret_key = secret_key
        self._audience = audience

    @property
    def secret_key(self) -> str:
        if self._secret_key:
            return self._secret_key
        return get_settings().jwt_secret

    @property
    def audience(self) -> str:
        if self._audience:
            return self._audience
        return get_settings().jwt_audience

    def create_access_token(
        self,
        user_id: str,
        email: str,
        metadata: dict[str, Any] | None = None,
        expires_delta: timedelta | None = None,
    ) -> str:
        """Create an access token.

        Args:
            user_id: The identity's unique identifier.
            email: The identity's email address.
            metadata: User metadata copied into the ``user_metadata`` claim.
            expires_delta: Custom expiration time. Defaults to config value.

        Returns:
            Encoded JWT access token.
        """
        if expires_delta is None:
            expires_delta = timedelta(minutes=get_settings().access_token_expire_minutes)

        now = datetime.now(timezone.utc)
        payload = {
            "sub": user_id,
            "aud": self.audience,
            "iat": now,
            "exp": now + expires_delta,
            "email": email,
            "role": "authenticated",
            "user_metadata": metadata or {},
            "session_id": str(uuid.uuid4()),
        }
        return jwt.encode(payload, self.secret_key, algorithm=self.ALGORITHM)

    def create_refresh_token(self) -> str:
        """Create an opaque refresh token."""
        return uuid.uuid4().hex

    def decode_token(self, token: str) -> dict[str, Any]:
        """Decode and validate a JWT token.

        Args:
            token: The encoded JWT token.

        Returns:
            Decoded token payload.

        Raises:
            TokenExpiredError: If the token has expired.
            InvalidTokenError: If the token is invalid.
        """
        try:
            return jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.ALGORITHM],
                audience=self.audience,
            )
        except jwt.ExpiredSignatureError as e:
            raise TokenExpiredError("Token has expired") from e
        except jwt.InvalidTokenError as e:
            raise InvalidTokenError("Invalid token") from e

    def validate_access_token(self, token: str) -> dict[str, Any]:
        """Validate an access token and return its claims.

        Raises:
            TokenExpiredError: If the token has expired.
            InvalidTokenError: If the token is invalid or carries no subject.
        """
        payload = self.decode_token(token)
        if not payload.get("sub"):
            raise InvalidTokenError("Token has no subject")
        return payload

    def get_expires_in(self, expires_delta: timedelta | None = None) -> int:
        """Get the access token lifetime in seconds."""
        if expires_delta is None:
            expires_delta = timedelta(minutes=get_settings().access_token_expire_minutes)
        return int(expires_delta.total_seconds())


# Default JWT service instance
jwt_service = JWTService()
