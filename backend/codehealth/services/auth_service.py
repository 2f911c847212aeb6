"""Authentication service for bearer JWTs."""

from datetime import datetime, timedelta, timezone
from typing import Any

import jwt

from codehealth.config import Settings, get_settings


class AuthService:
    """Service for authentication operations."""

    def __init__(self, settings: Settings | None = None):
        settings = settings or get_settings()
        self.secret_key = settings.jwt_secret
        self.algorithm = settings.jwt_algorithm
        self.audience = settings.jwt_audience
        self.expiry_hours = settings.jwt_expiry_hours

    def create_jwt(self, user_id: str) -> str:
        """Create a JWT token for a user.

        Args:
            user_id: The user's UUID as string

        Returns:
            JWT token string
        """
        now = datetime.now(timezone.utc)
        expire = now + timedelta(hours=self.expiry_hours)

        payload: dict[str, Any] = {
            "sub": user_id,
            "iat": now,
            "exp": expire,
        }
        if self.audience:
            payload["aud"] = self.audience

        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)

    def verify_jwt(self, token: str) -> dict[str, Any] | None:
        """Verify a JWT token and return its payload.

        Args:
            token: JWT token string

        Returns:
            Token payload dict or None if invalid
        """
        options = {} if self.audience else {"verify_aud": False}
        try:
            return jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm],
                audience=self.audience,
                options=options,
            )
        except jwt.ExpiredSignatureError:
            return None
        except jwt.InvalidTokenError:
            return None
