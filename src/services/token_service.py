"""JWT bearer tokens asserting a user id.

The signing key is injected at construction and never changes afterwards.
"""

import logging
import os
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt

from domain.model.errors import ConfigurationError

logger = logging.getLogger(__name__)

JWT_ALGORITHM = "HS256"


class JWTTokenService:
    def __init__(
        self,
        secret_key: Optional[str],
        expires_in: Optional[timedelta] = None,
        algorithm: str = JWT_ALGORITHM,
    ):
        if not secret_key:
            raise ConfigurationError(
                "JWT signing secret is required. "
                "Generate a secure key with: openssl rand -hex 32"
            )
        if expires_in is not None and expires_in <= timedelta(0):
            raise ConfigurationError("Token expiry must be positive")

        self._secret_key = secret_key
        self.expires_in = expires_in
        self.algorithm = algorithm

    @classmethod
    def from_env(cls) -> 'JWTTokenService':
        """Build from JWT_SECRET and optional JWT_EXPIRATION_DAYS."""
        expiration_days = os.getenv("JWT_EXPIRATION_DAYS")
        expires_in = None
        if expiration_days:
            try:
                expires_in = timedelta(days=int(expiration_days))
            except ValueError as e:
                raise ConfigurationError(
                    f"JWT_EXPIRATION_DAYS must be an integer, got {expiration_days!r}"
                ) from e
        return cls(os.getenv("JWT_SECRET"), expires_in=expires_in)

    def issue(self, subject_id: str) -> str:
        """Create a signed token for subject_id."""
        now = datetime.now(timezone.utc)
        payload = {
            "sub": subject_id,
            "iat": now,
        }
        if self.expires_in is not None:
            payload["exp"] = now + self.expires_in
        return jwt.encode(payload, self._secret_key, algorithm=self.algorithm)

    def verify(self, token: str) -> Optional[str]:
        """Return the subject id of a valid token, None otherwise."""
        try:
            payload = jwt.decode(token, self._secret_key, algorithms=[self.algorithm])
        except JWTError as e:
            logger.debug(f"JWT verification failed: {e}")
            return None

        subject_id = payload.get("sub")
        if not isinstance(subject_id, str) or not subject_id:
            return None
        return subject_id
