"""Password hashing with bcrypt.

Hashes are salted per call and self-describing ($2b$<rounds>$<salt><digest>),
so verification needs nothing but the stored string.
"""

import logging

import bcrypt

from domain.model.errors import MalformedCredentialError, ValidationError

logger = logging.getLogger(__name__)

# 2^10 iterations. Changing this only affects newly created hashes.
BCRYPT_ROUNDS = 10

# bcrypt ignores everything past the first 72 bytes of input
BCRYPT_MAX_PASSWORD_BYTES = 72


class BcryptPasswordHasher:
    def __init__(self, rounds: int = BCRYPT_ROUNDS):
        self.rounds = rounds

    def hash(self, password: str) -> str:
        """Hash a plain password.

        Raises:
            ValidationError: password is empty or longer than 72 bytes
        """
        if not password:
            raise ValidationError("Password must not be empty")
        encoded = password.encode('utf-8')
        if len(encoded) > BCRYPT_MAX_PASSWORD_BYTES:
            raise ValidationError("Password must be at most 72 bytes")

        salt = bcrypt.gensalt(rounds=self.rounds)
        return bcrypt.hashpw(encoded, salt).decode('utf-8')

    def verify(self, password: str, password_hash: str) -> bool:
        """Check a plain password against a stored hash.

        A mismatch is a normal False result.

        Raises:
            MalformedCredentialError: password_hash is not a bcrypt hash
        """
        if not password_hash:
            raise MalformedCredentialError("Stored password hash is empty")

        encoded = password.encode('utf-8')
        if not encoded or len(encoded) > BCRYPT_MAX_PASSWORD_BYTES:
            # hash() never accepts these, so nothing stored can match
            return False

        try:
            return bcrypt.checkpw(encoded, password_hash.encode('utf-8'))
        except ValueError as e:
            logger.error("Stored password hash is malformed", extra={"error": str(e)})
            raise MalformedCredentialError("Stored password hash is malformed") from e
