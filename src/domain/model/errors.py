"""Domain-level exceptions.

Adapters and engines raise these errors. The auth service turns the expected
ones into Err results; the rest are internal failures.
"""


class DomainError(Exception):
    """Base class for all domain errors."""


class NotFoundError(DomainError):
    """Requested entity does not exist."""


class DuplicateError(DomainError):
    """Entity with the same unique key already exists."""


class ValidationError(DomainError):
    """Input violates a business validation rule."""


class MalformedCredentialError(DomainError):
    """Stored password hash is not in the expected bcrypt format."""


class StoreUnavailableError(DomainError):
    """The credential store could not complete an operation."""


class ConfigurationError(Exception):
    """Required process configuration is missing or invalid."""
