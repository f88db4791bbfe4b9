from typing import Protocol
from domain.model.user import User, UserProfileUpdate


class UserRepository(Protocol):
    """Protocol defining the interface for credential storage, keyed by email.

    Implementations raise StoreUnavailableError on driver failures and never retry.
    """
    def find_by_email(self, email: str) -> User | None:
        """Find a user by email. Return User or None if not found."""
        ...

    def get_by_id(self, user_id: str) -> User | None:
        """Find a user by ID. Return User or None if not found."""
        ...

    def create(self, email: str, password_hash: str, first_name: str, last_name: str) -> User:
        """Create a new user. Raise DuplicateError if the email is already taken.

        Uniqueness must be enforced atomically by the store itself.
        """
        ...

    def update_by_email(self, email: str, update: UserProfileUpdate) -> User:
        """Merge the set fields of update into the user and stamp updated_at.

        Raise NotFoundError if no user has this email.
        """
        ...
