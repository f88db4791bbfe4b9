from dataclasses import dataclass
from datetime import datetime


def normalize_email(email: str) -> str:
    """Canonical form used for every lookup and insert (case-insensitive uniqueness)."""
    return email.strip().lower()


@dataclass
class User:
    """Domain model representing a registered user."""
    id: str
    email: str
    first_name: str
    last_name: str
    created_at: datetime
    updated_at: datetime | None = None
    password_hash: str | None = None


@dataclass(frozen=True)
class UserProfileUpdate:
    """Partial profile update. Only fields that are not None are written."""
    first_name: str | None = None
    last_name: str | None = None

    def to_fields(self) -> dict:
        fields = {}
        if self.first_name is not None:
            fields['first_name'] = self.first_name
        if self.last_name is not None:
            fields['last_name'] = self.last_name
        return fields
