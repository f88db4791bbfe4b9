"""In-memory implementation of UserRepository for testing."""

import threading
import uuid
from dataclasses import replace
from datetime import datetime, timezone
from domain.model.errors import DuplicateError, NotFoundError
from domain.model.user import User, UserProfileUpdate


class FakeUserRepository:
    def __init__(self):
        self.store: dict[str, User] = {}
        self._lock = threading.Lock()

    # ── write operations ─────────────────────────────────────

    def create(self, email: str, password_hash: str, first_name: str, last_name: str) -> User:
        with self._lock:
            if any(u.email == email for u in self.store.values()):
                raise DuplicateError("Email already exists")

            user_id = uuid.uuid4().hex
            now = datetime.now(timezone.utc)

            user = User(
                id=user_id,
                email=email,
                first_name=first_name,
                last_name=last_name,
                created_at=now,
                updated_at=now,
                password_hash=password_hash,
            )
            self.store[user_id] = user
            return replace(user)

    def update_by_email(self, email: str, update: UserProfileUpdate) -> User:
        with self._lock:
            user = self._find(email)
            if not user:
                raise NotFoundError("User not found")

            for name, value in update.to_fields().items():
                setattr(user, name, value)
            user.updated_at = datetime.now(timezone.utc)
            return replace(user)

    # ── read operations ──────────────────────────────────────

    def find_by_email(self, email: str) -> User | None:
        user = self._find(email)
        return replace(user) if user else None

    def get_by_id(self, user_id: str) -> User | None:
        user = self.store.get(user_id)
        return replace(user) if user else None

    def _find(self, email: str) -> User | None:
        for user in list(self.store.values()):
            if user.email == email:
                return user
        return None
