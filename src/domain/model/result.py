"""Outcome types returned by the auth service.

Wrong passwords, unknown emails and taken emails are expected outcomes,
so they travel as Err values instead of exceptions.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar, Union

T = TypeVar('T')


class AuthErrorCode(str, Enum):
    """Stable error codes exposed to callers."""
    EMAIL_TAKEN = 'email_taken'
    INVALID_CREDENTIALS = 'invalid_credentials'
    NOT_FOUND = 'not_found'
    INTERNAL = 'internal_error'


@dataclass(frozen=True)
class AuthError:
    code: AuthErrorCode
    message: str


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True)
class Err:
    error: AuthError


Result = Union[Ok[T], Err]


# ── success payloads ──────────────────────────────────────

@dataclass(frozen=True)
class Registered:
    token: str
    email: str


@dataclass(frozen=True)
class Authenticated:
    token: str
    first_name: str
    email: str


@dataclass(frozen=True)
class ProfileUpdated:
    token: str
