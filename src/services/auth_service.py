"""Auth service — registration, authentication and profile update flows.

Pure business logic with no HTTP dependencies.
Expected outcomes (taken email, bad credentials, missing user) are returned
as Err results. Store and credential corruption failures are logged here
and collapsed to a generic internal error.
"""

import logging

from domain.model.errors import (
    DuplicateError,
    MalformedCredentialError,
    NotFoundError,
    StoreUnavailableError,
)
from domain.model.result import (
    Authenticated,
    AuthError,
    AuthErrorCode,
    Err,
    Ok,
    ProfileUpdated,
    Registered,
    Result,
)
from domain.model.user import UserProfileUpdate, normalize_email
from port.password_hasher import PasswordHasher
from port.token_service import TokenService
from port.user_repository import UserRepository

logger = logging.getLogger(__name__)

EMAIL_TAKEN = Err(AuthError(AuthErrorCode.EMAIL_TAKEN, "Email already exists"))
INVALID_CREDENTIALS = Err(AuthError(AuthErrorCode.INVALID_CREDENTIALS, "Invalid email or password"))
USER_NOT_FOUND = Err(AuthError(AuthErrorCode.NOT_FOUND, "User not found"))
INTERNAL_ERROR = Err(AuthError(AuthErrorCode.INTERNAL, "Internal server error"))


def register(
    repo: UserRepository,
    hasher: PasswordHasher,
    tokens: TokenService,
    email: str,
    password: str,
    first_name: str,
    last_name: str,
) -> Result[Registered]:
    """Register a new user and issue a token for it.

    The existence check is only a fast path. Concurrent registrations are
    settled by the store's own uniqueness, and both paths end in EMAIL_TAKEN.
    """
    email = normalize_email(email)
    try:
        if repo.find_by_email(email):
            logger.warning("Registration rejected: email already exists", extra={"email": email})
            return EMAIL_TAKEN

        password_hash = hasher.hash(password)

        try:
            user = repo.create(
                email=email,
                password_hash=password_hash,
                first_name=first_name,
                last_name=last_name,
            )
        except DuplicateError:
            logger.warning("Registration lost race: email already exists", extra={"email": email})
            return EMAIL_TAKEN
    except StoreUnavailableError:
        logger.exception("Registration failed: credential store unavailable", extra={"email": email})
        return INTERNAL_ERROR

    token = tokens.issue(user.id)
    logger.info("User registered", extra={"userId": user.id, "email": email})
    return Ok(Registered(token=token, email=user.email))


def authenticate(
    repo: UserRepository,
    hasher: PasswordHasher,
    tokens: TokenService,
    email: str,
    password: str,
) -> Result[Authenticated]:
    """Authenticate a user by email and password.

    Unknown email and wrong password give the same INVALID_CREDENTIALS
    result. Only the logs tell them apart.
    """
    email = normalize_email(email)
    try:
        user = repo.find_by_email(email)
        if not user:
            logger.warning("Login failed: user not found", extra={"email": email})
            return INVALID_CREDENTIALS

        if not hasher.verify(password, user.password_hash or ''):
            logger.warning("Login failed: password mismatch", extra={"userId": user.id})
            return INVALID_CREDENTIALS
    except StoreUnavailableError:
        logger.exception("Login failed: credential store unavailable", extra={"email": email})
        return INTERNAL_ERROR
    except MalformedCredentialError:
        logger.exception("Login failed: stored credential is corrupt", extra={"email": email})
        return INTERNAL_ERROR

    token = tokens.issue(user.id)
    logger.info("User logged in", extra={"userId": user.id})
    return Ok(Authenticated(token=token, first_name=user.first_name, email=user.email))


def update_profile(
    repo: UserRepository,
    tokens: TokenService,
    email: str,
    first_name: str,
) -> Result[ProfileUpdated]:
    """Change the first name of the user identified by email.

    The caller is trusted to have established that identity already.
    """
    email = normalize_email(email)
    try:
        if not repo.find_by_email(email):
            logger.warning("Profile update failed: user not found", extra={"email": email})
            return USER_NOT_FOUND

        try:
            user = repo.update_by_email(email, UserProfileUpdate(first_name=first_name))
        except NotFoundError:
            logger.warning("Profile update failed: user removed before update", extra={"email": email})
            return USER_NOT_FOUND
    except StoreUnavailableError:
        logger.exception("Profile update failed: credential store unavailable", extra={"email": email})
        return INTERNAL_ERROR

    token = tokens.issue(user.id)
    logger.info("User updated", extra={"userId": user.id})
    return Ok(ProfileUpdated(token=token))
