"""Authentication routes (register, login, update)."""

import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from api.dependencies import get_password_hasher, get_token_service, get_user_repo
from api.models import (
    ErrorResponse,
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    RegisterResponse,
    UpdateRequest,
    UpdateResponse,
)
from api.security import get_current_user_required
from domain.model.result import AuthErrorCode, Err
from domain.model.user import User
from port.password_hasher import PasswordHasher
from port.token_service import TokenService
from port.user_repository import UserRepository
from services import auth_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])

_STATUS_CODES = {
    AuthErrorCode.EMAIL_TAKEN: status.HTTP_400_BAD_REQUEST,
    AuthErrorCode.INVALID_CREDENTIALS: status.HTTP_401_UNAUTHORIZED,
    AuthErrorCode.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    AuthErrorCode.INTERNAL: status.HTTP_500_INTERNAL_SERVER_ERROR,
}

_ERROR_RESPONSES = {
    code: {"model": ErrorResponse} for code in _STATUS_CODES.values()
}


def _error_response(result: Err) -> JSONResponse:
    """Map an auth error to its HTTP status. Internal details never leave the service."""
    return JSONResponse(
        status_code=_STATUS_CODES[result.error.code],
        content={"error": result.error.message, "code": result.error.code.value},
    )


# Handlers are sync so bcrypt and pymongo run in the threadpool, off the event loop.

@router.post("/register", response_model=RegisterResponse, responses=_ERROR_RESPONSES)
def register(
    request: RegisterRequest,
    repo: UserRepository = Depends(get_user_repo),
    hasher: PasswordHasher = Depends(get_password_hasher),
    tokens: TokenService = Depends(get_token_service),
):
    """Register a new user.

    Returns:
        Auth token and the registered email

    Raises:
        400 if the email is already registered
    """
    result = auth_service.register(
        repo, hasher, tokens,
        email=request.email,
        password=request.password,
        first_name=request.first_name,
        last_name=request.last_name,
    )
    if isinstance(result, Err):
        return _error_response(result)

    return RegisterResponse(authtoken=result.value.token, email=result.value.email)


@router.post("/login", response_model=LoginResponse, responses=_ERROR_RESPONSES)
def login(
    request: LoginRequest,
    repo: UserRepository = Depends(get_user_repo),
    hasher: PasswordHasher = Depends(get_password_hasher),
    tokens: TokenService = Depends(get_token_service),
):
    """Login user and return a fresh auth token.

    Raises:
        401 for an unknown email or a wrong password (same body for both)
    """
    result = auth_service.authenticate(
        repo, hasher, tokens,
        email=request.email,
        password=request.password,
    )
    if isinstance(result, Err):
        return _error_response(result)

    return LoginResponse(
        authtoken=result.value.token,
        userName=result.value.first_name,
        userEmail=result.value.email,
    )


@router.put("/update", response_model=UpdateResponse, responses=_ERROR_RESPONSES)
def update(
    request: UpdateRequest,
    current_user: User = Depends(get_current_user_required),
    repo: UserRepository = Depends(get_user_repo),
    tokens: TokenService = Depends(get_token_service),
):
    """Update the first name of the token's user.

    Identity comes from the verified bearer token, never from a
    caller-supplied email.
    """
    result = auth_service.update_profile(
        repo, tokens,
        email=current_user.email,
        first_name=request.name,
    )
    if isinstance(result, Err):
        return _error_response(result)

    return UpdateResponse(authtoken=result.value.token)
