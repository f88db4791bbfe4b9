"""Bearer token authentication dependencies."""

import logging
from typing import Optional
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from api.dependencies import get_token_service, get_user_repo
from domain.model.user import User
from port.token_service import TokenService
from port.user_repository import UserRepository

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_user_required(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    tokens: TokenService = Depends(get_token_service),
    user_repo: UserRepository = Depends(get_user_repo),
) -> User:
    """Resolve the user named by a verified bearer token. Raises 401 otherwise."""
    if not credentials:
        raise _unauthorized("Not authenticated")

    user_id = tokens.verify(credentials.credentials)
    if not user_id:
        raise _unauthorized("Invalid authentication credentials")

    user = user_repo.get_by_id(user_id)
    if not user:
        logger.warning("Token subject no longer exists", extra={"userId": user_id})
        raise _unauthorized("User not found")

    return user
