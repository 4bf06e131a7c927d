"""FastAPI dependency injection: session cookie, clients & current user."""

from __future__ import annotations

import logging
from typing import Any, Optional

from fastapi import Depends, HTTPException, Request, status

from app.config import settings
from app.services import get_account_service, get_file_service
from app.services.account_service import AccountService
from app.services.appwrite_client import AppwriteClient, NoSessionError, create_session_client
from app.services.file_service import FileService

logger = logging.getLogger(__name__)


def get_session_secret(request: Request) -> Optional[str]:
    """Session secret from the session cookie, if any."""
    return request.cookies.get(settings.session_cookie_name) or None


def get_session_client(
    secret: Optional[str] = Depends(get_session_secret),
) -> AppwriteClient:
    """Appwrite client acting as the signed-in user."""
    try:
        return create_session_client(secret)
    except NoSessionError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="No session",
        )


def account_service() -> AccountService:
    return get_account_service()


def file_service() -> FileService:
    return get_file_service()


async def get_current_user_optional(
    secret: Optional[str] = Depends(get_session_secret),
    accounts: AccountService = Depends(account_service),
) -> Optional[dict[str, Any]]:
    """Return the user document if a valid session is present, else None."""
    if not secret:
        return None
    return await accounts.get_current_user(create_session_client(secret))


async def get_current_user(
    user: Optional[dict[str, Any]] = Depends(get_current_user_optional),
) -> dict[str, Any]:
    """Require a signed-in user."""
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
        )
    return user
