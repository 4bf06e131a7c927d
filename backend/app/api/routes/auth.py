"""Auth routes: OTP email login against Appwrite, session in a cookie."""

import logging
from typing import Any, Optional

from fastapi import APIRouter, Depends, Response, status
from fastapi.responses import RedirectResponse

from app.api.deps import account_service, get_current_user, get_session_secret
from app.config import settings
from app.schemas.auth import (
    AccountIdResponse,
    EmailRequest,
    SessionResponse,
    SignUpRequest,
    VerifyRequest,
)
from app.services.account_service import AccountService
from app.services.appwrite_client import create_session_client

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/otp", response_model=AccountIdResponse)
async def send_otp(body: EmailRequest, accounts: AccountService = Depends(account_service)):
    """Send a one-time passcode; returns the pending account id."""
    account_id = await accounts.send_email_otp(body.email)
    return AccountIdResponse(account_id=account_id)


@router.post("/sign-up", response_model=AccountIdResponse)
async def sign_up(body: SignUpRequest, accounts: AccountService = Depends(account_service)):
    """Send an OTP and create the user document on first sign-up."""
    result = await accounts.create_account(body.full_name, body.email)
    return AccountIdResponse(account_id=result["accountId"])


@router.post("/sign-in", response_model=AccountIdResponse)
async def sign_in(body: EmailRequest, accounts: AccountService = Depends(account_service)):
    result = await accounts.sign_in(body.email)
    return AccountIdResponse(account_id=result["accountId"], error=result.get("error"))


@router.post("/verify", response_model=SessionResponse)
async def verify(
    body: VerifyRequest,
    response: Response,
    accounts: AccountService = Depends(account_service),
):
    """Verify the OTP and store the session secret in an http-only cookie."""
    result = await accounts.verify_secret(body.account_id, body.password)
    response.set_cookie(
        settings.session_cookie_name,
        result["secret"],
        path="/",
        httponly=True,
        samesite="strict",
        secure=True,
    )
    return SessionResponse(session_id=result["sessionId"])


@router.get("/me")
async def me(current_user: dict[str, Any] = Depends(get_current_user)):
    """User document of the signed-in user."""
    return current_user


@router.post("/sign-out")
async def sign_out(
    secret: Optional[str] = Depends(get_session_secret),
    accounts: AccountService = Depends(account_service),
):
    """Delete the session; always clears the cookie and redirects to sign-in."""
    if secret:
        await accounts.sign_out(create_session_client(secret))
    else:
        logger.info("Sign-out without session cookie")

    response = RedirectResponse(url=settings.sign_in_path, status_code=status.HTTP_303_SEE_OTHER)
    response.delete_cookie(
        settings.session_cookie_name,
        path="/",
        httponly=True,
        samesite="strict",
        secure=True,
    )
    return response
