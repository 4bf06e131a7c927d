"""OTP email authentication: user documents and sessions."""

from __future__ import annotations

import logging
from typing import Any

from app.config import settings
from app.services import query
from app.services.appwrite_client import UNIQUE_ID, AppwriteClient, AppwriteError
from app.services.schema_probe import ensure_attributes

logger = logging.getLogger(__name__)

USER_ATTRIBUTES = ["fullName", "email", "avatar", "accountId"]


class AccountService:
    """Sign-up, sign-in, OTP verification and session lookup."""

    def __init__(self, admin_client: AppwriteClient):
        self._admin = admin_client
        self._database_id = settings.appwrite_database_id
        self._users_collection_id = settings.appwrite_users_collection_id

    async def get_user_by_email(self, email: str) -> dict[str, Any] | None:
        result = await self._admin.list_documents(
            self._database_id,
            self._users_collection_id,
            [query.equal("email", [email])],
        )
        if result.get("total", 0) > 0 and result.get("documents"):
            return result["documents"][0]
        return None

    async def send_email_otp(self, email: str) -> str:
        """Send a passcode to ``email``; returns the pending account id."""
        try:
            token = await self._admin.create_email_token(UNIQUE_ID, email)
        except Exception as exc:
            logger.error("Failed to send email OTP: %s", exc)
            raise
        return token["userId"]

    async def create_account(self, full_name: str, email: str) -> dict[str, Any]:
        """Send an OTP and create the user document on first sign-up."""
        existing_user = await self.get_user_by_email(email)

        account_id = await self.send_email_otp(email)
        if not account_id:
            raise AppwriteError("Failed to send an OTP")

        if existing_user is None:
            await ensure_attributes(
                self._admin, self._database_id, self._users_collection_id, USER_ATTRIBUTES,
            )
            try:
                await self._admin.create_document(
                    self._database_id,
                    self._users_collection_id,
                    UNIQUE_ID,
                    {
                        "fullName": full_name,
                        "email": email,
                        "avatar": settings.avatar_placeholder_url,
                        "accountId": account_id,
                    },
                )
            except Exception as exc:
                logger.error("Failed to create user document: %s", exc)
                raise
            logger.info("Created user document for %s", email)

        return {"accountId": account_id}

    async def sign_in(self, email: str) -> dict[str, Any]:
        """Send an OTP to a known user."""
        try:
            existing_user = await self.get_user_by_email(email)
            if existing_user:
                await self.send_email_otp(email)
                return {"accountId": existing_user.get("accountId")}
        except Exception as exc:
            logger.error("Failed to sign in user: %s", exc)
            raise
        return {"accountId": None, "error": "User not found"}

    async def verify_secret(self, account_id: str, password: str) -> dict[str, Any]:
        """Exchange the passcode for a session.

        Returns ``{"sessionId", "secret"}``; the caller stores the secret in
        the session cookie.
        """
        try:
            session = await self._admin.create_session(account_id, password)
        except Exception as exc:
            logger.error("Failed to verify OTP: %s", exc)
            raise
        secret = session.get("secret")
        if not secret:
            logger.error("Session %s was created without a secret", session.get("$id"))
            raise AppwriteError("Session created without a secret")
        return {"sessionId": session["$id"], "secret": secret}

    async def get_current_user(self, session_client: AppwriteClient) -> dict[str, Any] | None:
        """User document behind the session, or None on any failure."""
        try:
            account = await session_client.get_account()
            result = await session_client.list_documents(
                self._database_id,
                self._users_collection_id,
                [query.equal("accountId", account["$id"])],
            )
            if result.get("total", 0) <= 0 or not result.get("documents"):
                return None
            return result["documents"][0]
        except Exception as exc:
            logger.info("No current user: %s", exc)
            return None

    async def sign_out(self, session_client: AppwriteClient) -> bool:
        """Delete the current session. Returns False if the backend refused."""
        try:
            await session_client.delete_session("current")
            return True
        except Exception as exc:
            logger.error("Failed to sign out user: %s", exc)
            return False
