"""Business logic services: singleton registry."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from app.config import settings

if TYPE_CHECKING:
    from app.services.account_service import AccountService
    from app.services.appwrite_client import AppwriteClient
    from app.services.file_service import FileService
    from app.services.revalidation import PageRevalidator

logger = logging.getLogger(__name__)

_admin_client: AppwriteClient | None = None
_revalidator: PageRevalidator | None = None
_account_service: AccountService | None = None
_file_service: FileService | None = None


def init_services() -> None:
    """Create and wire up all service singletons."""
    global _admin_client, _revalidator, _account_service, _file_service

    from app.services.account_service import AccountService
    from app.services.appwrite_client import create_admin_client
    from app.services.file_service import FileService
    from app.services.revalidation import PageRevalidator

    _admin_client = create_admin_client()
    _revalidator = PageRevalidator()
    _account_service = AccountService(_admin_client)
    _file_service = FileService(_admin_client, _revalidator)

    if not settings.appwrite_project_id or not settings.appwrite_api_key:
        logger.warning(
            "Appwrite project not configured (STOREIT_APPWRITE_PROJECT_ID / "
            "STOREIT_APPWRITE_API_KEY), backend calls will fail"
        )
    logger.info("Services initialized against %s", settings.appwrite_endpoint)


def shutdown_services() -> None:
    global _admin_client, _revalidator, _account_service, _file_service
    _admin_client = _revalidator = _account_service = _file_service = None


def get_revalidator() -> PageRevalidator:
    if _revalidator is None:
        raise RuntimeError("Services not initialized, call init_services() first")
    return _revalidator


def get_account_service() -> AccountService:
    if _account_service is None:
        raise RuntimeError("Services not initialized, call init_services() first")
    return _account_service


def get_file_service() -> FileService:
    if _file_service is None:
        raise RuntimeError("Services not initialized, call init_services() first")
    return _file_service
