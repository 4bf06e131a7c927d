"""Test fixtures: mocked Appwrite-backed services and FastAPI test client."""

from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from app.api.deps import account_service, file_service
from app.main import create_app


@pytest.fixture
def user_doc():
    """User document as the users collection returns it."""
    return {
        "$id": "user-1",
        "fullName": "Ada Lovelace",
        "email": "ada@example.com",
        "avatar": "https://example.com/avatar.png",
        "accountId": "acct-1",
        "$createdAt": "2025-01-01T10:00:00.000+00:00",
        "$updatedAt": "2025-01-01T10:00:00.000+00:00",
    }


@pytest.fixture
def mock_appwrite():
    """Appwrite client double; every API method is an AsyncMock."""
    client = MagicMock()
    for name in (
        "create_email_token",
        "create_session",
        "get_account",
        "delete_session",
        "list_attributes",
        "create_string_attribute",
        "create_document",
        "get_document",
        "list_documents",
        "update_document",
        "delete_document",
        "create_file",
        "delete_file",
    ):
        setattr(client, name, AsyncMock())
    return client


@pytest.fixture
def mock_accounts(user_doc):
    accounts = MagicMock()
    accounts.send_email_otp = AsyncMock(return_value="acct-1")
    accounts.create_account = AsyncMock(return_value={"accountId": "acct-1"})
    accounts.sign_in = AsyncMock(return_value={"accountId": "acct-1"})
    accounts.verify_secret = AsyncMock(return_value={"sessionId": "sess-1", "secret": "secret-1"})
    accounts.get_current_user = AsyncMock(return_value=user_doc)
    accounts.sign_out = AsyncMock(return_value=True)
    return accounts


@pytest.fixture
def mock_files():
    files = MagicMock()
    files.upload_file = AsyncMock()
    files.get_files = AsyncMock(return_value={"total": 0, "documents": []})
    files.rename_file = AsyncMock()
    files.update_file_users = AsyncMock()
    files.delete_file = AsyncMock(return_value={"status": "success"})
    files.get_total_space_used = AsyncMock()
    return files


@pytest_asyncio.fixture
async def client(mock_accounts, mock_files):
    """Provide an async test client with service dependencies overridden."""
    app = create_app()
    app.dependency_overrides[account_service] = lambda: mock_accounts
    app.dependency_overrides[file_service] = lambda: mock_files

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
