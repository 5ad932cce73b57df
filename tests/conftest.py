"""Pytest configuration and fixtures for the communications service.

Required settings get test defaults before app.main is imported so the app
can be built without a .env file. Uses app.main:app for HTTP tests and
app.infrastructure.persistence.database for DB-dependent fixtures.
"""

import os

os.environ.setdefault("CHAT_PLATFORM_URL", "http://chat.test")
os.environ.setdefault("CHAT_PLATFORM_ACCESS_TOKEN", "test-admin-token")
os.environ.setdefault("CHAT_PLATFORM_ADMIN_USER_ID", "admin-id")
os.environ.setdefault("INTERNAL_ACCESS_TOKEN", "test-internal-token")
os.environ.setdefault("USERNAME_HASH_SALT", "test-username-salt")
os.environ.setdefault("PASSWORD_HASH_SALT", "test-password-salt")

from typing import Any  # noqa: E402

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession  # noqa: E402

from app.application.dtos.identity import (  # noqa: E402
    UserIdentityCreate,
    UserIdentityResult,
)
from app.application.services.credential_hasher import CredentialHasher  # noqa: E402
from app.core.config import get_settings  # noqa: E402
from app.domain.exceptions import (  # noqa: E402
    DuplicateKeyException,
    SqlNotConfiguredException,
)
from app.infrastructure.persistence.database import get_session_factory  # noqa: E402
from app.main import app  # noqa: E402


class InMemoryIdentityRepository:
    """IUserIdentityRepository over a dict keyed by (user_id, tenant_code)."""

    def __init__(self) -> None:
        self.rows: dict[tuple[str, str], UserIdentityResult] = {}

    async def create(self, data: UserIdentityCreate) -> UserIdentityResult:
        key = (data.user_id, data.tenant_code)
        if key in self.rows:
            raise DuplicateKeyException(data.user_id, data.tenant_code)
        row = UserIdentityResult(
            user_id=data.user_id,
            tenant_code=data.tenant_code,
            user_info=dict(data.user_info),
            is_admin=data.is_admin,
        )
        self.rows[key] = row
        return row

    async def find_by_user_id(self, user_id: str, tenant_code: str) -> UserIdentityResult | None:
        return self.rows.get((user_id, tenant_code))

    async def find_by_external_id(
        self, external_user_id: str, tenant_code: str
    ) -> UserIdentityResult | None:
        for row in self.rows.values():
            if row.tenant_code == tenant_code and row.external_user_id == external_user_id:
                return row
        return None

    async def update(self, user_id: str, tenant_code: str, patch: dict[str, Any]) -> int:
        row = self.rows.get((user_id, tenant_code))
        if row is None:
            return 0
        self.rows[(user_id, tenant_code)] = UserIdentityResult(
            user_id=row.user_id,
            tenant_code=row.tenant_code,
            user_info=dict(patch.get("user_info", row.user_info)),
            is_admin=patch.get("is_admin", row.is_admin),
        )
        return 1

    async def soft_delete(self, user_id: str, tenant_code: str) -> int:
        return 1 if self.rows.pop((user_id, tenant_code), None) else 0


@pytest.fixture
def identity_repo() -> InMemoryIdentityRepository:
    return InMemoryIdentityRepository()


@pytest.fixture
def hasher() -> CredentialHasher:
    """Hasher built from the test settings (same salts the app uses)."""
    return CredentialHasher.from_settings(get_settings())


@pytest.fixture
def internal_headers() -> dict[str, str]:
    """Headers carrying the internal access token."""
    settings = get_settings()
    return {
        settings.internal_access_token_header: settings.internal_access_token.get_secret_value()
    }


@pytest.fixture
async def client() -> AsyncClient:
    """Async HTTP client against the FastAPI app (ASGI). Lifespan does not run."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
async def db_session() -> AsyncSession:
    """Database session for repository/integration tests. Rolls back after test.

    Requires DATABASE_URL. Skips (pytest.skip) when Postgres is not configured.
    Use @pytest.mark.requires_db to mark tests that need this fixture; run
    without DB via: pytest -m 'not requires_db'.
    """
    try:
        session_factory = get_session_factory()
    except SqlNotConfiguredException:
        pytest.skip(
            "Postgres not configured: set DATABASE_URL, then run: uv run alembic upgrade head"
        )
    async with session_factory() as session:
        yield session
        await session.rollback()
