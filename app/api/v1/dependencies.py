"""Presentation-layer dependency injection (composition root).

Provides FastAPI Depends() for the internal access token check, tenant
resolution, DB sessions and the communication service. The chat adapter
and credential hasher are created once in the lifespan and read from
app.state; routes depend only on these dependencies, not on infra directly.
"""

from __future__ import annotations

import hmac
from typing import Annotated

from fastapi import Depends, HTTPException, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.interfaces.chat import IChatPlatformAdapter
from app.application.services.communication_service import CommunicationService
from app.application.services.credential_hasher import CredentialHasher
from app.core.config import get_settings
from app.domain.value_objects import TenantCode
from app.infrastructure.persistence.database import get_db, get_db_transactional
from app.infrastructure.persistence.repositories import UserIdentityRepository


def require_internal_token(request: Request) -> None:
    """Reject the request (401) unless the internal access token matches."""
    settings = get_settings()
    supplied = request.headers.get(settings.internal_access_token_header, "")
    expected = settings.internal_access_token.get_secret_value()
    if not supplied or not hmac.compare_digest(supplied.encode(), expected.encode()):
        raise HTTPException(status_code=401, detail="Unauthorized request")


def get_tenant_code(request: Request) -> str:
    """Tenant code from the tenant header, or DEFAULT_TENANT_CODE when absent.

    Malformed codes raise ValidationException (400).
    """
    settings = get_settings()
    raw = request.headers.get(settings.tenant_header_name, "").strip()
    return str(TenantCode(raw or settings.default_tenant_code))


def get_chat_adapter(request: Request) -> IChatPlatformAdapter:
    return request.app.state.chat_adapter


def get_credential_hasher(request: Request) -> CredentialHasher:
    return request.app.state.credential_hasher


async def get_identity_repo_for_read(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> UserIdentityRepository:
    """Identity repository for lookups (no commit)."""
    return UserIdentityRepository(db)


async def get_identity_repo_for_write(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
) -> UserIdentityRepository:
    """Identity repository bound to the request transaction (commit on success)."""
    return UserIdentityRepository(db)


async def get_communication_service(
    identity_repo: Annotated[UserIdentityRepository, Depends(get_identity_repo_for_write)],
    chat_adapter: Annotated[IChatPlatformAdapter, Depends(get_chat_adapter)],
    hasher: Annotated[CredentialHasher, Depends(get_credential_hasher)],
) -> CommunicationService:
    return CommunicationService(identity_repo, chat_adapter, hasher)


async def get_stateless_communication_service(
    chat_adapter: Annotated[IChatPlatformAdapter, Depends(get_chat_adapter)],
    hasher: Annotated[CredentialHasher, Depends(get_credential_hasher)],
) -> CommunicationService:
    """Service without an identity store (login, createRoom, avatars); needs no database."""
    return CommunicationService(None, chat_adapter, hasher)


async def get_communication_service_for_read(
    identity_repo: Annotated[UserIdentityRepository, Depends(get_identity_repo_for_read)],
    chat_adapter: Annotated[IChatPlatformAdapter, Depends(get_chat_adapter)],
    hasher: Annotated[CredentialHasher, Depends(get_credential_hasher)],
) -> CommunicationService:
    """Service for routes that only read identity records (userMapping)."""
    return CommunicationService(identity_repo, chat_adapter, hasher)


TenantCodeDep = Annotated[str, Depends(get_tenant_code)]
CommunicationServiceDep = Annotated[CommunicationService, Depends(get_communication_service)]
ReadCommunicationServiceDep = Annotated[
    CommunicationService, Depends(get_communication_service_for_read)
]
StatelessCommunicationServiceDep = Annotated[
    CommunicationService, Depends(get_stateless_communication_service)
]
