"""Communication service: maps internal users onto chat platform accounts.

Orchestrates CredentialHasher, the identity repository and the chat platform
adapter. Every operation is scoped to a tenant_code. Chat credentials are
re-derived from user_id on each call and never stored.
"""

from __future__ import annotations

from typing import Any

from app.application.dtos.chat import ChatSession, RoomResult
from app.application.dtos.identity import (
    UserIdentityCreate,
    UserIdentityResult,
    UserMappingResult,
)
from app.application.interfaces.chat import IChatPlatformAdapter
from app.application.interfaces.repositories import IUserIdentityRepository
from app.application.services.credential_hasher import CredentialHasher
from app.domain.exceptions import (
    ChatPlatformException,
    DuplicateKeyException,
    SqlNotConfiguredException,
    UserNotFoundException,
    ValidationException,
)
from app.shared.telemetry.logging import get_logger
from app.shared.telemetry.tracing import traced

logger = get_logger(__name__)

ROOM_MEMBER_COUNT = 2


class CommunicationService:
    """Signup, sessions, rooms, avatars and profile sync for chat users."""

    def __init__(
        self,
        identity_repo: IUserIdentityRepository | None,
        chat_adapter: IChatPlatformAdapter,
        hasher: CredentialHasher,
    ) -> None:
        """Initialize with ports.

        Args:
            identity_repo: Identity store, or None when only the stateless
                operations (login, create_room, update_avatar, remove_avatar)
                are used.
            chat_adapter: Chat platform adapter.
            hasher: Derives chat credentials from user ids.
        """
        self._repo = identity_repo
        self._chat = chat_adapter
        self._hasher = hasher

    @property
    def _identity_repo(self) -> IUserIdentityRepository:
        if self._repo is None:
            raise SqlNotConfiguredException()
        return self._repo

    async def _require_identity(self, user_id: str, tenant_code: str) -> UserIdentityResult:
        record = await self._identity_repo.find_by_user_id(user_id, tenant_code)
        if record is None or not record.external_user_id:
            raise UserNotFoundException(user_id, tenant_code)
        return record

    @traced("communications.signup")
    async def signup(
        self,
        *,
        user_id: str,
        tenant_code: str,
        name: str,
        email: str,
        image_url: str | None = None,
    ) -> UserIdentityResult:
        """Create the chat account and the local mapping; idempotent per tenant.

        An existing live record is returned as success. When a concurrent
        signup for the same user wins the insert, the winner's record is
        returned. When the platform rejects the account because the derived
        username already exists (a concurrent signup, the same user in another
        tenant, or a retry after an orphaned account), the existing account is
        recovered by logging in with the derived credentials. The remote account
        is created before the local row, so a local failure other than a
        duplicate leaves an orphaned remote account; that case is logged and the
        error propagates.
        """
        existing = await self._identity_repo.find_by_user_id(user_id, tenant_code)
        if existing is not None:
            logger.info("Signup skipped, identity exists: user_id=%s tenant=%s", user_id, tenant_code)
            return existing

        credentials = self._hasher.credentials(user_id)
        try:
            account = await self._chat.signup(
                name, credentials.username, credentials.password, email
            )
            external_user_id = account.external_user_id
        except ChatPlatformException as signup_error:
            external_user_id = await self._existing_account_id(
                credentials.username, credentials.password, signup_error
            )
            logger.info(
                "Chat account already exists, linking: user_id=%s tenant=%s",
                user_id,
                tenant_code,
            )

        try:
            record = await self._identity_repo.create(
                UserIdentityCreate(
                    user_id=user_id,
                    tenant_code=tenant_code,
                    user_info={"external_user_id": external_user_id},
                )
            )
        except DuplicateKeyException:
            winner = await self._identity_repo.find_by_user_id(user_id, tenant_code)
            if winner is None:
                raise
            logger.info("Concurrent signup resolved to existing identity: user_id=%s tenant=%s", user_id, tenant_code)
            return winner
        except Exception:
            logger.error(
                "Orphaned chat account: remote id=%s username=%s has no local identity (user_id=%s tenant=%s)",
                external_user_id,
                credentials.username,
                user_id,
                tenant_code,
            )
            raise

        if image_url:
            try:
                await self._chat.set_avatar(credentials.username, image_url)
            except ChatPlatformException as e:
                logger.warning(
                    "Avatar not set after signup for user_id=%s: %s", user_id, e.error_code
                )
        return record

    async def _existing_account_id(
        self, username: str, password: str, signup_error: ChatPlatformException
    ) -> str:
        """External id of an account that already exists for the derived credentials.

        Re-raises signup_error when the credentials do not log in.
        """
        try:
            session = await self._chat.login(username, password)
        except ChatPlatformException as e:
            logger.warning(
                "Signup rejected and login failed for username=%s: %s / %s",
                username,
                signup_error.error_code,
                e.error_code,
            )
            raise signup_error from e
        return session.external_user_id

    @traced("communications.login")
    async def login(self, *, user_id: str) -> ChatSession:
        credentials = self._hasher.credentials(user_id)
        return await self._chat.login(credentials.username, credentials.password)

    @traced("communications.logout")
    async def logout(
        self, *, user_id: str, tenant_code: str, token: str | None = None
    ) -> dict[str, Any]:
        """End the user's chat sessions.

        With a token only that session is closed. Without one a fresh
        session is opened, every other session is revoked, then the fresh
        session is closed.
        """
        if token:
            record = await self._identity_repo.find_by_user_id(user_id, tenant_code)
            if record is not None and record.external_user_id:
                external_user_id = record.external_user_id
            else:
                logger.warning(
                    "Logout with token for unmapped user_id=%s tenant=%s; using derived username",
                    user_id,
                    tenant_code,
                )
                external_user_id = self._hasher.username(user_id)
            return await self._chat.logout(external_user_id, token)

        await self._require_identity(user_id, tenant_code)
        credentials = self._hasher.credentials(user_id)
        session = await self._chat.login(credentials.username, credentials.password)
        await self._chat.logout_other_clients(session.external_user_id, session.session_token)
        return await self._chat.logout(session.external_user_id, session.session_token)

    @traced("communications.create_room")
    async def create_room(
        self, *, usernames: list[str], initial_message: str
    ) -> RoomResult:
        """Open a DM room between two users and post the first user's message."""
        if len(usernames) != ROOM_MEMBER_COUNT:
            raise ValidationException(
                f"Exactly {ROOM_MEMBER_COUNT} usernames are required", "usernames"
            )
        sender = self._hasher.credentials(usernames[0])
        recipient = self._hasher.username(usernames[1])
        room = await self._chat.initiate_room([sender.username, recipient])
        await self._chat.send_message(
            sender.username, sender.password, room.room_id, initial_message
        )
        return room

    @traced("communications.update_avatar")
    async def update_avatar(self, *, user_id: str, image_url: str) -> dict[str, Any]:
        return await self._chat.set_avatar(self._hasher.username(user_id), image_url)

    @traced("communications.remove_avatar")
    async def remove_avatar(self, *, user_id: str) -> dict[str, Any]:
        return await self._chat.reset_avatar(self._hasher.username(user_id))

    @traced("communications.update_user")
    async def update_user(
        self, *, user_id: str, tenant_code: str, name: str
    ) -> dict[str, Any]:
        record = await self._require_identity(user_id, tenant_code)
        return await self._chat.update_user(record.external_user_id, name)

    @traced("communications.user_mapping")
    async def user_mapping(
        self, *, external_user_id: str, tenant_code: str
    ) -> UserMappingResult:
        """Resolve a chat platform user id back to the internal user id."""
        record = await self._identity_repo.find_by_external_id(external_user_id, tenant_code)
        if record is None:
            raise UserNotFoundException(external_user_id, tenant_code)
        return UserMappingResult(user_id=record.user_id, external_user_id=external_user_id)

    @traced("communications.set_active_status")
    async def set_active_status(
        self,
        *,
        user_id: str,
        tenant_code: str,
        active: bool,
        confirm_relinquish: bool = True,
    ) -> dict[str, Any]:
        record = await self._require_identity(user_id, tenant_code)
        return await self._chat.set_active_status(
            active, record.external_user_id, confirm_relinquish
        )
