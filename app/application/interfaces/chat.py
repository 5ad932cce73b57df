"""Chat platform adapter interface (port).

One implementation per chat platform, selected from CHAT_PLATFORM by
ChatAdapterFactory and injected at startup. Implementations translate
transport failures into domain exceptions (UnauthorizedException,
InvalidUserException, ChatTimeoutException, RemoteErrorException, ...).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from app.application.dtos.chat import ChatSession, RoomResult, SignupResult


class IChatPlatformAdapter(Protocol):
    """Protocol for chat platform adapters (DIP). Stateless between calls."""

    @property
    def platform_name(self) -> str:
        """Short platform identifier (e.g. 'rocketchat')."""

    async def signup(
        self, name: str, username: str, password: str, email: str
    ) -> SignupResult:
        """Create a platform account with the admin service account."""

    async def login(self, username: str, password: str) -> ChatSession:
        """Open a session for the user."""

    async def admin_login(self) -> ChatSession:
        """Open a session for the configured admin account."""

    async def logout(self, external_user_id: str, session_token: str) -> dict[str, Any]:
        """Close the given session."""

    async def logout_other_clients(
        self, external_user_id: str, session_token: str
    ) -> dict[str, Any]:
        """Invalidate every session of the user except the given one."""

    async def initiate_room(
        self, usernames: list[str], exclude_self: bool = True
    ) -> RoomResult:
        """Create (or reuse) a direct-message room between the usernames."""

    async def send_message(
        self, username: str, password: str, room_id: str, text: str
    ) -> dict[str, Any]:
        """Login as the user, post text to the room, open it, then logout."""

    async def set_avatar(self, username: str, image_url: str) -> dict[str, Any]:
        """Download image_url and upload it as the user's avatar."""

    async def reset_avatar(self, username: str) -> dict[str, Any]:
        """Restore the platform's default avatar for the user."""

    async def set_active_status(
        self, active: bool, user_id: str, confirm_relinquish: bool = True
    ) -> dict[str, Any]:
        """Activate or deactivate the platform account."""

    async def update_user(self, external_user_id: str, name: str) -> dict[str, Any]:
        """Update the account display name."""

    async def list_users(self, offset: int = 0, count: int = 100) -> list[dict[str, Any]]:
        """Return one page of platform accounts."""

    async def delete_user(
        self, external_user_id: str, confirm_relinquish: bool = True
    ) -> dict[str, Any]:
        """Delete a platform account."""

    async def save_settings(
        self, settings_id: str, settings: list[dict[str, Any]]
    ) -> dict[str, Any]:
        """Persist a group of platform settings."""

    async def update_permissions(self, permissions: list[dict[str, Any]]) -> dict[str, Any]:
        """Replace role assignments for the given permissions."""

    async def aclose(self) -> None:
        """Release transport resources the adapter owns."""
