"""Chat adapter factory: creates the platform adapter selected by CHAT_PLATFORM."""

from __future__ import annotations

from typing import TYPE_CHECKING

import httpx

from app.application.interfaces.chat import IChatPlatformAdapter

if TYPE_CHECKING:
    from app.core.config import Settings


class ChatAdapterFactory:
    """Factory for chat platform adapters based on configuration."""

    @staticmethod
    def create_adapter(
        settings: "Settings | None" = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> IChatPlatformAdapter:
        """Create the chat adapter from settings.

        Args:
            settings: Application settings; if None, uses get_settings().
            http_client: Shared client owned by the caller (lifespan). When
                None the adapter creates and owns its own client.

        Returns:
            RocketChatAdapter.

        Raises:
            ValueError: Unknown platform.
        """
        from app.core.config import get_settings

        s = settings or get_settings()
        platform = s.chat_platform.lower()

        if platform == "rocketchat":
            from app.infrastructure.external.chat.rocketchat import RocketChatAdapter

            return RocketChatAdapter(
                base_url=s.chat_platform_url,
                admin_user_id=s.chat_platform_admin_user_id,
                admin_token=s.chat_platform_access_token.get_secret_value(),
                admin_email=s.chat_platform_admin_email,
                admin_password=s.chat_platform_admin_password.get_secret_value(),
                timeout_seconds=s.chat_platform_timeout_seconds,
                http_client=http_client,
            )
        raise ValueError(f"Unknown chat platform: {platform}. Supported: 'rocketchat'")
