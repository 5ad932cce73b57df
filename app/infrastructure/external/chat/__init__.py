"""Chat platform adapters (Rocket.Chat) and the factory that selects one."""

from app.infrastructure.external.chat.factory import ChatAdapterFactory
from app.infrastructure.external.chat.rocketchat import RocketChatAdapter

__all__ = ["ChatAdapterFactory", "RocketChatAdapter"]
