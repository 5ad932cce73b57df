"""DTOs returned by chat platform adapters (platform-neutral)."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class SignupResult:
    """Account created on the chat platform."""

    external_user_id: str


@dataclass(frozen=True)
class ChatSession:
    """Authenticated chat platform session for one user."""

    external_user_id: str
    session_token: str = field(repr=False)


@dataclass(frozen=True)
class RoomResult:
    """Direct-message room created between two users."""

    room_id: str
