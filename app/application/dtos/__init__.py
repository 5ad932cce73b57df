"""Application DTOs: read-models and inputs independent of ORM and HTTP."""

from app.application.dtos.chat import ChatSession, RoomResult, SignupResult
from app.application.dtos.identity import (
    UserIdentityCreate,
    UserIdentityResult,
    UserMappingResult,
)

__all__ = [
    "ChatSession",
    "RoomResult",
    "SignupResult",
    "UserIdentityCreate",
    "UserIdentityResult",
    "UserMappingResult",
]
