"""Pydantic request/response schemas for the API."""

from app.schemas.communication import (
    ApiResponse,
    CreateRoomRequest,
    ErrorResponse,
    LoginData,
    LogoutRequest,
    RoomData,
    SetActiveStatusRequest,
    SignupData,
    SignupRequest,
    UpdateAvatarRequest,
    UpdateUserRequest,
    UserMappingData,
    UserMappingRequest,
    UserRequest,
)
from app.schemas.health import HealthResponse

__all__ = [
    "ApiResponse",
    "CreateRoomRequest",
    "ErrorResponse",
    "HealthResponse",
    "LoginData",
    "LogoutRequest",
    "RoomData",
    "SetActiveStatusRequest",
    "SignupData",
    "SignupRequest",
    "UpdateAvatarRequest",
    "UpdateUserRequest",
    "UserMappingData",
    "UserMappingRequest",
    "UserRequest",
]
