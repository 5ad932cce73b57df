"""Communication API schemas: flat request bodies and the response envelope."""

from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, EmailStr, Field, HttpUrl

T = TypeVar("T")

# Internal ids arrive as strings or numbers depending on the calling service.
_ID_CONFIG = ConfigDict(coerce_numbers_to_str=True, str_strip_whitespace=True)


class UserRequest(BaseModel):
    """Body carrying only the internal user id (login, removeAvatar)."""

    model_config = _ID_CONFIG

    user_id: str = Field(..., min_length=1, max_length=255)


class SignupRequest(UserRequest):
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    image_url: HttpUrl | None = None


class LogoutRequest(UserRequest):
    """Logout; with token only that session ends, otherwise every session."""

    token: str | None = Field(default=None, min_length=1)


class CreateRoomRequest(BaseModel):
    """Direct-message room between two internal user ids.

    The first id is the sender of initial_message.
    """

    model_config = _ID_CONFIG

    usernames: list[str] = Field(..., min_length=2, max_length=2)
    initial_message: str = Field(..., min_length=1)


class UpdateAvatarRequest(UserRequest):
    image_url: HttpUrl


class UpdateUserRequest(UserRequest):
    name: str = Field(..., min_length=1, max_length=255)


class UserMappingRequest(BaseModel):
    model_config = _ID_CONFIG

    external_user_id: str = Field(..., min_length=1, max_length=255)


class SetActiveStatusRequest(UserRequest):
    """Field names follow the chat platform's camelCase payload."""

    activeStatus: bool
    confirmRelinquish: bool = True


class SignupData(BaseModel):
    """user_id is the chat platform id of the new (or existing) account."""

    user_id: str


class LoginData(BaseModel):
    user_id: str
    auth_token: str


class RoomId(BaseModel):
    room_id: str


class RoomData(BaseModel):
    room: RoomId


class UserMappingData(BaseModel):
    user_id: str
    external_user_id: str


class ApiResponse(BaseModel, Generic[T]):
    """Success envelope: {statusCode, message, result}."""

    statusCode: int = 200
    message: str
    result: T | None = None


class ErrorResponse(BaseModel):
    """Failure envelope: {statusCode, message, responseCode}."""

    statusCode: int
    message: Any
    responseCode: str
