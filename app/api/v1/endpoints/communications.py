"""Communications API: thin routes delegating to CommunicationService.

All routes are POST with flat JSON bodies and answer with the
{statusCode, message, result} envelope. Domain errors are rendered by the
exception handlers in app.core.exception_handlers.
"""

from typing import Any

from fastapi import APIRouter

from app.api.v1.dependencies import (
    CommunicationServiceDep,
    ReadCommunicationServiceDep,
    StatelessCommunicationServiceDep,
    TenantCodeDep,
)
from app.schemas.communication import (
    ApiResponse,
    CreateRoomRequest,
    LoginData,
    LogoutRequest,
    RoomData,
    RoomId,
    SetActiveStatusRequest,
    SignupData,
    SignupRequest,
    UpdateAvatarRequest,
    UpdateUserRequest,
    UserMappingData,
    UserMappingRequest,
    UserRequest,
)

router = APIRouter()


@router.post("/signup", response_model=ApiResponse[SignupData], status_code=201)
async def signup(
    body: SignupRequest,
    tenant_code: TenantCodeDep,
    service: CommunicationServiceDep,
) -> ApiResponse[SignupData]:
    """Create (or return the existing) chat account for the user in this tenant."""
    record = await service.signup(
        user_id=body.user_id,
        tenant_code=tenant_code,
        name=body.name,
        email=str(body.email),
        image_url=str(body.image_url) if body.image_url else None,
    )
    return ApiResponse[SignupData](
        statusCode=201,
        message="User signed up",
        result=SignupData(user_id=record.external_user_id or ""),
    )


@router.post("/login", response_model=ApiResponse[LoginData])
async def login(
    body: UserRequest, service: StatelessCommunicationServiceDep
) -> ApiResponse[LoginData]:
    session = await service.login(user_id=body.user_id)
    return ApiResponse[LoginData](
        message="Logged In",
        result=LoginData(user_id=session.external_user_id, auth_token=session.session_token),
    )


@router.post("/logout", response_model=ApiResponse[dict[str, Any]])
async def logout(
    body: LogoutRequest,
    tenant_code: TenantCodeDep,
    service: CommunicationServiceDep,
) -> ApiResponse[dict[str, Any]]:
    result = await service.logout(
        user_id=body.user_id, tenant_code=tenant_code, token=body.token
    )
    return ApiResponse[dict[str, Any]](message="You've been logged out!", result=result)


@router.post("/createRoom", response_model=ApiResponse[RoomData])
async def create_room(
    body: CreateRoomRequest, service: StatelessCommunicationServiceDep
) -> ApiResponse[RoomData]:
    """Open a DM room between two users and send the first user's message."""
    room = await service.create_room(
        usernames=body.usernames, initial_message=body.initial_message
    )
    return ApiResponse[RoomData](
        message="Room created", result=RoomData(room=RoomId(room_id=room.room_id))
    )


@router.post("/updateAvatar", response_model=ApiResponse[dict[str, Any]])
async def update_avatar(
    body: UpdateAvatarRequest, service: StatelessCommunicationServiceDep
) -> ApiResponse[dict[str, Any]]:
    result = await service.update_avatar(user_id=body.user_id, image_url=str(body.image_url))
    return ApiResponse[dict[str, Any]](message="Avatar updated", result=result)


@router.post("/removeAvatar", response_model=ApiResponse[dict[str, Any]])
async def remove_avatar(
    body: UserRequest, service: StatelessCommunicationServiceDep
) -> ApiResponse[dict[str, Any]]:
    result = await service.remove_avatar(user_id=body.user_id)
    return ApiResponse[dict[str, Any]](message="Avatar removed", result=result)


@router.post("/updateUser", response_model=ApiResponse[dict[str, Any]])
async def update_user(
    body: UpdateUserRequest,
    tenant_code: TenantCodeDep,
    service: CommunicationServiceDep,
) -> ApiResponse[dict[str, Any]]:
    result = await service.update_user(
        user_id=body.user_id, tenant_code=tenant_code, name=body.name
    )
    return ApiResponse[dict[str, Any]](message="User updated", result=result)


@router.post("/userMapping", response_model=ApiResponse[UserMappingData])
async def user_mapping(
    body: UserMappingRequest,
    tenant_code: TenantCodeDep,
    service: ReadCommunicationServiceDep,
) -> ApiResponse[UserMappingData]:
    """Resolve a chat platform user id to the internal user id."""
    mapping = await service.user_mapping(
        external_user_id=body.external_user_id, tenant_code=tenant_code
    )
    return ApiResponse[UserMappingData](
        message="User mapping found",
        result=UserMappingData(
            user_id=mapping.user_id, external_user_id=mapping.external_user_id
        ),
    )


@router.post("/setActiveStatus", response_model=ApiResponse[dict[str, Any]])
async def set_active_status(
    body: SetActiveStatusRequest,
    tenant_code: TenantCodeDep,
    service: CommunicationServiceDep,
) -> ApiResponse[dict[str, Any]]:
    result = await service.set_active_status(
        user_id=body.user_id,
        tenant_code=tenant_code,
        active=body.activeStatus,
        confirm_relinquish=body.confirmRelinquish,
    )
    return ApiResponse[dict[str, Any]](message="Active status updated", result=result)
