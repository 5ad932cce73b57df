"""Rocket.Chat adapter: user accounts, sessions, DM rooms, messages, avatars.

Every call is a single HTTP round trip on a shared httpx.AsyncClient with a
bounded timeout, except the composites send_message (login, send, open,
logout) and set_avatar (download, upload). Transport and status failures are
translated to domain exceptions here; callers never see httpx types.
"""

from __future__ import annotations

import json
from typing import Any, ClassVar

import httpx

from app.application.dtos.chat import ChatSession, RoomResult, SignupResult
from app.domain.exceptions import (
    AvatarFailedException,
    ChatPlatformException,
    ChatTimeoutException,
    ConfigurationError,
    InvalidUserException,
    RemoteErrorException,
    SendFailedException,
    UnauthorizedException,
)
from app.infrastructure.external.chat import endpoints
from app.shared.telemetry.logging import get_logger
from app.shared.telemetry.tracing import TracedOperation
from app.shared.utils.datetime import avatar_timestamp

logger = get_logger(__name__)

# Body excerpt kept in RemoteErrorException details.
_REASON_MAX_LENGTH = 200


class RocketChatAdapter:
    """Rocket.Chat implementation of IChatPlatformAdapter.

    Administrative calls authenticate with the admin personal access token
    (X-Auth-Token + X-User-Id); user-scoped calls with the session pair
    returned by login().
    """

    PLATFORM_NAME: ClassVar[str] = "rocketchat"
    DEFAULT_AVATAR_CONTENT_TYPE: ClassVar[str] = "image/jpeg"

    def __init__(
        self,
        base_url: str,
        admin_user_id: str,
        admin_token: str,
        admin_email: str = "",
        admin_password: str = "",
        timeout_seconds: float = 10.0,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.admin_user_id = admin_user_id
        self._admin_token = admin_token
        self._admin_email = admin_email
        self._admin_password = admin_password
        self.timeout_seconds = timeout_seconds
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(timeout=timeout_seconds)

    @property
    def platform_name(self) -> str:
        return self.PLATFORM_NAME

    async def aclose(self) -> None:
        """Close the HTTP client if this adapter created it."""
        if self._owns_client:
            await self._client.aclose()

    # ---- transport ----

    def _url(self, endpoint: str) -> str:
        return f"{self.base_url}{endpoints.API_PREFIX}/{endpoint}"

    def _admin_headers(self) -> dict[str, str]:
        return {"X-Auth-Token": self._admin_token, "X-User-Id": self.admin_user_id}

    @staticmethod
    def _session_headers(session: ChatSession) -> dict[str, str]:
        return {"X-Auth-Token": session.session_token, "X-User-Id": session.external_user_id}

    async def _request(
        self,
        method: str,
        endpoint: str,
        *,
        headers: dict[str, str] | None = None,
        json_body: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
        data: dict[str, Any] | None = None,
        files: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Perform one API call and return the decoded JSON body.

        Raises:
            ChatTimeoutException: The call exceeded timeout_seconds.
            UnauthorizedException: HTTP 401.
            InvalidUserException: HTTP 400 with errorType error-invalid-user.
            RemoteErrorException: Any other failure.
        """
        with TracedOperation(
            f"chat.{endpoint}",
            {"chat.platform": self.PLATFORM_NAME, "http.method": method},
        ) as op:
            try:
                response = await self._client.request(
                    method,
                    self._url(endpoint),
                    headers=headers if headers is not None else self._admin_headers(),
                    json=json_body,
                    params=params,
                    data=data,
                    files=files,
                    timeout=self.timeout_seconds,
                )
            except httpx.TimeoutException:
                logger.warning(
                    "Rocket.Chat %s timed out after %ss", endpoint, self.timeout_seconds
                )
                raise ChatTimeoutException(endpoint, self.timeout_seconds)
            except httpx.HTTPError as e:
                logger.error("Rocket.Chat %s transport error: %s", endpoint, e)
                raise RemoteErrorException(endpoint, reason=type(e).__name__)
            op.set_attribute("http.status_code", response.status_code)
            self._raise_for_status(endpoint, response)
            if not response.content:
                return {}
            try:
                return response.json()
            except ValueError:
                raise RemoteErrorException(
                    endpoint, response.status_code, "Response is not JSON"
                )

    @staticmethod
    def _raise_for_status(endpoint: str, response: httpx.Response) -> None:
        """Translate non-2xx responses into domain exceptions."""
        status = response.status_code
        if status < 400:
            return
        if status == 401:
            logger.warning("Rocket.Chat %s unauthorized - check credentials or token", endpoint)
            raise UnauthorizedException()
        body: dict[str, Any] = {}
        try:
            parsed = response.json()
            if isinstance(parsed, dict):
                body = parsed
        except ValueError:
            pass
        if status == 400 and body.get("errorType") == endpoints.ERROR_INVALID_USER:
            logger.info("Rocket.Chat %s rejected user: %s", endpoint, body.get("error"))
            raise InvalidUserException()
        reason = str(body.get("error") or response.text)[:_REASON_MAX_LENGTH]
        logger.error("Rocket.Chat %s failed: status=%d reason=%s", endpoint, status, reason)
        raise RemoteErrorException(endpoint, status, reason)

    # ---- accounts and sessions ----

    async def signup(
        self, name: str, username: str, password: str, email: str
    ) -> SignupResult:
        payload = {
            "name": name,
            "username": username,
            "password": password,
            "email": email,
            "verified": True,
            "setRandomPassword": False,
            "requirePasswordChange": False,
            "customFields": {},
            "sendWelcomeEmail": False,
            "joinDefaultChannels": False,
        }
        data = await self._request("POST", endpoints.USERS_CREATE, json_body=payload)
        try:
            external_user_id = data["user"]["_id"]
        except (KeyError, TypeError):
            raise RemoteErrorException(endpoints.USERS_CREATE, reason="Missing user._id")
        logger.info("Rocket.Chat account created: username=%s id=%s", username, external_user_id)
        return SignupResult(external_user_id=external_user_id)

    async def update_user(self, external_user_id: str, name: str) -> dict[str, Any]:
        return await self._request(
            "POST",
            endpoints.USERS_UPDATE,
            json_body={"userId": external_user_id, "data": {"name": name}},
        )

    async def login(self, username: str, password: str) -> ChatSession:
        data = await self._request(
            "POST",
            endpoints.LOGIN,
            json_body={"user": username, "password": password},
            headers={},
        )
        session_data = data.get("data") or {}
        user_id = session_data.get("userId")
        token = session_data.get("authToken")
        if not user_id or not token:
            raise RemoteErrorException(endpoints.LOGIN, reason="Missing userId or authToken")
        return ChatSession(external_user_id=user_id, session_token=token)

    async def admin_login(self) -> ChatSession:
        if not self._admin_email or not self._admin_password:
            raise ConfigurationError(
                "CHAT_PLATFORM_ADMIN_EMAIL and CHAT_PLATFORM_ADMIN_PASSWORD are required for admin login"
            )
        return await self.login(self._admin_email, self._admin_password)

    async def logout(self, external_user_id: str, session_token: str) -> dict[str, Any]:
        session = ChatSession(external_user_id=external_user_id, session_token=session_token)
        return await self._request(
            "POST", endpoints.LOGOUT, json_body={}, headers=self._session_headers(session)
        )

    async def logout_other_clients(
        self, external_user_id: str, session_token: str
    ) -> dict[str, Any]:
        session = ChatSession(external_user_id=external_user_id, session_token=session_token)
        return await self._request(
            "POST",
            endpoints.USERS_LOGOUT_OTHER_CLIENTS,
            json_body={},
            headers=self._session_headers(session),
        )

    async def set_active_status(
        self, active: bool, user_id: str, confirm_relinquish: bool = True
    ) -> dict[str, Any]:
        return await self._request(
            "POST",
            endpoints.USERS_SET_ACTIVE_STATUS,
            json_body={
                "activeStatus": active,
                "userId": user_id,
                "confirmRelinquish": confirm_relinquish,
            },
        )

    async def list_users(self, offset: int = 0, count: int = 100) -> list[dict[str, Any]]:
        data = await self._request(
            "GET", endpoints.USERS_LIST, params={"offset": offset, "count": count}
        )
        if not data.get("success", True):
            raise RemoteErrorException(endpoints.USERS_LIST, reason="success=false")
        return list(data.get("users") or [])

    async def delete_user(
        self, external_user_id: str, confirm_relinquish: bool = True
    ) -> dict[str, Any]:
        return await self._request(
            "POST",
            endpoints.USERS_DELETE,
            json_body={"userId": external_user_id, "confirmRelinquish": confirm_relinquish},
        )

    # ---- rooms and messages ----

    async def initiate_room(
        self, usernames: list[str], exclude_self: bool = True
    ) -> RoomResult:
        data = await self._request(
            "POST",
            endpoints.IM_CREATE,
            json_body={"usernames": ",".join(usernames), "excludeSelf": exclude_self},
        )
        room = data.get("room") or {}
        room_id = room.get("rid") or room.get("_id")
        if not room_id:
            raise RemoteErrorException(endpoints.IM_CREATE, reason="Missing room id")
        return RoomResult(room_id=room_id)

    async def send_message(
        self, username: str, password: str, room_id: str, text: str
    ) -> dict[str, Any]:
        """Post text to room as username and add the room to the sender's DM list.

        Login failure raises SendFailedException without attempting the send;
        a failed send or open after login raises SendFailedException too.
        Timeouts surface as ChatTimeoutException.
        The temporary session is always logged out afterwards.
        """
        try:
            session = await self.login(username, password)
        except ChatPlatformException as e:
            logger.warning("Send aborted, login failed for username=%s: %s", username, e.error_code)
            raise SendFailedException(room_id, f"login failed: {e.error_code}")
        headers = self._session_headers(session)
        try:
            response = await self._request(
                "POST",
                endpoints.CHAT_SEND_MESSAGE,
                json_body={"message": {"rid": room_id, "msg": text}},
                headers=headers,
            )
            await self._request(
                "POST", endpoints.IM_OPEN, json_body={"roomId": room_id}, headers=headers
            )
        except ChatTimeoutException:
            raise
        except ChatPlatformException as e:
            logger.warning("Send to room_id=%s failed: %s", room_id, e.error_code)
            raise SendFailedException(room_id, e.error_code)
        finally:
            await self._logout_after_send(session)
        return response

    async def _logout_after_send(self, session: ChatSession) -> None:
        """Close the temporary send session; a failed logout only leaves a stale token."""
        try:
            await self.logout(session.external_user_id, session.session_token)
        except ChatPlatformException as e:
            logger.warning(
                "Logout after send failed for id=%s: %s", session.external_user_id, e.error_code
            )

    # ---- avatars ----

    async def set_avatar(self, username: str, image_url: str) -> dict[str, Any]:
        """Download image_url then upload it as multipart form data."""
        try:
            image = await self._client.get(
                image_url, timeout=self.timeout_seconds, follow_redirects=True
            )
            image.raise_for_status()
        except httpx.HTTPError as e:
            logger.warning("Avatar download failed for username=%s: %s", username, type(e).__name__)
            raise AvatarFailedException(username, "download", type(e).__name__)
        content_type = image.headers.get("content-type", "").split(";")[0].strip()
        if not content_type.startswith("image/"):
            content_type = self.DEFAULT_AVATAR_CONTENT_TYPE
        filename = f"avatar-{avatar_timestamp()}.jpg"
        try:
            return await self._request(
                "POST",
                endpoints.USERS_SET_AVATAR,
                data={"username": username},
                files={"image": (filename, image.content, content_type)},
            )
        except ChatPlatformException as e:
            raise AvatarFailedException(username, "upload", e.error_code)

    async def reset_avatar(self, username: str) -> dict[str, Any]:
        return await self._request(
            "POST", endpoints.USERS_RESET_AVATAR, json_body={"username": username}
        )

    # ---- workspace administration ----

    async def save_settings(
        self, settings_id: str, settings: list[dict[str, Any]]
    ) -> dict[str, Any]:
        """Save settings through the DDP-over-REST method.call bridge."""
        message = json.dumps(
            {"msg": "method", "id": settings_id, "method": "saveSettings", "params": [settings]}
        )
        return await self._request(
            "POST", endpoints.METHOD_CALL_SAVE_SETTINGS, json_body={"message": message}
        )

    async def update_permissions(self, permissions: list[dict[str, Any]]) -> dict[str, Any]:
        return await self._request(
            "POST", endpoints.PERMISSIONS_UPDATE, json_body={"permissions": permissions}
        )
