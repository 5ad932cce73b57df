"""Wire-level tests for RocketChatAdapter using httpx.MockTransport."""

import json
from collections.abc import Callable

import httpx
import pytest

from app.domain.exceptions import (
    AvatarFailedException,
    ChatTimeoutException,
    ConfigurationError,
    InvalidUserException,
    RemoteErrorException,
    SendFailedException,
    UnauthorizedException,
)
from app.infrastructure.external.chat import ChatAdapterFactory, RocketChatAdapter

BASE = "http://chat.test"


def _adapter(
    handler: Callable[[httpx.Request], httpx.Response],
    **kwargs,
) -> tuple[RocketChatAdapter, list[httpx.Request]]:
    seen: list[httpx.Request] = []

    def recording(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return handler(request)

    client = httpx.AsyncClient(transport=httpx.MockTransport(recording))
    adapter = RocketChatAdapter(
        base_url=BASE + "/",
        admin_user_id="admin-id",
        admin_token="admin-token",
        http_client=client,
        **kwargs,
    )
    return adapter, seen


def _body(request: httpx.Request) -> dict:
    return json.loads(request.content)


class TestSignup:
    async def test_posts_payload_with_admin_headers(self) -> None:
        adapter, seen = _adapter(
            lambda r: httpx.Response(200, json={"success": True, "user": {"_id": "rc-1"}})
        )
        result = await adapter.signup("Alice", "abcd1234", "pw123456", "a@x.com")

        assert result.external_user_id == "rc-1"
        request = seen[0]
        assert request.method == "POST"
        assert str(request.url) == f"{BASE}/api/v1/users.create"
        assert request.headers["X-Auth-Token"] == "admin-token"
        assert request.headers["X-User-Id"] == "admin-id"
        body = _body(request)
        assert body["username"] == "abcd1234"
        assert body["password"] == "pw123456"
        assert body["verified"] is True
        assert body["sendWelcomeEmail"] is False
        assert body["joinDefaultChannels"] is False
        assert body["requirePasswordChange"] is False

    async def test_missing_user_id_is_remote_error(self) -> None:
        adapter, _ = _adapter(lambda r: httpx.Response(200, json={"success": True}))
        with pytest.raises(RemoteErrorException):
            await adapter.signup("Alice", "abcd1234", "pw", "a@x.com")


class TestErrorTranslation:
    async def test_401_is_unauthorized(self) -> None:
        adapter, _ = _adapter(lambda r: httpx.Response(401, json={"status": "error"}))
        with pytest.raises(UnauthorizedException):
            await adapter.login("abcd1234", "pw")

    async def test_invalid_user(self) -> None:
        adapter, _ = _adapter(
            lambda r: httpx.Response(
                400, json={"success": False, "errorType": "error-invalid-user", "error": "x"}
            )
        )
        with pytest.raises(InvalidUserException):
            await adapter.initiate_room(["a", "b"])

    async def test_other_400_is_remote_error(self) -> None:
        adapter, _ = _adapter(
            lambda r: httpx.Response(
                400, json={"success": False, "errorType": "error-field-unavailable", "error": "taken"}
            )
        )
        with pytest.raises(RemoteErrorException) as exc_info:
            await adapter.signup("Alice", "abcd1234", "pw", "a@x.com")
        assert exc_info.value.details["status_code"] == 400
        assert exc_info.value.details["reason"] == "taken"

    async def test_500_non_json_body(self) -> None:
        adapter, _ = _adapter(lambda r: httpx.Response(500, text="upstream down"))
        with pytest.raises(RemoteErrorException) as exc_info:
            await adapter.update_user("rc-1", "Alice")
        assert exc_info.value.details["reason"] == "upstream down"

    async def test_timeout(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        adapter, _ = _adapter(handler, timeout_seconds=2.5)
        with pytest.raises(ChatTimeoutException) as exc_info:
            await adapter.login("abcd1234", "pw")
        assert exc_info.value.details == {"endpoint": "login", "timeout_seconds": 2.5}

    async def test_connect_error_is_remote_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        adapter, _ = _adapter(handler)
        with pytest.raises(RemoteErrorException):
            await adapter.logout("rc-1", "tok")


class TestSessions:
    async def test_login_returns_session(self) -> None:
        adapter, seen = _adapter(
            lambda r: httpx.Response(
                200, json={"status": "success", "data": {"userId": "rc-1", "authToken": "tok"}}
            )
        )
        session = await adapter.login("abcd1234", "pw")
        assert session.external_user_id == "rc-1"
        assert session.session_token == "tok"
        assert _body(seen[0]) == {"user": "abcd1234", "password": "pw"}
        assert "X-Auth-Token" not in seen[0].headers

    async def test_logout_uses_session_headers(self) -> None:
        adapter, seen = _adapter(lambda r: httpx.Response(200, json={"status": "success"}))
        await adapter.logout("rc-1", "tok")
        assert seen[0].url.path == "/api/v1/logout"
        assert seen[0].headers["X-Auth-Token"] == "tok"
        assert seen[0].headers["X-User-Id"] == "rc-1"

    async def test_logout_other_clients(self) -> None:
        adapter, seen = _adapter(lambda r: httpx.Response(200, json={"success": True}))
        await adapter.logout_other_clients("rc-1", "tok")
        assert seen[0].url.path == "/api/v1/users.logoutOtherClients"
        assert seen[0].headers["X-User-Id"] == "rc-1"

    async def test_admin_login_requires_credentials(self) -> None:
        adapter, _ = _adapter(lambda r: httpx.Response(200, json={}))
        with pytest.raises(ConfigurationError):
            await adapter.admin_login()

    async def test_admin_login(self) -> None:
        adapter, seen = _adapter(
            lambda r: httpx.Response(200, json={"data": {"userId": "admin-id", "authToken": "t"}}),
            admin_email="admin@x.com",
            admin_password="secret",
        )
        session = await adapter.admin_login()
        assert session.external_user_id == "admin-id"
        assert _body(seen[0]) == {"user": "admin@x.com", "password": "secret"}


class TestRooms:
    async def test_initiate_room_joins_usernames(self) -> None:
        adapter, seen = _adapter(
            lambda r: httpx.Response(200, json={"room": {"rid": "room-1"}, "success": True})
        )
        room = await adapter.initiate_room(["aaaa1111", "bbbb2222"])
        assert room.room_id == "room-1"
        assert _body(seen[0]) == {"usernames": "aaaa1111,bbbb2222", "excludeSelf": True}

    async def test_send_message_sequence(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path.endswith("/login"):
                return httpx.Response(200, json={"data": {"userId": "rc-1", "authToken": "tok"}})
            return httpx.Response(200, json={"success": True})

        adapter, seen = _adapter(handler)
        await adapter.send_message("aaaa1111", "pw", "room-1", "hello")

        paths = [r.url.path.removeprefix("/api/v1/") for r in seen]
        assert paths == ["login", "chat.sendMessage", "im.open", "logout"]
        assert _body(seen[1]) == {"message": {"rid": "room-1", "msg": "hello"}}
        assert _body(seen[2]) == {"roomId": "room-1"}
        for request in seen[1:]:
            assert request.headers["X-Auth-Token"] == "tok"
            assert request.headers["X-User-Id"] == "rc-1"

    async def test_send_message_login_failure_does_not_send(self) -> None:
        adapter, seen = _adapter(lambda r: httpx.Response(401, json={}))
        with pytest.raises(SendFailedException) as exc_info:
            await adapter.send_message("aaaa1111", "pw", "room-1", "hello")
        assert exc_info.value.details["room_id"] == "room-1"
        assert len(seen) == 1

    async def test_send_failure_still_logs_out(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path.endswith("/login"):
                return httpx.Response(200, json={"data": {"userId": "rc-1", "authToken": "tok"}})
            if request.url.path.endswith("/chat.sendMessage"):
                return httpx.Response(500, json={"error": "boom"})
            return httpx.Response(200, json={"success": True})

        adapter, seen = _adapter(handler)
        with pytest.raises(SendFailedException) as exc_info:
            await adapter.send_message("aaaa1111", "pw", "room-1", "hello")
        assert exc_info.value.details == {"room_id": "room-1", "reason": "REMOTE_ERROR"}
        assert seen[-1].url.path == "/api/v1/logout"

    async def test_open_failure_is_send_failed(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path.endswith("/login"):
                return httpx.Response(200, json={"data": {"userId": "rc-1", "authToken": "tok"}})
            if request.url.path.endswith("/im.open"):
                return httpx.Response(400, json={"error": "not allowed"})
            return httpx.Response(200, json={"success": True})

        adapter, seen = _adapter(handler)
        with pytest.raises(SendFailedException):
            await adapter.send_message("aaaa1111", "pw", "room-1", "hello")
        paths = [r.url.path.removeprefix("/api/v1/") for r in seen]
        assert paths == ["login", "chat.sendMessage", "im.open", "logout"]

    async def test_send_timeout_is_not_wrapped(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path.endswith("/login"):
                return httpx.Response(200, json={"data": {"userId": "rc-1", "authToken": "tok"}})
            if request.url.path.endswith("/chat.sendMessage"):
                raise httpx.ReadTimeout("timed out", request=request)
            return httpx.Response(200, json={"success": True})

        adapter, seen = _adapter(handler)
        with pytest.raises(ChatTimeoutException):
            await adapter.send_message("aaaa1111", "pw", "room-1", "hello")
        assert seen[-1].url.path == "/api/v1/logout"


class TestAvatar:
    async def test_download_then_multipart_upload(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.host == "img.test":
                return httpx.Response(
                    200, content=b"\x89PNG-bytes", headers={"content-type": "image/png"}
                )
            return httpx.Response(200, json={"success": True})

        adapter, seen = _adapter(handler)
        await adapter.set_avatar("aaaa1111", "http://img.test/a.png")

        assert seen[0].method == "GET"
        upload = seen[1]
        assert upload.url.path == "/api/v1/users.setAvatar"
        assert upload.headers["content-type"].startswith("multipart/form-data")
        content = upload.content
        assert b'name="username"' in content
        assert b"aaaa1111" in content
        assert b'filename="avatar-' in content
        assert b"\x89PNG-bytes" in content
        assert upload.headers["X-Auth-Token"] == "admin-token"

    async def test_download_failure(self) -> None:
        adapter, seen = _adapter(lambda r: httpx.Response(404))
        with pytest.raises(AvatarFailedException) as exc_info:
            await adapter.set_avatar("aaaa1111", "http://img.test/missing.png")
        assert exc_info.value.details["stage"] == "download"
        assert len(seen) == 1

    async def test_upload_failure(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.host == "img.test":
                return httpx.Response(200, content=b"jpeg")
            return httpx.Response(400, json={"error": "bad image"})

        adapter, _ = _adapter(handler)
        with pytest.raises(AvatarFailedException) as exc_info:
            await adapter.set_avatar("aaaa1111", "http://img.test/a.jpg")
        assert exc_info.value.details["stage"] == "upload"

    async def test_reset_avatar(self) -> None:
        adapter, seen = _adapter(lambda r: httpx.Response(200, json={"success": True}))
        await adapter.reset_avatar("aaaa1111")
        assert seen[0].url.path == "/api/v1/users.resetAvatar"
        assert _body(seen[0]) == {"username": "aaaa1111"}


class TestAdministration:
    async def test_set_active_status_payload(self) -> None:
        adapter, seen = _adapter(lambda r: httpx.Response(200, json={"success": True}))
        await adapter.set_active_status(False, "rc-1")
        assert _body(seen[0]) == {"activeStatus": False, "userId": "rc-1", "confirmRelinquish": True}

    async def test_update_user_payload(self) -> None:
        adapter, seen = _adapter(lambda r: httpx.Response(200, json={"success": True}))
        await adapter.update_user("rc-1", "Alice B")
        assert _body(seen[0]) == {"userId": "rc-1", "data": {"name": "Alice B"}}

    async def test_list_users(self) -> None:
        adapter, seen = _adapter(
            lambda r: httpx.Response(200, json={"success": True, "users": [{"_id": "u1"}]})
        )
        users = await adapter.list_users(offset=100, count=50)
        assert users == [{"_id": "u1"}]
        assert seen[0].method == "GET"
        assert seen[0].url.params["offset"] == "100"
        assert seen[0].url.params["count"] == "50"

    async def test_delete_user(self) -> None:
        adapter, seen = _adapter(lambda r: httpx.Response(200, json={"success": True}))
        await adapter.delete_user("rc-1")
        assert _body(seen[0]) == {"userId": "rc-1", "confirmRelinquish": True}

    async def test_save_settings_wraps_method_call(self) -> None:
        adapter, seen = _adapter(lambda r: httpx.Response(200, json={"success": True}))
        await adapter.save_settings("33", [{"_id": "UI_Use_Real_Name", "value": True}])
        assert seen[0].url.path == "/api/v1/method.call/saveSettings"
        message = json.loads(_body(seen[0])["message"])
        assert message == {
            "msg": "method",
            "id": "33",
            "method": "saveSettings",
            "params": [[{"_id": "UI_Use_Real_Name", "value": True}]],
        }

    async def test_update_permissions(self) -> None:
        adapter, seen = _adapter(lambda r: httpx.Response(200, json={"success": True}))
        await adapter.update_permissions([{"_id": "view-outside-room", "roles": ["admin"]}])
        assert _body(seen[0]) == {"permissions": [{"_id": "view-outside-room", "roles": ["admin"]}]}


def test_factory_creates_rocketchat_adapter() -> None:
    from app.core.config import get_settings

    adapter = ChatAdapterFactory.create_adapter(get_settings(), http_client=httpx.AsyncClient())
    assert isinstance(adapter, RocketChatAdapter)
    assert adapter.platform_name == "rocketchat"
