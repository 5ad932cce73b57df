"""Tests for domain exceptions (error_code, message, details)."""

import pytest

from app.domain.exceptions import (
    AvatarFailedException,
    ChatPlatformException,
    ChatTimeoutException,
    CommunicationsException,
    ConfigurationError,
    DuplicateKeyException,
    InvalidUserException,
    RemoteErrorException,
    SendFailedException,
    SqlNotConfiguredException,
    UnauthorizedException,
    UserNotFoundException,
    ValidationException,
)


def test_base_exception_default_error_code() -> None:
    """Base CommunicationsException uses class name as error_code when not provided."""
    exc = CommunicationsException("Something failed")
    assert exc.message == "Something failed"
    assert exc.error_code == "CommunicationsException"
    assert exc.details == {}


def test_to_dict() -> None:
    exc = CommunicationsException("Oops", error_code="CUSTOM", details={"key": "value"})
    assert exc.to_dict() == {"error": "CUSTOM", "message": "Oops", "details": {"key": "value"}}


def test_validation_exception() -> None:
    """ValidationException sets VALIDATION_ERROR and optional field in details."""
    exc = ValidationException("Invalid format", field="tenant_code")
    assert exc.error_code == "VALIDATION_ERROR"
    assert exc.details == {"field": "tenant_code"}
    assert ValidationException("Invalid").details == {}


def test_configuration_error_is_value_error() -> None:
    """pydantic-settings reports ValueError raised from validators."""
    exc = ConfigurationError("USERNAME_HASH_SALT is required.")
    assert isinstance(exc, ValueError)
    assert exc.error_code == "CONFIGURATION_ERROR"


def test_duplicate_key_exception() -> None:
    exc = DuplicateKeyException("u1", "acme")
    assert exc.error_code == "DUPLICATE_KEY"
    assert exc.details == {"user_id": "u1", "tenant_code": "acme"}


def test_user_not_found_exception() -> None:
    exc = UserNotFoundException("u1", "acme")
    assert exc.message == "User does not exist"
    assert exc.error_code == "USER_NOT_FOUND"
    assert exc.details == {"user_id": "u1", "tenant_code": "acme"}
    assert UserNotFoundException("u1").details == {"user_id": "u1"}


@pytest.mark.parametrize(
    "exc,code",
    [
        (UnauthorizedException(), "UNAUTHORIZED"),
        (InvalidUserException(), "INVALID_USER"),
        (SendFailedException("room1", "login failed"), "SEND_FAILED"),
        (AvatarFailedException("abcd1234", "download", "HTTPStatusError"), "AVATAR_FAILED"),
        (ChatTimeoutException("login", 10.0), "CHAT_TIMEOUT"),
        (RemoteErrorException("users.create", 500, "boom"), "REMOTE_ERROR"),
    ],
)
def test_chat_platform_exceptions(exc: ChatPlatformException, code: str) -> None:
    assert isinstance(exc, ChatPlatformException)
    assert exc.error_code == code


def test_avatar_failed_details() -> None:
    exc = AvatarFailedException("abcd1234", "upload", "REMOTE_ERROR")
    assert exc.details == {"username": "abcd1234", "stage": "upload", "reason": "REMOTE_ERROR"}


def test_remote_error_details_omit_missing_values() -> None:
    assert RemoteErrorException("login").details == {"endpoint": "login"}
    assert RemoteErrorException("login", 502, "bad gateway").details == {
        "endpoint": "login",
        "status_code": 502,
        "reason": "bad gateway",
    }


def test_sql_not_configured_exception() -> None:
    exc = SqlNotConfiguredException()
    assert exc.error_code == "SERVICE_UNAVAILABLE"
