"""Tests for Settings validation (required secrets, salts, bounds)."""

from typing import Any

import pytest
from pydantic import ValidationError

from app.core.config import Settings


def _settings(**overrides: Any) -> Settings:
    values: dict[str, Any] = {
        "chat_platform_url": "http://chat.test",
        "chat_platform_access_token": "token",
        "chat_platform_admin_user_id": "admin-id",
        "internal_access_token": "internal",
        "username_hash_salt": "us",
        "password_hash_salt": "ps",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


def test_defaults() -> None:
    s = _settings()
    assert s.chat_platform == "rocketchat"
    assert s.username_hash_length == 8
    assert s.password_hash_length == 8
    assert s.chat_platform_timeout_seconds == 10.0
    assert s.default_tenant_code == "default"
    assert s.internal_access_token_header == "internal-access-token"


def test_secrets_are_masked() -> None:
    s = _settings(internal_access_token="very-secret")
    assert "very-secret" not in repr(s)
    assert s.internal_access_token.get_secret_value() == "very-secret"


@pytest.mark.parametrize(
    "field,message",
    [
        ("username_hash_salt", "USERNAME_HASH_SALT"),
        ("password_hash_salt", "PASSWORD_HASH_SALT"),
        ("internal_access_token", "INTERNAL_ACCESS_TOKEN"),
        ("chat_platform_url", "CHAT_PLATFORM_URL"),
        ("chat_platform_access_token", "CHAT_PLATFORM_ACCESS_TOKEN"),
        ("chat_platform_admin_user_id", "CHAT_PLATFORM_ADMIN_USER_ID"),
    ],
)
def test_required_values(field: str, message: str) -> None:
    with pytest.raises(ValidationError, match=message):
        _settings(**{field: ""})


def test_unknown_platform_rejected() -> None:
    with pytest.raises(ValidationError, match="chat_platform"):
        _settings(chat_platform="slack")


@pytest.mark.parametrize("length", [0, 129])
def test_hash_length_bounds(length: int) -> None:
    with pytest.raises(ValidationError, match="USERNAME_HASH_LENGTH"):
        _settings(username_hash_length=length)


def test_timeout_must_be_positive() -> None:
    with pytest.raises(ValidationError, match="CHAT_PLATFORM_TIMEOUT_SECONDS"):
        _settings(chat_platform_timeout_seconds=0)
