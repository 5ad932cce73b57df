"""Apply the workspace settings this service relies on to the chat platform.

Locks down profile edits (names, avatars and passwords are managed by this
service), shows real names, disables 2FA, hides usernames, restricts
view-outside-room to admins, enables CORS and the API rate limiter.

Usage:
    uv run python -m scripts.update_chat_settings
All imports use app.*.
"""

import asyncio
import sys
from typing import Any

from app.application.interfaces.chat import IChatPlatformAdapter
from app.core.config import get_settings
from app.domain.exceptions import ChatPlatformException
from app.infrastructure.external.chat import ChatAdapterFactory
from app.shared.telemetry.logging import setup_logging

# (description, method call id, settings)
SETTINGS_GROUPS: list[tuple[str, str, list[dict[str, Any]]]] = [
    (
        "Disable profile changes",
        "27",
        [
            {"_id": "Accounts_AllowUserProfileChange", "value": False},
            {"_id": "Accounts_AllowUserAvatarChange", "value": False},
            {"_id": "Accounts_AllowRealNameChange", "value": False},
            {"_id": "Accounts_AllowUserStatusMessageChange", "value": False},
            {"_id": "Accounts_AllowUsernameChange", "value": False},
            {"_id": "Accounts_AllowEmailChange", "value": False},
            {"_id": "Accounts_AllowPasswordChange", "value": False},
            {"_id": "Accounts_AllowPasswordChangeForOAuthUsers", "value": False},
            {"_id": "Accounts_AllowEmailNotifications", "value": False},
        ],
    ),
    ("Use real names", "33", [{"_id": "UI_Use_Real_Name", "value": True}]),
    (
        "Disable two-factor authentication",
        "39",
        [{"_id": "Accounts_TwoFactorAuthentication_Enabled", "value": False}],
    ),
    (
        "Hide usernames",
        "40",
        [{"_id": "Accounts_Default_User_Preferences_hideUsernames", "value": True}],
    ),
    (
        "Enable CORS",
        "50",
        [
            {"_id": "API_Enable_CORS", "value": True},
            {"_id": "API_CORS_Origin", "value": "*"},
        ],
    ),
    (
        "Configure API rate limiter",
        "65",
        [
            {"_id": "API_Enable_Rate_Limiter", "value": True},
            {"_id": "API_Enable_Rate_Limiter_Limit_Calls_Default", "value": 100},
            {"_id": "API_Enable_Rate_Limiter_Limit_Time_Default", "value": 60000},
        ],
    ),
]

PERMISSIONS: list[dict[str, Any]] = [{"_id": "view-outside-room", "roles": ["admin"]}]


async def apply_settings(adapter: IChatPlatformAdapter) -> list[str]:
    """Apply every group and the permission update; return names of failed steps."""
    failed: list[str] = []
    for description, settings_id, settings in SETTINGS_GROUPS:
        try:
            await adapter.save_settings(settings_id, settings)
        except ChatPlatformException as e:
            print(f" {description} failed: {e.error_code} {e.details}", file=sys.stderr)
            failed.append(description)
        else:
            print(f" {description} completed")
    try:
        await adapter.update_permissions(PERMISSIONS)
    except ChatPlatformException as e:
        print(f" Update permissions failed: {e.error_code}", file=sys.stderr)
        failed.append("Update permissions")
    else:
        print(" Update permissions completed")
    return failed


async def main() -> None:
    setup_logging()
    adapter = ChatAdapterFactory.create_adapter(get_settings())
    try:
        failed = await apply_settings(adapter)
    finally:
        await adapter.aclose()
    if failed:
        print(f"Configuration finished with {len(failed)} failures", file=sys.stderr)
        sys.exit(1)
    print("Configuration completed")


if __name__ == "__main__":
    asyncio.run(main())
