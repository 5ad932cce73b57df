"""Delete every chat platform account except an exclusion list.

Pages through users.list, skips excluded ids (the admin service account is
always excluded), deletes the rest and prints a summary. Local identity
records are not touched.

Usage:
    uv run python -m scripts.delete_bulk_users [excluded_id ...]
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

PAGE_SIZE = 100
DEFAULT_EXCLUDED_IDS = frozenset({"rocket.cat"})


async def fetch_users(
    adapter: IChatPlatformAdapter, excluded_ids: set[str], page_size: int = PAGE_SIZE
) -> list[dict[str, Any]]:
    """Return every remote account whose _id is not excluded."""
    users: list[dict[str, Any]] = []
    offset = 0
    while True:
        page = await adapter.list_users(offset=offset, count=page_size)
        users.extend(u for u in page if u.get("_id") not in excluded_ids)
        if len(page) < page_size:
            return users
        offset += page_size


async def delete_users(
    adapter: IChatPlatformAdapter, users: list[dict[str, Any]]
) -> tuple[list[str], list[tuple[str, str]]]:
    """Delete each user; return (deleted names, [(name, error_code)])."""
    deleted: list[str] = []
    failed: list[tuple[str, str]] = []
    for user in users:
        name = user.get("name") or user.get("username") or user["_id"]
        try:
            await adapter.delete_user(user["_id"], confirm_relinquish=True)
        except ChatPlatformException as e:
            failed.append((name, e.error_code))
        else:
            deleted.append(name)
    return deleted, failed


async def main() -> None:
    """Delete all remote users not excluded on the command line."""
    setup_logging()
    settings = get_settings()
    excluded = set(DEFAULT_EXCLUDED_IDS) | set(sys.argv[1:])
    excluded.add(settings.chat_platform_admin_user_id)

    adapter = ChatAdapterFactory.create_adapter(settings)
    try:
        users = await fetch_users(adapter, excluded)
        print(f"Fetched {len(users)} users (excluding {len(excluded)} ids)")
        deleted, failed = await delete_users(adapter, users)
    finally:
        await adapter.aclose()

    print("\nUser deletion summary:")
    print(f"- Deleted: {len(deleted)}")
    print(f"- Failed: {len(failed)}")
    for name, error in failed:
        print(f"  - {name}: {error}")
    if failed:
        sys.exit(1)


if __name__ == "__main__":
    asyncio.run(main())
