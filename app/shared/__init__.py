"""Shared utilities: telemetry and cross-cutting helpers.

Used by application and infrastructure. No business logic.
"""

from app.shared.utils import avatar_timestamp, ensure_utc, utc_now

__all__ = [
    "avatar_timestamp",
    "ensure_utc",
    "utc_now",
]
