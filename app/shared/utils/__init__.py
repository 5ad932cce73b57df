"""Shared utilities: UTC datetime helpers."""

from app.shared.utils.datetime import avatar_timestamp, ensure_utc, utc_now

__all__ = [
    "avatar_timestamp",
    "ensure_utc",
    "utc_now",
]
