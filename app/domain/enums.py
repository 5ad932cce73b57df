"""Domain enumerations for the communications service.

Enums represent fixed sets of domain values (e.g. credential kind).
"""

from enum import Enum


class CredentialKind(str, Enum):
    """Which chat platform credential a digest is derived for.

    Each kind has its own salt and output length.
    """

    USERNAME = "username"
    PASSWORD = "password"

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid kind values as strings."""
        return [kind.value for kind in cls]


class ResponseCode(str, Enum):
    """Machine-readable failure category in the API failure envelope."""

    CLIENT_ERROR = "CLIENT_ERROR"
    UNAUTHORIZED = "UNAUTHORIZED"
    SERVER_ERROR = "SERVER_ERROR"
