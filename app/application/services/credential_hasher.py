"""Credential hasher: deterministic chat platform credentials from internal user ids.

The chat platform never sees internal user ids. Usernames and passwords are
salted SHAKE-256 digests of the user id, truncated to a short configurable
length (default 8 hex characters) because the platform limits username
length. Truncation trades collision resistance for compatibility: this is
internal namespacing, not a security primitive, and must not be relied on
against an adversary who can choose user ids.

Credentials are recomputed on every operation and never stored, so the
salts and lengths are part of the identity contract: changing them orphans
every existing chat account.
"""

from __future__ import annotations

import hashlib
import math
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from app.domain.enums import CredentialKind
from app.domain.exceptions import ConfigurationError, ValidationException
from app.domain.value_objects import ChatCredentials

if TYPE_CHECKING:
    from app.core.config import Settings


class HashAlgorithm(ABC):
    """Abstract variable-length hash algorithm."""

    @abstractmethod
    def digest(self, data: str, length: int) -> str:
        """Return exactly `length` lowercase hex characters for data."""
        ...


class Shake256Algorithm(HashAlgorithm):
    """SHAKE-256 extendable-output implementation."""

    def digest(self, data: str, length: int) -> str:
        return hashlib.shake_256(data.encode()).hexdigest(math.ceil(length / 2))[:length]


class CredentialHasher:
    """Derives chat platform usernames and passwords from internal user ids.

    Stateless apart from its configuration; safe to share across requests.
    """

    def __init__(
        self,
        username_salt: str,
        password_salt: str,
        username_length: int = 8,
        password_length: int = 8,
        algorithm: HashAlgorithm | None = None,
    ) -> None:
        """Validate salts and lengths up front.

        Raises:
            ConfigurationError: A salt is empty or a length is not positive.
        """
        if not username_salt:
            raise ConfigurationError("Username hash salt is not configured")
        if not password_salt:
            raise ConfigurationError("Password hash salt is not configured")
        if username_length < 1 or password_length < 1:
            raise ConfigurationError("Hash lengths must be positive")
        self._salts = {
            CredentialKind.USERNAME: username_salt,
            CredentialKind.PASSWORD: password_salt,
        }
        self._lengths = {
            CredentialKind.USERNAME: username_length,
            CredentialKind.PASSWORD: password_length,
        }
        self.algorithm = algorithm or Shake256Algorithm()

    @classmethod
    def from_settings(cls, settings: Settings) -> CredentialHasher:
        """Build from application settings (salts are SecretStr)."""
        return cls(
            username_salt=settings.username_hash_salt.get_secret_value(),
            password_salt=settings.password_hash_salt.get_secret_value(),
            username_length=settings.username_hash_length,
            password_length=settings.password_hash_length,
        )

    def digest(self, kind: CredentialKind | str, value: str) -> str:
        """Return the salted, truncated digest of value for the given kind."""
        kind = CredentialKind(kind)
        if not value:
            raise ValidationException("Cannot derive credentials from an empty identifier", "user_id")
        return self.algorithm.digest(self._salts[kind] + value, self._lengths[kind])

    def username(self, user_id: str) -> str:
        return self.digest(CredentialKind.USERNAME, user_id)

    def password(self, user_id: str) -> str:
        return self.digest(CredentialKind.PASSWORD, user_id)

    def credentials(self, user_id: str) -> ChatCredentials:
        """Username and password for user_id."""
        return ChatCredentials(
            username=self.username(user_id),
            password=self.password(user_id),
        )
