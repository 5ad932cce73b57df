"""Domain value objects for the communications service.

Value objects are immutable types that represent domain concepts with
self-validation. They have no identity, only value.
"""

import re
from dataclasses import dataclass, field

from app.domain.exceptions import ValidationException

# Tenant codes come from upstream systems: letters, digits, underscore, hyphen.
_TENANT_CODE_MAX_LENGTH = 64
_TENANT_CODE_RE = re.compile(r"^[A-Za-z0-9_-]+$")


@dataclass(frozen=True)
class TenantCode:
    """Value object for the tenant scope of every identity operation.

    Codes are 1-64 characters of letters, digits, underscore or hyphen.
    """

    value: str

    def __post_init__(self) -> None:
        if not self.value or len(self.value) > _TENANT_CODE_MAX_LENGTH:
            raise ValidationException(
                f"Tenant code must be 1-{_TENANT_CODE_MAX_LENGTH} characters",
                "tenant_code",
            )
        if not _TENANT_CODE_RE.fullmatch(self.value):
            raise ValidationException(
                "Tenant code may contain only letters, digits, '_' and '-'",
                "tenant_code",
            )

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class ChatCredentials:
    """Username/password pair presented to the chat platform.

    Always derived from the internal user id; never persisted. The password
    is excluded from repr so it does not leak into logs.
    """

    username: str
    password: str = field(repr=False)
