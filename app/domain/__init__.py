"""Domain layer: value objects and exceptions.

No dependencies on infrastructure or presentation. Used by application
and infrastructure layers.
"""

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
    UnauthorizedException,
    UserNotFoundException,
    ValidationException,
)
from app.domain.value_objects import ChatCredentials, TenantCode

__all__ = [
    # Exceptions
    "AvatarFailedException",
    "ChatPlatformException",
    "ChatTimeoutException",
    "CommunicationsException",
    "ConfigurationError",
    "DuplicateKeyException",
    "InvalidUserException",
    "RemoteErrorException",
    "SendFailedException",
    "UnauthorizedException",
    "UserNotFoundException",
    "ValidationException",
    # Value objects
    "ChatCredentials",
    "TenantCode",
]
