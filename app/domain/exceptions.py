"""Domain exceptions for the communications service.

Defines domain-level exceptions for identity mapping and chat platform
failures. The chat adapter translates transport errors into these at its
boundary; the presentation layer maps them to HTTP responses in exception
handlers.
"""

from typing import Any


class CommunicationsException(Exception):
    """Base exception for all communications service errors.

    All custom exceptions should inherit from this class to allow
    consistent error handling and logging. Presentation layer maps
    these to HTTP responses using message, error_code, and details.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. user_id, tenant_code).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Serialize for logs and error responses."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ConfigurationError(CommunicationsException, ValueError):
    """Raised at startup when a required secret or salt is missing.

    Also a ValueError so pydantic-settings reports it as a validation error.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message, "CONFIGURATION_ERROR")


class ValidationException(CommunicationsException):
    """Raised when input validation fails (e.g. empty identifier)."""

    def __init__(self, message: str, field: str | None = None) -> None:
        """Initialize with message and optional field name.

        Args:
            message: Description of the validation failure.
            field: Optional field or attribute that failed validation.
        """
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class DuplicateKeyException(CommunicationsException):
    """Raised when a live identity record already exists for (user_id, tenant_code)."""

    def __init__(self, user_id: str, tenant_code: str) -> None:
        super().__init__(
            f"User {user_id} already mapped in tenant {tenant_code}",
            "DUPLICATE_KEY",
            {"user_id": user_id, "tenant_code": tenant_code},
        )


class UserNotFoundException(CommunicationsException):
    """Raised when no live identity record exists for the requested user in the tenant."""

    def __init__(self, user_id: str, tenant_code: str | None = None) -> None:
        """Initialize with the missing identifier.

        Args:
            user_id: Internal or external user id that was looked up.
            tenant_code: Tenant the lookup was scoped to.
        """
        details: dict[str, Any] = {"user_id": user_id}
        if tenant_code is not None:
            details["tenant_code"] = tenant_code
        super().__init__("User does not exist", "USER_NOT_FOUND", details)


class ChatPlatformException(CommunicationsException):
    """Base for errors reported by (or while talking to) the chat platform."""


class UnauthorizedException(ChatPlatformException):
    """Raised when the chat platform rejects credentials or a session token (HTTP 401)."""

    def __init__(self, message: str = "Unauthorized request") -> None:
        super().__init__(message, "UNAUTHORIZED")


class InvalidUserException(ChatPlatformException):
    """Raised when the chat platform reports an unknown or invalid user (error-invalid-user)."""

    def __init__(self, message: str = "User does not exist") -> None:
        super().__init__(message, "INVALID_USER")


class SendFailedException(ChatPlatformException):
    """Raised when the composite send-message operation cannot complete."""

    def __init__(self, room_id: str, reason: str) -> None:
        super().__init__(
            "Unable to send message",
            "SEND_FAILED",
            {"room_id": room_id, "reason": reason},
        )


class AvatarFailedException(ChatPlatformException):
    """Raised when downloading the avatar image or uploading it to the platform fails."""

    def __init__(self, username: str, stage: str, reason: str) -> None:
        """Initialize with the failing leg.

        Args:
            username: Chat platform username whose avatar was being set.
            stage: 'download' or 'upload'.
            reason: Human-readable reason (status code or transport error).
        """
        super().__init__(
            "Unable to set avatar",
            "AVATAR_FAILED",
            {"username": username, "stage": stage, "reason": reason},
        )


class ChatTimeoutException(ChatPlatformException):
    """Raised when a chat platform call exceeds the configured timeout."""

    def __init__(self, endpoint: str, timeout_seconds: float) -> None:
        super().__init__(
            f"Chat platform did not respond within {timeout_seconds} seconds",
            "CHAT_TIMEOUT",
            {"endpoint": endpoint, "timeout_seconds": timeout_seconds},
        )


class RemoteErrorException(ChatPlatformException):
    """Raised for any other chat platform failure (unexpected status or transport error)."""

    def __init__(
        self,
        endpoint: str,
        status_code: int | None = None,
        reason: str | None = None,
    ) -> None:
        details: dict[str, Any] = {"endpoint": endpoint}
        if status_code is not None:
            details["status_code"] = status_code
        if reason:
            details["reason"] = reason
        super().__init__("Chat platform request failed", "REMOTE_ERROR", details)


class SqlNotConfiguredException(CommunicationsException):
    """Raised when an operation requires the database but DATABASE_URL is not set."""

    def __init__(self) -> None:
        super().__init__(
            message="This operation requires a SQL database that is not configured.",
            error_code="SERVICE_UNAVAILABLE",
        )
