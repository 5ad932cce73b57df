"""Per-request context: request id and tenant code.

Set by RequestIDMiddleware and TenantContextMiddleware, read by the logging
filter so every log line of a request carries both values without
threading them through every call.
"""

from contextvars import ContextVar

current_request_id: ContextVar[str | None] = ContextVar(
    "current_request_id", default=None
)
current_tenant_code: ContextVar[str | None] = ContextVar(
    "current_tenant_code", default=None
)


def set_request_id(request_id: str | None) -> None:
    current_request_id.set(request_id)


def get_request_id() -> str | None:
    return current_request_id.get()


def set_tenant_code(tenant_code: str | None) -> None:
    """Set the tenant code for this context (e.g. request)."""
    current_tenant_code.set(tenant_code)


def get_tenant_code() -> str | None:
    """Return the current tenant code if set."""
    return current_tenant_code.get()
