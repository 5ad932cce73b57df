"""Tenant context middleware.

Puts the tenant code from the tenant header (DEFAULT_TENANT_CODE when
absent) into the request context for logging. Validation of the code
happens in the route dependency, which rejects malformed values.
"""

from typing import Callable

from app.core.request_context import set_tenant_code
from app.middleware.request_id import get_header


def TenantContextMiddleware(
    app: Callable, header_name: str = "X-Tenant-Code", default_tenant_code: str = "default"
) -> Callable:
    """Set the tenant code in context before the route runs. Raw ASGI."""

    async def asgi_app(scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await app(scope, receive, send)
            return
        raw = (get_header(scope, header_name) or "").strip()
        # Logged verbatim; bounded so a hostile header cannot bloat log lines.
        set_tenant_code(raw[:64] or default_tenant_code)
        try:
            await app(scope, receive, send)
        finally:
            set_tenant_code(None)

    return asgi_app
