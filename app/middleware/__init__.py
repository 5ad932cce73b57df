"""HTTP middleware: timeout, request ID, tenant context.

Applied in main app; order matters (last added = outermost).
"""

from app.middleware.request_id import RequestIDMiddleware
from app.middleware.tenant_context import TenantContextMiddleware
from app.middleware.timeout import TimeoutMiddleware

__all__ = [
    "RequestIDMiddleware",
    "TenantContextMiddleware",
    "TimeoutMiddleware",
]
